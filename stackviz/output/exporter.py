"""
Trace export to plain text, JSON and LaTeX.

The text form is the operations log shown next to the visualization:
input expression, one numbered line per processed token, final result.
"""

import json
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import sympy as sp

from ..models import Algorithm, StepTrace, format_value
from ..utils.constants import DEFAULT_PRECISION

_FINAL_LABELS = {
    Algorithm.INFIX_TO_POSTFIX: "Final Postfix",
    Algorithm.INFIX_TO_PREFIX: "Final Prefix",
    Algorithm.PREFIX_EVALUATION: "Final Answer",
    Algorithm.POSTFIX_EVALUATION: "Final Answer",
}

_TITLES = {
    Algorithm.INFIX_TO_POSTFIX: "Infix to Postfix Conversion Log",
    Algorithm.INFIX_TO_PREFIX: "Infix to Prefix Conversion Log",
    Algorithm.PREFIX_EVALUATION: "Prefix Evaluation Log",
    Algorithm.POSTFIX_EVALUATION: "Postfix Evaluation Log",
}


@dataclass
class ExportOptions:
    """What to include in an export."""

    include_steps: bool = True
    include_snapshots: bool = False
    precision: int = DEFAULT_PRECISION


def final_label(algorithm: Algorithm) -> str:
    return _FINAL_LABELS[algorithm]


def format_final(trace: StepTrace, precision: int = DEFAULT_PRECISION) -> str:
    """The final output as shown in logs, e.g. 'Final Answer: 21'."""
    value = trace.final_output
    if isinstance(value, str):
        text = value
    else:
        text = format_value(value, precision)
    return f"{final_label(trace.algorithm)}: {text}"


def log_lines(trace: StepTrace, upto: Optional[int] = None) -> List[str]:
    """
    Numbered explanations of the token steps in ``trace.steps[:upto + 1]``.

    Start and drain records are not numbered.
    """
    steps = trace.steps if upto is None else trace.steps[: upto + 1]
    lines = []
    for step in steps:
        if step.token is not None:
            lines.append(f"{len(lines) + 1}. {step.explanation}")
    return lines


def _leaf(token_text: str) -> sp.Basic:
    # Identifiers become plain symbols, so 'E' or 'I' are not sympy constants
    if token_text[0].isdigit():
        return sp.Float(token_text) if "." in token_text else sp.Integer(token_text)
    return sp.Symbol(token_text)


def _combine(op: str, left: sp.Basic, right: sp.Basic) -> sp.Basic:
    if op == "+":
        return sp.Add(left, right, evaluate=False)
    if op == "-":
        return sp.Add(left, sp.Mul(sp.Integer(-1), right, evaluate=False), evaluate=False)
    if op == "*":
        return sp.Mul(left, right, evaluate=False)
    if op == "/":
        return sp.Mul(left, sp.Pow(right, sp.Integer(-1), evaluate=False), evaluate=False)
    return sp.Pow(left, right, evaluate=False)


def build_expression(tokens: Sequence[str], prefix: bool = False) -> sp.Basic:
    """
    Build an unevaluated SymPy tree from postfix (or prefix) token texts.

    The tree follows the token order exactly, so the grouping the engine
    chose (left-associative '^' included) is what gets rendered.

    Raises:
        ValueError: if the tokens do not form one expression.
    """
    stack: List[sp.Basic] = []
    for text in reversed(tokens) if prefix else tokens:
        if len(text) == 1 and text in "+-*/^":
            if len(stack) < 2:
                raise ValueError(f"Not enough operands for '{text}'")
            if prefix:
                left, right = stack.pop(), stack.pop()
            else:
                right, left = stack.pop(), stack.pop()
            stack.append(_combine(text, left, right))
        else:
            stack.append(_leaf(text))
    if len(stack) != 1:
        raise ValueError("Tokens do not form a single expression")
    return stack[0]


def expression_tree(trace: StepTrace) -> sp.Basic:
    """SymPy tree for the expression a trace worked on."""
    if trace.algorithm is Algorithm.INFIX_TO_POSTFIX:
        return build_expression(str(trace.final_output).split())
    if trace.algorithm is Algorithm.INFIX_TO_PREFIX:
        return build_expression(str(trace.final_output).split(), prefix=True)
    texts = [token.text for token in trace.tokens]
    return build_expression(texts, prefix=trace.algorithm is Algorithm.PREFIX_EVALUATION)


class TraceExporter:
    """
    Export a StepTrace in several formats.

    Usage:
        exporter = TraceExporter(convert_to_postfix("A * (B + C)"))
        print(exporter.to_text())
    """

    def __init__(self, trace: StepTrace, options: Optional[ExportOptions] = None):
        self.trace = trace
        self.options = options or ExportOptions()

    @property
    def title(self) -> str:
        return _TITLES[self.trace.algorithm]

    def to_text(self) -> str:
        """Operations log as plain text."""
        lines = [self.title, "", f"Input Expression: {self.trace.expression}"]
        if self.options.include_steps:
            lines.append("")
            lines.extend(self._step_lines())
        lines.append("")
        lines.append(format_final(self.trace, self.options.precision))
        return "\n".join(lines)

    def to_json(self) -> str:
        """Full trace as JSON, using the collaborator key names."""
        data = self.trace.to_dict()
        if not self.options.include_steps:
            data.pop("steps")
        return json.dumps(data, indent=2)

    def to_latex(self) -> str:
        """LaTeX fragment: the expression, the steps and the result."""
        lines = [
            f"\\section*{{{self.title}}}",
            f"Input expression: \\texttt{{{_escape(self.trace.expression)}}}",
        ]
        try:
            tree = expression_tree(self.trace)
        except ValueError:
            # Juxtaposed groups like '(A)(B)' convert but form no single tree
            tree = None
        if tree is not None:
            lines.extend(["", f"\\[ {sp.latex(tree, order='none')} \\]"])
        if self.options.include_steps:
            lines.append("\\begin{enumerate}")
            for step in self.trace.token_steps:
                lines.append(f"  \\item {_escape(step.explanation)}")
            lines.append("\\end{enumerate}")
        lines.append("")
        lines.append(f"\\textbf{{{_escape(format_final(self.trace, self.options.precision))}}}")
        return "\n".join(lines)

    def _step_lines(self) -> List[str]:
        if not self.options.include_snapshots:
            return log_lines(self.trace)
        lines = []
        for number, step in enumerate(self.trace.token_steps, 1):
            lines.append(f"{number}. {step.explanation}")
            lines.append(f"   stack:  {render_items(step.stack_snapshot)}")
            lines.append(f"   output: {render_items(step.output_snapshot)}")
        # The closing record holds the drained stack and complete output
        final = self.trace.final_step
        lines.append(final.explanation)
        lines.append(f"   stack:  {render_items(final.stack_snapshot)}")
        lines.append(f"   output: {render_items(final.output_snapshot)}")
        return lines


_LATEX_SPECIALS: Dict[str, str] = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "^": r"\^{}",
    "~": r"\~{}",
}


def _escape(text: str) -> str:
    return "".join(_LATEX_SPECIALS.get(char, char) for char in text)


def render_items(items) -> str:
    if isinstance(items, str):
        return items or "(empty)"
    if not items:
        return "(empty)"
    return " ".join(
        format_value(item) if not isinstance(item, str) else item for item in items
    )
