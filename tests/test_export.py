"""
Tests for trace export and playback.
"""

import json

import pytest

import sympy as sp

from stackviz import convert_to_postfix, convert_to_prefix, evaluate_postfix, evaluate_prefix
from stackviz.output.exporter import ExportOptions, TraceExporter, build_expression
from stackviz.output.playback import TracePlayer, view_at


@pytest.fixture
def postfix_trace():
    """Conversion trace for the textbook infix expression."""
    return convert_to_postfix("A * (B + C) - D/E")


@pytest.fixture
def prefix_eval_trace():
    """Evaluation trace for the textbook prefix expression."""
    return evaluate_prefix("- + * 5 3 8 / 4 2")


class TestTextExport:
    """Test the plain text operations log."""

    def test_log_layout(self):
        """Test title, input line, numbered steps and final line."""
        text = TraceExporter(convert_to_postfix("A+B")).to_text()
        lines = text.splitlines()

        assert lines[0] == "Infix to Postfix Conversion Log"
        assert lines[2] == "Input Expression: A+B"
        assert lines[4].startswith("1. Token is an operand ('A')")
        assert lines[6].startswith("3. ")
        assert lines[-1] == "Final Postfix: A B +"

    def test_without_steps(self, postfix_trace):
        """Test that steps can be left out."""
        text = TraceExporter(postfix_trace, ExportOptions(include_steps=False)).to_text()

        assert "1." not in text
        assert text.endswith("Final Postfix: A B C + * D E / -")

    def test_with_snapshots(self, postfix_trace):
        """Test stack and output lines under each step."""
        text = TraceExporter(postfix_trace, ExportOptions(include_snapshots=True)).to_text()

        assert "   stack:  * ( +" in text

        # The drained state closes the step list, unnumbered
        body = text.split("\n\nFinal Postfix:")[0].splitlines()
        assert body[-3].startswith("The entire infix expression has been scanned.")
        assert body[-2] == "   stack:  (empty)"
        assert body[-1] == "   output: A B C + * D E / -"

    def test_snapshots_for_evaluation(self, prefix_eval_trace):
        """Test that the final operand stack is shown for evaluations."""
        text = TraceExporter(prefix_eval_trace, ExportOptions(include_snapshots=True)).to_text()
        body = text.split("\n\nFinal Answer:")[0].splitlines()

        assert body[-3] == "After processing all symbols, the final answer is 21."
        assert body[-2] == "   stack:  21"

    def test_evaluation_log(self, prefix_eval_trace):
        """Test evaluation titles and answers."""
        text = TraceExporter(prefix_eval_trace).to_text()

        assert text.startswith("Prefix Evaluation Log")
        assert text.endswith("Final Answer: 21")

    def test_precision(self):
        """Test that non-integral answers are rounded."""
        trace = evaluate_prefix("/ 1 3")

        assert TraceExporter(trace).to_text().endswith("Final Answer: 0.33")
        assert TraceExporter(trace, ExportOptions(precision=4)).to_text().endswith("0.3333")


class TestJsonExport:
    """Test JSON export."""

    def test_valid_json(self, postfix_trace):
        """Test that the export parses and uses the expected keys."""
        data = json.loads(TraceExporter(postfix_trace).to_json())

        assert data["algorithm"] == "infix-to-postfix"
        assert data["finalOutput"] == "A B C + * D E / -"
        assert len(data["steps"]) == len(postfix_trace)

        step = data["steps"][1]
        assert step["stepNumber"] == 1
        assert step["token"] == "A"
        assert step["outputSnapshot"] == ["A"]
        assert step["ruleRef"] == [1]
        assert step["changed"] is True

    def test_evaluation_operands(self):
        """Test that operator steps carry operands and results."""
        data = json.loads(TraceExporter(evaluate_postfix("10 4 -")).to_json())

        assert data["steps"][3]["operands"] == [10, 4]
        assert data["steps"][3]["result"] == 6
        assert "operands" not in data["steps"][1]

    def test_without_steps(self, postfix_trace):
        """Test that steps can be left out of the JSON."""
        data = json.loads(TraceExporter(postfix_trace, ExportOptions(include_steps=False)).to_json())

        assert "steps" not in data


class TestLatexExport:
    """Test LaTeX export."""

    def test_fraction(self):
        """Test that division renders as a fraction."""
        latex = TraceExporter(convert_to_postfix("A/B")).to_latex()

        assert r"\section*{Infix to Postfix Conversion Log}" in latex
        assert r"\frac{A}{B}" in latex
        assert r"\begin{enumerate}" in latex

    def test_escaping(self):
        """Test that LaTeX specials in text are escaped."""
        latex = TraceExporter(convert_to_postfix("rate_1 ^ 2")).to_latex()

        assert r"\texttt{rate\_1 \^{} 2}" in latex

    def test_juxtaposed_groups(self):
        """Test that output forming no single tree skips the math block."""
        latex = TraceExporter(convert_to_postfix("(A)(B)")).to_latex()

        assert r"\[" not in latex
        assert r"\textbf{Final Postfix: A B}" in latex

    def test_build_expression(self):
        """Test that the tree follows the token grouping."""
        a, b, c = sp.symbols("A B C")

        postfix = build_expression("A B + C *".split())
        prefix = build_expression("* + A B C".split(), prefix=True)

        assert sp.simplify(postfix - (a + b) * c) == 0
        assert sp.simplify(prefix - (a + b) * c) == 0

    def test_build_expression_rejects_bad_shape(self):
        """Test malformed token lists."""
        with pytest.raises(ValueError):
            build_expression(["A", "+"])
        with pytest.raises(ValueError):
            build_expression(["A", "B"])


class TestPlayback:
    """Test cursor playback over traces."""

    def test_view_at_start(self, postfix_trace):
        """Test the first view."""
        view = view_at(postfix_trace, 0)

        assert view.is_first
        assert view.log == ()
        assert view.rule_texts == (
            "Create an empty stack and read symbols one by one from left to right.",
        )
        assert view.final_output is None

    def test_view_clamps(self, postfix_trace):
        """Test out-of-range cursors."""
        assert view_at(postfix_trace, -5).cursor == 0
        assert view_at(postfix_trace, 999).cursor == len(postfix_trace) - 1

    def test_view_at_end(self, postfix_trace):
        """Test that the last view adds the final line."""
        view = view_at(postfix_trace, len(postfix_trace) - 1)

        assert view.is_last
        assert view.log[-1] == "Final Postfix: A B C + * D E / -"
        assert len(view.log) == len(postfix_trace.tokens) + 1
        assert view.final_output == "A B C + * D E / -"

    def test_nested_rule_texts(self, postfix_trace):
        """Test that a nested rule reference highlights each level."""
        view = view_at(postfix_trace, 7)  # ')' closes the group

        assert view.rule_texts[0] == "If the symbol is a right parenthesis ')':"
        assert len(view.rule_texts) == 3

    def test_player_walks_trace(self, prefix_eval_trace):
        """Test stepping forward and back."""
        player = TracePlayer(prefix_eval_trace)

        assert player.at_start
        assert player.previous().cursor == 0
        assert player.next().cursor == 1
        assert player.seek(100).is_last
        assert player.at_end
        assert player.next().cursor == len(prefix_eval_trace) - 1
        assert player.reset().cursor == 0

    def test_player_iteration(self):
        """Test that iterating yields one view per step."""
        trace = convert_to_prefix("A+B*C")
        views = list(TracePlayer(trace))

        assert [view.cursor for view in views] == list(range(len(trace)))
        assert views[-1].log[-1] == "Final Prefix: + A * B C"


class TestRuleCatalog:
    """Test rule path resolution."""

    def test_leaf_siblings(self):
        """Test that indices past a leaf pick siblings on the same level."""
        from stackviz.utils.constants import resolve_rule_path

        texts = resolve_rule_path("prefix-evaluation", (2, 0, 1, 2))

        assert texts == [
            "If the symbol is an operator:",
            "Pop twice to get operand1 and then operand2.",
            "Calculate result = operand1 (operator) operand2.",
            "Push the result onto the stack.",
        ]

    def test_out_of_range(self):
        """Test that a bad path is rejected."""
        from stackviz.utils.constants import resolve_rule_path

        with pytest.raises(IndexError):
            resolve_rule_path("infix-to-postfix", (9,))
        with pytest.raises(KeyError):
            resolve_rule_path("infix-to-roman", (0,))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
