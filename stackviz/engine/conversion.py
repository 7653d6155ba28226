"""
Infix to postfix and infix to prefix conversion.

Both conversions are the same shunting-yard loop. Prefix conversion walks
the tokens in reverse, treats ')' as the opening bracket and places new
output at the front instead of the back.
"""

from collections import deque
from typing import Dict, Iterable, List, Sequence, Tuple

from ..input.validator import validate_infix
from ..models import Algorithm, StepTrace, Token, TokenKind
from ..utils.errors import MismatchedParenthesesError
from .base import BaseAlgorithm
from .precedence import precedence
from .trace import TraceRecorder


class ShuntingYardConverter(BaseAlgorithm):
    """
    Shared conversion loop over an operator stack.

    Subclasses choose the traversal order, which bracket opens a group,
    how output accumulates and which rules each branch points at.
    """

    # Kind of the bracket that is pushed; the other one pops until it
    opening: TokenKind = TokenKind.LEFT_PAREN

    # Rule references, keyed by the branch of the algorithm that fired
    rules: Dict[str, Tuple[int, ...]] = {}

    start_text: str = ""
    drain_text: str = ""

    # "append" or "prefix", and where emitted items go
    emit_verb: str = "append"
    emit_target: str = "to the output"

    def can_run(self, tokens: Sequence[Token]) -> bool:
        return True

    def validate(self, tokens: Sequence[Token]) -> None:
        # Always the original order, even when traversal is reversed
        validate_infix(tokens)

    # --- Hooks ---

    def traversal(self, tokens: Sequence[Token]) -> Iterable[int]:
        return range(len(tokens))

    def new_output(self):
        return []

    def emit(self, output, item: str) -> None:
        output.append(item)

    def output_view(self, output):
        return tuple(output)

    def final_output(self, output) -> str:
        return " ".join(output)

    # --- Algorithm ---

    @property
    def opening_symbol(self) -> str:
        return "(" if self.opening is TokenKind.LEFT_PAREN else ")"

    def execute(self, expression: str, tokens: Sequence[Token]) -> StepTrace:
        recorder = TraceRecorder(self.algorithm, expression, tokens)
        stack: List[str] = []
        output = self.new_output()

        recorder.record(
            token=None,
            stack=stack,
            output=self.output_view(output),
            explanation=self.start_text,
            rule_ref=self.rules["start"],
        )

        for index in self.traversal(tokens):
            token = tokens[index]
            if token.is_operand:
                explanation, rule = self._operand(token, output)
            elif token.kind is self.opening:
                explanation, rule = self._open(token, stack)
            elif token.is_operator:
                explanation, rule = self._operator(token, stack, output)
            else:
                explanation, rule = self._close(token, stack, output)

            recorder.record(
                token=token,
                stack=stack,
                output=self.output_view(output),
                explanation=explanation,
                rule_ref=rule,
                token_index=index,
            )

        while stack:
            top = stack.pop()
            if top == self.opening_symbol:
                raise MismatchedParenthesesError(
                    f"'{top}' is still on the stack after the last token"
                )
            self.emit(output, top)

        final = self.final_output(output)
        recorder.record(
            token=None,
            stack=stack,
            output=self._final_view(output),
            explanation=self.drain_text,
            rule_ref=self.rules["drain"],
        )
        return recorder.finish(final)

    def _final_view(self, output):
        return self.output_view(output)

    def _operand(self, token: Token, output) -> Tuple[str, Tuple[int, ...]]:
        self.emit(output, token.text)
        return (
            f"Token is an operand ('{token.text}'). {self.emit_verb.capitalize()} it {self.emit_target}.",
            self.rules["operand"],
        )

    def _open(self, token: Token, stack: List[str]) -> Tuple[str, Tuple[int, ...]]:
        stack.append(token.text)
        return (
            f"Token is {self._bracket_name(token.text)} ('{token.text}'). Push it onto the stack.",
            self.rules["open"],
        )

    def _close(self, token: Token, stack: List[str], output) -> Tuple[str, Tuple[int, ...]]:
        while stack and stack[-1] != self.opening_symbol:
            self.emit(output, stack.pop())
        if not stack:
            raise MismatchedParenthesesError(
                f"No matching '{self.opening_symbol}' for '{token.text}' at position {token.position}"
            )
        stack.pop()
        opening = self._bracket_name(self.opening_symbol)
        return (
            f"Token is {self._bracket_name(token.text)} ('{token.text}'). "
            f"Pop operators from the stack and {self.emit_verb} them {self.emit_target} "
            f"until {opening} is found. Then pop and discard {opening}.",
            self.rules["close"],
        )

    def _operator(self, token: Token, stack: List[str], output) -> Tuple[str, Tuple[int, ...]]:
        op = token.text
        text = f"Token is an operator ('{op}'). "

        if not stack:
            stack.append(op)
            return text + f"The stack is empty, so push '{op}' onto the stack.", self.rules["empty"]

        top = stack[-1]
        if top == self.opening_symbol:
            stack.append(op)
            return (
                text + f"The top of the stack is {self._bracket_name(top)}, "
                f"so push '{op}' onto the stack.",
                self.rules["bracket_top"],
            )

        if precedence(op) > precedence(top):
            stack.append(op)
            return (
                text + f"Precedence of '{op}' is greater than the top of the stack ('{top}'), "
                f"so push '{op}' onto the stack.",
                self.rules["higher"],
            )

        relation = "equal to" if precedence(op) == precedence(top) else "less than"
        while stack and stack[-1] != self.opening_symbol and precedence(stack[-1]) >= precedence(op):
            self.emit(output, stack.pop())
        stack.append(op)
        return (
            text + f"Precedence of '{op}' is {relation} the top of the stack ('{top}'), "
            f"so pop operators of higher or equal precedence and {self.emit_verb} them {self.emit_target}. "
            f"Then push '{op}' onto the stack.",
            self.rules["pop"],
        )

    @staticmethod
    def _bracket_name(symbol: str) -> str:
        return "a left parenthesis" if symbol == "(" else "a right parenthesis"


class InfixToPostfixConverter(ShuntingYardConverter):
    """Convert infix to postfix, appending to the output left to right."""

    algorithm = Algorithm.INFIX_TO_POSTFIX
    name = "Infix to Postfix Conversion"
    description = "Shunting-yard conversion reading tokens left to right"
    emit_target = "to the postfix output"

    rules = {
        "start": (0,),
        "operand": (1,),
        "open": (2,),
        "close": (3, 0, 1),
        "empty": (4, 0),
        "bracket_top": (4, 1, 0),
        "pop": (4, 1, 1),
        "higher": (4, 1, 2),
        "drain": (5,),
    }

    start_text = "Algorithm starts. Reading expression tokens from left to right."
    drain_text = (
        "The entire infix expression has been scanned. Pop all remaining operators "
        "from the stack to the postfix output. Conversion is complete."
    )


class InfixToPrefixConverter(ShuntingYardConverter):
    """
    Convert infix to prefix.

    Reads the reversed tokens, pushes ')' and pops on '(', and prefixes
    every emitted item to the output.
    """

    algorithm = Algorithm.INFIX_TO_PREFIX
    name = "Infix to Prefix Conversion"
    description = "Shunting-yard conversion over the reversed tokens"
    emit_verb = "prefix"
    opening = TokenKind.RIGHT_PAREN

    rules = {
        "start": (0, 1),
        "operand": (2,),
        "open": (3,),
        "close": (4, 0, 1),
        "empty": (5, 0),
        "bracket_top": (5, 1, 0),
        "pop": (5, 1, 1),
        "higher": (5, 1, 2),
        "drain": (6,),
    }

    start_text = "Algorithm starts. Reverse the expression and read tokens."
    drain_text = (
        "After processing all symbols, pop all the remaining operators from the "
        "stack and prefix them to the output."
    )

    def traversal(self, tokens: Sequence[Token]) -> Iterable[int]:
        return reversed(range(len(tokens)))

    def new_output(self):
        return deque()

    def emit(self, output, item: str) -> None:
        output.appendleft(item)

    def output_view(self, output) -> str:
        return " ".join(output)

    def _final_view(self, output) -> str:
        return self.output_view(output).strip()

    def final_output(self, output) -> str:
        return " ".join(output).strip()
