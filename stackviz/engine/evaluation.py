"""
Prefix and postfix evaluation.

A single operand stack is driven over the tokens; prefix reads right to
left, postfix left to right. Only numeric operands can be evaluated.
"""

import math
import operator
from abc import abstractmethod
from typing import Iterable, List, Sequence, Tuple

from ..input.validator import validate_operand_count
from ..models import Algorithm, Number, StepTrace, Token, format_value
from ..utils.constants import MAX_INTEGER_DIGITS
from ..utils.errors import (
    DivisionByZeroError,
    InsufficientOperandsError,
    InvalidCharacterError,
    InvalidOperandCountError,
    UndefinedResultError,
)
from .base import BaseAlgorithm
from .trace import TraceRecorder

_OPERATIONS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
}

_INTEGER_LIMIT = 10 ** MAX_INTEGER_DIGITS


def parse_number(text: str) -> Number:
    """
    Parse a numeric literal: integers stay int, decimals become float.

    Raises:
        InvalidCharacterError: if the literal is too long to represent.
    """
    if "." in text:
        value = float(text)
        if not math.isfinite(value):
            raise _too_long(text)
        return value
    if len(text) > MAX_INTEGER_DIGITS:
        raise _too_long(text)
    try:
        return int(text)
    except ValueError:
        raise _too_long(text) from None


def _too_long(text: str) -> InvalidCharacterError:
    return InvalidCharacterError(
        f"Number is too long ({len(text)} digits).",
        character=text[:20],
        technical_details=f"Integers are limited to {MAX_INTEGER_DIGITS} digits",
        suggestions=["Use shorter numbers"],
    )


def apply_operator(op: str, operand1: Number, operand2: Number) -> Number:
    """
    Compute ``operand1 op operand2``.

    Raises:
        DivisionByZeroError: for '/' with a zero divisor.
        UndefinedResultError: when the result is not a finite real number.
    """
    if op == "/" and operand2 == 0:
        raise DivisionByZeroError(operand1)

    try:
        if op == "/":
            result = operand1 / operand2
        elif op == "^":
            # Negative base with a fractional exponent gives a complex number
            result = float(operand1) ** float(operand2)
        else:
            result = _OPERATIONS[op](operand1, operand2)
    except (OverflowError, ZeroDivisionError):
        result = math.nan

    if (
        isinstance(result, complex)
        or (isinstance(result, float) and not math.isfinite(result))
        or (isinstance(result, int) and abs(result) >= _INTEGER_LIMIT)
    ):
        raise UndefinedResultError(
            f"{format_value(operand1)} {op} {format_value(operand2)}"
        )
    return result


class StackEvaluator(BaseAlgorithm):
    """
    Shared evaluation loop over an operand stack.

    Subclasses choose the traversal order and the order in which an
    operator's two operands come off the stack.
    """

    notation: str = ""
    reverse: bool = False

    rules = {
        "start": (0,),
        "operand": (1,),
        "operator": (2, 0, 1, 2),
        "final": (3,),
    }

    start_text: str = ""

    def can_run(self, tokens: Sequence[Token]) -> bool:
        if len(tokens) < 3:
            return False
        if not all(token.is_operator or token.is_numeric for token in tokens):
            return False
        edge = tokens[0] if self.reverse else tokens[-1]
        return edge.is_operator

    def validate(self, tokens: Sequence[Token]) -> None:
        for token in tokens:
            if not (token.is_operator or token.is_numeric):
                raise InvalidCharacterError(
                    f"Invalid {self.notation} expression: '{token.text}' is not a number. "
                    "Please use numbers and operators only.",
                    character=token.text,
                    position=token.position,
                )
        validate_operand_count(tokens, reverse=self.reverse, notation=self.notation)

    def traversal(self, tokens: Sequence[Token]) -> Iterable[int]:
        if self.reverse:
            return reversed(range(len(tokens)))
        return range(len(tokens))

    @abstractmethod
    def pop_operands(self, stack: List[Number]) -> Tuple[Number, Number]:
        """Pop two values and return them as (operand1, operand2)."""

    @abstractmethod
    def describe_pops(self, operand1: Number, operand2: Number) -> str:
        """Explanation text for the two pops."""

    def execute(self, expression: str, tokens: Sequence[Token]) -> StepTrace:
        recorder = TraceRecorder(self.algorithm, expression, tokens)
        stack: List[Number] = []

        recorder.record(
            token=None,
            stack=stack,
            output=stack,
            explanation=self.start_text,
            rule_ref=self.rules["start"],
        )

        for index in self.traversal(tokens):
            token = tokens[index]
            if token.is_operand:
                stack.append(parse_number(token.text))
                recorder.record(
                    token=token,
                    stack=stack,
                    output=stack,
                    explanation=f"Symbol is an operand ('{token.text}'). Push it onto the stack.",
                    rule_ref=self.rules["operand"],
                    token_index=index,
                )
                continue

            if len(stack) < 2:
                raise InsufficientOperandsError(token.text, self.notation)
            operand1, operand2 = self.pop_operands(stack)
            result = apply_operator(token.text, operand1, operand2)
            stack.append(result)
            a, b, r = format_value(operand1), format_value(operand2), format_value(result)
            recorder.record(
                token=token,
                stack=stack,
                output=stack,
                explanation=(
                    f"Symbol is an operator ('{token.text}'). {self.describe_pops(operand1, operand2)} "
                    f"Calculate {a} {token.text} {b} = {r}. Push the result onto the stack."
                ),
                rule_ref=self.rules["operator"],
                operands=(operand1, operand2),
                result=result,
                token_index=index,
            )

        if len(stack) != 1:
            raise InvalidOperandCountError(len(stack), self.notation)

        answer = stack[0]
        recorder.record(
            token=None,
            stack=stack,
            output=stack,
            explanation=f"After processing all symbols, the final answer is {format_value(answer)}.",
            rule_ref=self.rules["final"],
        )
        return recorder.finish(answer)


class PrefixEvaluator(StackEvaluator):
    """Evaluate prefix expressions, reading right to left."""

    algorithm = Algorithm.PREFIX_EVALUATION
    name = "Evaluation of Prefix Expression"
    description = "Operand stack driven right to left"
    notation = "prefix"
    reverse = True

    start_text = "Algorithm starts. Reading prefix expression from right to left."

    def pop_operands(self, stack: List[Number]) -> Tuple[Number, Number]:
        operand1 = stack.pop()
        operand2 = stack.pop()
        return operand1, operand2

    def describe_pops(self, operand1: Number, operand2: Number) -> str:
        return f"Pop {format_value(operand1)} and {format_value(operand2)}."


class PostfixEvaluator(StackEvaluator):
    """Evaluate postfix expressions, reading left to right."""

    algorithm = Algorithm.POSTFIX_EVALUATION
    name = "Evaluation of Postfix Expression"
    description = "Operand stack driven left to right"
    notation = "postfix"

    start_text = "Algorithm starts. Reading postfix expression from left to right."

    def pop_operands(self, stack: List[Number]) -> Tuple[Number, Number]:
        operand2 = stack.pop()
        operand1 = stack.pop()
        return operand1, operand2

    def describe_pops(self, operand1: Number, operand2: Number) -> str:
        return f"Pop {format_value(operand2)} and then {format_value(operand1)}."
