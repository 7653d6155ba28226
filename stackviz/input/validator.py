"""
Structural validation of token sequences.

Infix sequences are checked pairwise and at their boundaries before a
conversion runs; prefix/postfix sequences get an operand-count check
before they are evaluated.
"""

from typing import Optional, Sequence

from ..models import Token, TokenKind
from ..utils.errors import (
    ConsecutiveOperandsError,
    ConsecutiveOperatorsError,
    EmptyParenthesesError,
    InsufficientOperandsError,
    InvalidEndError,
    InvalidOperandCountError,
    InvalidStartError,
    OperatorAfterOpenParenError,
    OperatorBeforeCloseParenError,
    ValidationError,
)


def validate_infix(tokens: Sequence[Token]) -> None:
    """
    Reject structurally invalid infix token sequences.

    Must be given the original left-to-right order. Parenthesis balance is
    not checked here; the conversions report it while running.

    Raises:
        ValidationError: the first violation found.
    """
    for current, following in zip(tokens, tokens[1:]):
        if current.is_operator and following.is_operator:
            raise ConsecutiveOperatorsError(current.text, following.text)
        if current.is_operand and following.is_operand:
            raise ConsecutiveOperandsError(current.text, following.text)
        if current.kind is TokenKind.LEFT_PAREN and following.kind is TokenKind.RIGHT_PAREN:
            raise EmptyParenthesesError()
        if current.is_operator and following.kind is TokenKind.RIGHT_PAREN:
            raise OperatorBeforeCloseParenError(current.text)
        if current.kind is TokenKind.LEFT_PAREN and following.is_operator:
            raise OperatorAfterOpenParenError(following.text)

    if not tokens:
        return

    first, last = tokens[0], tokens[-1]
    if first.is_operator or first.kind is TokenKind.RIGHT_PAREN:
        raise InvalidStartError(first.text)
    if last.is_operator or last.kind is TokenKind.LEFT_PAREN:
        raise InvalidEndError(last.text)


def check_infix(tokens: Sequence[Token]) -> Optional[ValidationError]:
    """Return the first violation instead of raising it, or None."""
    try:
        validate_infix(tokens)
    except ValidationError as e:
        return e
    return None


def validate_operand_count(
    tokens: Sequence[Token], *, reverse: bool, notation: str = "prefix"
) -> None:
    """
    Check that a prefix/postfix sequence has exactly enough operands.

    Scans in evaluation order (right to left for prefix, ``reverse=True``).
    Every operator needs two operands available and leaves one behind; one
    operand must remain at the end.

    Raises:
        InsufficientOperandsError: an operator has fewer than two operands.
        InvalidOperandCountError: the final count is not one.
    """
    count = 0
    for token in reversed(tokens) if reverse else tokens:
        if token.is_operand:
            count += 1
        elif token.is_operator:
            if count < 2:
                raise InsufficientOperandsError(token.text, notation)
            count -= 1
    if count != 1:
        raise InvalidOperandCountError(count, notation)
