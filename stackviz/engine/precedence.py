"""Operator precedence table."""

from ..utils.constants import PRECEDENCE


def precedence(operator: str) -> int:
    """
    Precedence rank of an operator: '^' 3, '*' '/' 2, '+' '-' 1.

    Raises:
        ValueError: for anything that is not an operator, parentheses included.
    """
    try:
        return PRECEDENCE[operator]
    except KeyError:
        raise ValueError(f"'{operator}' is not an operator and has no precedence") from None


def compare_precedence(operator: str, other: str) -> int:
    """Return 1, 0 or -1 as ``operator`` binds tighter than, as tight as, or looser than ``other``."""
    diff = precedence(operator) - precedence(other)
    return (diff > 0) - (diff < 0)
