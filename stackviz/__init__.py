"""
stackviz - step-by-step expression notation algorithms.

Converts infix expressions to postfix/prefix and evaluates prefix/postfix
expressions, recording every stack state along the way.
"""

from .engine import (
    convert_to_postfix,
    convert_to_prefix,
    evaluate_postfix,
    evaluate_prefix,
    get_default_registry,
)
from .input import check_infix, tokenize, validate_infix
from .models import Algorithm, StepRecord, StepTrace, Token, TokenKind
from .utils.errors import ErrorKind, NotationError

__version__ = "0.1.0"

__all__ = [
    "convert_to_postfix",
    "convert_to_prefix",
    "evaluate_postfix",
    "evaluate_prefix",
    "get_default_registry",
    "check_infix",
    "tokenize",
    "validate_infix",
    "Algorithm",
    "StepRecord",
    "StepTrace",
    "Token",
    "TokenKind",
    "ErrorKind",
    "NotationError",
]
