"""Input layer: tokenizing and validating expressions."""

from .tokenizer import Tokenizer, tokenize
from .validator import check_infix, validate_infix, validate_operand_count

__all__ = [
    "Tokenizer",
    "tokenize",
    "check_infix",
    "validate_infix",
    "validate_operand_count",
]
