"""Utilities: engine tables, rule catalog and errors."""

from .constants import ALGORITHM_RULES, PRECEDENCE, resolve_rule_path
from .errors import ErrorKind, NotationError

__all__ = ["ALGORITHM_RULES", "PRECEDENCE", "resolve_rule_path", "ErrorKind", "NotationError"]
