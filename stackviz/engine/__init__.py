"""Engine layer: the four instrumented stack algorithms."""

from .base import BaseAlgorithm, AlgorithmRegistry
from .conversion import InfixToPostfixConverter, InfixToPrefixConverter
from .evaluation import PostfixEvaluator, PrefixEvaluator
from .precedence import precedence
from .trace import TraceRecorder

__all__ = [
    "BaseAlgorithm",
    "AlgorithmRegistry",
    "InfixToPostfixConverter",
    "InfixToPrefixConverter",
    "PostfixEvaluator",
    "PrefixEvaluator",
    "TraceRecorder",
    "precedence",
    "get_default_registry",
    "convert_to_postfix",
    "convert_to_prefix",
    "evaluate_prefix",
    "evaluate_postfix",
]


def get_default_registry() -> AlgorithmRegistry:
    """
    Create and return a registry with all algorithms at standard priorities.

    Priority order for detection (lower = higher priority):
    - Prefix evaluation: 10 (numeric, starts with an operator)
    - Postfix evaluation: 20 (numeric, ends with an operator)
    - Infix to postfix: 100 (fallback for everything else)
    - Infix to prefix: 110 (only reached by name)
    """
    registry = AlgorithmRegistry()
    registry.register(PrefixEvaluator(), priority=10)
    registry.register(PostfixEvaluator(), priority=20)
    registry.register(InfixToPostfixConverter(), priority=100)
    registry.register(InfixToPrefixConverter(), priority=110)
    return registry


def convert_to_postfix(expression: str):
    """Convert an infix expression to postfix, returning the StepTrace."""
    return InfixToPostfixConverter().run(expression)


def convert_to_prefix(expression: str):
    """Convert an infix expression to prefix, returning the StepTrace."""
    return InfixToPrefixConverter().run(expression)


def evaluate_prefix(expression: str):
    """Evaluate a prefix expression, returning the StepTrace."""
    return PrefixEvaluator().run(expression)


def evaluate_postfix(expression: str):
    """Evaluate a postfix expression, returning the StepTrace."""
    return PostfixEvaluator().run(expression)
