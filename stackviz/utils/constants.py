"""
Engine tables and the algorithm rule catalog.

The rule catalog is what rule references in step records point into.
"""

import re
from typing import Dict, List, Sequence


OPERATORS = frozenset("+-*/^")

PRECEDENCE = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
    "^": 3,
}

# Alternation order matters: numbers, then identifiers, then symbols
NUMBER_PATTERN = r"[0-9]+(?:\.[0-9]+)?"
IDENTIFIER_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*"
SYMBOL_PATTERN = r"[+\-*/^()]"

TOKEN_RE = re.compile(
    rf"(?P<number>{NUMBER_PATTERN})|(?P<identifier>{IDENTIFIER_PATTERN})|(?P<symbol>{SYMBOL_PATTERN})"
)
NUMBER_RE = re.compile(rf"{NUMBER_PATTERN}\Z")
WHITESPACE_RE = re.compile(r"\s+")

# Decimal places for final answers in exported logs
DEFAULT_PRECISION = 2

# Longest integer that can be read or printed (CPython's str/int conversion limit)
MAX_INTEGER_DIGITS = 4300

DEFAULT_EXPRESSIONS = {
    "infix-to-postfix": "A * (B + C) - D/E",
    "infix-to-prefix": "A * (B + C) - D/E",
    "prefix-evaluation": "- + * 5 3 8 / 4 2",
    "postfix-evaluation": "5 3 * 8 + 4 2 / -",
}


def _rule(text: str, *sub_steps: dict) -> dict:
    return {"text": text, "sub_steps": list(sub_steps)}


ALGORITHM_RULES: Dict[str, List[dict]] = {
    "infix-to-postfix": [
        _rule("Create an empty stack and read symbols one by one from left to right."),
        _rule("If the symbol is an operand, append it to the output."),
        _rule("If the symbol is a left parenthesis '(', push it onto the stack."),
        _rule(
            "If the symbol is a right parenthesis ')':",
            _rule("Pop operators from the stack and append them to the output until a '(' is on top."),
            _rule("Pop the '(' from the stack without appending it to the output."),
        ),
        _rule(
            "If the symbol is an operator:",
            _rule("If the stack is empty, push the operator onto the stack."),
            _rule(
                "If the stack is not empty:",
                _rule("If the top of the stack is '(', push the operator onto the stack."),
                _rule(
                    "If the top has higher or equal precedence, pop it to the output. "
                    "Repeat while this holds, then push the operator."
                ),
                _rule("If the top has lower precedence, push the operator onto the stack."),
            ),
        ),
        _rule("After the last symbol, pop all remaining operators and append them to the output."),
    ],
    "infix-to-prefix": [
        _rule("Create an empty stack."),
        _rule("Reverse the infix expression, then read the symbols from left to right."),
        _rule("If the symbol is an operand, prefix it to the output."),
        _rule("If the symbol is a right parenthesis ')', push it onto the stack."),
        _rule(
            "If the symbol is a left parenthesis '(':",
            _rule("Pop operators from the stack and prefix them to the output until a ')' is on top."),
            _rule("Pop the ')' from the stack without prefixing it to the output."),
        ),
        _rule(
            "If the symbol is an operator:",
            _rule("If the stack is empty, push the operator onto the stack."),
            _rule(
                "If the stack is not empty:",
                _rule("If the top of the stack is ')', push the operator onto the stack."),
                _rule(
                    "If the top has higher or equal precedence, pop it and prefix it to the output. "
                    "Repeat while this holds, then push the operator."
                ),
                _rule("If the top has lower precedence, push the operator onto the stack."),
            ),
        ),
        _rule("After the last symbol, pop all remaining operators and prefix them to the output."),
    ],
    "prefix-evaluation": [
        _rule("Create an empty stack. Read the symbols one by one from right to left."),
        _rule("If the symbol is an operand, push it onto the stack."),
        _rule(
            "If the symbol is an operator:",
            _rule("Pop twice to get operand1 and then operand2."),
            _rule("Calculate result = operand1 (operator) operand2."),
            _rule("Push the result onto the stack."),
        ),
        _rule("After the last symbol, the value left on the stack is the final answer."),
    ],
    "postfix-evaluation": [
        _rule("Create an empty stack. Read the symbols one by one from left to right."),
        _rule("If the symbol is an operand, push it onto the stack."),
        _rule(
            "If the symbol is an operator:",
            _rule("Pop twice to get operand2 and then operand1."),
            _rule("Calculate result = operand1 (operator) operand2."),
            _rule("Push the result onto the stack."),
        ),
        _rule("After the last symbol, the value left on the stack is the final answer."),
    ],
}


def resolve_rule_path(algorithm: str, path: Sequence[int]) -> List[str]:
    """
    Return the rule texts a rule reference highlights.

    Each index descends into the sub-steps of the rule chosen so far. Once
    a rule without sub-steps is reached, the remaining indices pick more
    rules from that same level, so (3, 0, 1) highlights rule 3 and both of
    its sub-steps.

    Raises:
        KeyError: unknown algorithm
        IndexError: path points outside the catalog
    """
    level = ALGORITHM_RULES[algorithm]
    texts = []
    for index in path:
        if index < 0 or index >= len(level):
            raise IndexError(f"Rule path {tuple(path)} is outside the {algorithm} rules")
        node = level[index]
        texts.append(node["text"])
        if node["sub_steps"]:
            level = node["sub_steps"]
    return texts
