"""
Core data structures for stackviz.

These dataclasses define the contract between the engine and everything
that displays, replays or exports its results.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple, Union, Iterator

Number = Union[int, float]


class TokenKind(Enum):
    """Lexical category of a token, decided once at tokenize time."""

    OPERAND = auto()
    OPERATOR = auto()
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()


class Algorithm(Enum):
    """The four instrumented stack algorithms."""

    INFIX_TO_POSTFIX = "infix-to-postfix"
    INFIX_TO_PREFIX = "infix-to-prefix"
    PREFIX_EVALUATION = "prefix-evaluation"
    POSTFIX_EVALUATION = "postfix-evaluation"

    @property
    def is_evaluation(self) -> bool:
        return self in (Algorithm.PREFIX_EVALUATION, Algorithm.POSTFIX_EVALUATION)


@dataclass(frozen=True)
class Token:
    """A single lexical token and where it started in the raw input."""

    kind: TokenKind
    text: str
    position: int = -1

    @property
    def is_operand(self) -> bool:
        return self.kind is TokenKind.OPERAND

    @property
    def is_operator(self) -> bool:
        return self.kind is TokenKind.OPERATOR

    @property
    def is_numeric(self) -> bool:
        """True for operands that are numeric literals."""
        return self.is_operand and self.text[0].isdigit()

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class StepRecord:
    """
    Snapshot of an algorithm's state after one step.

    Start and drain records have no token. Snapshots are tuples (or a
    string for prefix output) so later processing cannot change them.
    """

    step_number: int
    token: Optional[str]
    stack_snapshot: tuple
    output_snapshot: Union[tuple, str]
    explanation: str
    rule_ref: Tuple[int, ...]
    changed: bool = False
    token_index: int = -1  # Position in the original left-to-right token order
    operands: Optional[Tuple[Number, Number]] = None  # (operand1, operand2)
    result: Optional[Number] = None

    def to_dict(self) -> dict:
        """Serialize with the key names presentation collaborators expect."""
        data = {
            "stepNumber": self.step_number,
            "token": self.token,
            "stackSnapshot": list(self.stack_snapshot),
            "outputSnapshot": (
                self.output_snapshot
                if isinstance(self.output_snapshot, str)
                else list(self.output_snapshot)
            ),
            "explanation": self.explanation,
            "ruleRef": list(self.rule_ref),
            "changed": self.changed,
            "tokenIndex": self.token_index,
        }
        if self.operands is not None:
            data["operands"] = list(self.operands)
            data["result"] = self.result
        return data


@dataclass(frozen=True)
class StepTrace:
    """
    Complete, immutable record of one engine run.

    This is the primary data object handed to presentation code.
    """

    algorithm: Algorithm
    expression: str
    tokens: Tuple[Token, ...]
    steps: Tuple[StepRecord, ...] = field(default_factory=tuple)
    final_output: Union[str, Number] = ""

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[StepRecord]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> StepRecord:
        return self.steps[index]

    @property
    def final_step(self) -> StepRecord:
        return self.steps[-1]

    @property
    def token_steps(self) -> Tuple[StepRecord, ...]:
        """Records produced by consuming a token (no start/drain)."""
        return tuple(step for step in self.steps if step.token is not None)

    def to_dict(self) -> dict:
        return {
            "algorithm": self.algorithm.value,
            "expression": self.expression,
            "tokens": [token.text for token in self.tokens],
            "steps": [step.to_dict() for step in self.steps],
            "finalOutput": self.final_output,
        }


def format_value(value: Number, precision: Optional[int] = None) -> str:
    """
    Render a number for explanations and logs.

    Integral values print without a decimal point. With ``precision`` set,
    other values are rounded to that many decimals; otherwise the shortest
    repr is used.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float) and precision is not None:
        return f"{value:.{precision}f}"
    return str(value)
