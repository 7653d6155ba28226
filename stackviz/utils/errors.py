"""
Centralized error handling for stackviz.

Every malformed expression is classified into one ErrorKind and raised as
a NotationError subclass carrying a user-friendly message and suggestions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, List


class ErrorKind(Enum):
    """Classification of every way an engine run can fail."""

    EMPTY_EXPRESSION = "EmptyExpression"
    INVALID_CHARACTER = "InvalidCharacter"
    CONSECUTIVE_OPERATORS = "ConsecutiveOperators"
    CONSECUTIVE_OPERANDS = "ConsecutiveOperands"
    EMPTY_PARENTHESES = "EmptyParentheses"
    OPERATOR_BEFORE_CLOSE_PAREN = "OperatorBeforeCloseParen"
    OPERATOR_AFTER_OPEN_PAREN = "OperatorAfterOpenParen"
    INVALID_START = "InvalidStart"
    INVALID_END = "InvalidEnd"
    MISMATCHED_PARENTHESES = "MismatchedParentheses"
    INSUFFICIENT_OPERANDS = "InsufficientOperands"
    INVALID_OPERAND_COUNT = "InvalidOperandCount"
    DIVISION_BY_ZERO = "DivisionByZero"
    UNDEFINED_RESULT = "UndefinedResult"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"  # Input rejected, user can edit and retry
    CRITICAL = "critical"  # Unrecoverable error


@dataclass
class ErrorContext:
    """
    Rich context for error reporting.

    Provides user-friendly information beyond the raw exception.
    """

    title: str  # Short title for a status line or dialog
    message: str  # User-friendly message
    technical_details: Optional[str]
    suggestions: List[str]
    severity: ErrorSeverity
    recoverable: bool = True

    @classmethod
    def from_exception(cls, exc: Exception, context: str = "") -> "ErrorContext":
        """Create ErrorContext from any exception."""
        if isinstance(exc, NotationError):
            return exc.to_context()

        exc_type = type(exc).__name__
        exc_msg = str(exc)

        if isinstance(exc, (RecursionError, MemoryError)):
            return cls(
                title="Expression Too Large",
                message="The expression is too large to process.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=["Split the expression into smaller parts"],
                severity=ErrorSeverity.CRITICAL,
                recoverable=False,
            )

        return cls(
            title="Error",
            message=f"An unexpected error occurred: {exc_msg}",
            technical_details=f"{exc_type}: {exc_msg}\nContext: {context}",
            suggestions=["Try again with a simpler expression"],
            severity=ErrorSeverity.ERROR,
        )


class NotationError(Exception):
    """
    Base exception for all stackviz errors.

    Subclasses set ``kind`` and provide default titles and suggestions.
    """

    kind: ErrorKind
    default_title = "Error"
    default_suggestions: List[str] = []
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        *,
        suggestions: Optional[List[str]] = None,
        technical_details: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
    ):
        super().__init__(message)
        self.user_message = message
        self.suggestions = suggestions or self.default_suggestions.copy()
        self.technical_details = technical_details
        self.severity = severity or self.default_severity

    def to_context(self) -> ErrorContext:
        """Convert to ErrorContext for display."""
        return ErrorContext(
            title=self.default_title,
            message=self.user_message,
            technical_details=self.technical_details,
            suggestions=self.suggestions,
            severity=self.severity,
            recoverable=self.severity != ErrorSeverity.CRITICAL,
        )

    def to_dict(self) -> dict:
        """Machine-readable form used by the JSON output."""
        return {
            "error": self.kind.value,
            "message": self.user_message,
            "suggestions": list(self.suggestions),
        }


# === Lexical Errors ===


class LexError(NotationError):
    """Raised when the raw string cannot be split into tokens."""

    default_title = "Invalid Input"


class EmptyExpressionError(LexError):
    """Raised for empty or whitespace-only input."""

    kind = ErrorKind.EMPTY_EXPRESSION
    default_title = "Empty Expression"
    default_suggestions = ["Enter an expression such as 'A * (B + C)'"]

    def __init__(self):
        super().__init__("Expression cannot be empty.")


class InvalidCharacterError(LexError):
    """Raised when a character (or operand) is not allowed in the input."""

    kind = ErrorKind.INVALID_CHARACTER
    default_title = "Invalid Character"
    default_suggestions = [
        "Use only letters, digits, '_', '.', the operators + - * / ^ and parentheses",
    ]

    def __init__(self, message: str, *, character: str = "", position: int = -1, **kwargs):
        super().__init__(message, **kwargs)
        self.character = character
        self.position = position


# === Validation Errors ===


class ValidationError(NotationError):
    """Raised when a token sequence is structurally invalid."""

    default_title = "Syntax Error"
    default_suggestions = ["Check the order of operands, operators and parentheses"]

    def __init__(self, message: str, *, tokens: tuple = (), **kwargs):
        super().__init__(message, **kwargs)
        self.tokens = tokens


class ConsecutiveOperatorsError(ValidationError):
    kind = ErrorKind.CONSECUTIVE_OPERATORS

    def __init__(self, first: str, second: str):
        super().__init__(
            f"Syntax Error: Consecutive operators '{first}' and '{second}'.",
            tokens=(first, second),
            suggestions=["Put an operand between the two operators (unary minus is not supported)"],
        )


class ConsecutiveOperandsError(ValidationError):
    kind = ErrorKind.CONSECUTIVE_OPERANDS

    def __init__(self, first: str, second: str):
        super().__init__(
            f"Syntax Error: Consecutive operands '{first}' and '{second}'.",
            tokens=(first, second),
            suggestions=["Put an operator between the two operands (implicit multiplication is not supported)"],
        )


class EmptyParenthesesError(ValidationError):
    kind = ErrorKind.EMPTY_PARENTHESES

    def __init__(self):
        super().__init__("Syntax Error: Empty parentheses '()'.", tokens=("(", ")"))


class OperatorBeforeCloseParenError(ValidationError):
    kind = ErrorKind.OPERATOR_BEFORE_CLOSE_PAREN

    def __init__(self, operator: str):
        super().__init__(
            f"Syntax Error: Operator '{operator}' cannot be followed by ')'.",
            tokens=(operator, ")"),
        )


class OperatorAfterOpenParenError(ValidationError):
    kind = ErrorKind.OPERATOR_AFTER_OPEN_PAREN

    def __init__(self, operator: str):
        super().__init__(
            f"Syntax Error: Operator '{operator}' cannot follow '('.",
            tokens=("(", operator),
        )


class InvalidStartError(ValidationError):
    kind = ErrorKind.INVALID_START

    def __init__(self, token: str):
        super().__init__(f"Syntax Error: Expression cannot start with '{token}'.", tokens=(token,))


class InvalidEndError(ValidationError):
    kind = ErrorKind.INVALID_END

    def __init__(self, token: str):
        super().__init__(f"Syntax Error: Expression cannot end with '{token}'.", tokens=(token,))


class OperandCountError(ValidationError):
    """Raised when a prefix/postfix expression has the wrong number of operands."""

    default_title = "Invalid Expression"
    default_suggestions = [
        "Every binary operator needs exactly two operands",
        "Separate numbers with spaces, e.g. '- + * 5 3 8 / 4 2'",
    ]


class InsufficientOperandsError(OperandCountError):
    kind = ErrorKind.INSUFFICIENT_OPERANDS

    def __init__(self, operator: str, notation: str = "prefix"):
        super().__init__(
            f"Invalid {notation.capitalize()} Expression: Not enough operands for operator '{operator}'.",
            tokens=(operator,),
        )


class InvalidOperandCountError(OperandCountError):
    kind = ErrorKind.INVALID_OPERAND_COUNT

    def __init__(self, remaining: int, notation: str = "prefix"):
        super().__init__(
            f"Invalid {notation.capitalize()} Expression: The final count of operands is "
            f"{remaining}, not one.",
            technical_details=f"Operands left after all operators: {remaining}",
        )
        self.remaining = remaining


# === Execution Errors ===


class ExecutionError(NotationError):
    """Raised while an algorithm is running over a validated expression."""

    default_title = "Evaluation Error"


class MismatchedParenthesesError(ExecutionError):
    kind = ErrorKind.MISMATCHED_PARENTHESES
    default_title = "Mismatched Parentheses"
    default_suggestions = ["Check that every '(' has a matching ')'"]

    def __init__(self, detail: Optional[str] = None):
        super().__init__("Mismatched parentheses.", technical_details=detail)


class DivisionByZeroError(ExecutionError):
    kind = ErrorKind.DIVISION_BY_ZERO
    default_title = "Division by Zero"
    default_suggestions = ["Change the divisor so it is not zero"]

    def __init__(self, dividend=None):
        super().__init__(
            "Error: Cannot divide by zero.",
            technical_details=f"Dividend: {dividend}" if dividend is not None else None,
        )


class UndefinedResultError(ExecutionError):
    kind = ErrorKind.UNDEFINED_RESULT
    default_title = "Undefined Result"
    default_suggestions = ["Only real, finite results can be computed"]

    def __init__(self, expression: str):
        super().__init__(f"Error: {expression} has no real, finite value.")


# === Utility functions ===


def format_error_for_user(exc: Exception, context: str = "") -> str:
    """
    Format an exception into a user-friendly string.

    Returns a single string suitable for a status line.
    """
    ctx = ErrorContext.from_exception(exc, context)

    result = ctx.message
    if ctx.suggestions:
        result += f" Try: {ctx.suggestions[0]}"

    return result
