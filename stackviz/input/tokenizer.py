"""
Expression tokenizer.

Splits raw expression strings into classified tokens for the engine.
"""

import logging
from typing import List, Optional, Tuple

from ..models import Token, TokenKind
from ..utils.constants import TOKEN_RE, WHITESPACE_RE
from ..utils.errors import EmptyExpressionError, InvalidCharacterError, LexError

logger = logging.getLogger(__name__)

_SYMBOL_KINDS = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
}


class Tokenizer:
    """
    Split expression strings into tokens.

    Numbers and identifiers may span several characters; operators and
    parentheses are single characters. Whitespace separates tokens.

    Usage:
        tokenizer = Tokenizer()
        tokens = tokenizer.tokenize("A * (B + C)")
        print([t.text for t in tokens])  # ['A', '*', '(', 'B', '+', 'C', ')']
    """

    def tokenize(self, expression: str) -> List[Token]:
        """
        Tokenize an expression.

        Raises:
            EmptyExpressionError: if the input is empty or only whitespace.
            InvalidCharacterError: if any character starts no token.
        """
        if not expression or not expression.strip():
            raise EmptyExpressionError()

        tokens = []
        pos = 0
        end = len(expression)
        while pos < end:
            space = WHITESPACE_RE.match(expression, pos)
            if space:
                pos = space.end()
                continue

            match = TOKEN_RE.match(expression, pos)
            if match is None:
                char = expression[pos]
                logger.debug("Invalid character %r at %d in %r", char, pos, expression)
                raise InvalidCharacterError(
                    f"Invalid character '{char}' at position {pos}.",
                    character=char,
                    position=pos,
                )

            tokens.append(self._classify(match.group(), match.lastgroup, pos))
            pos = match.end()

        self._check_round_trip(expression, tokens)
        return tokens

    def try_tokenize(self, expression: str) -> Tuple[Optional[List[Token]], Optional[str]]:
        """
        Attempt to tokenize, returning None on failure instead of raising.

        Returns:
            Tuple of (tokens or None, error message or None)
        """
        try:
            return self.tokenize(expression), None
        except LexError as e:
            return None, str(e)

    @staticmethod
    def _classify(text: str, group: str, position: int) -> Token:
        if group == "symbol":
            kind = _SYMBOL_KINDS.get(text, TokenKind.OPERATOR)
        else:
            kind = TokenKind.OPERAND
        return Token(kind=kind, text=text, position=position)

    @staticmethod
    def _check_round_trip(expression: str, tokens: List[Token]) -> None:
        """The tokens must account for every non-whitespace character."""
        stripped = WHITESPACE_RE.sub("", expression)
        rejoined = "".join(token.text for token in tokens)
        if rejoined != stripped:
            raise InvalidCharacterError(
                "Invalid characters found in the expression. "
                "Only use letters, digits, operators and parentheses.",
                technical_details=f"Tokens rejoin to {rejoined!r}, input is {stripped!r}",
            )


def tokenize(expression: str) -> List[Token]:
    """
    Convenience function: tokenize with a default Tokenizer.

    Raises LexError on failure.
    """
    return Tokenizer().tokenize(expression)
