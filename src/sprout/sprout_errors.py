"""
Error types raised by the Sprout front end.

Both kinds are terminal: the lexer and parser never recover, never return a
partial result, and never log-and-continue. Callers receive one of:

    LexError              unrecognized character, bad escape, unterminated
                          string, or a number above the 128-bit bound
    ParseError            tokens do not match the production being parsed
    UnterminatedBlockError  input ran out inside a `{ ... }` block
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sprout.sprout_lexer import Token


class SproutError(Exception):
    """Base class for every error raised while tokenizing or parsing."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LexError(SproutError):
    """Raised when the source text cannot be split into tokens.

    Attributes:
        text (str): The offending character or slice of source.
        offset (int): 0-based character offset where `text` starts.
        line (int): 1-based line of `text`.
        col (int): 1-based column of `text`.
    """

    def __init__(
        self, reason: str, text: str, offset: int, line: int = 0, col: int = 0
    ) -> None:
        super().__init__(
            f"{reason} {text!r} at line {line}, col {col} (offset {offset})"
        )
        self.reason = reason
        self.text = text
        self.offset = offset
        self.line = line
        self.col = col


class ParseError(SproutError):
    """Raised when the token sequence does not match the expected grammar.

    Attributes:
        production (str): The construct being parsed when the error occurred.
        token (Token | None): The offending token, or None at end of input.
    """

    def __init__(self, production: str, reason: str, token: Token | None) -> None:
        got = "end of input" if token is None else repr(token)
        super().__init__(f"Error parsing {production}: {reason}, got {got}")
        self.production = production
        self.reason = reason
        self.token = token

    @property
    def at_end_of_input(self) -> bool:
        return self.token is None


class UnterminatedBlockError(ParseError):
    """Raised when the input is exhausted before a block's closing `}`."""

    def __init__(self, production: str) -> None:
        super().__init__(production, "expected '}' to close block", None)


__all__ = ["LexError", "ParseError", "SproutError", "UnterminatedBlockError"]
