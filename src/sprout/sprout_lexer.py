"""
Lexical analyzer for the Sprout programming language.

This module converts raw source text into a flat sequence of tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: A single immutable token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace (any character for which `str.isspace` holds)
    - Unicode identifiers, classified against a configurable keyword table
    - Unsigned integer literals up to 2**128 - 1
    - Double-quoted strings with escape sequences
    - Longest-match recognition of operators (`>=` before `>`)

Raises:
    LexError: On an unrecognized character, a bad escape, an unterminated
        string, or a number that does not fit in 128 bits.

Example:
    >>> tokenize("let x = 5;")
    [Token(LET, let), Token(IDENT, x), Token(ASSIGN, =), Token(NUMBER, 5), Token(SEMI, ;)]

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

import logging
from dataclasses import dataclass, field

from sprout.sprout_constants import (
    MAX_NUMBER,
    MAX_NUMBER_DIGITS,
    MAX_OPERATOR_LENGTH,
    boolean_literals,
    token_hashmap,
)
from sprout.sprout_errors import LexError
from sprout.sprout_keywords import KeywordMapper

logger = logging.getLogger(__name__)

ESCAPES: dict[str, str] = {
    '"': '"',
    "\\": "\\",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
}


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            LexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise LexError(
                "Unexpected end of input", "", self.position, self.line, self.column
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead without advancing, or "" if out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """Represents a single lexical token in the Sprout language.

    Position fields are diagnostic metadata only: they are excluded from
    equality and hashing, so the same tokens laid out differently compare equal.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'NUMBER', 'EOF').
        value (str | int | bool): The name or spelling for identifiers, keywords
            and punctuation; the decoded text for STRING; an int for NUMBER;
            a bool for BOOLEAN.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
        offset (int): The 0-based character offset where the token starts.
    """

    type: str
    value: str | int | bool
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)
    offset: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"


class Lexer:
    """Lexical analyzer for the Sprout language.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        keywords (KeywordMapper): Table used to classify scanned words.
    """

    def __init__(
        self, stream: CharacterStream, keywords: KeywordMapper | None = None
    ) -> None:
        self.stream = stream
        self.keywords = (
            keywords if keywords is not None else KeywordMapper.from_canonical()
        )

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek().isspace():
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col, offset = self.stream.line, self.stream.column, self.stream.position
        max_token = None
        candidate = ""

        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col, offset)

        return None

    def read_word(self, line: int, col: int, offset: int) -> Token:
        word = self.advance()
        while not self.stream.end_of_file() and ("_" + self.peek()).isidentifier():
            word += self.advance()

        if word in boolean_literals:
            return Token("BOOLEAN", boolean_literals[word], line, col, offset)
        keyword = self.keywords.classify(word)
        if keyword is not None:
            return Token(keyword, word, line, col, offset)
        return Token("IDENT", word, line, col, offset)

    def read_number(self, line: int, col: int, offset: int) -> Token:
        digits = ""
        while not self.stream.end_of_file() and self.peek().isdecimal():
            digits += self.advance()

        # int() refuses very long digit strings, so convert only the significant part
        significant = digits.lstrip("0") or "0"
        if len(significant) > MAX_NUMBER_DIGITS:
            raise LexError("Number literal too large", digits, offset, line, col)
        value = int(significant)
        if value > MAX_NUMBER:
            raise LexError("Number literal too large", digits, offset, line, col)
        return Token("NUMBER", value, line, col, offset)

    def read_string(self, line: int, col: int, offset: int) -> Token:
        quote = self.advance()
        val = ""
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch == quote:
                self.advance()
                return Token("STRING", val, line, col, offset)
            if ch == "\\":
                esc_line, esc_col = self.stream.line, self.stream.column
                esc_offset = self.stream.position
                self.advance()
                if self.stream.end_of_file():
                    break
                code = self.advance()
                if code not in ESCAPES:
                    raise LexError(
                        "Invalid escape sequence",
                        "\\" + code,
                        esc_offset,
                        esc_line,
                        esc_col,
                    )
                val += ESCAPES[code]
            else:
                val += self.advance()

        raise LexError("Unterminated string", quote + val, offset, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token, or an EOF token once the source is exhausted.

        Raises:
            LexError: If the source cannot be tokenized at the current position.
        """
        self.skip_whitespace()

        line, col, offset = self.stream.line, self.stream.column, self.stream.position
        if self.stream.end_of_file():
            return Token("EOF", "EOF", line, col, offset)

        ch = self.peek()

        # 1. Identifier or keyword
        if ch.isidentifier():
            return self.read_word(line, col, offset)

        # 2. Number
        if ch.isdecimal():
            return self.read_number(line, col, offset)

        # 3. String
        if ch == '"':
            return self.read_string(line, col, offset)

        # 4. Compound or single-character operator
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character
        raise LexError("Unexpected character", ch, offset, line, col)

    def tokenize(self) -> list[Token]:
        """Consumes the whole stream and returns its tokens, without the trailing EOF."""
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            if tok.type == "EOF":
                break
            tokens.append(tok)
        logger.debug(
            "Tokenized %d characters into %d tokens",
            len(self.stream.source),
            len(tokens),
        )
        return tokens


def tokenize(source: str, keywords: KeywordMapper | None = None) -> list[Token]:
    """Tokenizes a complete source unit.

    Args:
        source (str): The Sprout source text.
        keywords (KeywordMapper, optional): Keyword table; defaults to the reserved words.

    Returns:
        list[Token]: The tokens in source order, without an EOF marker.

    Raises:
        LexError: If the source contains text that is not a valid token.
    """
    return Lexer(CharacterStream(source), keywords).tokenize()


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
