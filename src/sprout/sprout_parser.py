"""
Sprout Language Parser

Parses a Sprout token sequence into a list of top-level `ASTNode` statements.

The parser is recursive-descent over a fully materialized token list. Lookahead
is an index offset (`peek(n)`), so productions can inspect several tokens before
committing: a function header is checked four tokens deep, an assignment five.

Supported Constructs
--------------------
- Statements:
    * Functions: `fn name() { ... }`
    * Bindings: `let x = 5;`, `const y = "hi";`
    * Conditionals: `if cond { ... }` with optional `else { ... }` or a
      block-form `else if cond { ... }`
    * Returns: `return expr;` or `return;` (inside a function body)
    * Bare blocks: `{ ... }`
    * Expression statements: `expr;`

- Expressions:
    * Identifiers, string, number and boolean literals
    * Comparisons: `==`, `!=`, `>`, `>=`, `<`, `<=` (one precedence level,
      left-associative)
    * Shorthand conditionals: `if cond then a else b`
    * Anonymous functions: `fn() { ... }`
    * Parenthesized expressions: `( expr )`

Parser Behavior
---------------
- Fail-fast: the first mismatch raises `ParseError`; nothing is recovered and
  no partial AST is returned.
- On failure the cursor is left on the first token that did not match, and the
  error names the innermost production being parsed.
- A block that runs into the end of input raises `UnterminatedBlockError`.
- Nesting of blocks, conditionals and expressions is capped at
  `MAX_NESTING_DEPTH`; deeper input raises `ParseError`.
- An EOF token is accepted only as the last token of the input.

Entry Points
------------
- `parse(tokens)`: Parse a token list into top-level statements.
- `parse_source(source)`: Tokenize and parse source text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from sprout.sprout_ast import ASTNode
from sprout.sprout_constants import (
    MAX_NESTING_DEPTH,
    binding_tokens,
    comparison_tokens,
    literal_tokens,
)
from sprout.sprout_errors import ParseError, UnterminatedBlockError
from sprout.sprout_keywords import KeywordMapper
from sprout.sprout_lexer import Token, tokenize

logger = logging.getLogger(__name__)

EOF_TOKEN = Token("EOF", "EOF")

# Token types that end a conditional's condition without starting a body
CONDITION_STOP_TOKENS = frozenset({"SEMI", "RBRACE", "LBRACE", "EOF"})

Expected = str | frozenset[str]


class Parser:
    """
    Sprout Parser Class

    Attributes
    ----------
    tokens : list[Token]
        The input token sequence; a trailing EOF token is optional.
    position : int
        Current index into the token sequence.
    function_depth : int
        Number of function bodies enclosing the current position.
    nesting : int
        Current depth of nested blocks, conditionals and expressions.
    allow_expression_initializers : bool
        When False (the default), `let`/`const` take exactly one literal
        initializer. When True, any expression is accepted.
    """

    def __init__(
        self, tokens: Iterable[Token], allow_expression_initializers: bool = False
    ) -> None:
        self.tokens: list[Token] = list(tokens)
        self.position: int = 0
        self.function_depth: int = 0
        self.nesting: int = 0
        self.allow_expression_initializers = allow_expression_initializers

    def current(self) -> Token:
        return self.peek(0)

    def peek(self, offset: int = 1) -> Token:
        index = self.position + offset
        return self.tokens[index] if index < len(self.tokens) else EOF_TOKEN

    def advance(self) -> Token:
        tok = self.current()
        if tok.type != "EOF":
            self.position += 1
        return tok

    def error(self, production: str, reason: str, tok: Token) -> ParseError:
        return ParseError(production, reason, None if tok.type == "EOF" else tok)

    def match(self, *types: str, production: str) -> Token:
        tok = self.current()
        if tok.type in types:
            return self.advance()
        raise self.error(production, f"expected {' or '.join(types)}", tok)

    def expect_window(self, production: str, *expected: Expected) -> list[Token]:
        """Checks the next tokens against `expected` without consuming any.

        On a mismatch the cursor moves onto the offending token, so the error
        points at it, and ParseError is raised.
        """
        window = [self.peek(i) for i in range(len(expected))]
        for i, (tok, accepted) in enumerate(zip(window, expected)):
            allowed = {accepted} if isinstance(accepted, str) else accepted
            if tok.type not in allowed:
                self.position += i
                raise self.error(
                    production, f"expected {' or '.join(sorted(allowed))}", tok
                )
        return window

    @contextmanager
    def nested(self, production: str) -> Iterator[None]:
        """Tracks recursion depth, failing once it passes MAX_NESTING_DEPTH."""
        if self.nesting >= MAX_NESTING_DEPTH:
            raise self.error(
                production,
                f"nesting deeper than {MAX_NESTING_DEPTH} levels",
                self.current(),
            )
        self.nesting += 1
        try:
            yield
        finally:
            self.nesting -= 1

    def parse(self) -> list[ASTNode]:
        """Parse the whole token sequence into a list of top-level statements."""
        for tok in self.tokens[:-1]:
            if tok.type == "EOF":
                raise ParseError(
                    "program", "EOF is only allowed as the last token", tok
                )

        ast: list[ASTNode] = []
        while self.current().type != "EOF":
            ast.append(self.parse_statement())
        logger.debug("Parsed %d top-level statements", len(ast))
        return ast

    def parse_statement(self) -> ASTNode:
        """Parse a single top-level or block-level statement."""
        tok = self.current()

        if tok.type == "FN" and self.peek().type != "LPAREN":
            return self.parse_function()
        if tok.type in binding_tokens:
            return self.parse_assignment()
        if tok.type == "IF":
            return self.parse_conditional()
        if tok.type == "RETURN":
            return self.parse_return()
        if tok.type == "LBRACE":
            body = self.parse_block("block")
            return ASTNode("block", children=body, line=tok.line, col=tok.col)

        return self.parse_expression_statement()

    def parse_block(self, production: str) -> list[ASTNode]:
        """Parse a `{}`-enclosed list of statements.

        Raises:
            UnterminatedBlockError: If the tokens run out before the closing `}`.
        """
        with self.nested(production):
            self.match("LBRACE", production=production)

            stmts: list[ASTNode] = []
            while self.current().type != "RBRACE":
                if self.current().type == "EOF":
                    raise UnterminatedBlockError(production)
                stmts.append(self.parse_statement())

            self.advance()
            return stmts

    def parse_function_body(self, production: str) -> list[ASTNode]:
        self.function_depth += 1
        try:
            return self.parse_block(production)
        finally:
            self.function_depth -= 1

    def parse_function(self) -> ASTNode:
        """Parse `fn name() { ... }`."""
        fn_tok = self.match("FN", production="function")
        name_tok, _, _, _ = self.expect_window(
            "function", "IDENT", "LPAREN", "RPAREN", "LBRACE"
        )
        self.position += 3

        body = self.parse_function_body("function")
        return ASTNode(
            "func",
            value=name_tok.value,
            children=body,
            line=fn_tok.line,
            col=fn_tok.col,
        )

    def parse_anon_function(self) -> ASTNode:
        """Parse `fn() { ... }` in expression position."""
        fn_tok = self.match("FN", production="anonymous function")
        self.match("LPAREN", production="anonymous function")
        self.match("RPAREN", production="anonymous function")

        body = self.parse_function_body("anonymous function")
        return ASTNode("anon_func", children=body, line=fn_tok.line, col=fn_tok.col)

    def parse_assignment(self) -> ASTNode:
        """Parse a `let`/`const` binding."""
        bindings = frozenset(binding_tokens)
        if self.allow_expression_initializers:
            kw_tok, name_tok, _ = self.expect_window(
                "assignment", bindings, "IDENT", "ASSIGN"
            )
            self.position += 3
            value_node = self.parse_expression()
            self.match("SEMI", production="assignment")
        else:
            kw_tok, name_tok, _, value_tok, _ = self.expect_window(
                "assignment",
                bindings,
                "IDENT",
                "ASSIGN",
                frozenset(literal_tokens),
                "SEMI",
            )
            self.position += 5
            value_node = self.literal_node(value_tok)

        return ASTNode(
            "assign",
            value=name_tok.value,
            children=[value_node],
            line=kw_tok.line,
            col=kw_tok.col,
            type_=binding_tokens[kw_tok.type],
        )

    def classify_conditional(self) -> str | None:
        """Look past the condition of the `if` at the cursor for its body marker.

        Returns "THEN" for the shorthand form, "LBRACE" for the block form, or
        None if the condition is followed by neither. Nested shorthand `if`s
        and anonymous function bodies inside the condition are skipped.
        """
        depth = 0
        offset = 1
        while True:
            tok = self.peek(offset)
            if tok.type == "IF":
                depth += 1
            elif tok.type == "THEN":
                if depth == 0:
                    return "THEN"
                depth -= 1
            elif tok.type == "LBRACE" and depth == 0:
                return "LBRACE"
            elif tok.type == "FN" and self.is_anon_function_header(offset):
                offset = self.skip_anon_function(offset)
            elif tok.type in CONDITION_STOP_TOKENS:
                return None
            offset += 1

    def is_anon_function_header(self, offset: int) -> bool:
        return [self.peek(offset + i).type for i in range(1, 4)] == [
            "LPAREN",
            "RPAREN",
            "LBRACE",
        ]

    def skip_anon_function(self, offset: int) -> int:
        """Returns the offset of the `}` closing the function at `offset`."""
        braces = 0
        while True:
            tok = self.peek(offset)
            if tok.type == "EOF":
                return offset - 1
            if tok.type == "LBRACE":
                braces += 1
            elif tok.type == "RBRACE":
                braces -= 1
                if braces == 0:
                    return offset
            offset += 1

    def parse_conditional(self) -> ASTNode:
        """Parse an `if` at statement level, in whichever form it takes."""
        if self.classify_conditional() == "THEN":
            return self.parse_expression_statement()
        return self.parse_if()

    def parse_if(self, production: str = "if") -> ASTNode:
        """Parse `if cond { ... }` with an optional `else` branch.

        `else` takes either a block or another block-form `if`; the shorthand
        is not accepted there, so `production` is "else if" for that case.
        """
        with self.nested(production):
            if_tok = self.match("IF", production=production)
            cond = self.parse_expression()

            if self.current().type != "LBRACE":
                expected = "LBRACE" if production == "else if" else "THEN or LBRACE"
                raise self.error(
                    production, f"expected {expected} after condition", self.current()
                )
            then_block = self.parse_block(production)

            node = ASTNode(
                "if", value=cond, children=then_block, line=if_tok.line, col=if_tok.col
            )
            if self.current().type == "ELSE":
                self.advance()
                if self.current().type == "IF":
                    node.else_children = [self.parse_if("else if")]
                else:
                    node.else_children = self.parse_block("else")
            return node

    def parse_if_shorthand(self) -> ASTNode:
        """Parse `if cond then a else b`."""
        if_tok = self.match("IF", production="if expression")
        cond = self.parse_expression()
        self.match("THEN", production="if expression")
        then_expr = self.parse_expression()
        self.match("ELSE", production="if expression")
        otherwise = self.parse_expression()
        return ASTNode(
            "if_shorthand",
            children=[cond, then_expr, otherwise],
            line=if_tok.line,
            col=if_tok.col,
        )

    def parse_return(self) -> ASTNode:
        """Parse `return expr;` or `return;`."""
        tok = self.current()
        if self.function_depth == 0:
            raise self.error("return", "return is only allowed inside a function", tok)
        self.advance()

        if self.current().type == "SEMI":
            self.advance()
            return ASTNode("return", line=tok.line, col=tok.col)

        expr = self.parse_expression()
        self.match("SEMI", production="return")
        return ASTNode("return", children=[expr], line=tok.line, col=tok.col)

    def parse_expression_statement(self) -> ASTNode:
        expr = self.parse_expression()
        self.match("SEMI", production="expression statement")
        return ASTNode("expr_stmt", children=[expr], line=expr.line, col=expr.col)

    def parse_expression(self) -> ASTNode:
        """Parse a primary expression and any comparisons chained after it."""
        with self.nested("expression"):
            left = self.parse_primary()
            while self.current().type in comparison_tokens:
                op_tok = self.advance()
                right = self.parse_primary()
                left = ASTNode(
                    "compare",
                    value=comparison_tokens[op_tok.type],
                    children=[left, right],
                    line=op_tok.line,
                    col=op_tok.col,
                )
            return left

    def parse_primary(self) -> ASTNode:
        tok = self.current()

        if tok.type == "IDENT":
            self.advance()
            return ASTNode("identifier", tok.value, line=tok.line, col=tok.col)
        if tok.type in literal_tokens:
            self.advance()
            return self.literal_node(tok)
        if tok.type == "LPAREN":
            self.advance()
            expr = self.parse_expression()
            self.match("RPAREN", production="parenthesized expression")
            return expr
        if tok.type == "IF":
            return self.parse_if_shorthand()
        if tok.type == "FN":
            return self.parse_anon_function()

        raise self.error("expression", "expected expression", tok)

    def literal_node(self, tok: Token) -> ASTNode:
        return ASTNode(literal_tokens[tok.type], tok.value, line=tok.line, col=tok.col)


def parse(
    tokens: Iterable[Token], allow_expression_initializers: bool = False
) -> list[ASTNode]:
    """Parse a token sequence into its top-level statements.

    Raises:
        ParseError: If the tokens do not form a valid program.
    """
    return Parser(tokens, allow_expression_initializers).parse()


def parse_source(
    source: str,
    keywords: KeywordMapper | None = None,
    allow_expression_initializers: bool = False,
) -> list[ASTNode]:
    """Tokenize and parse `source` in one step.

    Raises:
        LexError: If the source cannot be tokenized.
        ParseError: If the tokens do not form a valid program.
    """
    return parse(tokenize(source, keywords), allow_expression_initializers)


__all__ = ["Parser", "parse", "parse_source"]
