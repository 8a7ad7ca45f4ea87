"""
Token vocabulary shared by the Sprout lexer, keyword mapper and parser.

Exports:
    - token_hashmap: punctuation and operator spellings -> token type
    - keyword_hashmap: reserved words -> token type
    - boolean_literals: reserved words that lex to a BOOLEAN token
    - comparison_tokens: comparison token type -> operator name
    - literal_tokens: token types that form a literal expression
    - CANONICAL_TOKENS: every token type, in a stable order
    - MAX_NUMBER: largest value a NUMBER token may hold
    - MAX_NESTING_DEPTH: deepest nesting the parser accepts
"""

token_hashmap: dict[str, str] = {
    ";": "SEMI",
    "{": "LBRACE",
    "}": "RBRACE",
    "(": "LPAREN",
    ")": "RPAREN",
    "=": "ASSIGN",
    ">": "GT",
    "<": "LT",
    ">=": "GE",
    "<=": "LE",
    "!=": "NE",
    "==": "EQ",
}

keyword_hashmap: dict[str, str] = {
    "fn": "FN",
    "let": "LET",
    "const": "CONST",
    "if": "IF",
    "then": "THEN",
    "else": "ELSE",
    "return": "RETURN",
    "use": "USE",
}

boolean_literals: dict[str, bool] = {
    "true": True,
    "false": False,
}

comparison_tokens: dict[str, str] = {
    "EQ": "Equal",
    "NE": "NotEqual",
    "GT": "GreaterThan",
    "GE": "GreaterOrEqual",
    "LT": "LessThan",
    "LE": "LessOrEqual",
}

literal_tokens: dict[str, str] = {
    "STRING": "string",
    "NUMBER": "number",
    "BOOLEAN": "boolean",
}

binding_tokens: dict[str, str] = {
    "LET": "let",
    "CONST": "const",
}

CANONICAL_TOKENS: list[str] = [
    "FN",
    "LET",
    "CONST",
    "IF",
    "THEN",
    "ELSE",
    "RETURN",
    "USE",
    "LBRACE",
    "RBRACE",
    "SEMI",
    "LPAREN",
    "RPAREN",
    "ASSIGN",
    "GT",
    "LT",
    "GE",
    "LE",
    "NE",
    "EQ",
    "IDENT",
    "STRING",
    "NUMBER",
    "BOOLEAN",
    "EOF",
]

# Keyword types an alias may be bound to
KEYWORD_TOKENS: frozenset[str] = frozenset(keyword_hashmap.values())

MAX_OPERATOR_LENGTH: int = max(len(k) for k in token_hashmap)

MAX_NUMBER: int = 2**128 - 1

MAX_NUMBER_DIGITS: int = len(str(MAX_NUMBER))

# Combined depth of nested blocks, conditionals and expressions
MAX_NESTING_DEPTH: int = 128
