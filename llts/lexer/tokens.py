"""
Token definitions for the LLTS lexer.

This module defines the closed set of token types produced by the scanner,
along with the lookup tables it uses to classify lexemes:
- Keywords and compiler directives (``@import``, ``@func``, ...)
- Delimiters, including the pipe used by ``@while`` captures
- Binary, unary and assignment operators
- Operator precedence for the expression parser

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass


class TokenType(Enum):
    """
    Enumeration of all token types in LLTS.

    The set is closed: the scanner never produces anything else.
    """

    # ========================================================================
    # Words
    # ========================================================================
    KEYWORD = auto()                # return
    IDENTIFIER = auto()             # myFunc, i32
    V_REGISTER = auto()             # $counter
    COMPILER_KEYWORD = auto()       # @import, @func, @while

    # ========================================================================
    # Literals
    # ========================================================================
    STRING = auto()                 # "hello", 'hello'
    NUMBER = auto()                 # 42, 3.14
    HEX = auto()                    # 0x1F
    OCTAL = auto()                  # 0o17
    BINARY = auto()                 # 0b1010
    BOOLEAN = auto()                # true, false

    # ========================================================================
    # Punctuation and operators
    # ========================================================================
    DELIMITER = auto()              # , ; : ( ) { } . |
    TYPE_DECL = auto()              # the `i32` in `$a: i32`
    BIN_OP = auto()                 # + - * / % ^ == != > >= < <= && ||
    UNARY_OP = auto()               # !
    ASSIGN_OP = auto()              # = += -= *= /= %= ^= &&= ||=

    EOF = auto()                    # End of input


class CompilerDirective(Enum):
    """Keywords that may follow the `@` sigil."""
    IMPORT = "import"
    CONST = "const"
    TYPE_OF = "typeOf"
    FUNC = "func"
    WHILE = "while"
    FOR = "for"


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and for the location attached to AST nodes.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of source

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the LLTS language.

    ``lexeme`` holds the token text exactly as the parser needs it: string
    tokens carry their unquoted content, radix literals keep their prefix,
    and the EOF token is empty.
    """
    type: TokenType
    lexeme: str
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.location!r})"

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in LITERAL_TOKENS

    @property
    def is_operator(self) -> bool:
        """Check if this token is an operator."""
        return self.type in (TokenType.BIN_OP, TokenType.UNARY_OP, TokenType.ASSIGN_OP)

    def is_delimiter(self, char: str) -> bool:
        """Check if this token is the given delimiter character."""
        return self.type == TokenType.DELIMITER and self.lexeme == char


# Lookup tables used by the lexer and parser

LITERAL_TOKENS = frozenset({
    TokenType.STRING,
    TokenType.NUMBER,
    TokenType.HEX,
    TokenType.OCTAL,
    TokenType.BINARY,
    TokenType.BOOLEAN,
})

KEYWORDS = frozenset({"true", "false", "return"})

BOOLEANS = frozenset({"true", "false"})

COMPILER_DIRECTIVES = {directive.value: directive for directive in CompilerDirective}

COMMA = ","
SEMICOLON = ";"
COLON = ":"
LEFT_PAREN = "("
RIGHT_PAREN = ")"
LEFT_BRACE = "{"
RIGHT_BRACE = "}"
DOT = "."
PIPE = "|"

DELIMITERS = frozenset({
    COMMA, SEMICOLON, COLON, LEFT_PAREN, RIGHT_PAREN, LEFT_BRACE, RIGHT_BRACE, DOT,
})

BINARY_OPERATORS = frozenset({
    "+", "-", "*", "/", "%", "^",
    "==", "!=", ">", ">=", "<", "<=",
    "&&", "||",
})

# '-' is also a binary operator; the parser disambiguates by position
UNARY_OPERATORS = frozenset({"!", "-"})

# Comparison symbols are deliberately absent: they only ever scan as BIN_OP
ASSIGNMENT_OPERATORS = frozenset({
    "=", "+=", "-=", "*=", "/=", "%=", "^=", "&&=", "||=",
})

# Longest operator first so the scanner can do greedy matching
MULTI_CHAR_OPERATORS = sorted(
    (op for op in ASSIGNMENT_OPERATORS | BINARY_OPERATORS if len(op) > 1),
    key=len,
    reverse=True,
)

PRECEDENCE = {
    "=": 1, "+=": 1, "-=": 1,
    "||": 2,
    "&&": 3,
    "==": 4, "!=": 4,
    ">": 5, ">=": 5, "<": 5, "<=": 5,
    "+": 6, "-": 6,
    "*": 7, "/": 7, "%": 7,
    "^": 8,
}
