"""
LLTS Lexer - turns source text into a flat token list

Single forward pass over the source. Each position is dispatched on its
first character in a fixed priority order (whitespace, comments, strings,
delimiters, registers, directives, numbers, words, operators). The first
malformed lexeme raises a LexerError; there is no recovery.

xwest
"""

import logging
from typing import Callable, List, Optional
from dataclasses import dataclass, field

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, BOOLEANS, COMPILER_DIRECTIVES,
    DELIMITERS, PIPE, DOT, COLON, BINARY_OPERATORS, UNARY_OPERATORS,
    ASSIGNMENT_OPERATORS, MULTI_CHAR_OPERATORS
)
from .errors import (
    LexerError, create_unexpected_character_error, create_unterminated_string_error,
    create_multiline_string_error, create_missing_register_name_error,
    create_missing_directive_error, create_unknown_directive_error,
    create_missing_type_error, create_invalid_member_error, create_invalid_number_error
)

logger = logging.getLogger(__name__)

WHITESPACE = frozenset(" \t\r\n")
QUOTES = frozenset("\"'")
END = "\0"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_alpha(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def _is_alphanumeric(char: str) -> bool:
    return _is_alpha(char) or _is_digit(char)


def _is_hex_digit(char: str) -> bool:
    return _is_digit(char) or ("a" <= char <= "f") or ("A" <= char <= "F")


def _is_binary_digit(char: str) -> bool:
    return char in ("0", "1")


def _is_octal_digit(char: str) -> bool:
    return "0" <= char <= "7"


def _is_type_char(char: str) -> bool:
    return not char.isspace() and char != "%"


# Radix prefix letter -> (token type, digit predicate, human name)
RADIX_PREFIXES = {
    "x": (TokenType.HEX, _is_hex_digit, "hexadecimal"),
    "b": (TokenType.BINARY, _is_binary_digit, "binary"),
    "o": (TokenType.OCTAL, _is_octal_digit, "octal"),
}


@dataclass
class ScanResult:
    """Output of one scanner run."""
    tokens: List[Token]
    # Always empty: errors are raised, never collected
    errors: List[LexerError] = field(default_factory=list)


class Lexer:
    """
    LLTS lexical analyzer.

    Converts source text into a list of tokens terminated by exactly one
    EOF token. Instances own their cursor state, so one instance must not
    be shared between concurrent scans.
    """

    def __init__(self, source: str, filename: str = "<anonymous>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Display path, used only for diagnostics
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens including the trailing EOF token

        Raises:
            LexerError: On the first malformed lexeme
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []

        while not self._is_at_end():
            self._scan_token()

        self._emit(TokenType.EOF, "", self._location())
        logger.debug("Scanned %d tokens from %s", len(self.tokens), self.filename)
        return self.tokens

    def _scan_token(self):
        """Scan whatever starts at the cursor, emitting zero or more tokens."""
        char = self._current()

        if char in WHITESPACE:
            self._advance()
            return

        if char == "#":
            self._skip_comment()
            return

        if char in QUOTES:
            self._scan_string()
            return

        # A lone pipe delimits a while-loop capture; '||' is an operator
        if char in DELIMITERS or (char == PIPE and self._peek() != PIPE):
            self._scan_delimiter()
            return

        if char == "$":
            self._scan_register()
            if self._current() == DOT:
                self._scan_member_chain()
            return

        if char == "@":
            self._scan_compiler_keyword()
            return

        if _is_digit(char):
            self._scan_number()
            return

        if _is_alpha(char):
            self._scan_word()
            if self._current() == DOT:
                self._scan_member_chain()
            return

        if self._scan_operator():
            return

        raise create_unexpected_character_error(char, self._location())

    def _skip_comment(self):
        while not self._is_at_end() and self._current() != "\n":
            self._advance()

    def _scan_string(self):
        """Scan a quoted string; the token text is the unquoted content."""
        start = self._location()
        quote = self._advance()
        value_parts = []

        while not self._is_at_end() and self._current() != quote:
            if self._current() == "\n":
                raise create_multiline_string_error(self._location())
            value_parts.append(self._advance())

        if self._is_at_end():
            raise create_unterminated_string_error(quote, start)

        self._advance()  # closing quote
        self._emit(TokenType.STRING, "".join(value_parts), start)

    def _scan_delimiter(self):
        start = self._location()
        self._emit(TokenType.DELIMITER, self._advance(), start)

    def _scan_register(self):
        """Scan `$name`, plus a `: Type` annotation glued to the name."""
        start = self._location()
        self._advance()  # '$'

        name = self._read_while(_is_alphanumeric)
        if not name:
            found = None if self._is_at_end() else self._current()
            raise create_missing_register_name_error(found, self._location())

        self._emit(TokenType.V_REGISTER, name, start)

        if self._current() == COLON:
            self._scan_type_annotation()

    def _scan_type_annotation(self):
        start = self._location()
        self._advance()  # ':'
        self._skip_whitespace()

        type_name = self._read_while(_is_type_char)
        if not type_name:
            raise create_missing_type_error(start)

        self._emit(TokenType.TYPE_DECL, type_name, start)
        self._skip_whitespace()

    def _scan_member_chain(self):
        """Scan `.a.b.c` following a register or identifier."""
        while self._current() == DOT:
            self._scan_delimiter()
            if self._is_at_end() or not _is_alphanumeric(self._current()):
                raise create_invalid_member_error(self._location())
            self._scan_word()

    def _scan_compiler_keyword(self):
        start = self._location()
        self._advance()  # '@'

        word = self._read_while(_is_alphanumeric)
        if not word:
            raise create_missing_directive_error(self._location())
        if word not in COMPILER_DIRECTIVES:
            raise create_unknown_directive_error(word, start)

        self._emit(TokenType.COMPILER_KEYWORD, word, start)

    def _scan_number(self):
        """Scan decimal, fractional and radix-prefixed number literals."""
        start = self._location()

        radix = RADIX_PREFIXES.get(self._peek().lower()) if self._current() == "0" else None
        if radix is not None:
            token_type, is_valid_digit, radix_name = radix
            prefix = self._advance() + self._advance()
            digits = self._read_while(is_valid_digit)
            if not digits:
                raise create_invalid_number_error(
                    prefix, start, f"Expected {radix_name} digits after '{prefix}'"
                )
            self._emit(token_type, prefix + digits, start)
            return

        lexeme = self._read_while(_is_digit)

        # Only a dot followed by a digit is a fraction; `1.foo` stays a member access
        if self._current() == DOT and _is_digit(self._peek()):
            lexeme += self._advance()
            lexeme += self._read_while(_is_digit)

        self._emit(TokenType.NUMBER, lexeme, start)

    def _scan_word(self):
        """Scan an identifier, keyword or boolean."""
        start = self._location()
        word = self._read_while(_is_alphanumeric)

        if word in BOOLEANS:
            token_type = TokenType.BOOLEAN
        elif word in KEYWORDS:
            token_type = TokenType.KEYWORD
        else:
            token_type = TokenType.IDENTIFIER

        self._emit(token_type, word, start)

    def _scan_operator(self) -> bool:
        """Scan the longest operator at the cursor. Returns False if none matches."""
        start = self._location()

        for op in MULTI_CHAR_OPERATORS:
            if self.source.startswith(op, self.pos):
                token_type = TokenType.ASSIGN_OP if op in ASSIGNMENT_OPERATORS else TokenType.BIN_OP
                self._advance_by(len(op))
                self._emit(token_type, op, start)
                return True

        char = self._current()
        if char in BINARY_OPERATORS:
            token_type = TokenType.BIN_OP
        elif char in UNARY_OPERATORS:
            token_type = TokenType.UNARY_OP
        elif char in ASSIGNMENT_OPERATORS:
            token_type = TokenType.ASSIGN_OP
        else:
            return False

        self._advance()
        self._emit(token_type, char, start)
        return True

    # Cursor helpers

    def _emit(self, token_type: TokenType, lexeme: str, location: SourceLocation):
        self.tokens.append(Token(token_type, lexeme, location))

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _read_while(self, predicate: Callable[[str], bool]) -> str:
        start_pos = self.pos
        while not self._is_at_end() and predicate(self._current()):
            self._advance()
        return self.source[start_pos:self.pos]

    def _skip_whitespace(self):
        while not self._is_at_end() and self._current().isspace():
            self._advance()

    def _advance(self) -> str:
        """Advance position by one character, updating line/column."""
        char = self.source[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _advance_by(self, count: int):
        for _ in range(count):
            if not self._is_at_end():
                self._advance()

    def _current(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return END

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return END

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)


def scan(source: str, path: str = "<anonymous>") -> ScanResult:
    """
    Scan a source string.

    Args:
        source: Source code string
        path: Display path for diagnostics

    Returns:
        ScanResult whose token list ends with one EOF token

    Raises:
        LexerError: If lexing fails
    """
    return ScanResult(tokens=Lexer(source, path).tokenize())


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """Convenience function to tokenize a source string."""
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str, encoding: Optional[str] = "utf-8") -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If lexing fails
        OSError: If file cannot be read
    """
    with open(filepath, "r", encoding=encoding) as f:
        source = f.read()

    return tokenize_string(source, filepath)
