"""
Error handling for the LLTS parser.

Parsing is fail-fast: the first syntax error raises a ParseError pointing
at the offending token. Directives that are reserved but not implemented
yet raise UnsupportedDirectiveError so callers can tell a feature gap from
bad input.

Author: xwest
"""

from typing import Optional, List

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class UnsupportedDirectiveError(ParseError):
    """A recognized compiler directive whose parsing is not implemented."""

    def __init__(self, directive: str, token: Token):
        super().__init__(
            message=f'"@{directive}" is not supported yet',
            location=token.location,
            token=token,
            code="P006",
            help_text=f"The @{directive} directive is reserved but cannot be parsed yet."
        )
        self.directive = directive


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Expected token not found",
    "P003": "Unexpected keyword",
    "P004": "Invalid import path",
    "P005": "Invalid expression",
    "P006": "Unsupported directive",
    "P007": "Nesting too deep",
}


def describe_token(token: Token) -> str:
    """Human-readable name of a token for error messages."""
    if token.type == TokenType.EOF:
        return "end of input"
    return f'"{token.lexeme}"'


# Helper functions for creating common parser errors

def create_unexpected_token_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start a statement."""
    return ParseError(
        message=f"Unexpected token: {describe_token(found)}",
        location=found.location,
        token=found,
        code="P001"
    )


def create_expected_token_error(expected: str, found: Token) -> ParseError:
    """Create an error for a required token that is missing."""
    return ParseError(
        message=f"Expected {expected} but found {describe_token(found)} instead",
        location=found.location,
        token=found,
        code="P002",
        help_text=f"The parser expected to see {expected} at this position."
    )


def create_unexpected_keyword_error(found: Token) -> ParseError:
    """Create an error for a keyword in statement position."""
    return ParseError(
        message=f"Unexpected keyword: {found.lexeme}",
        location=found.location,
        token=found,
        code="P003"
    )


def create_invalid_import_error(found: Token) -> ParseError:
    """Create an error for an import whose argument is not a string."""
    return ParseError(
        message=f"Unexpected import value {describe_token(found)}. Expected a valid path.",
        location=found.location,
        token=found,
        code="P004",
        suggestions=['@import("path/to/module");']
    )


def create_invalid_expression_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    return ParseError(
        message=f"Unexpected token in expression: {describe_token(found)}",
        location=found.location,
        token=found,
        code="P005",
        help_text="Expected a literal, identifier, register or parenthesized expression."
    )


def create_nesting_too_deep_error(found: Token, max_depth: int) -> ParseError:
    """Create an error for input nested beyond the parser's depth limit."""
    return ParseError(
        message=f"Nesting too deep (limit is {max_depth})",
        location=found.location,
        token=found,
        code="P007",
        help_text="Split the expression or block into smaller pieces."
    )
