"""
Error handling for the LLTS lexer.

Lexing is fail-fast: the first malformed lexeme raises a ``LexerError``
carrying a ``Diagnostic`` with the offending location. Callers decide
whether to render it and exit.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation, COMPILER_DIRECTIVES


@dataclass
class Diagnostic:
    """A single error report with source location and optional hints."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        code = f"[{self.code}]" if self.code else ""
        result = f"{severity_prefix}{code}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Exception raised when the lexer encounters a malformed lexeme.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
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

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        return _edit_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def suggest_directive_corrections(invalid_word: str) -> List[str]:
    """Suggest directives close to a misspelled `@word` (edit distance <= 2)."""
    candidates = [
        name for name in COMPILER_DIRECTIVES
        if _edit_distance(invalid_word.lower(), name.lower()) <= 2
    ]
    candidates.sort(key=lambda name: _edit_distance(invalid_word.lower(), name.lower()))
    return [f"@{name}" for name in candidates[:3]]


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Unexpected character",
    "L002": "Unterminated string literal",
    "L003": "String spans multiple lines",
    "L004": "Missing register name",
    "L005": "Missing compiler keyword",
    "L006": "Unknown compiler keyword",
    "L007": "Missing type annotation",
    "L008": "Invalid member access",
    "L009": "Invalid numeric literal",
}


# Helper functions for creating common errors

def create_unexpected_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character no token can start with."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in LLTS source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Unexpected character: '{char}'",
        location=location,
        code="L001",
        help_text=help_text
    )


def create_unterminated_string_error(quote: str, location: SourceLocation) -> LexerError:
    """Create an error for a string literal that runs into end of input."""
    return LexerError(
        message="Unterminated string literal",
        location=location,
        code="L002",
        help_text=f"String literals must be closed with a matching {quote} quote.",
        suggestions=[f"Add a closing {quote} quote"]
    )


def create_multiline_string_error(location: SourceLocation) -> LexerError:
    """Create an error for a newline inside a string literal."""
    return LexerError(
        message="String cannot span multiple lines",
        location=location,
        code="L003",
        help_text="Close the string before the end of the line."
    )


def create_missing_register_name_error(found: Optional[str], location: SourceLocation) -> LexerError:
    """Create an error for a `$` sigil with no register name."""
    found_text = "end of input" if found is None else f'"{found}"'
    return LexerError(
        message=f"Expected register name after '$' but found {found_text} instead",
        location=location,
        code="L004",
        help_text="Register names are made of letters, digits and underscores, e.g. $counter."
    )


def create_missing_directive_error(location: SourceLocation) -> LexerError:
    """Create an error for an `@` sigil with no keyword."""
    return LexerError(
        message="Expected keyword after '@'",
        location=location,
        code="L005",
        suggestions=[f"@{name}" for name in COMPILER_DIRECTIVES]
    )


def create_unknown_directive_error(word: str, location: SourceLocation) -> LexerError:
    """Create an error for `@word` where word is not a compiler directive."""
    suggestions = suggest_directive_corrections(word)
    help_text = None
    if suggestions:
        help_text = f"Did you mean {', '.join(suggestions)}?"

    return LexerError(
        message=f'Expected compiler keyword after "@": "@{word}" is not a compiler keyword',
        location=location,
        code="L006",
        help_text=help_text,
        suggestions=suggestions
    )


def create_missing_type_error(location: SourceLocation) -> LexerError:
    """Create an error for a register annotation with no type name."""
    return LexerError(
        message="Expected type after ':'",
        location=location,
        code="L007"
    )


def create_invalid_member_error(location: SourceLocation) -> LexerError:
    """Create an error for a `.` not followed by a member name."""
    return LexerError(
        message='Expected identifier after "."',
        location=location,
        code="L008"
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for an invalid numeric literal."""
    return LexerError(
        message=f"Invalid numeric literal: '{lexeme}'",
        location=location,
        code="L009",
        help_text=reason
    )
