"""
LLTS Lexer Package

Implements the scanner for the LLTS register language: a single forward
pass that turns source text into a token list terminated by EOF.

Key Features:
- Register references with inline type annotations ($count: i32)
- Compiler directives (@import, @const, @func, @while, ...)
- Radix-prefixed number literals kept verbatim (0xFF, 0b1010, 0o17)
- Member-access chains (a.b.c)
- Fail-fast diagnostics with source locations

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, CompilerDirective
from .lexer import Lexer, ScanResult, scan, tokenize_string, tokenize_file
from .errors import Diagnostic, LexerError

__all__ = [
    "Lexer",
    "ScanResult",
    "scan",
    "tokenize_string",
    "tokenize_file",
    "Token",
    "TokenType",
    "SourceLocation",
    "CompilerDirective",
    "Diagnostic",
    "LexerError",
]
