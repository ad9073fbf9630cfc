"""
LLTS Front End Package

Scanner and parser for LLTS, a small explicitly-typed register language.
Source text is turned into a token list, then into a syntax tree.

Architecture:
    llts/
    ├── lexer/           # Tokenization and lexical analysis
    ├── parser/          # Syntax analysis, AST model and tree dumps
    ├── diagnostics.py   # Source excerpts with a caret under the error
    └── cli.py           # `llts` command-line tool

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Lexer, scan, LexerError
from .parser import Parser, parse_string, parse_expression_string, parse_file, ParseError
from .diagnostics import render_diagnostic, format_error, report

__all__ = [
    # Core classes
    "Lexer",
    "Parser",

    # Entry points
    "scan",
    "parse_string",
    "parse_expression_string",
    "parse_file",

    # Errors and reporting
    "LexerError",
    "ParseError",
    "render_diagnostic",
    "format_error",
    "report",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
