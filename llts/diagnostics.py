"""
Diagnostic Reporter for LLTS.

Renders a scanner or parser error as a short source excerpt: the line
before the error, a ``--> line L:C`` locator, the offending line, a caret
under the column, the line after, and finally a ``path: Error: message``
header. The output is meant for humans and is not a stable format.

Rendering returns a string; only the command-line tool decides to exit.

Author: xwest
"""

import sys
from typing import List, Optional, TextIO, Union

from colorama import Fore, Style

from .lexer.errors import LexerError
from .parser.errors import ParseError

FrontEndError = Union[LexerError, ParseError]


def _paint(text: str, style: str, color: bool) -> str:
    if not color:
        return text
    return f"{style}{text}{Style.RESET_ALL}"


def render_diagnostic(source: str, path: str, line: int, column: int, message: str,
                      color: bool = False) -> str:
    """
    Render an error message with the surrounding source lines.

    Args:
        source: Full source text the error refers to
        path: Display path used in the header
        line: 1-based line of the error
        column: 1-based column of the error
        message: Error text
        color: Emit ANSI colors through colorama

    Returns:
        The rendered diagnostic, without a trailing newline
    """
    header = _paint(f"{path}: Error: {message}", Style.BRIGHT + Fore.RED, color)
    lines = [text.rstrip("\r") for text in source.split("\n")]

    if line < 1 or line > len(lines):
        return f"{header} (at line {line})"

    width = len(str(min(line + 1, len(lines))))
    gutter = " " * width

    def numbered(number: int) -> str:
        return f" {number:>{width}} | {lines[number - 1]}"

    output: List[str] = []
    if line > 1:
        output.append(_paint(numbered(line - 1), Fore.LIGHTBLACK_EX, color))
    output.append(_paint(f"{gutter}--> line {line}:{column}", Fore.CYAN, color))
    output.append(numbered(line))
    caret = _paint("^", Fore.RED, color)
    output.append(f" {gutter} | {' ' * max(column - 1, 0)}{caret}")
    if line < len(lines):
        output.append(_paint(numbered(line + 1), Fore.LIGHTBLACK_EX, color))
    output.append(header)

    return "\n".join(output)


def format_error(error: FrontEndError, source: str, color: bool = False) -> str:
    """Render a LexerError or ParseError, including its code and help text."""
    diagnostic = error.diagnostic
    location = diagnostic.location

    message = diagnostic.message
    if diagnostic.code:
        message = f"{message} [{diagnostic.code}]"

    text = render_diagnostic(source, location.filename, location.line, location.column,
                             message, color=color)

    if diagnostic.help_text:
        text += "\n" + _paint(f"  help: {diagnostic.help_text}", Fore.CYAN, color)
    for suggestion in diagnostic.suggestions or []:
        text += f"\n  suggestion: {suggestion}"

    return text


def report(error: FrontEndError, source: str, stream: Optional[TextIO] = None,
           color: Optional[bool] = None):
    """
    Write a rendered error to a stream (stderr by default).

    When ``color`` is None, colors are used only if the stream is a terminal.
    """
    if stream is None:
        stream = sys.stderr
    if color is None:
        color = hasattr(stream, "isatty") and stream.isatty()

    stream.write(format_error(error, source, color=color) + "\n")
    stream.flush()
