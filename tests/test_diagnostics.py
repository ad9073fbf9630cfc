"""
Tests for the LLTS diagnostic reporter.

Author: xwest
"""

import unittest
import sys
import os
import io

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from colorama import Fore, Style

from llts.diagnostics import render_diagnostic, format_error, report
from llts.lexer.errors import LexerError
from llts.parser.errors import ParseError
from llts.parser.parser import parse_string


class TestRenderDiagnostic(unittest.TestCase):
    """Test cases for the source excerpt layout."""

    def test_full_excerpt(self):
        text = render_diagnostic("a\nbcd\ne", "f.llts", 2, 3, "oops")
        self.assertEqual(text.split("\n"), [
            " 1 | a",
            " --> line 2:3",
            " 2 | bcd",
            "   |   ^",
            " 3 | e",
            "f.llts: Error: oops",
        ])

    def test_first_line_has_no_previous_line(self):
        text = render_diagnostic("abc\ndef", "f.llts", 1, 1, "oops")
        lines = text.split("\n")
        self.assertEqual(lines[0], " --> line 1:1")
        self.assertEqual(lines[2], "   | ^")
        self.assertEqual(lines[3], " 2 | def")

    def test_last_line_has_no_next_line(self):
        lines = render_diagnostic("abc\ndef", "f.llts", 2, 2, "oops").split("\n")
        self.assertEqual(len(lines), 5)
        self.assertEqual(lines[-1], "f.llts: Error: oops")

    def test_gutter_width_follows_line_numbers(self):
        source = "\n".join(f"line{i}" for i in range(1, 12))
        lines = render_diagnostic(source, "f.llts", 10, 1, "oops").split("\n")
        self.assertEqual(lines[0], "  9 | line9")
        self.assertEqual(lines[2], " 10 | line10")
        self.assertEqual(lines[3], "    | ^")

    def test_line_outside_source(self):
        text = render_diagnostic("abc", "f.llts", 5, 1, "oops")
        self.assertEqual(text, "f.llts: Error: oops (at line 5)")

    def test_color(self):
        text = render_diagnostic("a\nb", "f.llts", 2, 1, "oops", color=True)
        self.assertIn(Fore.RED, text)
        self.assertIn(Fore.CYAN, text)
        self.assertIn(Style.RESET_ALL, text)

    def test_no_color_by_default(self):
        self.assertNotIn("\x1b[", render_diagnostic("a\nb", "f.llts", 2, 1, "oops"))


class TestFormatError(unittest.TestCase):
    """Test cases for rendering raised errors."""

    def test_lexer_error(self):
        source = '$a = 1;\n$b = "abc'
        with self.assertRaises(LexerError) as ctx:
            parse_string(source, "main.llts")

        text = format_error(ctx.exception, source)
        self.assertIn(" --> line 2:6", text)
        self.assertIn("main.llts: Error: Unterminated string literal [L002]", text)
        self.assertIn("help:", text)
        self.assertIn("suggestion: Add a closing \" quote", text)

    def test_parse_error(self):
        source = "@import(42);"
        with self.assertRaises(ParseError) as ctx:
            parse_string(source, "main.llts")

        text = format_error(ctx.exception, source)
        self.assertIn("   |         ^", text)
        self.assertIn("[P004]", text)

    def test_report_writes_plain_text_to_non_terminal(self):
        source = "$a = ;"
        with self.assertRaises(ParseError) as ctx:
            parse_string(source, "main.llts")

        stream = io.StringIO()
        report(ctx.exception, source, stream=stream)
        output = stream.getvalue()
        self.assertTrue(output.endswith("\n"))
        self.assertIn("main.llts: Error:", output)
        self.assertNotIn("\x1b[", output)


if __name__ == '__main__':
    unittest.main()
