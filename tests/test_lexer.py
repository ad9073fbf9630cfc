"""
Test suite for the LLTS lexer.

Tests cover:
- Token classification for every token kind
- Register type annotations and member-access chains
- Radix literals kept verbatim
- Greedy operator matching and the pipe delimiter
- Lexical error codes and locations

Author: xwest
"""

import unittest
import sys
import os
import tempfile

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from llts.lexer.lexer import Lexer, scan, tokenize_string, tokenize_file
from llts.lexer.tokens import TokenType
from llts.lexer.errors import LexerError


class TestLexer(unittest.TestCase):
    """Test cases for the lexer."""

    def _tokens(self, source):
        return Lexer(source, "test.llts").tokenize()

    def _kinds(self, source):
        return [(t.type, t.lexeme) for t in self._tokens(source)[:-1]]

    def _error(self, source) -> LexerError:
        with self.assertRaises(LexerError) as ctx:
            self._tokens(source)
        return ctx.exception

    def test_empty_source(self):
        tokens = self._tokens("")
        self.assertEqual(len(tokens), 1)
        self.assertEqual(tokens[0].type, TokenType.EOF)
        self.assertEqual(tokens[0].lexeme, "")

    def test_untyped_declaration(self):
        self.assertEqual(self._kinds("$a = 5;"), [
            (TokenType.V_REGISTER, "a"),
            (TokenType.ASSIGN_OP, "="),
            (TokenType.NUMBER, "5"),
            (TokenType.DELIMITER, ";"),
        ])

    def test_typed_register_emits_register_then_type(self):
        tokens = self._tokens("$count: i32 = 0;")
        self.assertEqual(tokens[0].type, TokenType.V_REGISTER)
        self.assertEqual(tokens[0].lexeme, "count")
        self.assertEqual(tokens[1].type, TokenType.TYPE_DECL)
        self.assertEqual(tokens[1].lexeme, "i32")
        self.assertEqual((tokens[1].line, tokens[1].column), (1, 7))
        self.assertEqual(tokens[2].type, TokenType.ASSIGN_OP)

    def test_type_annotation_runs_to_whitespace(self):
        self.assertEqual(self._kinds("$a: i32;"), [
            (TokenType.V_REGISTER, "a"),
            (TokenType.TYPE_DECL, "i32;"),
        ])
        self.assertEqual(self._kinds("$a: i32%2"), [
            (TokenType.V_REGISTER, "a"),
            (TokenType.TYPE_DECL, "i32"),
            (TokenType.BIN_OP, "%"),
            (TokenType.NUMBER, "2"),
        ])

    def test_missing_type_annotation(self):
        error = self._error("$a:   ")
        self.assertEqual(error.code, "L007")

    def test_words(self):
        self.assertEqual(self._kinds("true false return value _tmp1"), [
            (TokenType.BOOLEAN, "true"),
            (TokenType.BOOLEAN, "false"),
            (TokenType.KEYWORD, "return"),
            (TokenType.IDENTIFIER, "value"),
            (TokenType.IDENTIFIER, "_tmp1"),
        ])

    def test_compiler_keywords(self):
        tokens = self._tokens("@import @const @typeOf @func @while @for")
        self.assertTrue(all(t.type == TokenType.COMPILER_KEYWORD for t in tokens[:-1]))
        self.assertEqual(
            [t.lexeme for t in tokens[:-1]],
            ["import", "const", "typeOf", "func", "while", "for"]
        )

    def test_unknown_directive_suggests_close_match(self):
        error = self._error("@fucn add() {}")
        self.assertEqual(error.code, "L006")
        self.assertIn("@func", error.diagnostic.suggestions)
        self.assertEqual((error.location.line, error.location.column), (1, 1))

    def test_empty_directive(self):
        self.assertEqual(self._error("@ func").code, "L005")

    def test_empty_register_name(self):
        error = self._error("$ = 1;")
        self.assertEqual(error.code, "L004")
        self.assertIn('" "', error.message)

    def test_empty_register_name_at_end(self):
        error = self._error("$")
        self.assertIn("end of input", error.message)

    def test_numbers(self):
        self.assertEqual(self._kinds("42 3.14 0xFF 0XaB 0b1010 0o17"), [
            (TokenType.NUMBER, "42"),
            (TokenType.NUMBER, "3.14"),
            (TokenType.HEX, "0xFF"),
            (TokenType.HEX, "0XaB"),
            (TokenType.BINARY, "0b1010"),
            (TokenType.OCTAL, "0o17"),
        ])

    def test_radix_prefix_without_digits(self):
        error = self._error("$a = 0x;")
        self.assertEqual(error.code, "L009")
        self.assertEqual(error.location.column, 6)

    def test_strings_keep_unquoted_content(self):
        tokens = self._tokens("\"double\" 'single'")
        self.assertEqual(tokens[0].type, TokenType.STRING)
        self.assertEqual(tokens[0].lexeme, "double")
        self.assertEqual(tokens[1].lexeme, "single")
        self.assertEqual(tokens[1].column, 10)

    def test_unterminated_string_points_at_opening_quote(self):
        error = self._error('$a = 1;\n$b = "abc')
        self.assertEqual(error.code, "L002")
        self.assertEqual((error.location.line, error.location.column), (2, 6))

    def test_multiline_string(self):
        error = self._error("'ab\ncd'")
        self.assertEqual(error.code, "L003")
        self.assertEqual((error.location.line, error.location.column), (1, 4))

    def test_comments_are_skipped(self):
        tokens = self._tokens("# setup\n$a = 1; # trailing\n")
        self.assertEqual(tokens[0].type, TokenType.V_REGISTER)
        self.assertEqual(tokens[0].line, 2)
        self.assertEqual(tokens[-2].lexeme, ";")

    def test_member_chain(self):
        self.assertEqual(self._kinds("$a.b.c()"), [
            (TokenType.V_REGISTER, "a"),
            (TokenType.DELIMITER, "."),
            (TokenType.IDENTIFIER, "b"),
            (TokenType.DELIMITER, "."),
            (TokenType.IDENTIFIER, "c"),
            (TokenType.DELIMITER, "("),
            (TokenType.DELIMITER, ")"),
        ])

    def test_member_chain_requires_name(self):
        error = self._error("io.;")
        self.assertEqual(error.code, "L008")
        self.assertEqual(error.location.column, 4)

    def test_operators(self):
        self.assertEqual(self._kinds("a == b != c <= d >= e && f || g"), [
            (TokenType.IDENTIFIER, "a"),
            (TokenType.BIN_OP, "=="),
            (TokenType.IDENTIFIER, "b"),
            (TokenType.BIN_OP, "!="),
            (TokenType.IDENTIFIER, "c"),
            (TokenType.BIN_OP, "<="),
            (TokenType.IDENTIFIER, "d"),
            (TokenType.BIN_OP, ">="),
            (TokenType.IDENTIFIER, "e"),
            (TokenType.BIN_OP, "&&"),
            (TokenType.IDENTIFIER, "f"),
            (TokenType.BIN_OP, "||"),
            (TokenType.IDENTIFIER, "g"),
        ])

    def test_single_character_operators(self):
        self.assertEqual(self._kinds("! - + ="), [
            (TokenType.UNARY_OP, "!"),
            (TokenType.BIN_OP, "-"),
            (TokenType.BIN_OP, "+"),
            (TokenType.ASSIGN_OP, "="),
        ])

    def test_compound_assignment_longest_match(self):
        kinds = self._kinds("+= -= *= /= %= ^= &&= ||=")
        self.assertTrue(all(kind == TokenType.ASSIGN_OP for kind, _ in kinds))
        self.assertEqual([lexeme for _, lexeme in kinds],
                         ["+=", "-=", "*=", "/=", "%=", "^=", "&&=", "||="])

    def test_pipe_delimiter_versus_or(self):
        self.assertEqual(self._kinds("|$x| a || b"), [
            (TokenType.DELIMITER, "|"),
            (TokenType.V_REGISTER, "x"),
            (TokenType.DELIMITER, "|"),
            (TokenType.IDENTIFIER, "a"),
            (TokenType.BIN_OP, "||"),
            (TokenType.IDENTIFIER, "b"),
        ])

    def test_unexpected_character(self):
        error = self._error("$a = 1 ~ 2;")
        self.assertEqual(error.code, "L001")
        self.assertEqual(error.location.column, 8)

    def test_token_locations_are_ordered(self):
        source = (
            '@import("std/io");\n'
            "@const $limit: i32 = 0x10;\n"
            "@func add(a: i32, b: i32): i32 {\n"
            "    return a + b;\n"
            "}\n"
            "@while ($i < $limit) |$i| { $i += 1; }\n"
        )
        tokens = self._tokens(source)
        positions = [(t.line, t.column) for t in tokens]
        self.assertEqual(positions, sorted(positions))
        self.assertEqual([t.type for t in tokens].count(TokenType.EOF), 1)
        self.assertEqual(tokens[-1].type, TokenType.EOF)

    def test_eof_location(self):
        tokens = self._tokens("ab\ncd")
        self.assertEqual((tokens[-1].line, tokens[-1].column), (2, 3))
        self.assertEqual(tokens[-1].location.offset, 5)

    def test_filename_is_recorded(self):
        tokens = tokenize_string("x", "main.llts")
        self.assertEqual(str(tokens[0].location), "main.llts:1:1")

    def test_scan_result(self):
        result = scan("$a = 1;", "main.llts")
        self.assertEqual(result.errors, [])
        self.assertEqual(result.tokens[-1].type, TokenType.EOF)

    def test_lexer_can_be_reused(self):
        lexer = Lexer("$a;")
        first = lexer.tokenize()
        second = lexer.tokenize()
        self.assertEqual(first, second)

    def test_tokenize_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".llts", delete=False, encoding="utf-8") as f:
            f.write("$a = 1;\n")
            path = f.name
        try:
            tokens = tokenize_file(path)
            self.assertEqual(tokens[0].location.filename, path)
            self.assertEqual(len(tokens), 5)
        finally:
            os.unlink(path)


if __name__ == '__main__':
    unittest.main()
