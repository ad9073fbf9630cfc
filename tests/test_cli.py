"""
Tests for the llts command-line tool.

Author: xwest
"""

import unittest
import sys
import os
import json

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from click.testing import CliRunner

from llts import __version__
from llts.cli import cli


GOOD_SOURCE = "@func add(a: i32, b: i32): i32 {\n    return a + b;\n}\n"


class TestCLI(unittest.TestCase):
    """Test cases for the llts command."""

    def setUp(self):
        self.runner = CliRunner()

    def _write(self, name: str, content: str) -> str:
        with open(name, "w", encoding="utf-8") as f:
            f.write(content)
        return name

    def test_json_output(self):
        with self.runner.isolated_filesystem():
            path = self._write("prog.llts", GOOD_SOURCE)
            result = self.runner.invoke(cli, ["-i", path])

            self.assertEqual(result.exit_code, 0, result.output)
            data = json.loads(result.output)
            self.assertEqual(data["type"], "DocumentBody")
            self.assertEqual(data["statements"][0]["name"], "add")

    def test_output_file(self):
        with self.runner.isolated_filesystem():
            path = self._write("prog.llts", GOOD_SOURCE)
            result = self.runner.invoke(cli, ["--input", path, "--output", "tree.json"])

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(result.output, "")
            with open("tree.json", encoding="utf-8") as f:
                data = json.load(f)
            self.assertEqual(data["statements"][0]["type"], "FunctionDeclaration")

    def test_tree_output(self):
        with self.runner.isolated_filesystem():
            path = self._write("prog.llts", GOOD_SOURCE)
            result = self.runner.invoke(cli, ["-i", path, "--format", "tree"])

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("DocumentBody", result.output)
            self.assertIn("ReturnStatement", result.output)

    def test_format_from_environment(self):
        with self.runner.isolated_filesystem():
            path = self._write("prog.llts", GOOD_SOURCE)
            result = self.runner.invoke(
                cli, ["-i", path], env={"LLTS_FORMAT": "tree"}, auto_envvar_prefix="LLTS"
            )

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("FunctionDeclaration", result.output)
            self.assertFalse(result.output.lstrip().startswith("{"))

    def test_lexer_error_exits_with_diagnostic(self):
        with self.runner.isolated_filesystem():
            path = self._write("bad.llts", '$a = 1;\n$b = "abc\n')
            result = self.runner.invoke(cli, ["-i", path, "--no-color"])

            self.assertEqual(result.exit_code, 1)
            self.assertIn("--> line 2:10", result.output)
            self.assertIn("bad.llts: Error: String cannot span multiple lines", result.output)
            self.assertIn("^", result.output)

    def test_parse_error_exits_with_diagnostic(self):
        with self.runner.isolated_filesystem():
            path = self._write("bad.llts", "foo(1, 2\n")
            result = self.runner.invoke(cli, ["-i", path, "--no-color"])

            self.assertEqual(result.exit_code, 1)
            self.assertIn("Expected ')' after arguments", result.output)
            self.assertNotIn("\x1b[", result.output)

    def test_max_depth_option(self):
        with self.runner.isolated_filesystem():
            path = self._write("deep.llts", "$x = ((((1))));\n")
            result = self.runner.invoke(cli, ["-i", path, "--max-depth", "3", "--no-color"])

            self.assertEqual(result.exit_code, 1)
            self.assertIn("[P007]", result.output)

    def test_input_and_output_from_environment(self):
        with self.runner.isolated_filesystem():
            self._write("prog.llts", GOOD_SOURCE)
            result = self.runner.invoke(
                cli, [], env={"LLTS_INPUT": "prog.llts", "LLTS_OUTPUT": "tree.json"}
            )

            self.assertEqual(result.exit_code, 0, result.output)
            with open("tree.json", encoding="utf-8") as f:
                self.assertEqual(json.load(f)["type"], "DocumentBody")

    def test_invalid_utf8_input(self):
        with self.runner.isolated_filesystem():
            with open("binary.llts", "wb") as f:
                f.write(b"\xff\xfe$a = 1;\n")
            result = self.runner.invoke(cli, ["-i", "binary.llts"])

            self.assertEqual(result.exit_code, 1)
            self.assertNotIsInstance(result.exception, UnicodeDecodeError)
            self.assertIn("not valid UTF-8", result.output)

    def test_missing_input_file(self):
        result = self.runner.invoke(cli, ["-i", "no-such-file.llts"])
        self.assertEqual(result.exit_code, 2)

    def test_input_is_required(self):
        result = self.runner.invoke(cli, [])
        self.assertEqual(result.exit_code, 2)
        self.assertIn("--input", result.output)

    def test_version(self):
        result = self.runner.invoke(cli, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)


if __name__ == '__main__':
    unittest.main()
