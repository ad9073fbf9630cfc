"""
Command-line interface for the LLTS front end.

    llts -i program.llts                 # dump the tree as JSON to stdout
    llts -i program.llts -o tree.json    # write it to a file
    llts -i program.llts --format tree   # pretty tree in the terminal

Every option can also be set through an ``LLTS_<OPTION>`` environment
variable (for example ``LLTS_FORMAT=tree``). A scanner or parser error is
rendered with its source excerpt on stderr and the process exits with
status 1.

Author: xwest
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from colorama import just_fix_windows_console
from rich.console import Console

from . import __version__
from .diagnostics import report
from .lexer.errors import LexerError
from .parser.errors import ParseError
from .parser.parser import DEFAULT_MAX_DEPTH, parse_file
from .parser.dump import dump_ast, build_rich_tree

logger = logging.getLogger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-i", "--input", "input_path", required=True, envvar="LLTS_INPUT",
              type=click.Path(exists=True, dir_okay=False),
              help="Source file to parse.")
@click.option("-o", "--output", "output_path", default=None, envvar="LLTS_OUTPUT",
              type=click.Path(dir_okay=False, writable=True),
              help="Write the tree to this file instead of stdout.")
@click.option("--format", "output_format", type=click.Choice(["json", "tree"]),
              default="json", show_default=True, envvar="LLTS_FORMAT",
              help="Tree output format.")
@click.option("--color/--no-color", default=None,
              help="Force colored diagnostics on or off (default: only on a terminal).")
@click.option("--max-depth", type=click.IntRange(min=1), default=DEFAULT_MAX_DEPTH,
              show_default=True, help="Maximum statement/expression nesting.")
@click.option("-v", "--verbose", is_flag=True, help="Log scanner and parser progress.")
@click.version_option(__version__, prog_name="llts")
def cli(input_path: str, output_path: Optional[str], output_format: str,
        color: Optional[bool], max_depth: int, verbose: bool):
    """Parse an LLTS source file and print its syntax tree."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        parsed = parse_file(input_path, max_depth=max_depth)
    except (LexerError, ParseError) as error:
        source = Path(input_path).read_text(encoding="utf-8")
        report(error, source, stream=sys.stderr, color=color)
        sys.exit(1)
    except UnicodeDecodeError as error:
        raise click.ClickException(f"{input_path} is not valid UTF-8 text ({error.reason})")

    logger.info(
        "Parsed %s: %d statements from %d bytes",
        parsed.path, len(parsed.document.statements), parsed.stats.st_size
    )

    if output_format == "json":
        text = json.dumps(dump_ast(parsed.document), indent=2)
        if output_path:
            Path(output_path).write_text(text + "\n", encoding="utf-8")
        else:
            click.echo(text)
        return

    tree = build_rich_tree(parsed.document)
    if output_path:
        with open(output_path, "w", encoding="utf-8") as handle:
            Console(file=handle, no_color=True, width=120).print(tree)
    else:
        Console().print(tree)


def main():
    """Entry point for the ``llts`` console script."""
    just_fix_windows_console()
    cli(auto_envvar_prefix="LLTS")


if __name__ == "__main__":
    main()
