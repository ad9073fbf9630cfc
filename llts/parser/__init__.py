"""
LLTS Parser Package

Implements a recursive descent parser for the LLTS register language.
Produces an Abstract Syntax Tree whose nodes carry source locations and
links back to their parent and to the owning document.

Key Features:
- Precedence climbing for binary operators
- Postfix call and member-access chains
- Typed register declarations and @const
- @func, @while and @import directives
- Fail-fast diagnostics with a nesting-depth guard

Author: xwest
"""

from .ast_nodes import *
from .parser import (
    Parser, Precedence, ParsedFile, DEFAULT_MAX_DEPTH,
    parse_string, parse_expression_string, parse_file
)
from .errors import ParseError, UnsupportedDirectiveError
from .dump import ASTDumper, dump_ast, build_rich_tree

__all__ = [
    # Core parser
    "Parser", "Precedence", "ParsedFile", "DEFAULT_MAX_DEPTH",
    "parse_string", "parse_expression_string", "parse_file",

    # AST nodes
    "AST", "ASTNode", "ASTNodeType", "ASTVisitor",
    "Statement", "Expression", "LiteralKind", "PrimaryKind",
    "DocumentBody", "DeclarationNode", "Params", "BlockExpression",
    "FunctionDeclaration", "ReturnStatement", "WhileExpression", "ImportNode",
    "Literal", "PrimaryExpression", "MemberExpression", "CallExpression",
    "BinaryExpression", "UnaryExpression", "AssignmentExpression",

    # Tree output
    "ASTDumper", "dump_ast", "build_rich_tree",

    # Error handling
    "ParseError", "UnsupportedDirectiveError",
]
