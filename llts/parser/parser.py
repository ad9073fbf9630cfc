"""
LLTS Recursive Descent Parser

Statements are parsed by recursive descent, dispatching on the current
token kind (and on the directive name for `@` keywords). Binary
expressions use precedence climbing: each call takes a minimum precedence
and only consumes operators at or above it, with the right-hand side
parsed one level higher so equal-precedence operators associate left.

Author: xwest
"""

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, Dict, List, Union

from ..lexer.tokens import (
    Token, TokenType, CompilerDirective, COMPILER_DIRECTIVES, BOOLEANS, PRECEDENCE,
    SEMICOLON, COLON, COMMA, LEFT_PAREN, RIGHT_PAREN, LEFT_BRACE, RIGHT_BRACE, DOT, PIPE
)
from ..lexer.lexer import scan
from .ast_nodes import (
    ASTNode, DocumentBody, DeclarationNode, Params, BlockExpression, FunctionDeclaration,
    ReturnStatement, WhileExpression, ImportNode, Literal, LiteralKind, PrimaryExpression,
    PrimaryKind, MemberExpression, CallExpression, BinaryExpression, UnaryExpression,
    AssignmentExpression
)
from .errors import (
    UnsupportedDirectiveError, create_unexpected_token_error,
    create_expected_token_error, create_unexpected_keyword_error, create_invalid_import_error,
    create_invalid_expression_error, create_nesting_too_deep_error
)

logger = logging.getLogger(__name__)

# Each nesting level uses several interpreter frames; keep this far below
# sys.getrecursionlimit().
DEFAULT_MAX_DEPTH = 64


class Precedence(IntEnum):
    """Binary operator precedence levels (higher binds tighter)."""
    NONE = 0
    ASSIGNMENT = 1      # =, +=, -=
    OR = 2              # ||
    AND = 3             # &&
    EQUALITY = 4        # ==, !=
    COMPARISON = 5      # <, >, <=, >=
    TERM = 6            # +, -
    FACTOR = 7          # *, /, %
    POWER = 8           # ^
    UNARY = 9           # right-hand threshold after ^


LITERAL_KINDS = {
    TokenType.NUMBER: LiteralKind.NUMBER,
    TokenType.STRING: LiteralKind.STRING,
    TokenType.BOOLEAN: LiteralKind.BOOLEAN,
    TokenType.HEX: LiteralKind.HEXADECIMAL,
    TokenType.BINARY: LiteralKind.BINARY,
    TokenType.OCTAL: LiteralKind.OCTAL,
}

# Token kinds that always begin an expression statement
EXPRESSION_STATEMENT_STARTS = frozenset({
    TokenType.BIN_OP,
    TokenType.UNARY_OP,
    TokenType.ASSIGN_OP,
    TokenType.IDENTIFIER,
    TokenType.STRING,
    TokenType.NUMBER,
    TokenType.HEX,
    TokenType.BINARY,
    TokenType.OCTAL,
    TokenType.BOOLEAN,
})

# BIN_OP tokens that may also appear in prefix position
PREFIX_BINARY_OPERATORS = frozenset({"+", "-"})


class Parser:
    """
    LLTS parser.

    Consumes a token list produced by the lexer and builds a DocumentBody.
    Holds a single read cursor with one-token lookahead, plus a two-token
    peek used to tell declarations from expression statements.
    """

    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Token list from the lexer, terminated by EOF
            max_depth: Maximum nesting of statements and expressions
        """
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token list must end with an EOF token")

        self.tokens = tokens
        self.current = 0
        self.depth = 0
        self.max_depth = max_depth

        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize the directive dispatch table."""
        self.directive_parsers: Dict[CompilerDirective, Callable[[Token], ASTNode]] = {
            CompilerDirective.IMPORT: self._parse_import,
            CompilerDirective.CONST: self._parse_const,
            CompilerDirective.TYPE_OF: self._parse_unsupported_directive,
            CompilerDirective.FUNC: self._parse_function,
            CompilerDirective.WHILE: self._parse_while,
            CompilerDirective.FOR: self._parse_unsupported_directive,
        }

    def parse(self) -> DocumentBody:
        """
        Parse the token stream into an AST.

        Returns:
            DocumentBody owning every top-level statement

        Raises:
            ParseError: On the first syntax error
        """
        self.current = 0
        self.depth = 0
        statements = []

        while not self._is_at_end():
            statements.append(self._parse_statement())

        logger.debug("Parsed %d top-level statements", len(statements))
        return DocumentBody(statements, self.tokens[0].location)

    def parse_expression(self) -> ASTNode:
        """
        Parse the whole token stream as a single expression.

        Raises:
            ParseError: If the tokens do not form exactly one expression
        """
        self.current = 0
        self.depth = 0
        expr = self._parse_expression()
        if not self._is_at_end():
            raise create_expected_token_error("end of expression", self._peek())
        return expr

    # Statements

    def _parse_statement(self) -> ASTNode:
        """Decide what kind of statement starts at the cursor."""
        token = self._peek()
        logger.debug("Statement at %s starts with %s", token.location, token)

        with self._nested():
            if token.type == TokenType.V_REGISTER:
                if self._starts_declaration():
                    return self._parse_declaration()
                return self._parse_expression_statement()

            if token.type in EXPRESSION_STATEMENT_STARTS:
                return self._parse_expression_statement()

            if token.type == TokenType.KEYWORD:
                if token.lexeme == "return":
                    return self._parse_return_statement()
                if token.lexeme in BOOLEANS:
                    return self._parse_expression_statement()
                raise create_unexpected_keyword_error(token)

            if token.type == TokenType.COMPILER_KEYWORD:
                return self._parse_compiler_keyword()

            raise create_unexpected_token_error(token)

    def _starts_declaration(self) -> bool:
        """`$name = ...` and `$name: Type ...` declare; other uses are expressions."""
        next_token = self._peek(1)
        if next_token.type == TokenType.TYPE_DECL:
            return True
        return next_token.type == TokenType.ASSIGN_OP and next_token.lexeme == "="

    def _parse_expression_statement(self) -> ASTNode:
        expr = self._parse_expression()
        self._consume_delimiter(SEMICOLON, "';' after expression")
        return expr

    def _parse_declaration(self, is_const: bool = False) -> DeclarationNode:
        """Parse `$name = value`, `$name: Type = value` or `$name: Type <statement>`."""
        register = self._consume(TokenType.V_REGISTER, "a register name")

        type_annotation = None
        if self._check(TokenType.TYPE_DECL):
            type_token = self._advance()
            type_annotation = PrimaryExpression(
                PrimaryKind.IDENTIFIER, type_token.lexeme, type_token.location
            )
            if self._check_operator(TokenType.ASSIGN_OP, "="):
                self._advance()
                value = self._parse_expression()
                self._match_delimiter(SEMICOLON)
            else:
                value = self._parse_statement()
        else:
            self._consume_operator(TokenType.ASSIGN_OP, "=", f'"=" after "${register.lexeme}"')
            value = self._parse_expression()
            self._match_delimiter(SEMICOLON)

        return DeclarationNode(
            name=register.lexeme,
            value=value,
            is_const=is_const,
            type_annotation=type_annotation,
            location=register.location
        )

    def _parse_return_statement(self) -> ReturnStatement:
        keyword = self._advance()

        argument = None
        if not self._check_delimiter(SEMICOLON):
            argument = self._parse_expression()

        self._consume_delimiter(SEMICOLON, "';' after return")
        return ReturnStatement(argument, keyword.location)

    def _parse_block(self) -> BlockExpression:
        brace = self._consume_delimiter(LEFT_BRACE, "'{'")
        statements = []

        while not self._is_at_end() and not self._check_delimiter(RIGHT_BRACE):
            statements.append(self._parse_statement())

        self._consume_delimiter(RIGHT_BRACE, "'}'")
        return BlockExpression(statements, brace.location)

    # Compiler directives

    def _parse_compiler_keyword(self) -> ASTNode:
        keyword = self._advance()
        # The lexer only emits COMPILER_KEYWORD for known directives
        directive = COMPILER_DIRECTIVES[keyword.lexeme]
        return self.directive_parsers[directive](keyword)

    def _parse_import(self, keyword: Token) -> ImportNode:
        """Parse `@import("path");`."""
        self._consume_delimiter(LEFT_PAREN, "'(' after @import")

        path = self._peek()
        if path.type != TokenType.STRING:
            raise create_invalid_import_error(path)
        self._advance()

        self._consume_delimiter(RIGHT_PAREN, "')' after import path")
        self._consume_delimiter(SEMICOLON, "';' after import statement")
        return ImportNode(path.lexeme, path.location)

    def _parse_const(self, keyword: Token) -> DeclarationNode:
        return self._parse_declaration(is_const=True)

    def _parse_function(self, keyword: Token) -> FunctionDeclaration:
        """Parse `@func name(a: T, b): R { ... }`."""
        name = self._consume(TokenType.IDENTIFIER, "a valid function name")
        self._consume_delimiter(LEFT_PAREN, "'(' after function name")
        params = self._parse_params()

        return_type = None
        if self._match_delimiter(COLON):
            type_token = self._consume(TokenType.IDENTIFIER, "a return type name")
            return_type = PrimaryExpression(
                PrimaryKind.IDENTIFIER, type_token.lexeme, type_token.location
            )

        body = self._parse_block()

        return FunctionDeclaration(
            name=name.lexeme,
            params=params,
            body=body,
            return_type=return_type,
            location=name.location
        )

    def _parse_params(self) -> Params:
        """Parse parameters up to and including the closing ')'."""
        open_paren = self._previous()
        params = []

        if not self._check_delimiter(RIGHT_PAREN):
            params.append(self._parse_param())
            while self._match_delimiter(COMMA):
                params.append(self._parse_param())

        self._consume_delimiter(RIGHT_PAREN, "')' after parameters")
        return Params(params, open_paren.location)

    def _parse_param(self) -> DeclarationNode:
        name = self._consume(TokenType.IDENTIFIER, "a parameter name")

        type_annotation = None
        if self._match_delimiter(COLON):
            type_token = self._consume(TokenType.IDENTIFIER, "a type name")
            type_annotation = PrimaryExpression(
                PrimaryKind.IDENTIFIER, type_token.lexeme, type_token.location
            )

        # Parameters have no initializer in source
        placeholder = Literal(LiteralKind.NUMBER, "0", name.location)
        return DeclarationNode(name.lexeme, placeholder, False, type_annotation, name.location)

    def _parse_while(self, keyword: Token) -> WhileExpression:
        """Parse `@while (cond) |capture| { body }`."""
        self._consume_delimiter(LEFT_PAREN, "'(' after @while")
        condition = self._parse_expression()
        self._consume_delimiter(RIGHT_PAREN, "')' after loop condition")

        capture = None
        if self._match_delimiter(PIPE):
            capture = self._parse_primary()
            self._consume_delimiter(PIPE, "'|' after loop capture")

        # TODO: accept an else block once the tail syntax is settled
        body = self._parse_block()
        return WhileExpression(condition, capture, body, keyword.location)

    def _parse_unsupported_directive(self, keyword: Token) -> ASTNode:
        raise UnsupportedDirectiveError(keyword.lexeme, keyword)

    # Expressions

    def _parse_expression(self) -> ASTNode:
        with self._nested():
            return self._parse_assignment()

    def _parse_assignment(self) -> ASTNode:
        """Assignment is right associative and sits below every binary operator."""
        left = self._parse_binary(Precedence.NONE)

        if self._check(TokenType.ASSIGN_OP):
            operator = self._advance()
            with self._nested():
                right = self._parse_assignment()
            return AssignmentExpression(left, operator.lexeme, right, left.location)

        return left

    def _parse_binary(self, min_precedence: Precedence) -> ASTNode:
        """Precedence climbing over BIN_OP tokens."""
        left = self._parse_unary()

        while self._check(TokenType.BIN_OP):
            operator = self._peek()
            precedence = self._get_precedence(operator.lexeme)
            if precedence == Precedence.NONE or precedence < min_precedence:
                break

            self._advance()
            right = self._parse_binary(Precedence(precedence + 1))
            left = BinaryExpression(left, operator.lexeme, right, left.location)

        return left

    def _get_precedence(self, operator: str) -> Precedence:
        return Precedence(PRECEDENCE.get(operator, Precedence.NONE))

    def _parse_unary(self) -> ASTNode:
        token = self._peek()

        if token.type == TokenType.UNARY_OP or (
            token.type == TokenType.BIN_OP and token.lexeme in PREFIX_BINARY_OPERATORS
        ):
            self._advance()
            with self._nested():
                operand = self._parse_unary()
            return UnaryExpression(token.lexeme, operand, token.location)

        return self._parse_postfix()

    def _parse_postfix(self) -> ASTNode:
        """Apply call and member-access suffixes left to right."""
        expr = self._parse_primary()

        while True:
            if self._check_delimiter(LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._check_delimiter(DOT):
                self._advance()
                name = self._consume(TokenType.IDENTIFIER, "a property name after '.'")
                prop = PrimaryExpression(PrimaryKind.IDENTIFIER, name.lexeme, name.location)
                expr = MemberExpression(expr, prop, expr.location)
            else:
                break

        return expr

    def _finish_call(self, callee: ASTNode) -> CallExpression:
        self._advance()  # '('

        args = []
        if not self._check_delimiter(RIGHT_PAREN):
            args.append(self._parse_expression())
            while self._match_delimiter(COMMA):
                # Allow trailing commas
                if self._check_delimiter(RIGHT_PAREN):
                    break
                args.append(self._parse_expression())

        self._consume_delimiter(RIGHT_PAREN, "')' after arguments")
        return CallExpression(callee, args, callee.location)

    def _parse_primary(self) -> ASTNode:
        token = self._peek()

        if token.type in LITERAL_KINDS:
            self._advance()
            return Literal(LITERAL_KINDS[token.type], token.lexeme, token.location)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return PrimaryExpression(PrimaryKind.IDENTIFIER, token.lexeme, token.location)

        if token.type == TokenType.V_REGISTER:
            self._advance()
            return PrimaryExpression(PrimaryKind.REGISTER, token.lexeme, token.location)

        if token.is_delimiter(LEFT_PAREN):
            self._advance()
            expr = self._parse_expression()
            self._consume_delimiter(RIGHT_PAREN, "')' after expression")
            return expr

        raise create_invalid_expression_error(token)

    # Utility methods

    @contextmanager
    def _nested(self):
        """Count one level of statement/expression nesting."""
        if self.depth >= self.max_depth:
            raise create_nesting_too_deep_error(self._peek(), self.max_depth)
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def _peek(self, offset: int = 0) -> Token:
        """Return the token `offset` places ahead without consuming (EOF past the end)."""
        index = self.current + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return self.tokens[-1]

    def _previous(self) -> Token:
        if self.current > 0:
            return self.tokens[self.current - 1]
        return self.tokens[0]

    def _advance(self) -> Token:
        """Consume and return current token."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type == token_type

    def _check_operator(self, token_type: TokenType, lexeme: str) -> bool:
        token = self._peek()
        return token.type == token_type and token.lexeme == lexeme

    def _check_delimiter(self, char: str) -> bool:
        return self._peek().is_delimiter(char)

    def _match_delimiter(self, char: str) -> bool:
        if self._check_delimiter(char):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise create_expected_token_error(expected, self._peek())

    def _consume_operator(self, token_type: TokenType, lexeme: str, expected: str) -> Token:
        if self._check_operator(token_type, lexeme):
            return self._advance()
        raise create_expected_token_error(expected, self._peek())

    def _consume_delimiter(self, char: str, expected: str) -> Token:
        if self._check_delimiter(char):
            return self._advance()
        raise create_expected_token_error(expected, self._peek())


@dataclass
class ParsedFile:
    """A parsed source file together with its metadata."""
    path: str
    stats: os.stat_result
    code: str
    document: DocumentBody


def parse_string(source: str, filename: str = "<anonymous>",
                 max_depth: int = DEFAULT_MAX_DEPTH) -> DocumentBody:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Display path for diagnostics

    Returns:
        DocumentBody AST

    Raises:
        LexerError: If scanning fails
        ParseError: If parsing fails
    """
    tokens = scan(source, filename).tokens
    return Parser(tokens, max_depth=max_depth).parse()


def parse_expression_string(source: str, filename: str = "<expression>",
                            max_depth: int = DEFAULT_MAX_DEPTH) -> ASTNode:
    """Parse a source string holding exactly one expression (no trailing ';')."""
    tokens = scan(source, filename).tokens
    return Parser(tokens, max_depth=max_depth).parse_expression()


def parse_file(filepath: Union[str, Path], encoding: str = "utf-8",
               max_depth: int = DEFAULT_MAX_DEPTH) -> ParsedFile:
    """
    Convenience function to parse a source file.

    Returns:
        ParsedFile with the file's stat result, its text and the AST

    Raises:
        FileNotFoundError: If the file does not exist
        LexerError: If scanning fails
        ParseError: If parsing fails
    """
    path = Path(filepath)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {filepath}")

    stats = path.stat()
    code = path.read_text(encoding=encoding)
    logger.debug("Read %d characters from %s", len(code), path)

    return ParsedFile(
        path=str(filepath),
        stats=stats,
        code=code,
        document=parse_string(code, str(filepath), max_depth=max_depth)
    )
