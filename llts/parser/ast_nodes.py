"""
Abstract Syntax Tree node definitions for LLTS.

Every node carries an optional source location, a reference to its
syntactic parent and a reference to the owning DocumentBody. Composite
nodes set their children's parent in their constructor; the DocumentBody
constructor assigns ``document`` across the finished tree. Nothing is
mutated after that.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional
from enum import Enum

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    DOCUMENT_BODY = "DocumentBody"

    # Statements
    DECLARATION = "DeclarationNode"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    PARAMS = "Params"
    BLOCK = "BlockExpression"
    RETURN = "ReturnStatement"
    WHILE = "WhileExpression"
    IMPORT = "ImportNode"

    # Expressions
    LITERAL = "LiteralNode"
    PRIMARY = "PrimaryExpression"
    MEMBER = "MemberExpression"
    CALL = "CallExpression"
    BINARY = "BinaryExpression"
    UNARY = "UnaryExpression"
    ASSIGNMENT = "AssignmentExpression"


class LiteralKind(Enum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    HEXADECIMAL = "hex"
    BINARY = "binary"
    OCTAL = "octal"


class PrimaryKind(Enum):
    IDENTIFIER = "Identifier"
    REGISTER = "Register"


class ASTVisitor:
    """
    Visitor base class.

    ``visit`` dispatches on the node type to ``visit_<NodeTypeName>``
    (e.g. ``visit_BinaryExpression``). A node type without a handler raises
    NotImplementedError instead of being skipped.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method = getattr(self, f"visit_{node.node_type.value}", None)
        if method is None:
            raise NotImplementedError(
                f"{type(self).__name__} has no handler for {node.node_type.value}"
            )
        return method(node)


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def __init__(self, node_type: ASTNodeType, location: Optional[SourceLocation] = None):
        self.node_type = node_type
        self.location = location
        self.parent: Optional['ASTNode'] = None
        self.document: Optional['DocumentBody'] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes, in source order."""
        pass

    def set_parent(self, parent: 'ASTNode'):
        """Set the parent node."""
        self.parent = parent

    def walk(self) -> Iterator['ASTNode']:
        """Yield this node and all descendants, depth first."""
        yield self
        for child in self.children():
            yield from child.walk()

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.location}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(location={self.location})"


class Statement(ASTNode):
    """Base class for statements."""
    pass


class Expression(ASTNode):
    """Base class for expressions."""
    pass


# ============================================================================
# Top-level
# ============================================================================

class DocumentBody(ASTNode):
    """Root node owning every statement of one source unit."""
    statements: List[ASTNode]

    def __init__(self, statements: List[ASTNode], location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.DOCUMENT_BODY, location)
        self.statements = statements
        for stmt in statements:
            stmt.set_parent(self)
        for node in self.walk():
            node.document = self

    def children(self) -> List[ASTNode]:
        return list(self.statements)


# ============================================================================
# Statements
# ============================================================================

class DeclarationNode(Statement):
    """Register declaration: `$name = value`, `$name: Type ...`, `@const $name = value`."""
    name: str
    value: ASTNode
    is_const: bool
    type_annotation: Optional['PrimaryExpression']

    def __init__(self, name: str, value: ASTNode, is_const: bool = False,
                 type_annotation: Optional['PrimaryExpression'] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.DECLARATION, location)
        self.name = name
        self.value = value
        self.is_const = is_const
        self.type_annotation = type_annotation

        value.set_parent(self)
        if type_annotation:
            type_annotation.set_parent(self)

    def children(self) -> List[ASTNode]:
        children = [self.value]
        if self.type_annotation:
            children.append(self.type_annotation)
        return children


class Params(ASTNode):
    """Ordered parameter list of a function declaration."""
    params: List[DeclarationNode]

    def __init__(self, params: List[DeclarationNode], location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.PARAMS, location)
        self.params = params
        for param in params:
            param.set_parent(self)

    def children(self) -> List[ASTNode]:
        return list(self.params)


class BlockExpression(Statement):
    """Braced statement list; its parent is the enclosing function or loop."""
    statements: List[ASTNode]

    def __init__(self, statements: List[ASTNode], location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.BLOCK, location)
        self.statements = statements
        for stmt in statements:
            stmt.set_parent(self)

    def children(self) -> List[ASTNode]:
        return list(self.statements)


class FunctionDeclaration(Statement):
    """`@func name(params): ReturnType { body }`."""
    name: str
    params: Params
    body: BlockExpression
    return_type: Optional['PrimaryExpression']

    def __init__(self, name: str, params: Params, body: BlockExpression,
                 return_type: Optional['PrimaryExpression'] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.FUNCTION_DECLARATION, location)
        self.name = name
        self.params = params
        self.body = body
        self.return_type = return_type

        params.set_parent(self)
        body.set_parent(self)
        if return_type:
            return_type.set_parent(self)

    def children(self) -> List[ASTNode]:
        children: List[ASTNode] = [self.params, self.body]
        if self.return_type:
            children.append(self.return_type)
        return children


class ReturnStatement(Statement):
    """`return;` or `return expr;`."""
    argument: Optional[ASTNode]

    def __init__(self, argument: Optional[ASTNode], location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.RETURN, location)
        self.argument = argument

        if argument:
            argument.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.argument] if self.argument else []


class WhileExpression(Statement):
    """`@while (condition) |capture| { body }`."""
    condition: ASTNode
    capture: Optional[ASTNode]
    body: BlockExpression

    def __init__(self, condition: ASTNode, capture: Optional[ASTNode], body: BlockExpression,
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.WHILE, location)
        self.condition = condition
        self.capture = capture
        self.body = body

        condition.set_parent(self)
        if capture:
            capture.set_parent(self)
        body.set_parent(self)

    def children(self) -> List[ASTNode]:
        children = [self.condition]
        if self.capture:
            children.append(self.capture)
        children.append(self.body)
        return children


class ImportNode(Statement):
    """`@import("path");` - recorded, never resolved."""
    path: str

    def __init__(self, path: str, location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.IMPORT, location)
        self.path = path

    def children(self) -> List[ASTNode]:
        return []


# ============================================================================
# Expressions
# ============================================================================

class Literal(Expression):
    """Literal with its raw source text; radix conversion happens later."""
    literal_type: LiteralKind
    value: str

    def __init__(self, literal_type: LiteralKind, value: str,
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.LITERAL, location)
        self.literal_type = literal_type
        self.value = value

    def children(self) -> List[ASTNode]:
        return []


class PrimaryExpression(Expression):
    """Identifier or register reference."""
    kind: PrimaryKind
    name: str

    def __init__(self, kind: PrimaryKind, name: str, location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.PRIMARY, location)
        self.kind = kind
        self.name = name

    def children(self) -> List[ASTNode]:
        return []


class MemberExpression(Expression):
    """`object.property`."""
    object: ASTNode
    property: PrimaryExpression

    def __init__(self, object: ASTNode, property: PrimaryExpression,
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.MEMBER, location)
        self.object = object
        self.property = property

        object.set_parent(self)
        property.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.object, self.property]


class CallExpression(Expression):
    """`callee(args...)`."""
    callee: ASTNode
    args: List[ASTNode]

    def __init__(self, callee: ASTNode, args: List[ASTNode],
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.CALL, location)
        self.callee = callee
        self.args = args

        callee.set_parent(self)
        for arg in args:
            arg.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.callee] + self.args


class BinaryExpression(Expression):
    """Binary operation expression."""
    left: ASTNode
    operator: str
    right: ASTNode

    def __init__(self, left: ASTNode, operator: str, right: ASTNode,
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.BINARY, location)
        self.left = left
        self.operator = operator
        self.right = right

        left.set_parent(self)
        right.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


class UnaryExpression(Expression):
    """Prefix operation expression."""
    operator: str
    operand: ASTNode

    def __init__(self, operator: str, operand: ASTNode, location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.UNARY, location)
        self.operator = operator
        self.operand = operand

        operand.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.operand]


class AssignmentExpression(Expression):
    """`target op value`; the target is not validated at parse time."""
    left: ASTNode
    operator: str
    right: ASTNode

    def __init__(self, left: ASTNode, operator: str, right: ASTNode,
                 location: Optional[SourceLocation] = None):
        super().__init__(ASTNodeType.ASSIGNMENT, location)
        self.left = left
        self.operator = operator
        self.right = right

        left.set_parent(self)
        right.set_parent(self)

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


# Alias for the main AST type
AST = DocumentBody
