"""
Tree output for LLTS ASTs.

ASTDumper turns a tree into plain dicts and lists that ``json.dumps`` can
serialize. build_rich_tree renders the same data as a ``rich`` Tree for
terminal display.

Author: xwest
"""

from typing import Any, Dict, List, Optional

from rich.markup import escape
from rich.tree import Tree

from .ast_nodes import (
    ASTNode, ASTVisitor, DocumentBody, DeclarationNode, Params, BlockExpression,
    FunctionDeclaration, ReturnStatement, WhileExpression, ImportNode, Literal,
    PrimaryExpression, MemberExpression, CallExpression, BinaryExpression,
    UnaryExpression, AssignmentExpression
)


class ASTDumper(ASTVisitor):
    """
    Convert AST nodes into JSON-compatible dictionaries.

    Every dict has a ``type`` key holding the node type name. Child nodes
    are nested dicts, child lists are lists, and absent optional children
    are ``None``.
    """

    def __init__(self, include_locations: bool = True):
        self.include_locations = include_locations

    def dump(self, node: Optional[ASTNode]) -> Optional[Dict[str, Any]]:
        if node is None:
            return None
        return node.accept(self)

    def _dump_all(self, nodes: List[ASTNode]) -> List[Dict[str, Any]]:
        return [self.dump(node) for node in nodes]

    def _node(self, node: ASTNode, **fields) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": node.node_type.value}
        if self.include_locations and node.location is not None:
            result["loc"] = {"line": node.location.line, "column": node.location.column}
        result.update(fields)
        return result

    def visit_DocumentBody(self, node: DocumentBody) -> Dict[str, Any]:
        return self._node(node, statements=self._dump_all(node.statements))

    def visit_DeclarationNode(self, node: DeclarationNode) -> Dict[str, Any]:
        return self._node(
            node,
            name=node.name,
            const=node.is_const,
            typeAnnotation=self.dump(node.type_annotation),
            value=self.dump(node.value),
        )

    def visit_Params(self, node: Params) -> Dict[str, Any]:
        return self._node(node, params=self._dump_all(node.params))

    def visit_BlockExpression(self, node: BlockExpression) -> Dict[str, Any]:
        return self._node(node, statements=self._dump_all(node.statements))

    def visit_FunctionDeclaration(self, node: FunctionDeclaration) -> Dict[str, Any]:
        return self._node(
            node,
            name=node.name,
            params=self.dump(node.params),
            returnType=self.dump(node.return_type),
            body=self.dump(node.body),
        )

    def visit_ReturnStatement(self, node: ReturnStatement) -> Dict[str, Any]:
        return self._node(node, argument=self.dump(node.argument))

    def visit_WhileExpression(self, node: WhileExpression) -> Dict[str, Any]:
        return self._node(
            node,
            condition=self.dump(node.condition),
            capture=self.dump(node.capture),
            body=self.dump(node.body),
        )

    def visit_ImportNode(self, node: ImportNode) -> Dict[str, Any]:
        return self._node(node, path=node.path)

    def visit_LiteralNode(self, node: Literal) -> Dict[str, Any]:
        return self._node(node, literalType=node.literal_type.value, value=node.value)

    def visit_PrimaryExpression(self, node: PrimaryExpression) -> Dict[str, Any]:
        return self._node(node, kind=node.kind.value, name=node.name)

    def visit_MemberExpression(self, node: MemberExpression) -> Dict[str, Any]:
        return self._node(node, object=self.dump(node.object), property=self.dump(node.property))

    def visit_CallExpression(self, node: CallExpression) -> Dict[str, Any]:
        return self._node(node, callee=self.dump(node.callee), args=self._dump_all(node.args))

    def visit_BinaryExpression(self, node: BinaryExpression) -> Dict[str, Any]:
        return self._node(
            node,
            operator=node.operator,
            left=self.dump(node.left),
            right=self.dump(node.right),
        )

    def visit_UnaryExpression(self, node: UnaryExpression) -> Dict[str, Any]:
        return self._node(node, operator=node.operator, operand=self.dump(node.operand))

    def visit_AssignmentExpression(self, node: AssignmentExpression) -> Dict[str, Any]:
        return self._node(
            node,
            operator=node.operator,
            left=self.dump(node.left),
            right=self.dump(node.right),
        )


def dump_ast(node: ASTNode, include_locations: bool = True) -> Dict[str, Any]:
    """Convenience function to dump a tree to dictionaries."""
    return ASTDumper(include_locations).dump(node)


# Scalar keys shown on a node's own label rather than as branches
_LABEL_KEYS = ("name", "operator", "kind", "literalType", "value", "path", "const")


def _label(data: Dict[str, Any]) -> str:
    parts = [f"[bold]{data['type']}[/bold]"]
    for key in _LABEL_KEYS:
        value = data.get(key)
        if key in data and not isinstance(value, (dict, list)):
            parts.append(escape(f"{key}={value!r}"))
    loc = data.get("loc")
    if loc:
        parts.append(f"[dim]{loc['line']}:{loc['column']}[/dim]")
    return " ".join(parts)


def _add_branches(tree: Tree, data: Dict[str, Any]):
    for key, value in data.items():
        if key in ("type", "loc") or (key in _LABEL_KEYS and not isinstance(value, (dict, list))):
            continue
        if isinstance(value, dict):
            branch = tree.add(f"[cyan]{key}[/cyan]: {_label(value)}")
            _add_branches(branch, value)
        elif isinstance(value, list):
            branch = tree.add(f"[cyan]{key}[/cyan] [dim]({len(value)})[/dim]")
            for item in value:
                _add_branches(branch.add(_label(item)), item)
        elif value is None:
            tree.add(f"[cyan]{key}[/cyan]: [dim]none[/dim]")


def build_rich_tree(node: ASTNode) -> Tree:
    """
    Build a rich Tree for terminal display.

    Each node shows its type, scalar attributes and line:column; child
    nodes hang beneath it under their attribute name.
    """
    data = dump_ast(node)
    tree = Tree(_label(data))
    _add_branches(tree, data)
    return tree
