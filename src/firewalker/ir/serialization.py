"""
Bound Tree Serialization

Renders bound trees as S-expressions for debugging and pass dumps:

    (output (literal "ami-") (variable-access "var.ami" :type string))
"""

import json
from typing import Any, Callable, Dict, List

from .nodes import (
    BoundNode, BoundExpr, BoundArithmetic, BoundCall, BoundConditional, BoundIndex,
    BoundListProperty, BoundLiteral, BoundMapProperty, BoundOutput, BoundVariableAccess,
)


class BoundTreeSerializer:
    """S-expression printer for bound nodes."""

    def __init__(self, include_types: bool = False):
        self.include_types = include_types
        self._dispatch: Dict[type, Callable[[Any], str]] = {
            BoundArithmetic: self._arithmetic,
            BoundCall: self._call,
            BoundConditional: self._conditional,
            BoundIndex: self._index,
            BoundListProperty: self._list_property,
            BoundLiteral: self._literal,
            BoundMapProperty: self._map_property,
            BoundOutput: self._output,
            BoundVariableAccess: self._variable_access,
        }

    def serialize(self, node: BoundNode) -> str:
        handler = self._dispatch.get(type(node))
        if handler is None:
            return f"(<{type(node).__name__}>)"
        return handler(node)

    def _sexpr(self, head: str, node: BoundNode, parts: List[str]) -> str:
        items = [head] + parts
        if self.include_types and isinstance(node, BoundExpr):
            items.append(f":type {node.type}")
        return "(" + " ".join(items) + ")"

    def _children(self, nodes) -> List[str]:
        return [self.serialize(n) for n in nodes]

    def _arithmetic(self, node: BoundArithmetic) -> str:
        op = node.op.value if node.op is not None else "?"
        return self._sexpr("arithmetic", node, [op] + self._children(node.exprs))

    def _call(self, node: BoundCall) -> str:
        return self._sexpr("call", node, [node.func] + self._children(node.args))

    def _conditional(self, node: BoundConditional) -> str:
        return self._sexpr("conditional", node,
                           self._children([node.cond_expr, node.true_expr, node.false_expr]))

    def _index(self, node: BoundIndex) -> str:
        return self._sexpr("index", node, self._children([node.target_expr, node.key_expr]))

    def _literal(self, node: BoundLiteral) -> str:
        return self._sexpr("literal", node, [json.dumps(node.value, default=str)])

    def _output(self, node: BoundOutput) -> str:
        return self._sexpr("output", node, self._children(node.exprs))

    def _variable_access(self, node: BoundVariableAccess) -> str:
        return self._sexpr("variable-access", node, [json.dumps(node.tf_var.full_key())])

    def _list_property(self, node: BoundListProperty) -> str:
        return self._sexpr("list", node, self._children(node.elements))

    def _map_property(self, node: BoundMapProperty) -> str:
        parts = [f"({json.dumps(k)} {self.serialize(v)})" for k, v in node.elements.items()]
        return self._sexpr("map", node, parts)
