"""
Bound Tree Visitor

Generic pre/post-order traversal with in-place rewriting. A visitor is a
function that receives a node and returns it unchanged, returns a
replacement, or returns None to delete the node. Later passes (validation,
constant folding, code generation) are all written against this one walk.

Contract:
- pre runs before a node's children are visited; descent continues into
  whatever pre returned. If pre deletes the node, post is not called.
- post runs after the children have been visited and rewritten; its result
  is the result of the walk.
- Deleted children of list-bearing nodes are dropped. If deletions leave a
  list-bearing node with no children, the node itself is deleted and its
  post visitor does not run.
- Deleted map values drop their key; an empty map is kept.
- Fixed slots (conditional branches, index target and key) may be replaced
  but not deleted.
- Exceptions raised by a visitor propagate immediately. Rewrites already
  applied to ancestors are not undone.
"""

from typing import Callable, Dict, Optional, Tuple

from ..shared.errors import FirewalkerImplementationError
from .nodes import (
    BoundNode, BoundExpr, BoundArithmetic, BoundCall, BoundConditional, BoundIndex,
    BoundListProperty, BoundLiteral, BoundMapProperty, BoundOutput, BoundVariableAccess,
)

BoundNodeVisitor = Callable[[BoundNode], Optional[BoundNode]]


def identity_visitor(node: BoundNode) -> Optional[BoundNode]:
    """Visitor that returns its input unchanged."""
    return node


def _visit_children(nodes: list, pre: BoundNodeVisitor, post: BoundNodeVisitor,
                    exprs_only: bool) -> Tuple[list, bool]:
    """
    Visit a child list. Returns the surviving children (in order) and whether
    deletions emptied a list that had children.
    """
    survivors = []
    for child in nodes:
        visited = (visit_bound_expr if exprs_only else visit_bound_node)(child, pre, post)
        if visited is not None:
            survivors.append(visited)
    return survivors, bool(nodes) and not survivors


def _visit_arithmetic(node: BoundArithmetic, pre, post) -> Optional[BoundNode]:
    exprs, emptied = _visit_children(node.exprs, pre, post, exprs_only=True)
    if emptied:
        return None
    node.exprs = exprs
    return post(node)


def _visit_call(node: BoundCall, pre, post) -> Optional[BoundNode]:
    args, emptied = _visit_children(node.args, pre, post, exprs_only=True)
    if emptied:
        return None
    node.args = args
    return post(node)


def _visit_output(node: BoundOutput, pre, post) -> Optional[BoundNode]:
    exprs, emptied = _visit_children(node.exprs, pre, post, exprs_only=True)
    if emptied:
        return None
    node.exprs = exprs
    return post(node)


def _visit_list_property(node: BoundListProperty, pre, post) -> Optional[BoundNode]:
    elements, emptied = _visit_children(node.elements, pre, post, exprs_only=False)
    if emptied:
        return None
    node.elements = elements
    return post(node)


def _visit_map_property(node: BoundMapProperty, pre, post) -> Optional[BoundNode]:
    for key, value in list(node.elements.items()):
        visited = visit_bound_node(value, pre, post)
        if visited is None:
            del node.elements[key]
        else:
            node.elements[key] = visited
    return post(node)


def _visit_slot(node: BoundNode, slot: str, pre, post) -> BoundExpr:
    visited = visit_bound_expr(getattr(node, slot), pre, post)
    if visited is None:
        raise FirewalkerImplementationError(
            f"visitor deleted required {slot} of {type(node).__name__}"
        )
    return visited


def _visit_conditional(node: BoundConditional, pre, post) -> Optional[BoundNode]:
    cond_expr = _visit_slot(node, 'cond_expr', pre, post)
    true_expr = _visit_slot(node, 'true_expr', pre, post)
    false_expr = _visit_slot(node, 'false_expr', pre, post)
    node.cond_expr, node.true_expr, node.false_expr = cond_expr, true_expr, false_expr
    return post(node)


def _visit_index(node: BoundIndex, pre, post) -> Optional[BoundNode]:
    target_expr = _visit_slot(node, 'target_expr', pre, post)
    key_expr = _visit_slot(node, 'key_expr', pre, post)
    node.target_expr, node.key_expr = target_expr, key_expr
    return post(node)


def _visit_leaf(node: BoundNode, pre, post) -> Optional[BoundNode]:
    return post(node)


# Keyed by exact class: a node class without an entry here has no traversal
# case and is rejected, subclasses included.
_VISIT_DISPATCH: Dict[type, Callable[..., Optional[BoundNode]]] = {
    BoundArithmetic: _visit_arithmetic,
    BoundCall: _visit_call,
    BoundConditional: _visit_conditional,
    BoundIndex: _visit_index,
    BoundListProperty: _visit_list_property,
    BoundLiteral: _visit_leaf,
    BoundMapProperty: _visit_map_property,
    BoundOutput: _visit_output,
    BoundVariableAccess: _visit_leaf,
}


def visit_bound_node(node: BoundNode,
                     pre: BoundNodeVisitor = identity_visitor,
                     post: BoundNodeVisitor = identity_visitor) -> Optional[BoundNode]:
    """
    Visit each node in a bound tree with the given pre- and post-order
    visitors and return the result of the post-order visitor (None if the
    node was deleted).
    """
    node = pre(node)
    if node is None:
        return None

    handler = _VISIT_DISPATCH.get(type(node))
    if handler is None:
        raise FirewalkerImplementationError(
            f"unexpected node type in visit_bound_node: {type(node).__name__}"
        )
    return handler(node, pre, post)


def visit_bound_expr(node: BoundExpr,
                     pre: BoundNodeVisitor = identity_visitor,
                     post: BoundNodeVisitor = identity_visitor) -> Optional[BoundExpr]:
    """
    Same as visit_bound_node, but the visitors must keep expressions
    expressions: replacing one with a property container is an error.
    """
    visited = visit_bound_node(node, pre, post)
    if visited is not None and not isinstance(visited, BoundExpr):
        raise FirewalkerImplementationError(
            f"visitor replaced an expression with {type(visited).__name__}"
        )
    return visited

