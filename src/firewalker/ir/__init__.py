"""
Bound IR: typed nodes, graph nodes and the bound-tree visitor.
"""

from .nodes import (
    BoundNode, BoundExpr, BoundArithmetic, BoundCall, BoundConditional, BoundIndex,
    BoundListProperty, BoundLiteral, BoundMapProperty, BoundOutput, BoundVariableAccess,
)
from .graph import (
    Graph, GraphNode, ProviderNode, ResourceConfig, ResourceNode, ModuleNode, LocalNode,
    VariableNode,
)
from .visitor import (
    BoundNodeVisitor, identity_visitor, visit_bound_node, visit_bound_expr,
)
from .serialization import BoundTreeSerializer
