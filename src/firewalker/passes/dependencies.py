"""
Dependency Analysis Pass

Collects the graph nodes a bound tree refers to. The graph builder uses the
result to add edges from the owning resource, module or local to each of
its dependencies.
"""

import logging
from typing import List, Optional

from ..ir.graph import GraphNode
from ..ir.nodes import BoundNode, BoundVariableAccess
from ..ir.visitor import visit_bound_node
from .base import BasePass, CompilationContext

logger = logging.getLogger(__name__)


def collect_dependencies(node: BoundNode) -> List[GraphNode]:
    """Graph nodes referenced from `node`, in first-reference order, without duplicates."""
    deps: List[GraphNode] = []
    seen = set()

    def collect(n: BoundNode) -> BoundNode:
        if isinstance(n, BoundVariableAccess) and n.il_node is not None:
            if id(n.il_node) not in seen:
                seen.add(id(n.il_node))
                deps.append(n.il_node)
        return n

    visit_bound_node(node, pre=collect)
    return deps


class DependencyAnalysisPass(BasePass):
    """Stores collect_dependencies() of the tree as this pass's analysis result."""

    def run(self, node: BoundNode, ctx: CompilationContext) -> Optional[BoundNode]:
        deps = collect_dependencies(node)
        logger.debug(f"found {len(deps)} dependencies")
        ctx.set_analysis(DependencyAnalysisPass, deps)
        return node
