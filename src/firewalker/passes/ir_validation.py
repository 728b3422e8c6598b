"""
IR Validation Pass

Checks that a bound tree is structurally well-formed after binding and
rewriting:
1. Every expression reports a Type
2. Variable accesses that name a graph entity still reference its node

Semantic errors are the binder's business; a failure here indicates a
compiler bug or a misbehaving rewrite pass, so problems are reported with
the compiler-bug code rather than raised.
"""

import logging
from typing import Optional

from ..frontend.variables import LocalVariable, ModuleVariable, ResourceVariable, UserVariable
from ..ir.nodes import BoundNode, BoundExpr, BoundVariableAccess
from ..ir.visitor import visit_bound_node
from ..shared.types import Type
from .base import BasePass, CompilationContext

logger = logging.getLogger(__name__)

_GRAPH_REFERENCES = (LocalVariable, ModuleVariable, ResourceVariable, UserVariable)


class IRValidationPass(BasePass):
    """Reports malformed bound nodes to the context's error reporter (E0999)."""

    def run(self, node: BoundNode, ctx: CompilationContext) -> Optional[BoundNode]:
        logger.debug("Starting IR validation")
        self.ctx = ctx
        self.nodes_validated = 0
        visit_bound_node(node, pre=self._validate)
        logger.debug(f"IR validation done: {self.nodes_validated} nodes validated")
        return node

    def _report_error(self, message: str, node: BoundNode) -> None:
        self.ctx.reporter.report_error(message, node.location, code="E0999")

    def _validate(self, node: BoundNode) -> BoundNode:
        self.nodes_validated += 1
        kind = type(node).__name__

        if isinstance(node, BoundExpr) and not isinstance(node.type, Type):
            self._report_error(f"{kind} has no type", node)

        if isinstance(node, BoundVariableAccess):
            if isinstance(node.tf_var, _GRAPH_REFERENCES) and node.il_node is None:
                self._report_error(
                    f"variable access {node.tf_var.full_key()} is not bound to a graph node", node
                )
        return node
