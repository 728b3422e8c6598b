"""
Constant Folding Pass

Post-order rewrite over the bound tree:
- a conditional whose condition is a boolean literal becomes the selected
  branch
- an output whose operands are all literals becomes one string literal

Folding runs bottom-up, so a conditional that folds to a literal can in turn
let its enclosing output fold.
"""

import logging
from typing import Any, Optional

from ..ir.nodes import BoundNode, BoundConditional, BoundLiteral, BoundOutput
from ..ir.visitor import visit_bound_node
from ..shared.types import BOOL, STRING
from ..utils.config import BOOLEAN_TRUE_LITERAL, BOOLEAN_FALSE_LITERAL
from .base import BasePass, CompilationContext

logger = logging.getLogger(__name__)


def _format_literal(value: Any) -> str:
    """String form of a literal under interpolation."""
    if isinstance(value, bool):
        return BOOLEAN_TRUE_LITERAL if value else BOOLEAN_FALSE_LITERAL
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ConstantFoldingPass(BasePass):

    def run(self, node: BoundNode, ctx: CompilationContext) -> Optional[BoundNode]:
        self.folded = 0
        result = visit_bound_node(node, post=self._fold)
        logger.debug(f"folded {self.folded} nodes")
        return result

    def _fold(self, node: BoundNode) -> Optional[BoundNode]:
        if isinstance(node, BoundConditional):
            cond = node.cond_expr
            if isinstance(cond, BoundLiteral) and cond.type == BOOL:
                self.folded += 1
                return node.true_expr if cond.value else node.false_expr

        if isinstance(node, BoundOutput):
            if all(isinstance(e, BoundLiteral) for e in node.exprs):
                self.folded += 1
                text = "".join(_format_literal(e.value) for e in node.exprs)
                return BoundLiteral(STRING, text, hil_node=node.hil_node)

        return node
