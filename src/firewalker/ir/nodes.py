"""
Bound Nodes

The typed tree produced by the binder. Expression nodes (BoundExpr) carry a
type; the two property containers hold collection-shaped configuration
values and have none.

Nodes are mutable: rewrite passes replace children in place. Each node owns
its children; the originating HIL node (`hil_node`) and any graph node are
references only.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..shared.nodes import ASTNode, ArithmeticOp
from ..shared.schema import Schemas
from ..shared.source_location import SourceLocation
from ..shared.types import Type, UNKNOWN, STRING

if TYPE_CHECKING:
    from ..frontend.variables import InterpolatedVariable
    from .graph import GraphNode


class BoundNode:
    """Base class for all bound nodes."""
    __slots__ = ('hil_node',)

    def __init__(self, hil_node: Optional[ASTNode] = None):
        self.hil_node = hil_node

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.hil_node.location if self.hil_node is not None else None

    def __repr__(self) -> str:
        from .serialization import BoundTreeSerializer
        return BoundTreeSerializer(include_types=True).serialize(self)


class BoundExpr(BoundNode):
    """
    A bound expression. `type` is total: nodes whose type could not be
    derived report unknown.
    """
    __slots__ = ('expr_type',)

    def __init__(self, expr_type: Optional[Type] = None, hil_node: Optional[ASTNode] = None):
        super().__init__(hil_node)
        self.expr_type = expr_type

    @property
    def type(self) -> Type:
        return self.expr_type if self.expr_type is not None else UNKNOWN


class BoundArithmetic(BoundExpr):
    """Arithmetic or logical expression; its type is left to the consumer."""
    __slots__ = ('exprs',)

    def __init__(self, exprs: List[BoundExpr], hil_node: Optional[ASTNode] = None):
        super().__init__(UNKNOWN, hil_node)
        self.exprs = exprs

    @property
    def op(self) -> Optional[ArithmeticOp]:
        return getattr(self.hil_node, 'op', None)


class BoundCall(BoundExpr):
    __slots__ = ('func', 'args')

    def __init__(self, func: str, expr_type: Type, args: List[BoundExpr],
                 hil_node: Optional[ASTNode] = None):
        super().__init__(expr_type, hil_node)
        self.func = func
        self.args = args


class BoundConditional(BoundExpr):
    __slots__ = ('cond_expr', 'true_expr', 'false_expr')

    def __init__(self, expr_type: Type, cond_expr: BoundExpr, true_expr: BoundExpr,
                 false_expr: BoundExpr, hil_node: Optional[ASTNode] = None):
        super().__init__(expr_type, hil_node)
        self.cond_expr = cond_expr
        self.true_expr = true_expr
        self.false_expr = false_expr


class BoundIndex(BoundExpr):
    __slots__ = ('target_expr', 'key_expr')

    def __init__(self, expr_type: Type, target_expr: BoundExpr, key_expr: BoundExpr,
                 hil_node: Optional[ASTNode] = None):
        super().__init__(expr_type, hil_node)
        self.target_expr = target_expr
        self.key_expr = key_expr


class BoundLiteral(BoundExpr):
    __slots__ = ('value',)

    def __init__(self, expr_type: Type, value: Any, hil_node: Optional[ASTNode] = None):
        super().__init__(expr_type, hil_node)
        self.value = value


class BoundOutput(BoundExpr):
    """String interpolation: the concatenation of its operands."""
    __slots__ = ('exprs',)

    def __init__(self, exprs: List[BoundExpr], hil_node: Optional[ASTNode] = None):
        super().__init__(STRING, hil_node)
        self.exprs = exprs


class BoundVariableAccess(BoundExpr):
    """
    A resolved variable reference.

    elements: accessed property path of a resource reference, split on "."
    schemas: the resource's schemas (empty for other reference kinds)
    tf_var: the parsed reference
    il_node: the graph node the reference resolves to, if any
    """
    __slots__ = ('elements', 'schemas', 'tf_var', 'il_node')

    def __init__(self, expr_type: Type, elements: List[str], schemas: Schemas,
                 tf_var: "InterpolatedVariable", il_node: Optional["GraphNode"] = None,
                 hil_node: Optional[ASTNode] = None):
        super().__init__(expr_type, hil_node)
        self.elements = elements
        self.schemas = schemas
        self.tf_var = tf_var
        self.il_node = il_node


class BoundListProperty(BoundNode):
    """List-valued configuration property."""
    __slots__ = ('elements',)

    def __init__(self, elements: List[BoundNode], hil_node: Optional[ASTNode] = None):
        super().__init__(hil_node)
        self.elements = elements


class BoundMapProperty(BoundNode):
    """Map-valued configuration property (or a block of properties)."""
    __slots__ = ('elements',)

    def __init__(self, elements: Dict[str, BoundNode], hil_node: Optional[ASTNode] = None):
        super().__init__(hil_node)
        self.elements = elements
