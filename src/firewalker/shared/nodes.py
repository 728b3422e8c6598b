"""
HIL AST Definitions

Untyped expression nodes for the HashiCorp interpolation language, as
produced by the external configuration parser. The binder consumes these and
never mutates them; bound nodes keep a reference for provenance.

Visitor Pattern Support:
- Every node has accept() for polymorphic dispatch
- Nodes without a visit_* counterpart fall back to visit_unknown()
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, TypeVar, TYPE_CHECKING

from .source_location import SourceLocation

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')


class LiteralType(Enum):
    """Type tag of a HIL literal (mirrors hil/ast.Type)."""
    ANY = "any"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    MAP = "map"
    UNKNOWN = "unknown"


class ArithmeticOp(Enum):
    """Operators of a HIL arithmetic node."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    LOGICAL_AND = "&&"
    LOGICAL_OR = "||"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="


class ASTNode:
    """
    Base class for HIL AST nodes.

    __slots__ keeps nodes small; the external parser creates one per
    interpolation fragment.
    """
    __slots__ = ('location',)

    def __init__(self, location: Optional[SourceLocation] = None):
        self.location = location

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_unknown(self)

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{name}={getattr(self, name)!r}"
            for cls in type(self).__mro__ for name in getattr(cls, '__slots__', ())
            if name != 'location'
        )
        return f"{type(self).__name__}({fields})"


class Arithmetic(ASTNode):
    """Arithmetic or logical expression: `a + b`, `a && b`"""
    __slots__ = ('op', 'exprs')

    def __init__(self, op: ArithmeticOp, exprs: List[ASTNode],
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.op = op
        self.exprs = exprs

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_arithmetic(self)


class Call(ASTNode):
    """Built-in function call: `lookup(var.amis, var.region)`"""
    __slots__ = ('func', 'args')

    def __init__(self, func: str, args: List[ASTNode],
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.func = func
        self.args = args

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_call(self)


class Conditional(ASTNode):
    """Ternary conditional: `cond ? a : b`"""
    __slots__ = ('cond_expr', 'true_expr', 'false_expr')

    def __init__(self, cond_expr: ASTNode, true_expr: ASTNode, false_expr: ASTNode,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.cond_expr = cond_expr
        self.true_expr = true_expr
        self.false_expr = false_expr

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_conditional(self)


class Index(ASTNode):
    """Index expression: `var.list[0]`"""
    __slots__ = ('target', 'key')

    def __init__(self, target: ASTNode, key: ASTNode,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.target = target
        self.key = key

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_index(self)


class LiteralNode(ASTNode):
    """Literal value with its HIL type tag"""
    __slots__ = ('value', 'typex')

    def __init__(self, value: Any, typex: LiteralType,
                 location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.value = value
        self.typex = typex

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_literal(self)


class Output(ASTNode):
    """
    Top-level interpolation wrapper. A template such as "ami-${var.id}"
    parses to an Output holding a string literal and a variable access.
    """
    __slots__ = ('exprs',)

    def __init__(self, exprs: List[ASTNode], location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.exprs = exprs

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_output(self)


class VariableAccess(ASTNode):
    """Variable reference by its raw text, e.g. `aws_instance.web.*.id`"""
    __slots__ = ('name',)

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(location)
        self.name = name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_variable_access(self)
