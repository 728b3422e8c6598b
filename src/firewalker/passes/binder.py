"""
Expression Binder

Translates untyped HIL expressions into bound, typed nodes. Types are
propagated where they are cheap to know and fall back to unknown everywhere
else; variable accesses are resolved against the graph's node tables.

Design Pattern: Visitor pattern for AST traversal (ASTNode.accept)
"""

import logging
from typing import Any, List

from ..frontend.variables import (
    parse_variable, CountValueType, CountVariable, LocalVariable, ModuleVariable, PathVariable,
    ResourceVariable, SelfVariable, SimpleVariable, TerraformVariable, UserVariable,
)
from ..ir.graph import Graph
from ..ir.nodes import (
    BoundNode, BoundExpr, BoundArithmetic, BoundCall, BoundConditional, BoundIndex,
    BoundListProperty, BoundLiteral, BoundMapProperty, BoundOutput, BoundVariableAccess,
)
from ..shared.ast_visitor import ASTVisitor
from ..shared.errors import (
    MalformedInputError, ScopeError, UnresolvedReferenceError, UnsupportedConstructError,
)
from ..shared.nodes import (
    ASTNode, Arithmetic, Call, Conditional, Index, LiteralNode, LiteralType, Output,
    VariableAccess,
)
from ..shared.schema import Schemas
from ..shared.types import Type, UNKNOWN, BOOL, NUMBER, STRING, MAP
from ..utils.config import REFERENCE_SEPARATOR

logger = logging.getLogger(__name__)


_LITERAL_TYPES = {
    LiteralType.BOOL: BOOL,
    LiteralType.INT: NUMBER,
    LiteralType.FLOAT: NUMBER,
    LiteralType.STRING: STRING,
}

# Built-in functions whose result type does not depend on their arguments.
_STRING_FUNCTIONS = frozenset({"base64decode", "base64encode", "chomp", "file", "format"})


class PropertyBinder(ASTVisitor[BoundExpr]):
    """
    Binds HIL expressions against a graph.

    The graph tables and has_count_index are treated as read-only for the
    duration of a bind; only provider resolution may update a resource.
    """

    def __init__(self, graph: Graph, has_count_index: bool = False):
        self.graph = graph
        self.has_count_index = has_count_index

    # =========================================================================
    # Entry points
    # =========================================================================

    def bind_expr(self, node: ASTNode) -> BoundExpr:
        """Bind a single HIL expression."""
        if not isinstance(node, ASTNode):
            raise MalformedInputError(f"unexpected HIL node type {type(node).__name__}")
        return node.accept(self)

    def bind_exprs(self, nodes: List[ASTNode]) -> List[BoundExpr]:
        """Bind a list of HIL expressions, failing on the first error."""
        return [self.bind_expr(n) for n in nodes]

    def bind_property(self, value: Any) -> BoundNode:
        """
        Bind a configuration property value: lists and dicts become property
        containers, HIL expressions are bound, and plain scalars become
        literals.
        """
        if isinstance(value, ASTNode):
            return self.bind_expr(value)
        if isinstance(value, list):
            return BoundListProperty([self.bind_property(v) for v in value])
        if isinstance(value, dict):
            return BoundMapProperty({str(k): self.bind_property(v) for k, v in value.items()})
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return BoundLiteral(BOOL, value)
        if isinstance(value, (int, float)):
            return BoundLiteral(NUMBER, value)
        if isinstance(value, str):
            return BoundLiteral(STRING, value)
        raise MalformedInputError(f"unexpected property value of type {type(value).__name__}")

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_arithmetic(self, node: Arithmetic) -> BoundExpr:
        return BoundArithmetic(self.bind_exprs(node.exprs), hil_node=node)

    def visit_call(self, node: Call) -> BoundExpr:
        """
        Bind the arguments, then type the call from the name of the function.
        Only a subset of Terraform's interpolation functions is supported.
        """
        args = self.bind_exprs(node.args)

        func = node.func
        if func in _STRING_FUNCTIONS:
            expr_type = STRING
        elif func == "element":
            expr_type = UNKNOWN
            if args and args[0].type.is_list():
                expr_type = args[0].type.element_type()
        elif func == "list":
            expr_type = UNKNOWN.list_of()
        elif func == "lookup":
            expr_type = UNKNOWN
        elif func == "map":
            if len(args) % 2 != 0:
                raise MalformedInputError(
                    'the number of arguments to "map" must be even', node.location
                )
            expr_type = MAP
        elif func == "split":
            expr_type = STRING.list_of()
        else:
            raise UnsupportedConstructError(f"function not supported: {func}", node.location)

        return BoundCall(func, expr_type, args, hil_node=node)

    def visit_conditional(self, node: Conditional) -> BoundExpr:
        cond_expr = self.bind_expr(node.cond_expr)
        true_expr = self.bind_expr(node.true_expr)
        false_expr = self.bind_expr(node.false_expr)

        # No coercion: branches of different types give an unknown result.
        expr_type = true_expr.type
        if expr_type != false_expr.type:
            expr_type = UNKNOWN

        return BoundConditional(expr_type, cond_expr, true_expr, false_expr, hil_node=node)

    def visit_index(self, node: Index) -> BoundExpr:
        target_expr = self.bind_expr(node.target)
        key_expr = self.bind_expr(node.key)

        expr_type = UNKNOWN
        if target_expr.type.is_list():
            expr_type = target_expr.type.element_type()

        return BoundIndex(expr_type, target_expr, key_expr, hil_node=node)

    def visit_literal(self, node: LiteralNode) -> BoundExpr:
        expr_type = _LITERAL_TYPES.get(node.typex)
        if expr_type is None:
            raise MalformedInputError(
                f"unexpected literal type {node.typex.value}", node.location
            )
        return BoundLiteral(expr_type, node.value, hil_node=node)

    def visit_output(self, node: Output) -> BoundExpr:
        exprs = self.bind_exprs(node.exprs)

        # A single-element output is its element.
        if len(exprs) == 1:
            return exprs[0]
        return BoundOutput(exprs, hil_node=node)

    # =========================================================================
    # Variable access
    # =========================================================================

    def visit_variable_access(self, node: VariableAccess) -> BoundExpr:
        """
        Interpret the name as an interpolated variable and resolve it to the
        graph node it refers to, if any. Count, path, self, simple and
        terraform variables do not refer to graph nodes.
        """
        tf_var = parse_variable(node.name, node.location)
        loc = node.location

        elements: List[str] = []
        sch = Schemas()
        il_node = None

        if isinstance(tf_var, CountVariable):
            if tf_var.type is not CountValueType.INDEX:
                raise UnsupportedConstructError(
                    f"unsupported count variable {tf_var.full_key()}", loc
                )
            if not self.has_count_index:
                raise ScopeError("no count index in scope", loc)
            expr_type = NUMBER

        elif isinstance(tf_var, LocalVariable):
            il_node = self.graph.locals.get(tf_var.name)
            if il_node is None:
                raise UnresolvedReferenceError(f"unknown local {tf_var.name}", loc)
            expr_type = il_node.output_type()

        elif isinstance(tf_var, ModuleVariable):
            il_node = self.graph.modules.get(tf_var.name)
            if il_node is None:
                raise UnresolvedReferenceError(f"unknown module {tf_var.name}", loc)
            expr_type = il_node.output_type()

        elif isinstance(tf_var, PathVariable):
            raise UnsupportedConstructError("NYI: path variables", loc)

        elif isinstance(tf_var, ResourceVariable):
            il_node, elements, sch, expr_type = self._bind_resource_variable(tf_var, loc)

        elif isinstance(tf_var, SelfVariable):
            raise UnsupportedConstructError("NYI: self variables", loc)

        elif isinstance(tf_var, SimpleVariable):
            raise UnsupportedConstructError("NYI: simple variables", loc)

        elif isinstance(tf_var, TerraformVariable):
            raise UnsupportedConstructError("NYI: terraform variables", loc)

        elif isinstance(tf_var, UserVariable):
            il_node, expr_type = self._bind_user_variable(tf_var, loc)

        else:
            raise MalformedInputError(f"unexpected variable type {type(tf_var).__name__}", loc)

        return BoundVariableAccess(expr_type, elements, sch, tf_var, il_node, hil_node=node)

    def _bind_resource_variable(self, tf_var: ResourceVariable, loc):
        resource = self.graph.resources.get(tf_var.resource_id())
        if resource is None:
            raise UnresolvedReferenceError(f"unknown resource {tf_var.resource_id()}", loc)

        try:
            self.graph.ensure_provider(resource)
        except UnresolvedReferenceError as e:
            if e.location is None:
                e.location = loc
            raise

        # Walk the accessed field (name{.property}*) through the schemas.
        sch = resource.schemas
        elements = tf_var.field.split(REFERENCE_SEPARATOR)
        elem_sch = sch
        for element in elements:
            elem_sch = elem_sch.property_schemas(element)

        expr_type = elem_sch.type.output_of()
        if tf_var.is_splat():
            expr_type = expr_type.list_of()

        logger.debug(f"bound {tf_var.full_key()} to {resource.id} with type {expr_type}")
        return resource, elements, sch, expr_type

    def _bind_user_variable(self, tf_var: UserVariable, loc):
        if tf_var.elem:
            raise UnsupportedConstructError("NYI: user variable elements", loc)

        variable = self.graph.variables.get(tf_var.name)
        if variable is None:
            raise UnresolvedReferenceError(f"unknown variable {tf_var.name}", loc)

        # Without a default a variable is a string. With one, it is a string
        # only if the default is; anything else is left unknown.
        expr_type: Type = STRING
        default = variable.default_value
        if default is not None and not (isinstance(default, BoundExpr) and default.type == STRING):
            expr_type = UNKNOWN
        return variable, expr_type
