"""
firewalker: semantic front end for translating Terraform configurations.

Binds HIL interpolation expressions into a typed tree and provides the
visitor on which rewrite and code generation passes are built.
"""

from .shared.types import Type, TypeKind, UNKNOWN, BOOL, NUMBER, STRING, MAP
from .shared.schema import Schemas
from .shared.errors import (
    FirewalkerError, FirewalkerSourceError, FirewalkerImplementationError,
    UnsupportedConstructError, UnresolvedReferenceError, MalformedInputError, ScopeError,
)
from .ir.graph import Graph, ProviderNode, ResourceConfig, ResourceNode, ModuleNode, LocalNode, VariableNode
from .ir.visitor import identity_visitor, visit_bound_node, visit_bound_expr
from .passes.binder import PropertyBinder
from .compiler.driver import CompilerDriver, CompilationResult

__version__ = "0.1.0"
