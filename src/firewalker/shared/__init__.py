"""
Shared components: source locations, errors, types, schemas and the HIL AST.
"""

from .source_location import SourceLocation
from .errors import (
    Error, ErrorReporter, FirewalkerError, FirewalkerSourceError, FirewalkerImplementationError,
    UnsupportedConstructError, UnresolvedReferenceError, MalformedInputError, ScopeError,
)
from .types import Type, TypeKind, UNKNOWN, BOOL, NUMBER, STRING, MAP
from .schema import Schemas, UNKNOWN_SCHEMAS
from .nodes import (
    ASTNode, Arithmetic, ArithmeticOp, Call, Conditional, Index, LiteralNode, LiteralType,
    Output, VariableAccess,
)
from .ast_visitor import ASTVisitor
