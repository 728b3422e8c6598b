"""
AST Visitor

Abstract visitor over the HIL AST. Subclasses implement one visit_* method
per node variant; nodes outside the closed set land in visit_unknown(),
which rejects them as malformed input.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, TYPE_CHECKING

from .errors import MalformedInputError

if TYPE_CHECKING:
    from .nodes import (
        ASTNode, Arithmetic, Call, Conditional, Index, LiteralNode, Output, VariableAccess,
    )

T = TypeVar('T')


class ASTVisitor(ABC, Generic[T]):
    """Visitor for HIL AST nodes (dispatch through ASTNode.accept)."""

    @abstractmethod
    def visit_arithmetic(self, node: 'Arithmetic') -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_call(self, node: 'Call') -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_conditional(self, node: 'Conditional') -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_index(self, node: 'Index') -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_literal(self, node: 'LiteralNode') -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_output(self, node: 'Output') -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_variable_access(self, node: 'VariableAccess') -> T:
        raise NotImplementedError

    def visit_unknown(self, node: 'ASTNode') -> T:
        raise MalformedInputError(
            f"unexpected HIL node type {type(node).__name__}", node.location
        )
