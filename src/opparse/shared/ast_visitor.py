"""
AST Visitor Pattern

Abstract visitor with one ``visit_*`` method per token role. Dispatch is a
total match over ``TokenKind``; sentinels and close-groups never appear in a
built tree, so reaching one is an AST validation error.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, TYPE_CHECKING

from .tokens import TokenKind

if TYPE_CHECKING:
    from .nodes import AST

T = TypeVar('T')


class ASTValidationError(Exception):
    """Raised when a visitor meets a node that cannot occur in a built tree."""


class ASTVisitor(ABC, Generic[T]):
    """
    Base class for AST visitors.

    Example:
        class Depth(ASTVisitor[int]):
            def visit_identifier(self, node):
                return 1
            def visit_operation(self, node):
                return 1 + max(child.accept(self) for child in node.children)
            def visit_group(self, node):
                return node.children[0].accept(self)
    """

    def visit(self, node: 'AST') -> T:
        kind = node.token.kind
        if kind is TokenKind.IDENTIFIER:
            return self.visit_identifier(node)
        if kind in (TokenKind.UNARY_OPERATION, TokenKind.BINARY_OPERATION):
            return self.visit_operation(node)
        if kind is TokenKind.OPEN_GROUP:
            return self.visit_group(node)
        raise ASTValidationError(f"token <{node.token}> of kind {kind.name} cannot head an AST node")

    @abstractmethod
    def visit_identifier(self, node: 'AST') -> T:
        ...

    @abstractmethod
    def visit_operation(self, node: 'AST') -> T:
        ...

    @abstractmethod
    def visit_group(self, node: 'AST') -> T:
        ...
