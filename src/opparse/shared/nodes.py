"""
opparse AST Definitions

One node type: a token plus its ordered children.

- Identifier: no children
- Operation of arity k: exactly k children, in source order
- OpenGroup: exactly one child, the bracketed sub-expression

Visitor Pattern Support:
- ``accept()`` dispatches on the token kind (see ast_visitor.py)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Tuple, TypeVar, TYPE_CHECKING

from .tokens import Token, TokenKind

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')


@dataclass(frozen=True)
class AST:
    """
    Expression tree node.

    Immutable once built; the tree-build pass is the only producer.
    """
    token: Token
    children: Tuple["AST", ...] = ()

    def __post_init__(self):
        if len(self.children) != self.token.arity:
            raise ValueError(
                f"token <{self.token}> of kind {self.token.kind.name} takes "
                f"{self.token.arity} children, got {len(self.children)}"
            )

    @property
    def symbol(self) -> str:
        return self.token.symbol

    @property
    def kind(self) -> TokenKind:
        return self.token.kind

    def accept(self, visitor: 'ASTVisitor[T]') -> T:
        """Accept a visitor (dispatch on token kind)."""
        return visitor.visit(self)

    def walk(self) -> Iterator["AST"]:
        """Pre-order traversal."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def fold(self, combine: Callable[["AST", List[T]], T]) -> T:
        """
        Bottom-up evaluation: ``combine(node, child_results)`` runs once per
        node, children first and in order.

        Uses an explicit stack, so tree depth is not limited by the
        interpreter's recursion limit.
        """
        results: List[T] = []
        stack: List[Tuple["AST", bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded or not node.children:
                arity = len(node.children)
                operands = results[len(results) - arity:]
                del results[len(results) - arity:]
                results.append(combine(node, operands))
            else:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(node.children))
        return results[0]

    def without_groups(self) -> "AST":
        """Same tree with every bracket wrapper replaced by its sub-expression."""
        return self.fold(_strip_group)

    def __str__(self) -> str:
        return self.fold(_render_node)


def _strip_group(node: AST, children: List[AST]) -> AST:
    if node.token.is_open_group:
        return children[0]
    if not children:
        return node
    return AST(node.token, tuple(children))


def _render_node(node: AST, parts: List[str]) -> str:
    # Identifiers print bare; operations and groups as {symbol, child, ...}
    if not parts:
        return node.token.symbol
    return "{" + ", ".join([node.token.symbol] + parts) + "}"
