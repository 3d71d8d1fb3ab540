"""
Infix Renderer

Renders an AST as fully-bracketed infix text that re-parses, under the same
grammar, to the same tree modulo bracket wrappers (``AST.without_groups``).
"""

from typing import List

from ..grammar.spec import GrammarSpec
from ..shared.ast_visitor import ASTValidationError
from ..shared.errors import GrammarDefinitionError
from ..shared.nodes import AST
from ..shared.tokens import TokenKind


class InfixRenderer:
    """Wraps every operation in the grammar's first grouping pair."""

    def __init__(self, grammar: GrammarSpec):
        if not grammar.grouping_pairs:
            raise GrammarDefinitionError("grammar declares no grouping pair to bracket operations with")
        self.grammar = grammar
        open_tok, close_tok = grammar.grouping_pairs[0]
        self.open_symbol = open_tok.symbol
        self.close_symbol = close_tok.symbol

    def render(self, ast: AST) -> str:
        return ast.fold(self._render_node)

    def _render_node(self, node: AST, operands: List[str]) -> str:
        kind = node.kind
        if kind is TokenKind.IDENTIFIER:
            return node.symbol
        if kind is TokenKind.OPEN_GROUP:
            close = self.grammar.matching_close_group(node.token)
            return f"{node.symbol} {operands[0]} {close}"
        if kind is TokenKind.UNARY_OPERATION:
            return f"{self.open_symbol} {node.symbol} {operands[0]} {self.close_symbol}"
        if kind is TokenKind.BINARY_OPERATION:
            return f"{self.open_symbol} {operands[0]} {node.symbol} {operands[1]} {self.close_symbol}"
        raise ASTValidationError(f"token <{node.token}> of kind {kind.name} cannot be rendered")
