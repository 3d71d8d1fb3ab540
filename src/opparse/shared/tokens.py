"""
Token Model

A closed set of token kinds. Every token is one ``Token`` value tagged with a
``TokenKind``; arity and role are derived from the kind, so the adjacency
table and the precedence lookups are total over ``TokenKind``.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .source_location import SourceSpan
from ..utils.config import START_SYMBOL, END_SYMBOL


class TokenKind(Enum):
    """Token kinds"""
    IDENTIFIER = "identifier"
    UNARY_OPERATION = "unary_operation"
    BINARY_OPERATION = "binary_operation"
    OPEN_GROUP = "open_group"
    CLOSE_GROUP = "close_group"
    START = "start"
    END = "end"


# Number of subtrees a token of each kind owns in the AST
_KIND_ARITY = {
    TokenKind.IDENTIFIER: 0,
    TokenKind.UNARY_OPERATION: 1,
    TokenKind.BINARY_OPERATION: 2,
    TokenKind.OPEN_GROUP: 1,
    TokenKind.CLOSE_GROUP: 0,
    TokenKind.START: 0,
    TokenKind.END: 0,
}

_OPERATION_KINDS = frozenset({TokenKind.UNARY_OPERATION, TokenKind.BINARY_OPERATION})
_SENTINEL_KINDS = frozenset({TokenKind.START, TokenKind.END})


@dataclass(frozen=True)
class Token:
    """
    One token of an expression.

    Equality and hashing use only ``kind`` and ``symbol``: the grammar's
    token templates and the indexed tokens the tokenizer emits from them
    look up the same precedence and associativity entries.

    ``index`` is the position in the token stream (-1 for templates and
    sentinels); ``span`` is the source range the token was read from.
    """
    kind: TokenKind
    symbol: str
    index: int = field(default=-1, compare=False)
    span: Optional[SourceSpan] = field(default=None, compare=False)

    @property
    def arity(self) -> int:
        return _KIND_ARITY[self.kind]

    @property
    def is_identifier(self) -> bool:
        return self.kind is TokenKind.IDENTIFIER

    @property
    def is_operation(self) -> bool:
        return self.kind in _OPERATION_KINDS

    @property
    def is_open_group(self) -> bool:
        return self.kind is TokenKind.OPEN_GROUP

    @property
    def is_close_group(self) -> bool:
        return self.kind is TokenKind.CLOSE_GROUP

    @property
    def is_sentinel(self) -> bool:
        return self.kind in _SENTINEL_KINDS

    def at(self, index: int, span: Optional[SourceSpan] = None) -> "Token":
        """Copy of this token placed at ``index`` in a token stream."""
        return replace(self, index=index, span=span)

    def encoding(self) -> str:
        """Grammar-file encoding: arity digit followed by the symbol."""
        if self.is_operation:
            return f"{self.arity}{self.symbol}"
        return self.symbol

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.symbol!r}, index={self.index})"


def identifier(symbol: str) -> Token:
    return Token(TokenKind.IDENTIFIER, symbol)


def unary_operation(symbol: str) -> Token:
    return Token(TokenKind.UNARY_OPERATION, symbol)


def binary_operation(symbol: str) -> Token:
    return Token(TokenKind.BINARY_OPERATION, symbol)


def open_group(symbol: str) -> Token:
    return Token(TokenKind.OPEN_GROUP, symbol)


def close_group(symbol: str) -> Token:
    return Token(TokenKind.CLOSE_GROUP, symbol)


START = Token(TokenKind.START, START_SYMBOL)
END = Token(TokenKind.END, END_SYMBOL)
