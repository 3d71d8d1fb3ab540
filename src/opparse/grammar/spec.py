"""
Grammar Specification

Compiled, read-only form of an operator grammar: precedence classes (index 0
binds tightest), one associativity per class, and bracket pairs.
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple
from typing_extensions import TypeAlias

from ..shared.errors import GrammarDefinitionError
from ..shared.tokens import (
    Token, START, END, unary_operation, binary_operation, open_group, close_group,
)
from ..utils.config import GROUP_RANK, SENTINEL_RANK, GROUP_KEYWORD

logger = logging.getLogger(__name__)


class Associativity(Enum):
    """Tie-break rule for operators of one precedence class"""
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def from_string(cls, encoding: str) -> "Associativity":
        try:
            return cls(encoding.lower())
        except ValueError:
            raise GrammarDefinitionError(
                f"associativity <{encoding}> not recognized, expected `left` or `right`"
            ) from None

    def __str__(self) -> str:
        return self.value


GroupingPair: TypeAlias = Tuple[Token, Token]


class GrammarSpec:
    """
    Immutable operator grammar.

    Built once, then only read: safe to share between any number of parses.

    Args:
        precedences: precedence classes, tightest first; each an iterable of
            unary or binary operation tokens.
        associativities: one ``Associativity`` per class.
        groupers: ``(open_group, close_group)`` token pairs.

    Raises:
        GrammarDefinitionError: when the two lists differ in length, a class is
            empty, a class holds a non-operation token, or two registered
            symbols overlap (one a substring of the other).
    """

    def __init__(
        self,
        precedences: Sequence[Iterable[Token]],
        associativities: Sequence[Associativity],
        groupers: Sequence[GroupingPair] = (),
    ):
        if len(precedences) != len(associativities):
            raise GrammarDefinitionError(
                f"must be an equal number of precedence classes and associativities "
                f"(got {len(precedences)} and {len(associativities)})"
            )

        self._classes: Tuple[Tuple[Token, ...], ...] = tuple(tuple(c) for c in precedences)
        self._associativities: Tuple[Associativity, ...] = tuple(associativities)
        self._groupers: Tuple[GroupingPair, ...] = tuple(groupers)

        self._rank: Dict[Token, int] = {}
        self._associativity: Dict[Token, Associativity] = {}
        self._symbols: Dict[str, Token] = {}
        self._open_for_close: Dict[Token, Token] = {}
        self._close_for_open: Dict[Token, Token] = {}

        for rank, (members, assoc) in enumerate(zip(self._classes, self._associativities)):
            if not members:
                raise GrammarDefinitionError(f"precedence class {rank} has no operations")
            for op in members:
                if not op.is_operation:
                    raise GrammarDefinitionError(
                        f"<{op}> of kind {op.kind.name} cannot belong to a precedence class"
                    )
                self._register(op)
                self._rank[op] = rank
                self._associativity[op] = assoc

        for open_tok, close_tok in self._groupers:
            if not (open_tok.is_open_group and close_tok.is_close_group):
                raise GrammarDefinitionError(
                    f"grouping pair <{open_tok}> <{close_tok}> must be an open and a close group"
                )
            self._register(open_tok)
            self._register(close_tok)
            self._rank[open_tok] = GROUP_RANK
            self._rank[close_tok] = GROUP_RANK
            self._open_for_close[close_tok] = open_tok
            self._close_for_open[open_tok] = close_tok

        self._rank[START] = SENTINEL_RANK
        self._rank[END] = SENTINEL_RANK
        self._special_symbols: FrozenSet[str] = frozenset(self._symbols)

        logger.debug(
            f"Grammar built: {len(self._classes)} precedence class(es), "
            f"{len(self._groupers)} grouping pair(s), symbols {sorted(self._special_symbols)}"
        )

    def _register(self, token: Token) -> None:
        """Add a symbol, rejecting any that overlaps one registered earlier."""
        if not token.symbol or any(ch.isspace() for ch in token.symbol):
            raise GrammarDefinitionError(
                f"symbol {token.symbol!r} must be non-empty and free of whitespace"
            )
        for other in self._symbols.values():
            if token.symbol in other.symbol or other.symbol in token.symbol:
                raise GrammarDefinitionError(
                    f"operations <{other.encoding()}> and <{token.encoding()}> overlap"
                )
        self._symbols[token.symbol] = token

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @property
    def special_symbols(self) -> FrozenSet[str]:
        """Operation and grouping symbols of this grammar."""
        return self._special_symbols

    @property
    def precedence_classes(self) -> Tuple[Tuple[Token, ...], ...]:
        return self._classes

    @property
    def associativities(self) -> Tuple[Associativity, ...]:
        return self._associativities

    @property
    def grouping_pairs(self) -> Tuple[GroupingPair, ...]:
        return self._groupers

    @property
    def operations(self) -> List[Token]:
        return [op for members in self._classes for op in members]

    def is_special_symbol(self, symbol: str) -> bool:
        return symbol in self._special_symbols

    def lookup(self, symbol: str) -> Optional[Token]:
        """Token template for a special symbol, or None for identifier text."""
        return self._symbols.get(symbol)

    # ------------------------------------------------------------------
    # Precedence
    # ------------------------------------------------------------------

    def precedence_rank(self, token: Token) -> Optional[int]:
        return self._rank.get(token)

    def associativity_of(self, operation: Token) -> Optional[Associativity]:
        return self._associativity.get(operation)

    def matching_open_group(self, close: Token) -> Optional[Token]:
        return self._open_for_close.get(close)

    def matching_close_group(self, open_tok: Token) -> Optional[Token]:
        return self._close_for_open.get(open_tok)

    def left_is_tighter(self, left: Token, right: Token) -> bool:
        """
        Whether ``left`` binds tighter than ``right``.

        Lower rank wins; equal ranks are broken by the associativity of
        ``left`` (LEFT: left binds tighter, RIGHT: it does not).

        Raises:
            GrammarDefinitionError: if either token has no rank, or the tie
                cannot be broken because ``left`` has no associativity.
        """
        left_rank = self._rank.get(left)
        right_rank = self._rank.get(right)
        if left_rank is None or right_rank is None:
            raise GrammarDefinitionError(
                f"the following tokens do not have precedence rules: <{left}> <{right}>"
            )

        if left_rank != right_rank:
            return left_rank < right_rank

        assoc = self._associativity.get(left)
        if assoc is None:
            raise GrammarDefinitionError(
                f"the following tokens do not have precedence rules: <{left}> <{right}>"
            )
        return assoc is Associativity.LEFT

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def to_spec_text(self) -> str:
        """Render in the grammar-file format read by ``opparse.grammar.loader``."""
        lines = []
        for members, assoc in zip(self._classes, self._associativities):
            lines.append(" ".join([str(assoc)] + [op.encoding() for op in members]))
        for open_tok, close_tok in self._groupers:
            lines.append(f"{GROUP_KEYWORD} {open_tok.symbol} {close_tok.symbol}")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return "Grammar:\n" + self.to_spec_text()

    def __repr__(self) -> str:
        return (
            f"GrammarSpec(classes={len(self._classes)}, "
            f"groupers={len(self._groupers)}, symbols={sorted(self._special_symbols)})"
        )


def grammar_from_classes(
    classes: Sequence[Tuple[str, Sequence[Tuple[int, str]]]],
    groupers: Sequence[Tuple[str, str]] = (),
) -> GrammarSpec:
    """
    Build a grammar from plain data.

    ``classes`` is ``[(assoc, [(arity, symbol), ...]), ...]`` tightest first;
    ``groupers`` is ``[(open, close), ...]``.
    """
    precedences = []
    associativities = []
    for assoc, members in classes:
        ops = []
        for arity, symbol in members:
            if arity == 1:
                ops.append(unary_operation(symbol))
            elif arity == 2:
                ops.append(binary_operation(symbol))
            else:
                raise GrammarDefinitionError(
                    f"the encoding <{arity}{symbol}> has arity {arity}; "
                    f"only unary and binary operations are supported"
                )
        precedences.append(ops)
        associativities.append(Associativity.from_string(assoc))
    pairs = [(open_group(o), close_group(c)) for o, c in groupers]
    return GrammarSpec(precedences, associativities, pairs)
