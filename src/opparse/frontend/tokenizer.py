"""
Tokenizer

Splits an input line into tokens using the grammar's symbol catalog: every
special symbol is padded with whitespace, the padded text is split on
whitespace, and each piece is looked up (special symbol) or wrapped as an
identifier.

Special symbols are padded wherever they occur, so identifier text must not
contain one (``a+b`` with ``+`` registered is three tokens; ``max`` with
``a`` registered is not an identifier).
"""

import logging
from typing import Iterator, List, Sequence, TypeVar, Generic

from ..grammar.spec import GrammarSpec
from ..shared.errors import ImplementationError
from ..shared.source_location import SourceSpan
from ..shared.tokens import Token, identifier

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Tokenizer:
    """Grammar-driven tokenizer. Stateless between calls."""

    def __init__(self, grammar: GrammarSpec):
        self.grammar = grammar
        # Longest first so the padded text never depends on set iteration order
        self._symbols = sorted(grammar.special_symbols, key=lambda s: (-len(s), s))

    def tokenize(self, text: str) -> List[Token]:
        """
        Tokens of ``text``, each carrying its stream index and source span.

        Raises:
            ImplementationError: if a token cannot be located in ``text``.
        """
        pieces = self.split(text)
        tokens = []
        cursor = 0
        for index, piece in enumerate(pieces):
            start = text.find(piece, cursor)
            if start < 0:
                raise ImplementationError(
                    f"token <{piece}> not found in input after offset {cursor}: {text!r}"
                )
            cursor = start + len(piece)
            tokens.append(self.to_token(piece).at(index, SourceSpan(start, cursor)))
        logger.debug(f"Tokenized {text!r} -> {[t.symbol for t in tokens]}")
        return tokens

    def split(self, text: str) -> List[str]:
        """Non-empty pieces of ``text`` after padding every special symbol."""
        return self._pad(text).split()

    def to_token(self, piece: str) -> Token:
        template = self.grammar.lookup(piece)
        if template is not None:
            return template
        return identifier(piece)

    def _pad(self, text: str) -> str:
        for symbol in self._symbols:
            text = text.replace(symbol, f" {symbol} ")
        return text

    @staticmethod
    def input_offsets(tokens: Sequence[Token], index: int) -> List[int]:
        """Character offsets occupied by token ``index``."""
        span = tokens[index].span
        return list(span.offsets) if span is not None else []


class TokenStream(Generic[T]):
    """Read cursor over a token list."""

    def __init__(self, items: Sequence[T]):
        self._items = list(items)
        self._next = 0

    def peek(self) -> T:
        return self._items[self._next]

    def has_next(self) -> bool:
        return self._next < len(self._items)

    def next(self) -> T:
        item = self._items[self._next]
        self._next += 1
        return item

    def remaining(self) -> List[T]:
        return self._items[self._next:]

    def __iter__(self) -> Iterator[T]:
        while self.has_next():
            yield self.next()

    def __str__(self) -> str:
        return " ->" + "".join(f"  {item}" for item in self.remaining())
