"""
Grammar File Loader

Reads the line-oriented grammar format into a ``GrammarSpec``:

    # comment
    group ( )
    left 2* 2/
    left 2+ 2-

Each ``left``/``right`` line is one precedence class (earlier lines bind
tighter); each operator is an arity digit (1 prefix, 2 infix) immediately
followed by its symbol.
"""

import logging
from pathlib import Path
from typing import List, Tuple, Union

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput, VisitError
from lark.lexer import Token as LarkToken

from .spec import Associativity, GrammarSpec, GroupingPair
from ..shared.errors import GrammarDefinitionError
from ..shared.tokens import (
    Token, unary_operation, binary_operation, open_group, close_group,
)
from ..utils.config import DEFAULT_LOADER_CACHE_FILE, UNARY_ARITY, BINARY_ARITY
from ..utils.io_utils import read_source_file

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).parent / "grammar_spec.lark"


def operation_from_encoding(encoding: str) -> Token:
    """``"2+"`` -> binary ``+``; ``"1-"`` -> unary ``-``."""
    arity = int(encoding[0])
    symbol = encoding[1:]
    if arity == UNARY_ARITY:
        return unary_operation(symbol)
    if arity == BINARY_ARITY:
        return binary_operation(symbol)
    raise GrammarDefinitionError(
        f"the encoding <{encoding}> has arity {arity}; only unary and binary operations are supported"
    )


@v_args(inline=True)
class GrammarFileTransformer(Transformer):
    """Converts the lark parse tree of a grammar file to constructor arguments."""

    def group_decl(self, _keyword, open_sym, close_sym) -> GroupingPair:
        return open_group(str(open_sym)), close_group(str(close_sym))

    def class_decl(self, assoc, *operators) -> Tuple[Associativity, List[Token]]:
        return Associativity.from_string(str(assoc)), [operation_from_encoding(str(op)) for op in operators]

    def start(self, *entries) -> GrammarSpec:
        precedences: List[List[Token]] = []
        associativities: List[Associativity] = []
        groupers: List[GroupingPair] = []
        for entry in entries:
            if isinstance(entry, LarkToken):
                # COMMENT
                continue
            if isinstance(entry[0], Associativity):
                associativities.append(entry[0])
                precedences.append(entry[1])
            else:
                groupers.append(entry)
        return GrammarSpec(precedences, associativities, groupers)


class GrammarLoader:
    """
    Grammar-file parser (lark LALR, cached like the frontend parser).
    """

    def __init__(self, cache_file: Union[str, bool] = DEFAULT_LOADER_CACHE_FILE):
        self.parser = Lark.open(
            str(_GRAMMAR_PATH),
            start='start',
            parser='lalr',
            cache=cache_file,
            propagate_positions=True,
        )
        self.transformer = GrammarFileTransformer()

    def parse(self, text: str, source_name: str = "<grammar>") -> GrammarSpec:
        """
        Parse grammar-file text.

        Raises:
            GrammarDefinitionError: on a malformed line or an invalid grammar.
        """
        try:
            tree = self.parser.parse(text)
        except UnexpectedInput as e:
            line = getattr(e, "line", None)
            column = getattr(e, "column", None)
            bad_line = ""
            if line is not None and line > 0:
                lines = text.splitlines()
                bad_line = lines[line - 1] if line <= len(lines) else ""
            raise GrammarDefinitionError(
                f"problem with line <{bad_line.strip()}> in {source_name}", line, column
            ) from e

        try:
            grammar = self.transformer.transform(tree)
        except VisitError as e:
            # lark wraps exceptions raised inside transformer callbacks
            if isinstance(e.orig_exc, GrammarDefinitionError):
                raise e.orig_exc from None
            raise

        logger.debug(f"Loaded grammar from {source_name}")
        return grammar


_default_loader = None


def _loader() -> GrammarLoader:
    global _default_loader
    if _default_loader is None:
        _default_loader = GrammarLoader()
    return _default_loader


def parse_grammar_text(text: str, source_name: str = "<grammar>") -> GrammarSpec:
    """Build a grammar from grammar-file text."""
    return _loader().parse(text, source_name)


def load_grammar(path: Union[Path, str]) -> GrammarSpec:
    """Build a grammar from a grammar file."""
    return _loader().parse(read_source_file(path), str(path))
