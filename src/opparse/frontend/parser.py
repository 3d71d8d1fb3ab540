"""
Parser

Two-stack shunting-yard parsing under a ``GrammarSpec``.

Tokens flow from the tokenizer (plus an END sentinel) through the syntax
checker into the engine, which keeps pending operations and open brackets on
an operator stack (seeded with START) and emits tokens to an output stack in
reverse-Polish order:

- identifiers go straight to the output
- open brackets are pushed unconditionally
- a close bracket flushes the operator stack down to its open bracket, which
  is then emitted as a one-child wrapper node
- an operation (or END) first flushes every stacked operation that binds
  tighter than it, then is pushed (END never is)

A final pass rebuilds the AST from the output stack.
"""

import logging
from typing import List, Optional, Tuple

from .syntax_checker import SyntaxChecker
from .tokenizer import Tokenizer, TokenStream
from ..grammar.spec import GrammarSpec
from ..shared.errors import (
    MismatchedGroupersError,
    ParseError,
    StructuralUnderflowError,
)
from ..shared.nodes import AST
from ..shared.source_location import SourceSpan
from ..shared.tokens import Token, TokenKind, START, END

logger = logging.getLogger(__name__)


class ShuntingYardEngine:
    """
    Per-parse engine state: operator stack, output stack, syntax checker.

    One engine runs one parse; ``Parser`` creates a fresh engine per call.
    """

    def __init__(self, grammar: GrammarSpec, verbose: bool = False):
        self.grammar = grammar
        self.verbose = verbose
        self.checker = SyntaxChecker(grammar)
        self.operator_stack: List[Token] = [START]
        self.output_stack: List[Token] = []
        self.stream: TokenStream[Token] = TokenStream([])

    def run(self, tokens: List[Token]) -> List[Token]:
        """Reverse-Polish token sequence for ``tokens`` (END is appended here)."""
        end_offset = tokens[-1].span.end if tokens and tokens[-1].span else 0
        end = END.at(-1, SourceSpan(end_offset, end_offset))
        self.stream = TokenStream(tokens + [end])
        self.checker.refresh()

        while self.stream.has_next():
            self._dump_state()
            self.checker.check_next_token(self.stream.peek())
            self._consume(self.stream.next())
        self._dump_state()

        if self.operator_stack != [START]:
            raise StructuralUnderflowError(
                f"operations left pending at end of input: "
                f"{' '.join(str(t) for t in self.operator_stack[1:])}",
                *self.operator_stack[1:],
            )
        self.operator_stack.pop()
        return self.output_stack

    def _consume(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.IDENTIFIER:
            self.output_stack.append(token)
        elif kind is TokenKind.OPEN_GROUP:
            self.operator_stack.append(token)
        elif kind is TokenKind.CLOSE_GROUP:
            self._close_group(token)
        elif token.is_operation or kind is TokenKind.END:
            while self._left_is_tighter(self._top(token), token):
                self.output_stack.append(self.operator_stack.pop())
            if kind is not TokenKind.END:
                self.operator_stack.append(token)
        else:
            raise StructuralUnderflowError(f"unexpected token <{token}> in input", token)

    def _close_group(self, close: Token) -> None:
        while True:
            top = self._top(close)
            if top.is_open_group:
                break
            if top.kind is TokenKind.START:
                raise StructuralUnderflowError(
                    f"no open grouping symbol on the stack for <{close}>", close,
                )
            self.output_stack.append(self.operator_stack.pop())

        open_tok = self.operator_stack.pop()
        if self.grammar.matching_open_group(close) != open_tok:
            raise MismatchedGroupersError(
                f"mismatched grouping symbols: <{open_tok}> closed by <{close}>",
                open_tok, close,
            )
        self.output_stack.append(open_tok)

    def _top(self, incoming: Token) -> Token:
        if not self.operator_stack:
            raise StructuralUnderflowError(
                f"operator stack empty while handling <{incoming}>", incoming,
            )
        return self.operator_stack[-1]

    def _left_is_tighter(self, left: Token, right: Token) -> bool:
        if left.kind is TokenKind.START and right.kind is TokenKind.END:
            return False
        return self.grammar.left_is_tighter(left, right)

    def _dump_state(self) -> None:
        if not self.verbose:
            return
        logger.debug(
            "\nOutput: ->%s\nOperators: ->%s\nTokenStream:%s",
            "".join(f"  {t}" for t in reversed(self.output_stack)),
            "".join(f"  {t}" for t in reversed(self.operator_stack)),
            self.stream,
        )


def build_tree(output_stack: List[Token]) -> AST:
    """
    Rebuild the AST from a reverse-Polish output stack (top = last element).

    Works forward over the sequence with a node stack, which is the same as
    recursing from the top but keeps deep expressions off the call stack.

    Raises:
        StructuralUnderflowError: an operation lacks operands, or operands
            remain once the expression is complete.
    """
    nodes: List[AST] = []
    for token in output_stack:
        arity = token.arity
        if token.is_close_group or token.is_sentinel:
            raise StructuralUnderflowError(f"token <{token}> cannot be built into a tree", token)
        if len(nodes) < arity:
            raise StructuralUnderflowError(
                f"<{token}> needs {arity} operand(s), found {len(nodes)}", token,
            )
        children = tuple(nodes[len(nodes) - arity:]) if arity else ()
        del nodes[len(nodes) - arity:]
        nodes.append(AST(token, children))

    if not nodes:
        raise StructuralUnderflowError("empty expression")
    if len(nodes) > 1:
        raise StructuralUnderflowError(
            f"{len(nodes) - 1} expression(s) left over after building the tree",
            *[n.token for n in nodes[:-1]],
        )
    return nodes[0]


class Parser:
    """
    Operator-precedence parser for one grammar.

    Holds only read-only collaborators (grammar, tokenizer); every call to
    ``parse`` gets fresh stacks, so one parser may serve many parses.
    """

    def __init__(self, grammar: GrammarSpec, verbose: bool = False):
        self.grammar = grammar
        self.tokenizer = Tokenizer(grammar)
        self.verbose = verbose

    @classmethod
    def from_file(cls, path, verbose: bool = False) -> "Parser":
        from ..grammar.loader import load_grammar
        return cls(load_grammar(path), verbose=verbose)

    def parse(self, text: str) -> AST:
        """
        Parse one expression.

        Raises:
            ParseError: the first violation found; no partial tree is returned.
        """
        tokens = self.tokenizer.tokenize(text)
        engine = ShuntingYardEngine(self.grammar, verbose=self.verbose)
        output = engine.run(tokens)
        ast = build_tree(output)
        logger.debug("Parsed %r -> %s", text, ast)
        return ast

    def try_parse(self, text: str) -> Tuple[Optional[AST], Optional[ParseError]]:
        """``(ast, None)`` on success, ``(None, error)`` on a parse failure."""
        try:
            return self.parse(text), None
        except ParseError as e:
            return None, e
