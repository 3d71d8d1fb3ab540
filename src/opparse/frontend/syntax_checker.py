"""
Syntax Checker

Pushdown validator run on every token before the engine consumes it. The
control state is the kind of the last accepted token; the stack holds the
open brackets still waiting for their partner.
"""

from typing import List

from ..grammar.spec import GrammarSpec
from ..shared.errors import (
    ExpressionSyntaxError,
    MismatchedGroupersError,
    UnmatchedCloseGroupError,
    UnmatchedOpenGroupError,
)
from ..shared.tokens import Token, TokenKind, START

# Kinds after which an operand is expected, and kinds that can follow them
_EXPECT_OPERAND = frozenset({
    TokenKind.START, TokenKind.BINARY_OPERATION, TokenKind.UNARY_OPERATION, TokenKind.OPEN_GROUP,
})
_OPERAND_STARTS = frozenset({
    TokenKind.IDENTIFIER, TokenKind.OPEN_GROUP, TokenKind.UNARY_OPERATION,
})
# Kinds that complete an operand, and kinds that can follow them
_OPERAND_ENDS = frozenset({TokenKind.CLOSE_GROUP, TokenKind.IDENTIFIER})
_AFTER_OPERAND = frozenset({TokenKind.END, TokenKind.CLOSE_GROUP, TokenKind.BINARY_OPERATION})

ALLOWED_PAIRS = frozenset(
    [(last, nxt) for last in _EXPECT_OPERAND for nxt in _OPERAND_STARTS]
    + [(last, nxt) for last in _OPERAND_ENDS for nxt in _AFTER_OPERAND]
)


class SyntaxChecker:
    """
    Token adjacency and bracket discipline.

    Call ``refresh()`` before each parse; the parser creates one checker per
    parse so no state crosses parse boundaries.
    """

    def __init__(self, grammar: GrammarSpec):
        self.grammar = grammar
        self.last_token: Token = START
        self.open_groups: List[Token] = []

    def refresh(self) -> None:
        self.last_token = START
        self.open_groups = []

    def check_next_token(self, token: Token) -> None:
        """
        Accept ``token`` or raise.

        Raises:
            UnmatchedCloseGroupError: close bracket with nothing open.
            MismatchedGroupersError: close bracket not partnering the innermost open one.
            ExpressionSyntaxError: ``token`` may not follow the last accepted token.
            UnmatchedOpenGroupError: end of input with a bracket still open.
        """
        self._check_brackets(token)

        if (self.last_token.kind, token.kind) not in ALLOWED_PAIRS:
            raise ExpressionSyntaxError(
                f"syntax error: token <{self.last_token}> followed by <{token}>",
                *[t for t in (self.last_token, token) if t.kind is not TokenKind.START],
                help=self._hint(self.last_token, token),
            )

        if token.kind is TokenKind.END and self.open_groups:
            innermost = self.open_groups[-1]
            raise UnmatchedOpenGroupError(
                f"unclosed grouping symbol <{innermost}>",
                innermost,
                help=f"add `{self.grammar.matching_close_group(innermost)}` to close it",
            )

        self.last_token = token

    def _check_brackets(self, token: Token) -> None:
        if token.is_open_group:
            self.open_groups.append(token)
        elif token.is_close_group:
            if not self.open_groups:
                raise UnmatchedCloseGroupError(
                    f"unmatched closing grouping symbol <{token}>", token,
                )
            open_tok = self.open_groups.pop()
            expected = self.grammar.matching_close_group(open_tok)
            if expected != token:
                raise MismatchedGroupersError(
                    f"mismatched grouping symbols: <{open_tok}> closed by <{token}>",
                    open_tok, token,
                    help=f"expected `{expected}`",
                )

    @staticmethod
    def _hint(last: Token, token: Token):
        if last.kind in _OPERAND_ENDS and token.kind in _OPERAND_STARTS:
            return "expected an operation between them"
        if last.kind in _EXPECT_OPERAND and token.kind in _AFTER_OPERAND:
            return "expected an operand"
        return None
