"""
opparse: expressions parsed under a declarative operator grammar.

    >>> from opparse import Parser, parse_grammar_text
    >>> grammar = parse_grammar_text("left 2*\nleft 2+\ngroup ( )\n")
    >>> str(Parser(grammar).parse("1 + 2 * 3"))
    '{+, 1, {*, 2, 3}}'
"""

__version__ = "0.1.0"

from .grammar import Associativity, GrammarSpec, grammar_from_classes, load_grammar, parse_grammar_text
from .frontend import Parser, Tokenizer, SyntaxChecker, ShuntingYardEngine, InfixRenderer
from .shared import (
    AST, Token, TokenKind, SourceSpan, Error, ErrorReporter,
    OpparseError, GrammarDefinitionError, ParseError, ExpressionSyntaxError,
    UnmatchedOpenGroupError, UnmatchedCloseGroupError, MismatchedGroupersError,
    StructuralUnderflowError, ImplementationError,
)
