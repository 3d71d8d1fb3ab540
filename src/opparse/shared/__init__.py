"""
Shared components: tokens, AST, source spans, diagnostics.
"""

from .source_location import SourceSpan
from .tokens import (
    Token, TokenKind, START, END,
    identifier, unary_operation, binary_operation, open_group, close_group,
)
from .nodes import AST
from .ast_visitor import ASTVisitor, ASTValidationError
from .errors import (
    Error, ErrorReporter, OpparseError, GrammarDefinitionError, ParseError,
    ExpressionSyntaxError, UnmatchedOpenGroupError, UnmatchedCloseGroupError,
    MismatchedGroupersError, StructuralUnderflowError, ImplementationError,
)
