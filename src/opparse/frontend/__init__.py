"""
Frontend: tokenizer, syntax checker, shunting-yard parser, infix renderer.
"""

from .tokenizer import Tokenizer, TokenStream
from .syntax_checker import SyntaxChecker, ALLOWED_PAIRS
from .parser import Parser, ShuntingYardEngine, build_tree
from .renderer import InfixRenderer

__all__ = [
    "Tokenizer", "TokenStream", "SyntaxChecker", "ALLOWED_PAIRS",
    "Parser", "ShuntingYardEngine", "build_tree", "InfixRenderer",
]
