"""
Operator grammars: compiled specification and grammar-file loader.
"""

from .spec import Associativity, GrammarSpec, grammar_from_classes
from .loader import GrammarLoader, load_grammar, parse_grammar_text, operation_from_encoding

__all__ = [
    "Associativity", "GrammarSpec", "grammar_from_classes",
    "GrammarLoader", "load_grammar", "parse_grammar_text", "operation_from_encoding",
]
