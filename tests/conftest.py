"""
Pytest configuration and shared fixtures for all opparse tests.

Grammars are immutable and parsers hold no per-parse state, so both are
built once per session and shared by every test.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from opparse.grammar.loader import parse_grammar_text
from opparse.frontend.parser import Parser


ARITHMETIC_GRAMMAR = """\
# tightest first
right 1-
right 2^
left 2* 2/
left 2+
group ( )
group [ ]
"""


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def arithmetic_grammar():
    """Unary minus, right-assoc power, multiplicative, additive, two bracket pairs."""
    return parse_grammar_text(ARITHMETIC_GRAMMAR)


@pytest.fixture(scope="session")
def arithmetic_parser(arithmetic_grammar):
    return Parser(arithmetic_grammar)


@pytest.fixture(scope="session")
def simple_grammar():
    """`*` tighter than `+`, both left associative, parentheses."""
    return parse_grammar_text("left 2*\nleft 2+\ngroup ( )\n")


@pytest.fixture(scope="session")
def simple_parser(simple_grammar):
    return Parser(simple_grammar)


# =============================================================================
# Function-scoped fixtures
# =============================================================================

@pytest.fixture
def grammar_file(tmp_path):
    """Write grammar text to a temporary file and return its path."""
    def _write(text: str, name: str = "grammar.txt") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
