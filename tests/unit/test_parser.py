#!/usr/bin/env python3
"""
Tests for the shunting-yard engine, tree building and the Parser facade.
"""

import logging

import pytest
from opparse.frontend.parser import Parser, ShuntingYardEngine, build_tree
from opparse.frontend.tokenizer import Tokenizer
from opparse.grammar.loader import parse_grammar_text
from opparse.shared.errors import (
    ExpressionSyntaxError,
    MismatchedGroupersError,
    ParseError,
    StructuralUnderflowError,
    UnmatchedCloseGroupError,
    UnmatchedOpenGroupError,
)
from opparse.shared.tokens import identifier, binary_operation, unary_operation, open_group, close_group
from test_utils import ast_diff, binary, group, leaf, symbols, unary


class TestPrecedence:
    """Precedence and associativity resolution"""

    def test_tighter_on_right(self, simple_parser):
        assert str(simple_parser.parse("1 + 2 * 3")) == "{+, 1, {*, 2, 3}}"

    def test_tighter_on_left(self, simple_parser):
        assert str(simple_parser.parse("1 * 2 + 3")) == "{+, {*, 1, 2}, 3}"

    def test_left_associative_chain(self, simple_parser):
        assert str(simple_parser.parse("1 + 2 + 3")) == "{+, {+, 1, 2}, 3}"

    def test_right_associative_chain(self):
        parser = Parser(parse_grammar_text("right 2^\n"))
        assert str(parser.parse("2 ^ 3 ^ 4")) == "{^, 2, {^, 3, 4}}"

    def test_unary_tighter_than_binary(self):
        parser = Parser(parse_grammar_text("right 1-\nright 2^\n"))
        assert str(parser.parse("- 2 ^ 3")) == "{^, {-, 2}, 3}"

    def test_unary_looser_than_binary(self):
        parser = Parser(parse_grammar_text("right 2^\nright 1-\n"))
        assert str(parser.parse("- 2 ^ 3")) == "{-, {^, 2, 3}}"

    def test_unary_looser_than_binary_as_right_operand(self):
        # The tighter '^' is completed before its right operand exists
        parser = Parser(parse_grammar_text("right 2^\nright 1-\n"))
        with pytest.raises(StructuralUnderflowError):
            parser.parse("2 ^ - 3")

    def test_unary_completes_tighter_pending_operations(self):
        parser = Parser(parse_grammar_text("left 2*\nright 1-\nleft 2+\n"))
        assert str(parser.parse("x + y * - z")) == "{+, {*, x, y}, {-, z}}"

    def test_stacked_unary(self, arithmetic_parser):
        assert str(arithmetic_parser.parse("- - x")) == "{-, {-, x}}"

    def test_same_class_mixed_operations(self, arithmetic_parser):
        assert str(arithmetic_parser.parse("a / b * c")) == "{*, {/, a, b}, c}"

    def test_single_identifier(self, arithmetic_parser):
        ast = arithmetic_parser.parse("x")
        assert ast == leaf("x")

    def test_full_expression(self, arithmetic_parser):
        ast = arithmetic_parser.parse("a + b * - c ^ d ^ e / f")
        expected = binary(
            "+", "a",
            binary("/", binary("*", "b", binary("^", unary("-", "c"), binary("^", "d", "e"))), "f"),
        )
        assert ast_diff(ast, expected) is None


class TestGroups:

    def test_group_overrides_precedence(self, simple_parser):
        assert str(simple_parser.parse("( 1 + 2 ) * 3")) == "{*, {(, {+, 1, 2}}, 3}"

    def test_nested_groups(self, arithmetic_parser):
        ast = arithmetic_parser.parse("[ ( a + b ) * c ]")
        expected = group("[", binary("*", group("(", binary("+", "a", "b")), "c"))
        assert ast_diff(ast, expected) is None

    def test_group_on_right(self, arithmetic_parser):
        assert str(arithmetic_parser.parse("a * (b + c)")) == "{*, a, {(, {+, b, c}}}"

    def test_unary_applied_to_group(self, arithmetic_parser):
        assert str(arithmetic_parser.parse("-(a)")) == "{-, {(, a}}"

    def test_redundant_groups(self, arithmetic_parser):
        assert str(arithmetic_parser.parse("((x))")) == "{(, {(, x}}"


class TestParseErrors:

    def test_adjacent_identifiers(self, simple_parser):
        with pytest.raises(ExpressionSyntaxError):
            simple_parser.parse("1 2")

    def test_adjacent_operations(self, simple_parser):
        with pytest.raises(ExpressionSyntaxError):
            simple_parser.parse("1 + * 2")

    def test_empty(self, simple_parser):
        with pytest.raises(ExpressionSyntaxError):
            simple_parser.parse("")

    def test_mismatched(self, arithmetic_parser):
        with pytest.raises(MismatchedGroupersError) as info:
            arithmetic_parser.parse("( 1 + 2 ]")
        assert info.value.offsets == [0, 8]

    def test_unmatched_close(self, arithmetic_parser):
        with pytest.raises(UnmatchedCloseGroupError):
            arithmetic_parser.parse("1 + 2 )")

    def test_unmatched_open(self, simple_parser):
        with pytest.raises(UnmatchedOpenGroupError) as info:
            simple_parser.parse("( 1 + 2")
        assert info.value.token_indices == [0]
        assert info.value.offsets == [0]

    def test_undeclared_bracket_is_identifier(self, simple_parser):
        with pytest.raises(ExpressionSyntaxError):
            simple_parser.parse("( 1 + 2 ]")

    def test_all_parse_errors_share_base(self, simple_parser):
        for text in ("1 2", "( 1", "1 )"):
            with pytest.raises(ParseError):
                simple_parser.parse(text)

    def test_try_parse(self, simple_parser):
        ast, error = simple_parser.try_parse("1 + 2")
        assert error is None and str(ast) == "{+, 1, 2}"
        ast, error = simple_parser.try_parse("1 +")
        assert ast is None and isinstance(error, ExpressionSyntaxError)

    def test_parser_reusable_after_failure(self, simple_parser):
        with pytest.raises(UnmatchedOpenGroupError):
            simple_parser.parse("( ( a")
        assert str(simple_parser.parse("a * b")) == "{*, a, b}"


class TestEngine:

    def test_reverse_polish_output(self, arithmetic_grammar):
        tokens = Tokenizer(arithmetic_grammar).tokenize("( a + b ) * c")
        output = ShuntingYardEngine(arithmetic_grammar).run(tokens)
        assert symbols(output) == ["a", "b", "+", "(", "c", "*"]

    def test_operator_stack_emptied(self, arithmetic_grammar):
        engine = ShuntingYardEngine(arithmetic_grammar)
        engine.run(Tokenizer(arithmetic_grammar).tokenize("a ^ b ^ c"))
        assert engine.operator_stack == []

    def test_verbose_trace_goes_to_log(self, arithmetic_grammar, caplog):
        parser = Parser(arithmetic_grammar, verbose=True)
        with caplog.at_level(logging.DEBUG, logger="opparse.frontend.parser"):
            ast = parser.parse("a + b")
        assert str(ast) == "{+, a, b}"
        traces = [r.getMessage() for r in caplog.records if "Operators:" in r.getMessage()]
        # one dump per token (a, +, b, END) plus the final state
        assert len(traces) == 5
        assert "START" in traces[0]

    def test_verbose_does_not_change_result(self, arithmetic_grammar):
        text = "- a * ( b + c ) ^ d"
        quiet = Parser(arithmetic_grammar).parse(text)
        loud = Parser(arithmetic_grammar, verbose=True).parse(text)
        assert ast_diff(quiet, loud) is None


class TestBuildTree:

    def test_builds_children_in_source_order(self):
        output = [identifier("a"), identifier("b"), binary_operation("-")]
        assert str(build_tree(output)) == "{-, a, b}"

    def test_group_wrapper(self):
        output = [identifier("a"), open_group("(")]
        assert str(build_tree(output)) == "{(, a}"

    def test_underflow(self):
        with pytest.raises(StructuralUnderflowError):
            build_tree([identifier("a"), binary_operation("+")])

    def test_empty(self):
        with pytest.raises(StructuralUnderflowError):
            build_tree([])

    def test_leftover_operands(self):
        with pytest.raises(StructuralUnderflowError, match="left over"):
            build_tree([identifier("a"), identifier("b")])

    def test_close_group_never_built(self):
        with pytest.raises(StructuralUnderflowError):
            build_tree([identifier("a"), close_group(")")])

    def test_unary(self):
        assert str(build_tree([identifier("a"), unary_operation("!")])) == "{!, a}"

    def test_deep_expression(self, simple_parser):
        text = " + ".join(["x"] * 3000)
        ast = simple_parser.parse(text)
        depth = 0
        node = ast
        while node.children:
            node = node.children[0]
            depth += 1
        assert depth == 2999

    def test_deep_expression_prints(self, simple_parser):
        ast = simple_parser.parse(" + ".join(["x"] * 3000))
        assert str(ast) == "{+, " * 2999 + "x" + ", x}" * 2999

    def test_deep_expression_without_groups(self, simple_parser):
        text = "( " * 3000 + "x" + " )" * 3000 + " + y"
        assert str(simple_parser.parse(text).without_groups()) == "{+, x, y}"


class TestSharedGrammar:

    def test_parsers_share_grammar(self, arithmetic_grammar):
        a = Parser(arithmetic_grammar)
        b = Parser(arithmetic_grammar)
        assert str(a.parse("x + y")) == str(b.parse("x + y"))

    def test_from_file(self, grammar_file):
        parser = Parser.from_file(grammar_file("left 2*\nleft 2+\n"))
        assert str(parser.parse("1+2*3")) == "{+, 1, {*, 2, 3}}"
