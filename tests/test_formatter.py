"""Tests for the mini-ML formatter (AST pretty-printer)."""

from __future__ import annotations

import pytest

from miniml.ast_nodes import (
    ApplyExpr,
    BinaryExpr,
    BinOp,
    BoolType,
    FunType,
    IdentifierExpr,
    IntegerLit,
    IntType,
    ProdType,
    RefType,
    SumType,
    UnaryExpr,
    UnOp,
)
from miniml.formatter import format_expr, format_tree, format_type
from miniml.lexer import lex
from miniml.parser import parse_program


def parse(source: str):
    return parse_program(lex(source))


def _roundtrip(source: str) -> str:
    """Parse source and format back to text."""
    return format_expr(parse(source))


class TestFormatterCanonical:
    @pytest.mark.parametrize("source", [
        "1 + 2 * 3",
        "(1 + 2) * 3",
        "1 - 2 - 3",
        "1 - (2 - 3)",
        "f x y + 1",
        "f (g x) y",
        "(1, 2)",
        "~~x",
        "~(a || b)",
        "a := b := c",
        "(a := b) := c",
        "fst ref x",
        "!r + 1",
        "f -1",
        "x - -1",
        "inl (int -> int) x",
        "inr (int + bool) (1, 2)",
        "(fun (x : int) -> x) 3",
        "fun (x : int) -> fun (y : bool) -> y",
        "if a then 1 else 2",
        "let x : int = 5 in x * 2",
        "let rec f (n : int) : int = f (n - 1) in f 10",
        "case s of | inl a -> a | inr b -> b + 1",
        "f (if c then x else y)",
    ])
    def test_canonical_source_is_stable(self, source):
        assert _roundtrip(source) == source

    def test_redundant_parens_dropped(self):
        assert _roundtrip("((1)) + (2 * 3)") == "1 + 2 * 3"
        assert _roundtrip("(f x) y") == "f x y"

    def test_whitespace_normalized(self):
        assert _roundtrip("let  x:int=1 in(x,y)") == "let x : int = 1 in (x, y)"

    def test_postfix_printed_as_prefix(self):
        assert _roundtrip("x!") == "!x"
        assert _roundtrip("x ref") == "ref x"

    def test_grouped_left_operand_of_right_assoc_operator(self):
        assert _roundtrip("(a := b) := c") == "(a := b) := c"


class TestFormatterConstructed:
    def test_binding_form_as_operand(self):
        source = "1 + (let x : int = 1 in x)"
        assert _roundtrip(source) == source

    def test_not_as_function(self):
        expr = ApplyExpr(UnaryExpr(UnOp.NOT, IdentifierExpr("f", 0), 0), IdentifierExpr("x", 0), 0)
        assert format_expr(expr) == "(~f) x"

    def test_right_nested_same_tier(self):
        expr = BinaryExpr(
            IntegerLit(1, 0), BinOp.PLUS,
            BinaryExpr(IntegerLit(2, 0), BinOp.MINUS, IntegerLit(3, 0), 0), 0,
        )
        assert format_expr(expr) == "1 + (2 - 3)"

    @pytest.mark.parametrize("source", [
        "let rec f (n : int) : int = if n == 0 then 1 else n * f (n - 1) in f 5",
        "case inl (bool) 3 of | inl a -> (a, ()) | inr b -> (0, ())",
        "r := ~(!r && true) || x <= -3",
        "(fun (p : int * bool) -> snd p) (1, false)",
    ])
    def test_reparse_gives_equal_tree(self, source):
        tree = parse(source)
        assert parse(format_expr(tree)) == tree


class TestFormatType:
    def test_atoms(self):
        assert format_type(IntType()) == "int"
        assert format_type(BoolType()) == "bool"

    def test_arrow_domain_grouped(self):
        t = FunType(FunType(IntType(), IntType()), IntType())
        assert format_type(t) == "(int -> int) -> int"

    def test_right_nesting_ungrouped(self):
        t = FunType(IntType(), FunType(IntType(), BoolType()))
        assert format_type(t) == "int -> int -> bool"

    def test_mixed_levels(self):
        t = SumType(ProdType(IntType(), BoolType()), RefType(FunType(IntType(), IntType())))
        assert format_type(t) == "int * bool + ref (int -> int)"


class TestFormatTree:
    def test_tree_with_positions(self):
        assert format_tree(parse("1 + x")) == (
            "BinaryExpr + @2\n"
            "  IntegerLit value=1 @0\n"
            "  IdentifierExpr name='x' @4"
        )

    def test_tree_without_positions(self):
        assert format_tree(parse("inl (int) ()"), show_positions=False) == (
            "InlExpr other_type=int\n"
            "  UnitLit"
        )

    def test_tree_binding_form(self):
        out = format_tree(parse("fun (x : bool) -> x"), show_positions=False)
        assert out.splitlines() == [
            "LambdaExpr param='x' param_type=bool",
            "  IdentifierExpr name='x'",
        ]
