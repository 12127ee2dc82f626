"""AST-walking pretty-printer for mini-ML.

``format_expr`` emits source text with only the parentheses the grammar
needs, so that lexing and parsing the output gives back an equal tree.
``format_tree`` emits an indented node-per-line dump for debugging.
"""

from __future__ import annotations

from dataclasses import fields
from enum import Enum

from miniml.ast_nodes import (
    ApplyExpr,
    AssignExpr,
    BinaryExpr,
    BinOp,
    BooleanLit,
    BoolType,
    CaseExpr,
    DerefExpr,
    Expr,
    FstExpr,
    FunType,
    IdentifierExpr,
    IfExpr,
    InlExpr,
    InrExpr,
    IntegerLit,
    IntType,
    LambdaExpr,
    LetExpr,
    LetRecExpr,
    PairExpr,
    ProdType,
    RefExpr,
    RefType,
    SndExpr,
    SumType,
    Type,
    UnaryExpr,
    UnitLit,
    UnitType,
)
from miniml.parser import Precedence

# Binding strength of emitted text, weakest first. Binary operators sit
# between _BINDING and _PREFIX at their Precedence value.
_BINDING = 0
_PREFIX = 9
_APP = 10
_ATOM = 11

_BINOP_PRECEDENCE: dict[BinOp, Precedence] = {
    BinOp.OR: Precedence.OR,
    BinOp.AND: Precedence.AND,
    BinOp.EQ: Precedence.CMP,
    BinOp.NEQ: Precedence.CMP,
    BinOp.LT: Precedence.CMP,
    BinOp.GT: Precedence.CMP,
    BinOp.LE: Precedence.CMP,
    BinOp.GE: Precedence.CMP,
    BinOp.PLUS: Precedence.PLUS_MINUS,
    BinOp.MINUS: Precedence.PLUS_MINUS,
    BinOp.MUL: Precedence.MUL_DIV,
    BinOp.DIV: Precedence.MUL_DIV,
}

# Type levels: sum < product < arrow < ref < atom
_T_SUM = 1
_T_PROD = 2
_T_ARROW = 3
_T_REF = 4
_T_ATOM = 5


class ExprFormatter:
    """Format a parsed expression back to source text."""

    # ── Public API ─────────────────────────────────────────────

    def format(self, expr: Expr) -> str:
        return self._format_expr(expr)[0]

    def format_type(self, t: Type) -> str:
        return self._format_type(t)[0]

    # ── Expressions ────────────────────────────────────────────

    def _operand(self, expr: Expr, min_level: int) -> str:
        text, level = self._format_expr(expr)
        if level < min_level:
            return f"({text})"
        return text

    def _format_expr(self, expr: Expr) -> tuple[str, int]:
        if isinstance(expr, IntegerLit):
            return str(expr.value), _ATOM
        if isinstance(expr, BooleanLit):
            return ("true" if expr.value else "false"), _ATOM
        if isinstance(expr, UnitLit):
            return "()", _ATOM
        if isinstance(expr, IdentifierExpr):
            return expr.name, _ATOM
        if isinstance(expr, PairExpr):
            return f"({self.format(expr.first)}, {self.format(expr.second)})", _ATOM

        if isinstance(expr, RefExpr):
            return f"ref {self._operand(expr.expr, _ATOM)}", _ATOM
        if isinstance(expr, DerefExpr):
            return f"!{self._operand(expr.expr, _ATOM)}", _ATOM
        if isinstance(expr, FstExpr):
            return f"fst {self._operand(expr.expr, _ATOM)}", _ATOM
        if isinstance(expr, SndExpr):
            return f"snd {self._operand(expr.expr, _ATOM)}", _ATOM
        if isinstance(expr, (InlExpr, InrExpr)):
            keyword = "inl" if isinstance(expr, InlExpr) else "inr"
            return (
                f"{keyword} ({self.format_type(expr.other_type)}) "
                f"{self._operand(expr.expr, _ATOM)}"
            ), _ATOM

        if isinstance(expr, ApplyExpr):
            func = self._operand(expr.func, _APP)
            return f"{func} {self._operand(expr.arg, _ATOM)}", _APP
        if isinstance(expr, UnaryExpr):
            return f"~{self._operand(expr.operand, _PREFIX)}", _PREFIX
        if isinstance(expr, BinaryExpr):
            prec = _BINOP_PRECEDENCE[expr.op]
            left = self._operand(expr.left, prec)
            right = self._operand(expr.right, prec + 1)
            return f"{left} {expr.op.value} {right}", prec
        if isinstance(expr, AssignExpr):
            target = self._operand(expr.target, Precedence.ASSIGN + 1)
            value = self._operand(expr.value, Precedence.ASSIGN)
            return f"{target} := {value}", Precedence.ASSIGN

        return self._format_binding(expr), _BINDING

    def _format_binding(self, expr: Expr) -> str:
        if isinstance(expr, LambdaExpr):
            return (
                f"fun ({expr.param} : {self.format_type(expr.param_type)}) -> "
                f"{self.format(expr.body)}"
            )
        if isinstance(expr, IfExpr):
            return (
                f"if {self.format(expr.condition)} then {self.format(expr.then_branch)} "
                f"else {self.format(expr.else_branch)}"
            )
        if isinstance(expr, LetExpr):
            return (
                f"let {expr.name} : {self.format_type(expr.var_type)} = "
                f"{self.format(expr.value)} in {self.format(expr.body)}"
            )
        if isinstance(expr, LetRecExpr):
            return (
                f"let rec {expr.name} ({expr.param} : {self.format_type(expr.param_type)})"
                f" : {self.format_type(expr.return_type)} = "
                f"{self.format(expr.value)} in {self.format(expr.body)}"
            )
        if isinstance(expr, CaseExpr):
            return (
                f"case {self.format(expr.scrutinee)} of"
                f" | inl {expr.left_name} -> {self.format(expr.left_body)}"
                f" | inr {expr.right_name} -> {self.format(expr.right_body)}"
            )
        raise TypeError(f"not an expression node: {expr!r}")

    # ── Types ──────────────────────────────────────────────────

    def _type_operand(self, t: Type, min_level: int) -> str:
        text, level = self._format_type(t)
        if level < min_level:
            return f"({text})"
        return text

    def _format_type(self, t: Type) -> tuple[str, int]:
        if isinstance(t, UnitType):
            return "()", _T_ATOM
        if isinstance(t, IntType):
            return "int", _T_ATOM
        if isinstance(t, BoolType):
            return "bool", _T_ATOM
        if isinstance(t, RefType):
            return f"ref {self._type_operand(t.pointee, _T_REF)}", _T_REF
        if isinstance(t, FunType):
            domain = self._type_operand(t.domain, _T_ARROW + 1)
            return f"{domain} -> {self._type_operand(t.codomain, _T_ARROW)}", _T_ARROW
        if isinstance(t, ProdType):
            left = self._type_operand(t.left, _T_PROD + 1)
            return f"{left} * {self._type_operand(t.right, _T_PROD)}", _T_PROD
        if isinstance(t, SumType):
            left = self._type_operand(t.left, _T_SUM + 1)
            return f"{left} + {self._type_operand(t.right, _T_SUM)}", _T_SUM
        raise TypeError(f"not a type node: {t!r}")


def format_expr(expr: Expr) -> str:
    return ExprFormatter().format(expr)


def format_type(t: Type) -> str:
    return ExprFormatter().format_type(t)


def format_tree(expr: Expr, *, show_positions: bool = True) -> str:
    """One line per node, children indented beneath their parent."""
    lines: list[str] = []
    _tree_lines(expr, 0, show_positions, lines)
    return "\n".join(lines)


def _tree_lines(node: Expr, depth: int, show_positions: bool, lines: list[str]) -> None:
    attrs: list[str] = []
    children: list[Expr] = []
    for f in fields(node):
        if f.name == "pos":
            continue
        value = getattr(node, f.name)
        if isinstance(value, Enum):
            attrs.append(str(value.value))
        elif isinstance(value, (UnitType, IntType, BoolType, FunType, ProdType, SumType, RefType)):
            attrs.append(f"{f.name}={format_type(value)}")
        elif isinstance(value, (str, int, bool)):
            attrs.append(f"{f.name}={value!r}")
        else:
            children.append(value)
    header = type(node).__name__
    if attrs:
        header += " " + " ".join(attrs)
    if show_positions:
        header += f" @{node.pos}"
    lines.append("  " * depth + header)
    for child in children:
        _tree_lines(child, depth + 1, show_positions, lines)
