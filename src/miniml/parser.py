"""Parser for mini-ML expressions.

Binding forms (``fun``, ``if``, ``let``, ``let rec``, ``case``) are
recognized by their leading keyword. Everything else goes through a
precedence climbing loop over three tiers: prefix ``~``, application by
juxtaposition, and the keyword-prefixed/atomic forms.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import IntEnum

from miniml.ast_nodes import (
    ApplyExpr,
    AssignExpr,
    BinaryExpr,
    BinOp,
    BooleanLit,
    CaseExpr,
    DerefExpr,
    Expr,
    FstExpr,
    IdentifierExpr,
    IfExpr,
    InlExpr,
    InrExpr,
    IntegerLit,
    LambdaExpr,
    LetExpr,
    LetRecExpr,
    PairExpr,
    RefExpr,
    SndExpr,
    UnaryExpr,
    UnitLit,
    UnOp,
)
from miniml.cursor import TokenCursor
from miniml.errors import ParseError
from miniml.tokens import PosToken, TokenKind
from miniml.type_parser import parse_type

logger = logging.getLogger(__name__)


class Precedence(IntEnum):
    """Operator tiers, weakest binding first."""

    ZERO = 0
    ASSIGN = 1
    ARROW = 2  # reserved: '->' never appears infix in an expression
    OR = 3
    AND = 4
    CMP = 5
    PLUS_MINUS = 6
    MUL_DIV = 7
    REF_DEREF = 8


_PRECEDENCE: dict[TokenKind, Precedence] = {
    TokenKind.ASSIGN: Precedence.ASSIGN,
    TokenKind.ARROW: Precedence.ARROW,
    TokenKind.OR: Precedence.OR,
    TokenKind.AND: Precedence.AND,
    TokenKind.EQUAL_EQUAL: Precedence.CMP,
    TokenKind.NOT_EQUAL: Precedence.CMP,
    TokenKind.GREATER_EQUAL: Precedence.CMP,
    TokenKind.LESS_EQUAL: Precedence.CMP,
    TokenKind.GREATER: Precedence.CMP,
    TokenKind.LESS: Precedence.CMP,
    TokenKind.PLUS: Precedence.PLUS_MINUS,
    TokenKind.MINUS: Precedence.PLUS_MINUS,
    TokenKind.STAR: Precedence.MUL_DIV,
    TokenKind.SLASH: Precedence.MUL_DIV,
    TokenKind.REF: Precedence.REF_DEREF,
    TokenKind.BANG: Precedence.REF_DEREF,
}

_BINARY_OPS: dict[TokenKind, BinOp] = {
    TokenKind.OR: BinOp.OR,
    TokenKind.AND: BinOp.AND,
    TokenKind.EQUAL_EQUAL: BinOp.EQ,
    TokenKind.NOT_EQUAL: BinOp.NEQ,
    TokenKind.GREATER_EQUAL: BinOp.GE,
    TokenKind.LESS_EQUAL: BinOp.LE,
    TokenKind.GREATER: BinOp.GT,
    TokenKind.LESS: BinOp.LT,
    TokenKind.PLUS: BinOp.PLUS,
    TokenKind.MINUS: BinOp.MINUS,
    TokenKind.STAR: BinOp.MUL,
    TokenKind.SLASH: BinOp.DIV,
}

# Tokens that can begin an argument in an application chain.
_ATOM_START = frozenset({
    TokenKind.REF,
    TokenKind.BANG,
    TokenKind.FST,
    TokenKind.SND,
    TokenKind.INL,
    TokenKind.INR,
    TokenKind.TRUE,
    TokenKind.FALSE,
    TokenKind.LITERAL,
    TokenKind.UNIT,
    TokenKind.IDENT,
    TokenKind.LPAREN,
})


class Parser:
    """Parses a list of position-tracked tokens into a mini-ML AST."""

    def __init__(self, tokens: Sequence[PosToken]) -> None:
        self.cursor = TokenCursor(tokens)

    # ── Entry points ─────────────────────────────────────────────

    def parse_program(self) -> Expr:
        """Parse one expression and require that it spans all the input."""
        logger.debug("parsing program of %d tokens", len(self.cursor.tokens))
        expr = self.parse_expression()
        tok = self.cursor.peek()
        if tok is not None:
            raise ParseError(
                f"unexpected trailing input: {tok}", self.cursor.current_position(),
                expected="end of input", found=str(tok),
            )
        return expr

    def parse_expression(self) -> Expr:
        """Parse one complete expression, leaving the cursor just past it.

        Nesting deeper than the interpreter's recursion limit is reported
        as a ParseError at the token where parsing gave up.
        """
        try:
            return self._parse_expr()
        except RecursionError as e:
            raise ParseError(
                "expression nested too deeply", self.cursor.current_position(),
            ) from e

    def _parse_expr(self) -> Expr:
        match self.cursor.peek_kind():
            case TokenKind.FUN:
                return self._parse_lambda()
            case TokenKind.IF:
                return self._parse_if()
            case TokenKind.LET:
                return self._parse_let()
            case TokenKind.CASE:
                return self._parse_case()
        return self._parse_subexpr(Precedence.ZERO)

    # ── Binding forms ────────────────────────────────────────────

    def _parse_lambda(self) -> LambdaExpr:
        cur = self.cursor
        pos = cur.current_position()
        cur.advance()  # 'fun'
        cur.cut()
        cur.expect(TokenKind.LPAREN)
        param = cur.expect_ident()
        cur.expect(TokenKind.COLON)
        param_type = parse_type(cur)
        cur.expect(TokenKind.RPAREN)
        cur.expect(TokenKind.ARROW)
        body = self._parse_expr()
        return LambdaExpr(param, param_type, body, pos)

    def _parse_if(self) -> IfExpr:
        cur = self.cursor
        pos = cur.current_position()
        cur.advance()  # 'if'
        cur.cut()
        condition = self._parse_expr()
        cur.expect(TokenKind.THEN)
        then_branch = self._parse_expr()
        cur.expect(TokenKind.ELSE)
        else_branch = self._parse_expr()
        return IfExpr(condition, then_branch, else_branch, pos)

    def _parse_let(self) -> LetExpr | LetRecExpr:
        cur = self.cursor
        pos = cur.current_position()
        cur.advance()  # 'let'
        cur.cut()
        if cur.consume_if(TokenKind.REC):
            return self._parse_let_rec(pos)
        name = cur.expect_ident()
        cur.expect(TokenKind.COLON)
        var_type = parse_type(cur)
        cur.expect(TokenKind.EQUAL)
        value = self._parse_expr()
        cur.expect(TokenKind.IN)
        body = self._parse_expr()
        return LetExpr(name, var_type, value, body, pos)

    def _parse_let_rec(self, pos: int) -> LetRecExpr:
        cur = self.cursor
        name = cur.expect_ident()
        cur.expect(TokenKind.LPAREN)
        param = cur.expect_ident()
        cur.expect(TokenKind.COLON)
        param_type = parse_type(cur)
        cur.expect(TokenKind.RPAREN)
        cur.expect(TokenKind.COLON)
        return_type = parse_type(cur)
        cur.expect(TokenKind.EQUAL)
        value = self._parse_expr()
        cur.expect(TokenKind.IN)
        body = self._parse_expr()
        return LetRecExpr(name, param, param_type, return_type, value, body, pos)

    def _parse_case(self) -> CaseExpr:
        cur = self.cursor
        pos = cur.current_position()
        cur.advance()  # 'case'
        cur.cut()
        scrutinee = self._parse_expr()
        cur.expect(TokenKind.OF)
        cur.expect(TokenKind.PIPE)
        cur.expect(TokenKind.INL)
        left_name = cur.expect_ident()
        cur.expect(TokenKind.ARROW)
        left_body = self._parse_expr()
        cur.expect(TokenKind.PIPE)
        cur.expect(TokenKind.INR)
        right_name = cur.expect_ident()
        cur.expect(TokenKind.ARROW)
        right_body = self._parse_expr()
        return CaseExpr(scrutinee, left_name, left_body, right_name, right_body, pos)

    # ── Precedence climbing ──────────────────────────────────────

    def _parse_subexpr(self, precedence: Precedence) -> Expr:
        """Parse operators until one binds no tighter than ``precedence``."""
        expr = self._parse_prefix()
        while True:
            next_precedence = self._next_precedence()
            if precedence >= next_precedence:
                break
            expr = self._parse_infix(expr, next_precedence)
        return expr

    def _next_precedence(self) -> Precedence:
        return _PRECEDENCE.get(self.cursor.peek_kind(), Precedence.ZERO)

    def _parse_infix(self, left: Expr, precedence: Precedence) -> Expr:
        cur = self.cursor
        kind = cur.peek_kind()
        if kind == TokenKind.ARROW:
            raise cur.error_unexpected()
        pos = cur.current_position()
        cur.advance()
        if kind in _BINARY_OPS:
            right = self._parse_subexpr(precedence)
            return BinaryExpr(left, _BINARY_OPS[kind], right, pos)
        if kind == TokenKind.ASSIGN:
            # Right-associative: a := b := c is a := (b := c)
            value = self._parse_subexpr(Precedence(precedence - 1))
            return AssignExpr(left, value, pos)
        if kind == TokenKind.REF:
            return RefExpr(left, pos)
        return DerefExpr(left, pos)

    def _parse_prefix(self) -> Expr:
        cur = self.cursor
        pos = cur.current_position()
        if cur.consume_if(TokenKind.NOT):
            operand = self._parse_prefix()
            return UnaryExpr(UnOp.NOT, operand, pos)
        return self._parse_application()

    def _parse_application(self) -> Expr:
        """Parse ``f a b ...`` and fold it left: ``((f a) b) ...``."""
        func = self._parse_unary()
        while self.cursor.at(*_ATOM_START):
            arg = self.cursor.try_parse(lambda _: self._parse_unary())
            if arg is None:
                break
            func = ApplyExpr(func, arg, func.pos)
        return func

    # ── Keyword-prefixed and atomic forms ────────────────────────

    def _parse_unary(self) -> Expr:
        cur = self.cursor
        pos = cur.current_position()
        tok = cur.peek()
        if tok is None:
            raise cur.error_unexpected()

        match tok.kind:
            case TokenKind.REF:
                cur.advance()
                return RefExpr(self._parse_unary(), pos)
            case TokenKind.BANG:
                cur.advance()
                return DerefExpr(self._parse_unary(), pos)
            case TokenKind.FST:
                cur.advance()
                cur.cut()
                return FstExpr(self._parse_unary(), pos)
            case TokenKind.SND:
                cur.advance()
                cur.cut()
                return SndExpr(self._parse_unary(), pos)
            case TokenKind.INL | TokenKind.INR:
                cur.advance()
                cur.cut()
                cur.expect(TokenKind.LPAREN)
                other_type = parse_type(cur)
                cur.expect(TokenKind.RPAREN)
                inner = self._parse_unary()
                if tok.kind == TokenKind.INL:
                    return InlExpr(other_type, inner, pos)
                return InrExpr(other_type, inner, pos)
            case TokenKind.TRUE:
                cur.advance()
                return BooleanLit(True, pos)
            case TokenKind.FALSE:
                cur.advance()
                return BooleanLit(False, pos)
            case TokenKind.LITERAL:
                cur.advance()
                return IntegerLit(tok.value, pos)
            case TokenKind.UNIT:
                cur.advance()
                return UnitLit(pos)
            case TokenKind.IDENT:
                cur.advance()
                return IdentifierExpr(tok.value, pos)
            case TokenKind.LPAREN:
                return self._parse_parenthesized()

        raise cur.error_unexpected()

    def _parse_parenthesized(self) -> Expr:
        """Parse ``(e)`` (unwrapped to ``e``) or the pair ``(e1, e2)``."""
        cur = self.cursor
        pos = cur.current_position()
        cur.advance()  # '('
        cur.cut()
        first = self._parse_expr()
        if cur.consume_if(TokenKind.COMMA):
            second = self._parse_expr()
            cur.expect(TokenKind.RPAREN)
            return PairExpr(first, second, pos)
        if cur.consume_if(TokenKind.RPAREN):
            return first
        raise cur.error_expected("',' or ')'")


def parse_expression(tokens: Sequence[PosToken]) -> Expr:
    """Parse one expression from ``tokens``; trailing tokens are ignored."""
    return Parser(tokens).parse_expression()


def parse_program(tokens: Sequence[PosToken]) -> Expr:
    """Parse ``tokens`` as a whole program, rejecting trailing input."""
    return Parser(tokens).parse_program()
