"""Recursive descent parser for type annotations.

    Type    ::= Prod ('+' Type)?
    Prod    ::= Arrow ('*' Prod)?
    Arrow   ::= RefT ('->' Arrow)?
    RefT    ::= 'ref' RefT | Atom
    Atom    ::= '()' | 'int' | 'bool' | '(' Type ')'

Every binary level is right-associative.
"""

from __future__ import annotations

from miniml.ast_nodes import (
    BoolType,
    FunType,
    IntType,
    ProdType,
    RefType,
    SumType,
    Type,
    UnitType,
)
from miniml.cursor import TokenCursor
from miniml.tokens import TokenKind


def parse_type(cursor: TokenCursor) -> Type:
    """Parse one type, leaving the cursor just past it."""
    left = _parse_product(cursor)
    if cursor.consume_if(TokenKind.PLUS):
        return SumType(left, parse_type(cursor))
    return left


def _parse_product(cursor: TokenCursor) -> Type:
    left = _parse_arrow(cursor)
    if cursor.consume_if(TokenKind.STAR):
        return ProdType(left, _parse_product(cursor))
    return left


def _parse_arrow(cursor: TokenCursor) -> Type:
    left = _parse_ref(cursor)
    if cursor.consume_if(TokenKind.ARROW):
        return FunType(left, _parse_arrow(cursor))
    return left


def _parse_ref(cursor: TokenCursor) -> Type:
    if cursor.consume_if(TokenKind.REF):
        return RefType(_parse_ref(cursor))
    return _parse_atom(cursor)


def _parse_atom(cursor: TokenCursor) -> Type:
    match cursor.peek_kind():
        case TokenKind.UNIT:
            cursor.advance()
            return UnitType()
        case TokenKind.INT:
            cursor.advance()
            return IntType()
        case TokenKind.BOOL:
            cursor.advance()
            return BoolType()
        case TokenKind.LPAREN:
            cursor.advance()
            inner = parse_type(cursor)
            cursor.expect(TokenKind.RPAREN)
            return inner
    raise cursor.error_expected("a type")
