"""Tests for the token cursor and its backtracking transactions."""

from __future__ import annotations

import pytest

from miniml.cursor import TokenCursor
from miniml.errors import ParseError
from miniml.lexer import lex
from miniml.tokens import Token, TokenKind


def cursor(source: str) -> TokenCursor:
    return TokenCursor(lex(source))


class TestCursorAccess:
    def test_peek_does_not_advance(self):
        cur = cursor("x y")
        assert cur.peek() == Token(TokenKind.IDENT, "x")
        assert cur.peek() == Token(TokenKind.IDENT, "x")
        assert cur.index == 0

    def test_advance_returns_current(self):
        cur = cursor("x y")
        assert cur.advance() == Token(TokenKind.IDENT, "x")
        assert cur.advance() == Token(TokenKind.IDENT, "y")

    def test_advance_past_end_is_safe(self):
        cur = cursor("x")
        cur.advance()
        for _ in range(3):
            assert cur.advance() is None
            assert cur.peek() is None
        assert cur.at_end()

    def test_current_position(self):
        cur = cursor("ab   cd")
        assert cur.current_position() == 0
        cur.advance()
        assert cur.current_position() == 5
        cur.advance()
        assert cur.current_position() is None

    def test_consume_if(self):
        cur = cursor("( x")
        assert not cur.consume_if(TokenKind.RPAREN)
        assert cur.index == 0
        assert cur.consume_if(TokenKind.LPAREN)
        assert cur.index == 1

    def test_consume_if_at_end(self):
        cur = cursor("")
        assert not cur.consume_if(TokenKind.LPAREN)


class TestCursorExpect:
    def test_expect_match(self):
        cur = cursor(":=")
        assert cur.expect(TokenKind.ASSIGN) == Token(TokenKind.ASSIGN)
        assert cur.at_end()

    def test_expect_mismatch(self):
        cur = cursor("x  =")
        cur.advance()
        with pytest.raises(ParseError) as exc:
            cur.expect(TokenKind.COLON)
        err = exc.value
        assert err.pos == 3
        assert err.expected == "':'"
        assert err.found == "'='"
        assert cur.index == 1

    def test_expect_at_end(self):
        cur = cursor("")
        with pytest.raises(ParseError) as exc:
            cur.expect(TokenKind.RPAREN)
        assert exc.value.end_of_input
        assert exc.value.pos is None
        assert "unexpected end of input" in exc.value.message

    def test_expect_ident(self):
        cur = cursor("name let")
        assert cur.expect_ident() == "name"
        with pytest.raises(ParseError) as exc:
            cur.expect_ident()
        assert exc.value.expected == "identifier"
        assert exc.value.pos == 5


def _take(n: int):
    def parse(cur: TokenCursor) -> int:
        for _ in range(n):
            cur.advance()
        return n
    return parse


def _fail_after(n: int, *, cut: bool = False):
    def parse(cur: TokenCursor) -> int:
        for _ in range(n):
            cur.advance()
        if cut:
            cur.cut()
        raise cur.error_unexpected()
    return parse


class TestCursorTransactions:
    def test_begin_rollback(self):
        cur = cursor("a b c")
        cur.begin()
        cur.advance()
        cur.advance()
        cur.rollback()
        assert cur.index == 0

    def test_begin_commit(self):
        cur = cursor("a b c")
        cur.begin()
        cur.advance()
        cur.commit()
        assert cur.index == 1

    def test_nested(self):
        cur = cursor("a b c")
        cur.begin()
        cur.advance()
        cur.begin()
        cur.advance()
        cur.rollback()
        assert cur.index == 1
        cur.rollback()
        assert cur.index == 0

    def test_try_parse_success(self):
        cur = cursor("a b c")
        assert cur.try_parse(_take(2)) == 2
        assert cur.index == 2

    def test_try_parse_failure_restores_exactly(self):
        cur = cursor("a b c")
        cur.advance()
        assert cur.try_parse(_fail_after(2)) is None
        assert cur.index == 1
        assert cur.peek() == Token(TokenKind.IDENT, "b")

    def test_try_parse_leaves_no_open_transaction(self):
        cur = cursor("a b")
        cur.try_parse(_fail_after(1))
        cur.try_parse(_take(1))
        assert cur._transactions == []

    def test_cut_reraises(self):
        cur = cursor("a b c")
        with pytest.raises(ParseError) as exc:
            cur.try_parse(_fail_after(1, cut=True))
        assert exc.value.committed
        assert exc.value.pos == 2

    def test_committed_error_passes_outer_attempt(self):
        cur = cursor("a b c")

        def outer(c: TokenCursor) -> int:
            c.advance()
            return c.try_parse(_fail_after(1, cut=True))

        with pytest.raises(ParseError) as exc:
            cur.try_parse(outer)
        assert exc.value.committed

    def test_cut_outside_transaction_is_noop(self):
        cur = cursor("a")
        cur.cut()
        assert cur.try_parse(_fail_after(1)) is None

    def test_transaction_popped_on_other_exceptions(self):
        cur = cursor("a b")

        def boom(c: TokenCursor) -> int:
            c.advance()
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            cur.try_parse(boom)
        assert cur._transactions == []
