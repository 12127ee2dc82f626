"""Sequential reader over a token list with transactional backtracking."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from miniml.errors import ParseError
from miniml.tokens import SPELLINGS, PosToken, Token, TokenKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _Transaction:
    index: int
    cut: bool = False


class TokenCursor:
    """Read-only view over a token sequence.

    The read index is the only mutable state touched while parsing, so
    restoring it is enough to undo a failed attempt. ``begin``/``commit``/
    ``rollback`` nest; ``try_parse`` runs inside a transaction of its own and
    is the only place a ParseError may be caught.
    """

    def __init__(self, tokens: Sequence[PosToken]) -> None:
        self.tokens = tokens
        self.index = 0
        self._transactions: list[_Transaction] = []

    # ── Token access ─────────────────────────────────────────────

    def peek(self) -> Token | None:
        """Current token, or None at end of input."""
        if self.index < len(self.tokens):
            return self.tokens[self.index].token
        return None

    def peek_kind(self) -> TokenKind | None:
        tok = self.peek()
        return tok.kind if tok is not None else None

    def at(self, *kinds: TokenKind) -> bool:
        return self.peek_kind() in kinds

    def at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def advance(self) -> Token | None:
        """Return the current token and move past it. Safe past the end."""
        tok = self.peek()
        if tok is not None:
            self.index += 1
        return tok

    def current_position(self) -> int | None:
        """Offset of the next unread token, or None at end of input."""
        if self.index < len(self.tokens):
            return self.tokens[self.index].pos
        return None

    def consume_if(self, expected: TokenKind) -> bool:
        if self.peek_kind() == expected:
            self.index += 1
            return True
        return False

    def expect(self, expected: TokenKind) -> Token:
        tok = self.peek()
        if tok is not None and tok.kind == expected:
            self.index += 1
            return tok
        raise self.error_expected(repr(SPELLINGS[expected]))

    def expect_ident(self) -> str:
        tok = self.peek()
        if tok is not None and tok.kind == TokenKind.IDENT:
            self.index += 1
            return tok.value
        raise self.error_expected("identifier")

    # ── Errors ───────────────────────────────────────────────────

    def error_expected(self, expected: str) -> ParseError:
        tok = self.peek()
        if tok is None:
            return ParseError(
                f"unexpected end of input, expected {expected}", None,
                expected=expected, found="end of input",
            )
        return ParseError(
            f"expected {expected}, found {tok}", self.current_position(),
            expected=expected, found=str(tok),
        )

    def error_unexpected(self) -> ParseError:
        tok = self.peek()
        if tok is None:
            return ParseError("unexpected end of input", None, found="end of input")
        return ParseError(
            f"unexpected token {tok}", self.current_position(), found=str(tok),
        )

    # ── Transactions ─────────────────────────────────────────────

    def begin(self) -> None:
        self._transactions.append(_Transaction(self.index))

    def commit(self) -> None:
        self._transactions.pop()

    def rollback(self) -> None:
        self.index = self._transactions.pop().index

    def cut(self) -> None:
        """Commit the innermost open transaction to the current production.

        A failure after a cut is a genuine syntax error: ``try_parse``
        re-raises it instead of trying the next alternative.
        """
        if self._transactions:
            self._transactions[-1].cut = True

    def try_parse(self, parse: Callable[[TokenCursor], T]) -> T | None:
        """Run ``parse``; on failure restore the read position and return None."""
        self.begin()
        transaction = self._transactions[-1]
        try:
            return parse(self)
        except ParseError as e:
            if transaction.cut or e.committed:
                e.committed = True
                raise
            self.index = transaction.index
            logger.debug("backtracked to token %d after: %s", transaction.index, e)
            return None
        finally:
            # Popped on every exit, including non-ParseError exceptions.
            self._transactions.pop()
