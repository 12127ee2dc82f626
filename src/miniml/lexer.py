"""Lexer for mini-ML.

A single left-to-right scan with one character of lookahead. Lexing is
all-or-nothing: the first bad character raises LexError and no tokens are
returned.
"""

from __future__ import annotations

import logging

from miniml.errors import LexError
from miniml.tokens import KEYWORDS, PosToken, Token, TokenKind

logger = logging.getLogger(__name__)

_INT_MIN = -(2 ** 63)
_INT_MAX = 2 ** 63 - 1

# ASCII whitespace; vertical tab is not whitespace.
_WHITESPACE = frozenset(" \t\n\r\f")

_SINGLE: dict[str, TokenKind] = {
    "!": TokenKind.BANG,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "*": TokenKind.STAR,
    "+": TokenKind.PLUS,
    ",": TokenKind.COMMA,
    "/": TokenKind.SLASH,
    ":": TokenKind.COLON,
    "<": TokenKind.LESS,
    "=": TokenKind.EQUAL,
    ">": TokenKind.GREATER,
    "|": TokenKind.PIPE,
    "~": TokenKind.NOT,
    "-": TokenKind.MINUS,
}

# First character -> (second character, two-character kind)
_DOUBLE: dict[str, tuple[str, TokenKind]] = {
    "&": ("&", TokenKind.AND),
    "(": (")", TokenKind.UNIT),
    "/": ("=", TokenKind.NOT_EQUAL),
    ":": ("=", TokenKind.ASSIGN),
    "<": ("=", TokenKind.LESS_EQUAL),
    "=": ("=", TokenKind.EQUAL_EQUAL),
    ">": ("=", TokenKind.GREATER_EQUAL),
    "|": ("|", TokenKind.OR),
    "-": (">", TokenKind.ARROW),
}


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ident_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == "_")


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


class Lexer:
    """Tokenizes mini-ML source text."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.tokens: list[PosToken] = []

    def lex(self) -> list[PosToken]:
        """Tokenize the entire source. Each call rescans and returns a new list."""
        self.pos = 0
        self.tokens = []
        while self.pos < len(self.source):
            start = self.pos
            ch = self._advance()
            if ch in _WHITESPACE:
                continue
            self.tokens.append(PosToken(self._lex_token(ch, start), start))
        logger.debug("lexed %d tokens from %d characters", len(self.tokens), len(self.source))
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return "\0"

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def _consume(self, expected: str) -> bool:
        """Advance past the next character only if it is ``expected``."""
        if self.pos < len(self.source) and self.source[self.pos] == expected:
            self.pos += 1
            return True
        return False

    def _retreat(self) -> None:
        """Step back over the character just consumed."""
        self.pos -= 1

    # ── Tokens ───────────────────────────────────────────────────

    def _lex_token(self, ch: str, start: int) -> Token:
        if ch in _DOUBLE:
            second, kind = _DOUBLE[ch]
            if self._consume(second):
                return Token(kind)
        if ch == "-" and _is_digit(self._peek()):
            self._retreat()
            return self._lex_literal(start)
        if ch in _SINGLE:
            return Token(_SINGLE[ch])
        if _is_ident_start(ch):
            self._retreat()
            return self._lex_identifier()
        if _is_digit(ch):
            self._retreat()
            return self._lex_literal(start)
        raise LexError(f"unexpected character: {ch!r}", start, char=ch)

    def _lex_identifier(self) -> Token:
        begin = self.pos
        while _is_ident_char(self._peek()):
            self.pos += 1
        word = self.source[begin:self.pos]
        if word in KEYWORDS:
            return Token(KEYWORDS[word])
        return Token(TokenKind.IDENT, word)

    def _lex_literal(self, start: int) -> Token:
        begin = self.pos
        self._consume("-")
        while _is_digit(self._peek()):
            self.pos += 1
        value = int(self.source[begin:self.pos])
        if not _INT_MIN <= value <= _INT_MAX:
            raise LexError(
                f"integer literal out of range: {self.source[begin:self.pos]}", start,
            )
        return Token(TokenKind.LITERAL, value)


def lex(source: str) -> list[PosToken]:
    """Tokenize ``source``; raises LexError on the first bad character."""
    return Lexer(source).lex()
