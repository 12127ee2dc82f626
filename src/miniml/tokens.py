"""Token kinds and token representation for the mini-ML lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    # Keywords
    LET = auto()
    REC = auto()
    IN = auto()
    FUN = auto()
    REF = auto()
    IF = auto()
    THEN = auto()
    ELSE = auto()
    FST = auto()
    SND = auto()
    TRUE = auto()
    FALSE = auto()
    CASE = auto()
    OF = auto()
    INL = auto()
    INR = auto()
    INT = auto()
    BOOL = auto()

    # Identifiers and literals
    IDENT = auto()
    LITERAL = auto()

    # Operators
    ASSIGN = auto()
    ARROW = auto()
    BANG = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    EQUAL_EQUAL = auto()
    NOT_EQUAL = auto()
    GREATER_EQUAL = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    LESS = auto()
    NOT = auto()
    AND = auto()
    OR = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    UNIT = auto()
    EQUAL = auto()
    COMMA = auto()
    COLON = auto()
    PIPE = auto()


@dataclass(frozen=True)
class Token:
    """A lexical unit. ``value`` is the name of an IDENT, the int of a
    LITERAL, and None for every fixed keyword or symbol."""

    kind: TokenKind
    value: str | int | None = None

    def __str__(self) -> str:
        if self.kind == TokenKind.IDENT:
            return f"identifier {self.value!r}"
        if self.kind == TokenKind.LITERAL:
            return f"literal {self.value}"
        return repr(SPELLINGS[self.kind])


@dataclass(frozen=True)
class PosToken:
    """A token paired with the offset of its first character."""

    token: Token
    pos: int

    @property
    def kind(self) -> TokenKind:
        return self.token.kind


KEYWORDS: dict[str, TokenKind] = {
    "let": TokenKind.LET,
    "rec": TokenKind.REC,
    "in": TokenKind.IN,
    "fun": TokenKind.FUN,
    "ref": TokenKind.REF,
    "if": TokenKind.IF,
    "then": TokenKind.THEN,
    "else": TokenKind.ELSE,
    "fst": TokenKind.FST,
    "snd": TokenKind.SND,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "case": TokenKind.CASE,
    "of": TokenKind.OF,
    "inl": TokenKind.INL,
    "inr": TokenKind.INR,
    "int": TokenKind.INT,
    "bool": TokenKind.BOOL,
}

SYMBOLS: dict[str, TokenKind] = {
    ":=": TokenKind.ASSIGN,
    "->": TokenKind.ARROW,
    "!": TokenKind.BANG,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "==": TokenKind.EQUAL_EQUAL,
    "/=": TokenKind.NOT_EQUAL,
    ">=": TokenKind.GREATER_EQUAL,
    "<=": TokenKind.LESS_EQUAL,
    ">": TokenKind.GREATER,
    "<": TokenKind.LESS,
    "~": TokenKind.NOT,
    "&&": TokenKind.AND,
    "||": TokenKind.OR,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "()": TokenKind.UNIT,
    "=": TokenKind.EQUAL,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    "|": TokenKind.PIPE,
}

SPELLINGS: dict[TokenKind, str] = {
    **{kind: word for word, kind in KEYWORDS.items()},
    **{kind: sym for sym, kind in SYMBOLS.items()},
    TokenKind.IDENT: "identifier",
    TokenKind.LITERAL: "integer literal",
}
