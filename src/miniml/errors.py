"""Structured lexing and parsing errors.

Errors carry an offset into the source text (``None`` meaning end of
input) and never a rendered message with line/column context; turning a
position into a source snippet is left to the caller.
"""

from __future__ import annotations


class MinimlError(Exception):
    """Base class for every error raised while reading mini-ML source."""

    code = "E000"

    def __init__(self, message: str, pos: int | None) -> None:
        self.message = message
        self.pos = pos
        where = "end of input" if pos is None else f"offset {pos}"
        super().__init__(f"{message} at {where}")


class LexError(MinimlError):
    """Unexpected character or out-of-range integer literal."""

    code = "E100"

    def __init__(self, message: str, pos: int, char: str | None = None) -> None:
        self.char = char
        super().__init__(message, pos)


class ParseError(MinimlError):
    """Unexpected token, expected-token mismatch or unexpected end of input."""

    code = "E200"

    def __init__(
        self,
        message: str,
        pos: int | None,
        *,
        expected: str | None = None,
        found: str | None = None,
    ) -> None:
        self.expected = expected
        self.found = found
        # Set when the failure happened after a production committed; such
        # errors pass through every enclosing backtracking attempt.
        self.committed = False
        super().__init__(message, pos)

    @property
    def end_of_input(self) -> bool:
        return self.pos is None
