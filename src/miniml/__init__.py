"""mini-ML front end: lexer, expression parser and AST."""

from __future__ import annotations

__version__ = "0.1.0"

from miniml.errors import LexError, MinimlError, ParseError
from miniml.lexer import lex
from miniml.parser import parse_expression, parse_program
from miniml.type_parser import parse_type

__all__ = [
    "LexError",
    "MinimlError",
    "ParseError",
    "__version__",
    "lex",
    "parse_expression",
    "parse_program",
    "parse_type",
]
