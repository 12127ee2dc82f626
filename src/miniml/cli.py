"""mini-ML command-line driver."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, NoReturn

import click

from miniml import __version__
from miniml.config import MinimlConfig, find_config, load_config
from miniml.errors import LexError, MinimlError
from miniml.formatter import format_expr, format_tree
from miniml.lexer import lex
from miniml.parser import parse_expression, parse_program


def _config_for(source: BinaryIO) -> MinimlConfig:
    name = getattr(source, "name", "-")
    start = Path(name) if isinstance(name, str) and name not in ("-", "<stdin>") else None
    return load_config(find_config(start))


def _read(source: BinaryIO) -> str:
    try:
        return source.read().decode("utf-8")
    except UnicodeDecodeError as e:
        raise LexError("source is not valid UTF-8", e.start) from e


def _fail(e: MinimlError) -> NoReturn:
    where = "end of input" if e.pos is None else f"offset {e.pos}"
    click.echo(f"error[{e.code}]: {e.message} ({where})", err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="miniml")
@click.option("-v", "--verbose", is_flag=True, help="Log lexer and parser activity.")
def main(verbose: bool) -> None:
    """The mini-ML front end: lexer and expression parser."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@main.command()
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--positions", is_flag=True, help="Show source offsets.")
def tokens(source: BinaryIO, positions: bool) -> None:
    """Print the token stream of SOURCE, one token per line."""
    config = _config_for(source)
    try:
        toks = lex(_read(source))
    except MinimlError as e:
        _fail(e)
    for tok in toks:
        line = tok.kind.name
        if tok.token.value is not None:
            line += f" {tok.token.value}"
        if positions or config.output.show_positions:
            line = f"{tok.pos:>6} {line}"
        click.echo(line)


@main.command()
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--tree", is_flag=True, help="Print the AST as an indented tree.")
@click.option("--positions", is_flag=True, help="Annotate tree nodes with source offsets.")
@click.option(
    "--allow-trailing", is_flag=True,
    help="Stop after the first expression instead of requiring end of input.",
)
def parse(source: BinaryIO, tree: bool, positions: bool, allow_trailing: bool) -> None:
    """Parse SOURCE as an expression and print it back."""
    config = _config_for(source)
    whole = config.parse.require_eof and not allow_trailing
    try:
        toks = lex(_read(source))
        expr = parse_program(toks) if whole else parse_expression(toks)
    except MinimlError as e:
        _fail(e)
    if tree:
        click.echo(format_tree(expr, show_positions=positions or config.output.show_positions))
    else:
        click.echo(format_expr(expr))
