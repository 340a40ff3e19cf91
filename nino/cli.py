"""
Command-line front end.

    nino run FILE      execute a program
    nino parse FILE    show the parsed items
    nino mermaid CODE  flowchart of an expression
    nino repl          interactive session
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from nino import __version__, config
from nino.builtin.env_builtin import format_value
from nino.debug_utils.mermaid import render_mermaid
from nino.debug_utils.pprint import pprint_expr, pprint_items
from nino.diagnostics import format_runtime_error, format_syntax_error
from nino.errors import NinoRuntimeError, NinoSyntaxError
from nino.interpreter import Interpreter
from nino.types.ast import Expression, FunctionDeclaration

logger = logging.getLogger(__name__)

app = typer.Typer(help="Nino expression language interpreter", no_args_is_help=True)

PROMPT = "nino> "


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else config.get_log_level()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _apply_recursion_limit() -> None:
    limit = config.get_recursion_limit()
    if limit is not None:
        logger.debug("recursion limit set to %d", limit)
        sys.setrecursionlimit(limit)


def _read_source(file: Path) -> str:
    try:
        return file.read_text()
    except OSError as e:
        typer.echo(f"Cannot read {file}: {e.strerror}", err=True)
        raise typer.Exit(code=1)


def _show(value: Expression) -> str:
    if isinstance(value, FunctionDeclaration):
        return pprint_expr(value)
    return format_value(value)


@app.command("run")
def run_file(
    file: Path = typer.Argument(..., help="Nino source file"),
    strict_types: bool = typer.Option(
        False, "--strict-types", help="Check each declaration against its declared type"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
    no_color: bool = typer.Option(False, "--no-color", help="Plain diagnostics"),
) -> None:
    """Execute a Nino program."""
    _configure_logging(verbose)
    _apply_recursion_limit()
    color = config.use_color() and not no_color
    source = _read_source(file)

    interpreter = Interpreter(strict_types=strict_types or config.get_strict_types())
    try:
        items = interpreter.parse(source)
    except NinoSyntaxError as e:
        typer.echo(format_syntax_error(source, e, color), err=True)
        raise typer.Exit(code=1)

    try:
        interpreter.run(items)
    except NinoRuntimeError as e:
        typer.echo(format_runtime_error(e, color), err=True)
        raise typer.Exit(code=1)


@app.command("parse")
def parse_file(
    file: Path = typer.Argument(..., help="Nino source file"),
    no_color: bool = typer.Option(False, "--no-color", help="Plain output"),
) -> None:
    """Print the parsed program as an indented tree."""
    color = config.use_color() and not no_color
    source = _read_source(file)
    try:
        items = Interpreter(strict_types=False).parse(source)
    except NinoSyntaxError as e:
        typer.echo(format_syntax_error(source, e, color), err=True)
        raise typer.Exit(code=1)
    typer.echo(pprint_items(items))


@app.command("mermaid")
def mermaid(code: str = typer.Argument(..., help="An expression, e.g. '1 + 2 * 3'")) -> None:
    """Print a Mermaid flowchart of an expression tree."""
    try:
        chart = render_mermaid(code)
    except NinoSyntaxError as e:
        typer.echo(format_syntax_error(code, e, config.use_color()), err=True)
        raise typer.Exit(code=1)
    typer.echo(chart)


@app.command("repl")
def repl(
    strict_types: bool = typer.Option(False, "--strict-types"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Read-eval-print loop; declarations persist between lines."""
    _configure_logging(verbose)
    _apply_recursion_limit()
    color = config.use_color()
    interpreter = Interpreter(strict_types=strict_types or config.get_strict_types())
    typer.echo(f"nino {__version__} (Ctrl-D to exit)")

    while True:
        try:
            line = input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            typer.echo()
            break
        if not line.strip():
            continue
        try:
            result = interpreter.eval(line)
        except NinoSyntaxError as e:
            typer.echo(format_syntax_error(line, e, color), err=True)
            continue
        except NinoRuntimeError as e:
            typer.echo(format_runtime_error(e, color), err=True)
            continue
        if result is not None:
            typer.echo(_show(result))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
