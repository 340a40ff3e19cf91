"""Human-readable error reports with the offending source highlighted.

A syntax error is shown as the message, then the source line holding the error
span with a caret run under ``begin..end``:

    Parser error!
    Expected ';' after expression, found end of input
    Here (line 1, column 6):
      1 + 2
          ^
"""

from __future__ import annotations

from typing import Optional

from termcolor import colored

from nino import config
from nino.errors import NinoRuntimeError, NinoSyntaxError

ERROR = "red"


def position_from_offset(text: str, offset: int) -> tuple[int, int]:
    """0-based (line, column) of a character offset."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start


def _line_bounds(text: str, offset: int) -> tuple[int, int]:
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    return start, len(text) if end == -1 else end


def _bold(text: str, color: Optional[str], enabled: bool) -> str:
    if not enabled:
        return text
    return colored(text, color, attrs=["bold"], force_color=True)


def render_error_location(source: str, begin: int, end: int, color: Optional[bool] = None) -> str:
    """The line containing `begin`, and a caret run under columns begin..end (inclusive)."""
    if color is None:
        color = config.use_color()
    begin = max(0, min(begin, len(source)))
    line_start, line_end = _line_bounds(source, begin)
    # Spans never continue past the end of their first line
    end = max(begin, min(end, line_end - 1))

    line = source[line_start:line_end]
    column = begin - line_start
    width = end - begin + 1

    highlighted = (
        line[:column]
        + _bold(line[column:column + width], ERROR, color)
        + line[column + width:]
    )
    pointer = " " * column + _bold("^" * width, ERROR, color)
    return "  " + highlighted + "\n  " + pointer


def format_syntax_error(source: str, error: NinoSyntaxError, color: Optional[bool] = None) -> str:
    if color is None:
        color = config.use_color()
    report = _bold("Parser error!", ERROR, color) + "\n" + error.message
    span = error.span
    if span is None:
        return report
    line, column = position_from_offset(source, span[0])
    report += f"\nHere (line {line + 1}, column {column + 1}):\n"
    return report + render_error_location(source, span[0], span[1], color)


def format_runtime_error(error: NinoRuntimeError, color: Optional[bool] = None) -> str:
    if color is None:
        color = config.use_color()
    report = _bold("Runtime error", ERROR, color)
    if error.statement is not None:
        report += f" in statement {error.statement + 1}"
    return report + ": " + error.message
