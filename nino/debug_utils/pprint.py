from __future__ import annotations

from typing import Optional

from nino.builtin.env_builtin import format_number
from nino.types.ast import (
    Array,
    BinaryOperation,
    Bool,
    Char,
    CHAR,
    Declaration,
    Expression,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    Item,
    Match,
    Number,
)

# ----------------- ANSI colors -----------------
RESET = "\033[0m"
COLOR_NODE = "\033[94m"
COLOR_LITERAL = "\033[92m"
COLOR_IDENTIFIER = "\033[95m"
COLOR_LABEL = "\033[90m"

# ----------------- Defaults -----------------
DEFAULT_OPTIONS = {
    "indent": "  ",
    "max_depth": 64,
    "color": False,
    # Char arrays up to this length are shown inline as a string
    "inline_strings": 40,
}


# ----------------- Colorize utility -----------------
def colorize(text: str, color: str, options: dict = DEFAULT_OPTIONS) -> str:
    if options.get("color", False):
        return f"{color}{text}{RESET}"
    return text


def _as_string(array: Array) -> Optional[str]:
    if array.element_type != CHAR or not all(isinstance(e, Char) for e in array.elements):
        return None
    return "".join(chr(e.code) for e in array.elements)


def _header(expr: Expression, options: dict) -> str:
    """One-line description of a node, without its children."""
    match expr:
        case Number(value=value):
            return colorize(f"Number({format_number(value)})", COLOR_LITERAL, options)
        case Char(code=code):
            return colorize(f"Char({chr(code)!r})", COLOR_LITERAL, options)
        case Bool(value=value):
            return colorize(f"Bool({'true' if value else 'false'})", COLOR_LITERAL, options)
        case Identifier(name=name):
            return colorize(f"Identifier({name})", COLOR_IDENTIFIER, options)
        case Array(element_type=element_type):
            text = _as_string(expr)
            if text is not None and len(text) <= options.get("inline_strings", 40):
                return colorize(f"Array[{element_type}] {text!r}", COLOR_LITERAL, options)
            return colorize(f"Array[{element_type}]", COLOR_NODE, options)
        case FunctionDeclaration(parameters=parameters, return_type=return_type):
            params = ", ".join(f"{p.name}:{p.type}" for p in parameters)
            return colorize(f"Function({params}):{return_type}", COLOR_NODE, options)
        case FunctionCall(name=name):
            return colorize(f"Call {name}", COLOR_NODE, options)
        case Match():
            return colorize("Match", COLOR_NODE, options)
        case BinaryOperation(operator=op):
            return colorize(f"BinaryOperation({op.value})", COLOR_NODE, options)
    return repr(expr)


def _children(expr: Expression) -> list[tuple[Optional[str], Expression]]:
    """(label, child) pairs in source order."""
    match expr:
        case Array(elements=elements):
            return [(None, e) for e in elements]
        case FunctionDeclaration(body=body):
            return [(None, body)]
        case FunctionCall(arguments=arguments):
            return [(None, a) for a in arguments]
        case BinaryOperation(left=left, right=right):
            return [(None, left), (None, right)]
        case Match(scrutinee=scrutinee, arms=arms, default=default):
            children: list[tuple[Optional[str], Expression]] = [("on", scrutinee)]
            for pattern, result in arms:
                children.append(("case", pattern))
                children.append(("then", result))
            if default is not None:
                children.append(("default", default))
            return children
    return []


# ----------------- Pretty printer -----------------
def pprint_expr(
    expr: Expression,
    indent: int = 0,
    options: dict = DEFAULT_OPTIONS,
    _current_depth: int = 0,
    _label: Optional[str] = None,
) -> str:
    pad = options.get("indent", "  ") * indent
    prefix = pad + (colorize(f"{_label}: ", COLOR_LABEL, options) if _label else "")

    if _current_depth >= options.get("max_depth", 64):
        return prefix + "…"

    lines = [prefix + _header(expr, options)]
    if isinstance(expr, Array) and _as_string(expr) is not None \
            and len(expr.elements) <= options.get("inline_strings", 40):
        return lines[0]

    for label, child in _children(expr):
        lines.append(
            pprint_expr(child, indent + 1, options, _current_depth + 1, label)
        )
    return "\n".join(lines)


def pprint_item(item: Item, options: dict = DEFAULT_OPTIONS) -> str:
    if isinstance(item, Declaration):
        head = colorize(f"let {item.name}:{item.declared_type}", COLOR_NODE, options)
        return head + "\n" + pprint_expr(item.expression, 1, options, 1)
    return pprint_expr(item, 0, options)


def pprint_items(items: list[Item], options: dict = DEFAULT_OPTIONS) -> str:
    return "\n".join(pprint_item(item, options) for item in items)


def pprint(expr: Expression, options: dict = DEFAULT_OPTIONS) -> None:
    print(pprint_expr(expr, options=options))
