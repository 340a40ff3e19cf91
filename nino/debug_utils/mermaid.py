"""Render an expression tree as a Mermaid flowchart.

Each node is written as ``<Label>_<n>[<text>]`` where ``n`` counts nodes in
pre-order within one render, so repeated labels stay distinct.
"""

from __future__ import annotations

import itertools
import re
from typing import Iterator, Optional

from nino.builtin.env_builtin import format_number
from nino.reader.parser import parse_expression
from nino.types.ast import (
    Array,
    BinaryOperation,
    Bool,
    Char,
    Expression,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    Match,
    Number,
)

_PLAIN_TEXT = re.compile(r"^[A-Za-z0-9_.\-]+$")


def _operator_label(operation: BinaryOperation) -> str:
    # LESS_EQUAL_THAN -> LessEqualThan
    return "".join(part.capitalize() for part in operation.operator.name.split("_"))


def _text(text: str) -> str:
    if _PLAIN_TEXT.match(text):
        return text
    return '"' + text.replace('"', "#quot;") + '"'


class MermaidRenderer:
    def __init__(self):
        self._counter: Iterator[int] = itertools.count()
        self.lines: list[str] = []

    def _node(self, label: str, text: str) -> str:
        return f"{label}_{next(self._counter)}[{_text(text)}]"

    def _describe(self, expr: Expression) -> tuple[str, str]:
        match expr:
            case Number(value=value):
                return "Number", format_number(value)
            case Char(code=code):
                return "Char", f"'{chr(code)}'"
            case Bool(value=value):
                return "Bool", "true" if value else "false"
            case Identifier(name=name):
                return "Identifier", name
            case Array(element_type=element_type):
                return "Array", f"[{element_type}]"
            case FunctionDeclaration(parameters=parameters, return_type=return_type):
                params = ", ".join(f"{p.name}:{p.type}" for p in parameters)
                return "Function", f"({params}):{return_type}"
            case FunctionCall(name=name):
                return "Call", name
            case Match():
                return "Match", "?"
            case BinaryOperation():
                label = _operator_label(expr)
                return label, label
        raise TypeError(f"Cannot render {type(expr).__name__}")

    def _edge(self, parent: str, child: Expression, label: Optional[str] = None) -> str:
        node = self._node(*self._describe(child))
        arrow = f" -->|{label}| " if label else " --> "
        self.lines.append(parent + arrow + node)
        self._expand(child, node)
        return node

    def _expand(self, expr: Expression, node: str) -> None:
        match expr:
            case Array(elements=elements):
                for element in elements:
                    self._edge(node, element)
            case FunctionDeclaration(body=body):
                self._edge(node, body)
            case FunctionCall(arguments=arguments):
                for argument in arguments:
                    self._edge(node, argument)
            case BinaryOperation(left=left, right=right):
                self._edge(node, left)
                self._edge(node, right)
            case Match(scrutinee=scrutinee, arms=arms, default=default):
                self._edge(node, scrutinee, "on")
                for pattern, result in arms:
                    pattern_node = self._edge(node, pattern, "case")
                    self._edge(pattern_node, result, "then")
                if default is not None:
                    self._edge(node, default, "default")

    def render(self, expr: Expression) -> str:
        """Edges of the tree under `expr` in pre-order, one per line."""
        root = self._node(*self._describe(expr))
        self._expand(expr, root)
        if not self.lines:
            # A lone leaf still gets drawn
            self.lines.append(root)
        return "\n".join(self.lines)


def render_mermaid(code: str) -> str:
    """Flowchart of the leading expression of `code`; a trailing ';' is optional."""
    expression = parse_expression(code)
    chart = code + "\n```mermaid\nflowchart TD\n"
    chart += MermaidRenderer().render(expression)
    return chart + "\n```"
