"""Optional declared-type check.

Declared types are advisory: evaluation never consults them. When strict typing
is enabled, each declaration is checked once, after its expression has been
reduced and before it is stored.
"""

from __future__ import annotations

from typing import Optional

from nino.errors import NinoTypeError
from nino.types.ast import (
    Array,
    Bool,
    BOOLEAN,
    Char,
    CHAR,
    Declaration,
    Expression,
    FUNCTION,
    FunctionDeclaration,
    Number,
    NUMBER,
    Type,
    array_of,
)


def runtime_type(value: Expression) -> Optional[Type]:
    """The Type a reduced value actually has, or None for a non-value."""
    match value:
        case Number():
            return NUMBER
        case Char():
            return CHAR
        case Bool():
            return BOOLEAN
        case FunctionDeclaration():
            return FUNCTION
        case Array(element_type=element_type):
            return array_of(element_type)
    return None


def check_declared_type(declaration: Declaration) -> None:
    actual = runtime_type(declaration.expression)
    if actual != declaration.declared_type:
        shown = actual if actual is not None else type(declaration.expression).__name__
        raise NinoTypeError(
            f"{declaration.name} is declared {declaration.declared_type} but holds {shown}"
        )
