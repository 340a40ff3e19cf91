"""Built-in functions for the Nino runtime.

Builtins are resolved by name before any user definition. Each receives the
caller's Environment and its already-evaluated argument values, and returns a
value-form Expression.
"""
from __future__ import annotations

import math
import time as _time

from nino import BuiltinFn
from nino.errors import NinoArityError, NinoFormatError, NinoTypeError
from nino.types.ast import Array, Bool, Char, CHAR, Expression, Number
from nino.types.environment import Environment


def _expect_arity(name: str, args: list[Expression], count: int) -> None:
    if len(args) != count:
        plural = "" if count == 1 else "s"
        raise NinoArityError(f"{name} takes {count} argument{plural}, got {len(args)}")


def _expect_array(name: str, value: Expression) -> Array:
    if not isinstance(value, Array):
        raise NinoTypeError(f"Cannot take {name} of {type(value).__name__}")
    return value


def format_number(value: float) -> str:
    """Integral numbers print without a fractional part: 3.0 -> '3'."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_value(value: Expression) -> str:
    """Render a value the way print shows it."""
    match value:
        case Char(code=code):
            return chr(code)
        case Number(value=number):
            return format_number(number)
        case Bool(value=flag):
            return "true" if flag else "false"
        case Array(element_type=element_type, elements=elements):
            if element_type == CHAR:
                # Strings print as their characters, without brackets
                chars = []
                for item in elements:
                    if not isinstance(item, Char):
                        raise NinoFormatError(f"Cannot convert {type(item).__name__} to string")
                    chars.append(chr(item.code))
                return "".join(chars)
            return "[" + ", ".join(format_value(item) for item in elements) + "]"
    raise NinoFormatError(f"Cannot print {type(value).__name__}")


# -------------------------------
# Output
# -------------------------------
def print_builtin(env: Environment, args: list[Expression]) -> Expression:
    """(print x) writes x followed by a newline; returns x."""
    _expect_arity("print", args, 1)
    text = format_value(args[0])
    print(text)
    return args[0]


def debug_print(env: Environment, args: list[Expression]) -> Expression:
    """Write the AST form of x; returns x."""
    from nino.debug_utils.pprint import pprint_expr

    _expect_arity("debug_print", args, 1)
    print(pprint_expr(args[0]))
    return args[0]


# -------------------------------
# Numbers and time
# -------------------------------
def time_builtin(env: Environment, args: list[Expression]) -> Expression:
    """Milliseconds since the Unix epoch."""
    _expect_arity("time", args, 0)
    return Number(float(_time.time_ns() // 1_000_000))


def sqrt(env: Environment, args: list[Expression]) -> Expression:
    _expect_arity("sqrt", args, 1)
    value = args[0]
    if not isinstance(value, Number):
        raise NinoTypeError(f"sqrt expects a Number, got {type(value).__name__}")
    if value.value < 0:
        return Number(math.nan)
    return Number(math.sqrt(value.value))


# -------------------------------
# Arrays
# -------------------------------
def head(env: Environment, args: list[Expression]) -> Expression:
    """First element, or false for an empty array."""
    _expect_arity("head", args, 1)
    array = _expect_array("head", args[0])
    return array.elements[0] if array.elements else Bool(False)


def tail(env: Environment, args: list[Expression]) -> Expression:
    """Everything but the first element; keeps the element-type tag."""
    _expect_arity("tail", args, 1)
    array = _expect_array("tail", args[0])
    return Array(array.element_type, array.elements[1:])


def last(env: Environment, args: list[Expression]) -> Expression:
    """Last element, or false for an empty array."""
    _expect_arity("last", args, 1)
    array = _expect_array("last", args[0])
    return array.elements[-1] if array.elements else Bool(False)


def length(env: Environment, args: list[Expression]) -> Expression:
    _expect_arity("len", args, 1)
    array = _expect_array("len", args[0])
    return Number(float(len(array.elements)))


BUILTINS: dict[str, BuiltinFn] = {
    "print": print_builtin,
    "debug_print": debug_print,
    "time": time_builtin,
    "sqrt": sqrt,
    "head": head,
    "tail": tail,
    "last": last,
    "len": length,
}
