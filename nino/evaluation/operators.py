"""Binary operator dispatch for Nino.

Both operands arrive fully evaluated; dispatch is on the pair of runtime
variants and then on the operator. There is no implicit coercion: any pairing
or operator without a rule here is a NinoTypeError.

Numbers follow IEEE-754 double semantics, including division and remainder by
zero (which Python would otherwise raise on).
"""

from __future__ import annotations

import math
import operator
from typing import Callable

from nino.errors import NinoTypeError
from nino.types.ast import Array, BinaryOperator, Bool, Expression, Number


def ieee_divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def ieee_remainder(a: float, b: float) -> float:
    # Truncated remainder: the result takes the sign of the dividend
    if b == 0.0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    return math.fmod(a, b)


ARITHMETIC: dict[BinaryOperator, Callable[[float, float], float]] = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUBTRACT: operator.sub,
    BinaryOperator.MULTIPLY: operator.mul,
    BinaryOperator.DIVIDE: ieee_divide,
    BinaryOperator.MODULO: ieee_remainder,
}

COMPARISON: dict[BinaryOperator, Callable[[float, float], bool]] = {
    BinaryOperator.EQUAL: operator.eq,
    BinaryOperator.NOT_EQUAL: operator.ne,
    BinaryOperator.LESS_THAN: operator.lt,
    BinaryOperator.LESS_EQUAL_THAN: operator.le,
    BinaryOperator.GREATER_THAN: operator.gt,
    BinaryOperator.GREATER_EQUAL_THAN: operator.ge,
}


def values_equal(left: Expression, right: Expression, compare_tags: bool = False) -> bool:
    """Value equality; NaN is unequal to everything, including itself.

    Arrays compare elementwise, and their element-type tags only when
    `compare_tags` is set.
    """
    match left, right:
        case Number(), Number():
            return left.value == right.value
        case Array(), Array():
            if compare_tags and left.element_type != right.element_type:
                return False
            if len(left.elements) != len(right.elements):
                return False
            return all(
                values_equal(a, b, compare_tags) for a, b in zip(left.elements, right.elements)
            )
    return left == right


def _type_name(value: Expression) -> str:
    return type(value).__name__


def number_number(op: BinaryOperator, left: float, right: float) -> Expression:
    if op in ARITHMETIC:
        return Number(ARITHMETIC[op](left, right))
    if op in COMPARISON:
        return Bool(COMPARISON[op](left, right))
    raise NinoTypeError(f"Operator {op.value} is not supported for Number and Number")


def array_array(op: BinaryOperator, left: Array, right: Array) -> Expression:
    if op is BinaryOperator.EQUAL:
        # Element-type tags are ignored: ['a'] == "a"
        return Bool(values_equal(left, right))
    if op is BinaryOperator.ADD:
        if left.element_type != right.element_type:
            raise NinoTypeError(
                f"Cannot concatenate [{left.element_type}] and [{right.element_type}]"
            )
        return Array(left.element_type, left.elements + right.elements)
    raise NinoTypeError(f"Operator {op.value} is not supported for Array and Array")


def apply_binary(op: BinaryOperator, left: Expression, right: Expression) -> Expression:
    """Combine two evaluated operands."""
    match left, right:
        case Number(), Number():
            return number_number(op, left.value, right.value)
        case Array(), Array():
            return array_array(op, left, right)
    raise NinoTypeError(
        f"Invalid types for {op.value}: {_type_name(left)} and {_type_name(right)}"
    )
