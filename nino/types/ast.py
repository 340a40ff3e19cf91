"""AST node types shared by the parser and the evaluator.

Every node is an immutable (frozen) dataclass; child sequences are tuples so a
tree can be shared freely between declarations, call frames and results.
The evaluator reduces an Expression to a *value form*: Number, Char, Bool, or
an Array whose elements are value forms.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class TypeKind(Enum):
    NUMBER = "num"
    CHAR = "char"
    BOOLEAN = "bool"
    FUNCTION = "fn"
    ARRAY = "array"


@dataclass(frozen=True)
class Type:
    """Declared type. Metadata only: never checked unless strict typing is on."""

    kind: TypeKind
    element: Optional[Type] = None

    def __str__(self) -> str:
        if self.kind is TypeKind.ARRAY:
            return f"[{self.element}]"
        return self.kind.value


NUMBER = Type(TypeKind.NUMBER)
CHAR = Type(TypeKind.CHAR)
BOOLEAN = Type(TypeKind.BOOLEAN)
FUNCTION = Type(TypeKind.FUNCTION)


def array_of(element: Type) -> Type:
    return Type(TypeKind.ARRAY, element)


class Expression:
    """Base class for every expression node."""

    __slots__ = ()


@dataclass(frozen=True)
class Identifier(Expression):
    name: str


@dataclass(frozen=True)
class Number(Expression):
    value: float


@dataclass(frozen=True)
class Char(Expression):
    # Byte value, 0..255
    code: int

    def __str__(self) -> str:
        return chr(self.code)


@dataclass(frozen=True)
class Bool(Expression):
    value: bool


@dataclass(frozen=True)
class Array(Expression):
    # The tag decides formatting and concatenation; it is not inferred from elements
    element_type: Type
    elements: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Parameter:
    name: str
    type: Type


@dataclass(frozen=True)
class FunctionDeclaration(Expression):
    """A function literal. No environment is captured: free names resolve at call time."""

    parameters: tuple[Parameter, ...]
    return_type: Type
    body: Expression

    @property
    def arity(self) -> int:
        return len(self.parameters)


@dataclass(frozen=True)
class FunctionCall(Expression):
    name: str
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Match(Expression):
    scrutinee: Expression
    arms: tuple[tuple[Expression, Expression], ...] = ()
    default: Optional[Expression] = None


class BinaryOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_EQUAL_THAN = "<="
    GREATER_THAN = ">"
    GREATER_EQUAL_THAN = ">="
    # Reserved: no evaluation rule exists for these
    AND = "&&"
    OR = "||"


@dataclass(frozen=True)
class BinaryOperation(Expression):
    operator: BinaryOperator
    left: Expression
    right: Expression


@dataclass(frozen=True)
class Declaration:
    """`let name:type = expression;`"""

    name: str
    declared_type: Type
    expression: Expression


Item = Union[Declaration, Expression]


VALUE_FORMS = (Number, Char, Bool, Array)


def is_value(expr: Expression) -> bool:
    """True if `expr` needs no further reduction."""
    if isinstance(expr, Array):
        return all(is_value(e) for e in expr.elements)
    return isinstance(expr, VALUE_FORMS)


def string_literal(text: str) -> Array:
    """Strings are sugar for an Array of Char."""
    return Array(CHAR, tuple(Char(ord(ch)) for ch in text))
