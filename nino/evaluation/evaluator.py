"""Core evaluator and trampoline for the Nino interpreter.

evaluate0 performs one reduction step. For a tail position (identifier
resolution, a user function body, a match default) it does not recurse but
returns a TailCall describing the next state; evaluate loops over those until a
value comes back. Non-tail positions (binary operands, call arguments, match
scrutinee/patterns/selected result, builtin arguments) use a nested evaluate.
That partition alone bounds stack growth: tail-recursive programs run in
constant Python stack, anything else costs one level per nested evaluation.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from nino.builtin.env_builtin import BUILTINS
from nino.errors import NinoRecursionError, NinoRuntimeError
from nino.evaluation.apply import apply_function
from nino.evaluation.match_form import evaluate_match
from nino.evaluation.operators import apply_binary
from nino.evaluation.type_check import check_declared_type
from nino.types.ast import (
    Array,
    BinaryOperation,
    Bool,
    Char,
    Declaration,
    Expression,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    Item,
    Match,
    Number,
    is_value,
)
from nino.types.environment import Environment
from nino.types.tail_call import TailCall

logger = logging.getLogger(__name__)


def evaluate(expr: Expression, env: Environment) -> Expression:
    """
    Trampoline evaluator: reduce `expr` to a value form.

    Evaluation runs in a fresh frame over `env`, discarded on return, so
    nothing bound during the call is visible to the caller afterwards.
    """
    result = evaluate0(expr, Environment(outer=env))
    while isinstance(result, TailCall):
        result = evaluate0(result.expression, result.env)
    return result


def evaluate0(expr: Expression, env: Environment) -> Expression | TailCall:
    """
    Single reduction step. `env` must be a frame owned by the running
    trampoline (see nino.evaluation.apply.call_frame).
    Returns either a value or a TailCall.
    """
    match expr:
        case Number() | Char() | Bool():
            return expr

        case Array(element_type=element_type, elements=elements):
            if is_value(expr):
                return expr
            return Array(element_type, tuple(evaluate(e, env) for e in elements))

        case Identifier(name=name):
            return TailCall(env.lookup(name).expression, env)

        case FunctionCall(name=name, arguments=arguments):
            builtin = BUILTINS.get(name)
            if builtin is not None:
                return builtin(env, [evaluate(arg, env) for arg in arguments])
            return apply_function(expr, env, evaluate)

        case BinaryOperation(operator=op, left=left, right=right):
            return apply_binary(op, evaluate(left, env), evaluate(right, env))

        case Match():
            return evaluate_match(expr, env, evaluate)

        case FunctionDeclaration():
            # Function literals do not reduce further
            return expr

    raise NinoRuntimeError(f"Unknown expression {expr!r}")


def interpret(item: Item, env: Environment, strict_types: bool = False) -> Optional[Expression]:
    """Execute one top-level item against `env`.

    A declaration of a function literal is stored unevaluated, so the body can
    refer to the function's own name; any other declaration is reduced first.
    A bare expression is evaluated and its value returned.
    """
    if isinstance(item, Declaration):
        if isinstance(item.expression, FunctionDeclaration):
            declaration = item
        else:
            value = evaluate(item.expression, env)
            declaration = Declaration(item.name, item.declared_type, value)
        if strict_types:
            check_declared_type(declaration)
        env.define(declaration.name, declaration)
        logger.debug("defined %s:%s", declaration.name, declaration.declared_type)
        return None
    return evaluate(item, env)


def run(items: Iterable[Item], env: Environment, strict_types: bool = False) -> Optional[Expression]:
    """Execute items in program order against the root environment `env`.

    Stops at the first runtime error, which is re-raised with its `statement`
    attribute set to the index of the failing item. Returns the value of the
    last item when it is a bare expression, None otherwise.
    """
    result: Optional[Expression] = None
    for index, item in enumerate(items):
        logger.debug("statement %d: %s", index, type(item).__name__)
        try:
            result = interpret(item, env, strict_types)
        except NinoRuntimeError as exc:
            exc.statement = index
            raise
        except RecursionError:
            error = NinoRecursionError(
                "maximum recursion depth exceeded; only tail calls run in constant stack"
            )
            error.statement = index
            raise error from None
    return result
