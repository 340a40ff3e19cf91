"""User-function application for Nino.

Arguments are evaluated eagerly, in the caller's frame, before the call (they
are not in tail position). The callee body is then handed back to the
trampoline as a TailCall over a new call frame, so a call in tail position
never grows the Python stack.
"""

from nino import EvaluatorFn
from nino.errors import NinoArityError, NinoInvalidCall, NinoUnboundSymbol
from nino.types.ast import Declaration, FunctionCall, FunctionDeclaration
from nino.types.environment import Environment
from nino.types.tail_call import TailCall


def resolve_function(call: FunctionCall, env: Environment) -> FunctionDeclaration:
    """Look up the callee by name in the caller's scope chain."""
    declaration = env.get(call.name)
    if declaration is None:
        raise NinoUnboundSymbol(f"Cannot call unbound function {call.name}")
    function = declaration.expression
    if not isinstance(function, FunctionDeclaration):
        raise NinoInvalidCall(f"Cannot call {call.name}: it is not a function")
    return function


def call_frame(env: Environment, bindings: dict[str, Declaration]) -> Environment:
    """Frame for a call made from `env`, with `bindings` shadowing everything.

    `env` is always a frame owned by the running trampoline, so instead of
    nesting a new frame under it (which would grow the chain by one frame per
    tail call) its bindings are copied into a sibling frame. Lookups see the
    same names in the same order either way.
    """
    frame = Environment(outer=env.outer)
    frame.vars.update(env.vars)
    frame.update(bindings)
    return frame


def apply_function(call: FunctionCall, env: Environment, evaluate_fn: EvaluatorFn) -> TailCall:
    """Bind evaluated arguments to parameters and continue with the body."""
    function = resolve_function(call, env)

    provided = len(call.arguments)
    if provided != function.arity:
        raise NinoArityError(
            f"{call.name} takes {function.arity} arguments, got {provided}"
        )

    bindings: dict[str, Declaration] = {}
    for parameter, argument in zip(function.parameters, call.arguments):
        value = evaluate_fn(argument, env)
        bindings[parameter.name] = Declaration(parameter.name, parameter.type, value)

    return TailCall(function.body, call_frame(env, bindings))
