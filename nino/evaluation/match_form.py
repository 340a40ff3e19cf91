from nino import EvaluatorFn
from nino.errors import NinoMatchError, NinoNoMatchError
from nino.evaluation.operators import values_equal
from nino.types.ast import Expression, Match
from nino.types.environment import Environment
from nino.types.tail_call import TailCall


def evaluate_match(match: Match, env: Environment, evaluate_fn: EvaluatorFn) -> Expression | TailCall:
    """Select the first arm whose pattern equals the scrutinee.

    Every pattern tried must evaluate to the scrutinee's variant, otherwise the
    match is ill-typed even if a later arm would have matched. A selected arm
    is evaluated directly; the default arm is a tail position.
    """
    scrutinee = evaluate_fn(match.scrutinee, env)
    for pattern, result in match.arms:
        candidate = evaluate_fn(pattern, env)
        if type(candidate) is not type(scrutinee):
            raise NinoMatchError(
                f"Invalid types in match: {type(scrutinee).__name__} and {type(candidate).__name__}"
            )
        if values_equal(candidate, scrutinee, compare_tags=True):
            return evaluate_fn(result, env)

    if match.default is None:
        raise NinoNoMatchError("No matching pattern found. You should add a default pattern.")
    return TailCall(match.default, env)
