# Core type aliases for Nino's data model.
# Programs are trees of immutable Expression nodes (see nino.types.ast). Evaluation
# reduces an Expression to a value-form Expression, so the same classes describe
# both code and runtime values.
#
# Naming guidance:
# - Item:    a top-level unit produced by the parser (Declaration or Expression).
# - Value:   use in evaluator/runtime code to denote a reduced Expression.

from typing import Any, Callable

__version__ = "0.3.0"

# Runtime value alias (a value-form Expression)
Value = Any

# Builtin function type: receives the caller's Environment and evaluated arguments
BuiltinFn = Callable[..., Value]

# Evaluator function type: used by application and match helpers to evaluate
# sub-expressions without importing the evaluator module
EvaluatorFn = Callable[..., Value]
