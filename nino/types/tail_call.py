from nino.types.ast import Expression
from nino.types.environment import Environment


class TailCall:
    """Trampoline state: continue by reducing `expression` in `env`.

    Returned by evaluate0 for every tail position (identifier resolution,
    user function body, match default) instead of recursing.
    """

    __slots__ = ("expression", "env")

    def __init__(self, expression: Expression, env: Environment):
        self.expression = expression
        self.env = env
