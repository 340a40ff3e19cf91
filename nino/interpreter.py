from __future__ import annotations

import logging
from typing import Iterable, Optional

from nino import config
from nino.evaluation.evaluator import run
from nino.reader.lexer import tokenize
from nino.reader.parser import parse
from nino.types.ast import Declaration, Expression, Item
from nino.types.environment import Environment

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Orchestrates reading and evaluating Nino code.
    Maintains a root Environment across calls, so declarations made by one
    eval() are visible to the next.
    """

    def __init__(self, strict_types: Optional[bool] = None):
        if strict_types is None:
            strict_types = config.get_strict_types()
        self.strict_types: bool = strict_types
        self.env: Environment = Environment()

    def parse(self, code: str) -> list[Item]:
        return parse(tokenize(code))

    def run(self, items: Iterable[Item]) -> Optional[Expression]:
        return run(items, self.env, self.strict_types)

    def eval(self, code: str) -> Optional[Expression]:
        """Parse and execute `code`; returns the value of a trailing bare expression."""
        items = self.parse(code)
        logger.debug("parsed %d items", len(items))
        return self.run(items)

    def lookup(self, name: str) -> Declaration:
        return self.env.lookup(name)

    def value_of(self, name: str) -> Expression:
        """The stored expression of a declaration (its value for non-functions)."""
        return self.env.lookup(name).expression
