"""Runtime environment for Nino.

The Environment stores bindings of names to Declarations and supports nested
scopes via an `outer` link. Definitions always land in the local frame; lookups
fall back through the chain of outer frames. Nothing ever writes through to an
outer frame, so a child frame can shadow a name without disturbing its parent.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from nino.errors import NinoUnboundSymbol
from nino.types.ast import Declaration


class Environment:
    """Hierarchical mapping from names to Declarations."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[str, Declaration] = {}
        self.outer: Environment | None = outer

    @classmethod
    def with_parent(cls, parent: Environment) -> Environment:
        """Create an empty frame layered over `parent`."""
        return cls(outer=parent)

    def define(self, name: str, declaration: Declaration) -> None:
        """Bind `name` in this frame, shadowing any outer binding."""
        self.vars[name] = declaration

    def update(self, mapping: dict[str, Declaration]) -> None:
        """Bulk-define a mapping of name -> Declaration in the current frame."""
        self.vars.update(mapping)

    def find(self, name: str) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def get(self, name: str) -> Optional[Declaration]:
        """Return the nearest Declaration for `name`, or None at the root."""
        env = self.find(name)
        if env is None:
            return None
        return env.vars[name]

    def lookup(self, name: str) -> Declaration:
        """Like get(), but raises NinoUnboundSymbol if `name` is not bound."""
        env = self.find(name)
        if env is None:
            raise NinoUnboundSymbol(f"Cannot lookup unbound symbol {name}")
        return env.vars[name]

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def depth(self) -> int:
        """Number of frames in the chain, this one included."""
        n = 0
        env: Optional[Environment] = self
        while env is not None:
            n += 1
            env = env.outer
        return n

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's bindings into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v.declared_type}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Chain representation for debugging purposes."""
        chain = []
        env: Optional[Environment] = self
        while env is not None:
            with StringIO() as buffer:
                env._write_vars(buffer)
                chain.append(buffer.getvalue())
            env = env.outer
        return f"<Environment chain: {' -> '.join(chain)}>"
