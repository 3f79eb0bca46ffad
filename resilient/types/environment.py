"""Lexical environments for Resilient.

An Environment maps names to either runtime values (evaluator) or static
types (type checker); the two instantiations are never mixed. Scopes nest via
an `outer` link and lookups walk outward until the name is found.

Live blocks take an EnvironmentSnapshot of the chain on entry and restore it
in place before each retry, so closures and callers holding a reference to a
frame observe the rolled-back bindings.
"""

from __future__ import annotations

from io import StringIO
from typing import Any, Generic, Optional, TypeVar

from resilient.errors import ResilientUnboundName

T = TypeVar("T")


class Environment(Generic[T]):
    """Hierarchical mapping from names to values or types."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment[T]] = None):
        self.vars: dict[str, T] = {}
        self.outer: Environment[T] | None = outer

    def define(self, name: str, value: T) -> None:
        """Bind `name` in this frame, shadowing any outer binding."""
        self.vars[name] = value

    def find(self, name: str) -> Optional[Environment[T]]:
        """Find the nearest environment in the chain that binds `name`."""
        env: Optional[Environment[T]] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def set(self, name: str, value: T) -> None:
        """Re-target the nearest existing binding of `name`.

        Raises ResilientUnboundName if no frame binds it.
        """
        env = self.find(name)
        if env is None:
            raise ResilientUnboundName(name)
        env.vars[name] = value

    def lookup(self, name: str) -> T:
        env = self.find(name)
        if env is None:
            raise ResilientUnboundName(name)
        return env.vars[name]

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def enclosed(self) -> Environment[T]:
        """New child scope whose outer is this environment."""
        return Environment(outer=self)

    def snapshot(self) -> EnvironmentSnapshot:
        """Copy the bindings of every frame from this one outward."""
        frames = []
        env: Optional[Environment[T]] = self
        while env is not None:
            frames.append((env, dict(env.vars)))
            env = env.outer
        return EnvironmentSnapshot(frames)

    def _write_vars(self, buffer: StringIO) -> None:
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v!r}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            chain = []
            env = self
            while env is not None:
                with StringIO() as env_buf:
                    env._write_vars(env_buf)
                    chain.append(env_buf.getvalue())
                env = env.outer
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()


class EnvironmentSnapshot:
    """Restore point: a copy of the bindings of each frame in a scope chain."""

    __slots__ = ("frames",)

    def __init__(self, frames: list[tuple[Environment[Any], dict[str, Any]]]):
        self.frames = frames

    def restore(self) -> None:
        # Copy again so the snapshot stays pristine for later retries
        for env, saved in self.frames:
            env.vars = dict(saved)
