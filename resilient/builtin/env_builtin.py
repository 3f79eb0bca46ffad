"""Built-in functions for the Resilient runtime and their static signatures.

Runtime builtins are Python callables `fn(env, args) -> value`, registered
into an environment next to user definitions. `register_types` installs the
matching signatures into a type environment for the checker.
"""
from __future__ import annotations

import sys
from typing import TextIO

from resilient import BuiltinFn, Value
from resilient.errors import ResilientFailure
from resilient.printer import display
from resilient.types.environment import Environment
from resilient.types.static_types import FunctionType, StaticType, ANY, VOID
from resilient.types.void import Void


def make_println(out: TextIO | None = None) -> BuiltinFn:
    def println(env: Environment, args: list[Value]) -> Value:
        """Write the display form of the single argument and a newline."""
        if len(args) != 1:
            raise ResilientFailure(f"println expects 1 argument, got {len(args)}")
        stream = out if out is not None else sys.stdout
        stream.write(display(args[0]) + "\n")
        return Void

    return println


BUILTIN_TYPES: dict[str, StaticType] = {
    "println": FunctionType((ANY,), VOID),
}

BUILTIN_SIGNATURES: dict[str, str] = {
    "println": "fn println(any value) -> void",
}


def register(env: Environment, out: TextIO | None = None) -> None:
    """Bind the runtime builtins into `env`."""
    env.define("println", make_println(out))


def register_types(env: Environment) -> None:
    """Bind the builtin signatures into a type environment."""
    for name, typ in BUILTIN_TYPES.items():
        env.define(name, typ)
