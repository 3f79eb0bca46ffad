"""Function (closure) values for Resilient."""

from __future__ import annotations

from io import StringIO

from resilient.nodes import Block, Parameter
from resilient.types.environment import Environment


class Function:
    """A first-class function: parameters, body and the defining environment."""

    __slots__ = ("name", "parameters", "body", "env")

    def __init__(self, name: str, parameters: list[Parameter], body: Block, env: Environment):
        self.name = name
        self.parameters: list[Parameter] = list(parameters)
        self.body: Block = body
        self.env: Environment = env

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write(f"fn {self.name}(")
            buffer.write(", ".join(f"{p.type_name} {p.name}" for p in self.parameters))
            buffer.write(")")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return f"<function {self.name}>"

    def extend_env(self, args: list) -> Environment:
        """Bind arguments positionally in a new scope enclosed by the closure env.

        Missing arguments leave their parameter unbound and extra arguments are
        ignored; arity is only enforced by the type checker.
        """
        call_env = Environment(outer=self.env)
        for param, arg in zip(self.parameters, args):
            call_env.define(param.name, arg)
        return call_env
