from __future__ import annotations

from typing import TextIO

from resilient import Value
from resilient.builtin.env_builtin import register
from resilient.checker.type_checker import TypeChecker
from resilient.config import LIVE_MAX_ATTEMPTS, get_type_check_default
from resilient.errors import MAX_DEPTH_MESSAGE, ResilientFailure, ResilientParseErrors
from resilient.evaluation.evaluator import Evaluator
from resilient.nodes import Program
from resilient.reader.parser import parse_source
from resilient.types.environment import Environment
from resilient.types.return_value import ReturnValue


class Interpreter:
    """
    A Resilient session: parses, optionally type-checks, and evaluates programs.

    Keeps its global environment across calls so definitions persist. The
    `statics` environment stores one cell per `static let` declaration, keyed
    by its position in the source; it lives exactly as long as the session
    (pass the same handle to another Interpreter to share it).
    """

    def __init__(
        self,
        statics: Environment | None = None,
        *,
        out: TextIO | None = None,
        max_attempts: int = LIVE_MAX_ATTEMPTS,
    ):
        self.statics: Environment = statics if statics is not None else Environment()
        self.env: Environment = Environment()
        register(self.env, out)
        self.evaluator = Evaluator(self.statics, max_attempts)

    def run(self, program: Program, type_check: bool | None = None) -> Value:
        """Evaluate a parsed Program, type-checking it first if asked.

        Raises ResilientTypeError (without evaluating) when the check fails,
        and ResilientFailure when evaluation fails outside any live block.
        """
        if type_check is None:
            type_check = get_type_check_default()
        if type_check:
            TypeChecker().check_program(program)
        try:
            result = self.evaluator.evaluate(program, self.env)
        except RecursionError as exc:
            raise ResilientFailure(MAX_DEPTH_MESSAGE) from exc
        if isinstance(result, ReturnValue):
            return result.value
        return result

    def eval(self, code: str, type_check: bool | None = None) -> Value:
        """Parse and run source text; parse errors are raised together."""
        program, errors = parse_source(code)
        if errors:
            raise ResilientParseErrors(errors)
        return self.run(program, type_check)


def run(program: Program, type_check: bool | None = None, *, statics: Environment | None = None) -> Value:
    """Evaluate `program` in a fresh session (fresh Evaluator and Environment)."""
    return Interpreter(statics).run(program, type_check)


__all__ = ["Interpreter", "run", "parse_source"]
