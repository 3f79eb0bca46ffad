"""assert(condition[, message])

The only way user code signals a recoverable problem: a falsy condition
raises a ResilientFailure, which the nearest enclosing live block retries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from resilient import Value
from resilient.errors import ResilientFailure
from resilient.evaluation.operators import is_truthy
from resilient.nodes import Assert
from resilient.printer import pformat
from resilient.types.environment import Environment
from resilient.types.void import Void

if TYPE_CHECKING:
    from resilient.evaluation.evaluator import Evaluator

DEFAULT_MESSAGE = "Assertion failed"


def eval_assert(evaluator: Evaluator, node: Assert, env: Environment) -> Value:
    condition = evaluator.evaluate(node.condition, env)
    if is_truthy(condition):
        return Void

    if node.message is None:
        message = DEFAULT_MESSAGE
    else:
        evaluated = evaluator.evaluate(node.message, env)
        if isinstance(evaluated, str):
            message = evaluated
        else:
            message = f"{DEFAULT_MESSAGE} with message: {pformat(evaluated)}"

    raise ResilientFailure(
        f"ASSERTION ERROR: {message}\n  - Condition evaluated to: {pformat(condition)}"
    )
