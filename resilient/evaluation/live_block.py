"""live { ... }: self-healing execution.

State machine per live block:

    ATTEMPTING --ok------> SUCCEEDED
    ATTEMPTING --failure-> RETRYING --restore--> ATTEMPTING
    ATTEMPTING --failure (last attempt)--> EXHAUSTED

The restore point is taken once, on entry: a copy of every frame of the
enclosing scope chain. Static cells are copied by reference, so statics keep
their values across restores. Each attempt runs the body in a fresh child
scope. On failure the chain is restored in place before the next attempt. A
`return` inside the body counts as success and its marker propagates outward
unchanged.

Only ResilientFailure triggers a retry; a Python RecursionError from runaway
nesting is turned into one first. A nested live block that runs out of
attempts raises LiveBlockExhausted, which is itself a failure, so the outer
block counts it as one failed attempt. External effects (e.g. println output)
are not undone; retried code is expected to be idempotent.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Optional

from resilient import Value
from resilient.errors import MAX_DEPTH_MESSAGE, ResilientFailure, LiveBlockExhausted
from resilient.nodes import LiveBlock
from resilient.types.environment import Environment, EnvironmentSnapshot

if TYPE_CHECKING:
    from resilient.evaluation.evaluator import Evaluator

logger = logging.getLogger(__name__)


class LiveState(enum.Enum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    RETRYING = "retrying"
    EXHAUSTED = "exhausted"


class LiveBlockController:
    """Runs one live block to success or exhaustion."""

    def __init__(
        self,
        evaluator: Evaluator,
        node: LiveBlock,
        env: Environment,
        max_attempts: int,
    ):
        if max_attempts < 1:
            raise ValueError("a live block needs at least one attempt")
        self.evaluator = evaluator
        self.node = node
        self.env = env
        self.max_attempts = max_attempts
        self.state: Optional[LiveState] = None
        self.attempts = 0
        self.failures: list[ResilientFailure] = []
        self.restore_point: Optional[EnvironmentSnapshot] = None

    def run(self) -> Value:
        self.restore_point = self.env.snapshot()
        self.state = LiveState.ATTEMPTING
        while True:
            self.attempts += 1
            try:
                result = self.evaluator.eval_block(self.node.body, self.env.enclosed())
            except ResilientFailure as failure:
                self._on_failure(failure)
                continue
            except RecursionError as exc:
                failure = ResilientFailure(MAX_DEPTH_MESSAGE)
                failure.__cause__ = exc
                self._on_failure(failure)
                continue
            self.state = LiveState.SUCCEEDED
            return result

    def _on_failure(self, failure: ResilientFailure) -> None:
        self.failures.append(failure)
        logger.warning(
            "live block error (attempt %d/%d): %s", self.attempts, self.max_attempts, failure
        )
        if self.attempts >= self.max_attempts:
            self.state = LiveState.EXHAUSTED
            logger.error("live block exhausted after %d attempts", self.attempts)
            raise LiveBlockExhausted(self.attempts, failure) from failure

        self.state = LiveState.RETRYING
        logger.debug("restoring environment to live block entry state")
        self.restore_point.restore()
        self.state = LiveState.ATTEMPTING


def eval_live_block(evaluator: Evaluator, node: LiveBlock, env: Environment) -> Value:
    controller = LiveBlockController(evaluator, node, env, evaluator.max_attempts)
    return controller.run()
