from resilient.evaluation.evaluator import Evaluator
from resilient.evaluation.live_block import LiveBlockController, LiveState

__all__ = ["Evaluator", "LiveBlockController", "LiveState"]
