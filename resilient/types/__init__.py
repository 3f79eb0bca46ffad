from resilient.types.environment import Environment, EnvironmentSnapshot
from resilient.types.function import Function
from resilient.types.return_value import ReturnValue
from resilient.types.void import Void, VoidType

__all__ = [
    "Environment",
    "EnvironmentSnapshot",
    "Function",
    "ReturnValue",
    "Void",
    "VoidType",
]
