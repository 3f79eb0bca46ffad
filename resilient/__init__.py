# Core type aliases for Resilient's data model.
# Runtime values are plain Python types (int, float, str, bool) plus a few
# marker classes in resilient.types (Function, Void, ReturnValue).
#
# Naming guidance:
# - Value: use in evaluator/runtime code to denote evaluated values.
# - StaticType: use in the type checker (see resilient.types.static_types).

import logging
from typing import Any, Callable

# Runtime value alias
Value = Any

# Builtin callable: receives the calling environment and evaluated arguments
BuiltinFn = Callable[..., Value]

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
