"""Rendering of runtime values.

- pformat: display form used in messages and results (strings quoted)
- display: what `println` writes (strings verbatim)
- to_source: source text that lexes, parses and evaluates back to an
  equal value (Int, Float, String, Bool only)
"""

from __future__ import annotations

import math
from decimal import Decimal

from resilient import Value
from resilient.reader.lexer import INT64_MIN
from resilient.types.function import Function
from resilient.types.return_value import ReturnValue
from resilient.types.void import VoidType

SOURCE_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


def pformat(value: Value) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    return display(value)


def display(value: Value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    if isinstance(value, Function):
        return f"<function {value.name}>"
    if isinstance(value, ReturnValue):
        return display(value.value)
    if isinstance(value, VoidType):
        return "void"
    if callable(value):
        return f"<builtin {getattr(value, '__name__', 'function')}>"
    return repr(value)


def _float_source(value: float) -> str:
    if not math.isfinite(value):
        raise ValueError(f"{value!r} has no literal form")
    # positional notation only: the lexer has no exponent syntax
    text = format(Decimal(repr(abs(value))), "f")
    if "." not in text:
        text += ".0"
    return f"-{text}" if math.copysign(1.0, value) < 0 else text


def to_source(value: Value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        if value == INT64_MIN:
            # its magnitude is one past the largest integer literal
            return f"({INT64_MIN + 1} - 1)"
        return str(value)
    if isinstance(value, float):
        return _float_source(value)
    if isinstance(value, str):
        return '"' + "".join(SOURCE_ESCAPES.get(ch, ch) for ch in value) + '"'
    raise ValueError(f"{pformat(value)} has no literal form")
