"""Prefix/infix operator semantics and truthiness.

Int/Int arithmetic stays Int (64-bit, overflow is a failure); any Float
operand promotes both sides to Float. Comparisons need operands of the same
kind after promotion. Every failure here is a ResilientFailure so a live block
can retry it.
"""

from __future__ import annotations

import operator
from typing import Callable

from resilient import Value
from resilient.errors import ResilientFailure
from resilient.printer import pformat
from resilient.reader.lexer import INT64_MIN, INT64_MAX

COMPARISONS: dict[str, Callable[[Value, Value], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}

EQUALITY = ("==", "!=")


def is_truthy(value: Value) -> bool:
    """Bool as itself; numbers when nonzero; strings when non-empty; else true."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def _is_int(value: Value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _unknown(left: Value, op: str, right: Value) -> ResilientFailure:
    return ResilientFailure(f"Unknown operator: {pformat(left)} {op} {pformat(right)}")


def _check_int(result: int) -> int:
    if result < INT64_MIN or result > INT64_MAX:
        raise ResilientFailure(f"Integer overflow: {result}")
    return result


def _int_divide(left: int, right: int) -> int:
    # truncates toward zero
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def eval_prefix(op: str, right: Value) -> Value:
    if op == "!":
        return not is_truthy(right)
    if op == "-":
        if _is_int(right):
            return _check_int(-right)
        if isinstance(right, float):
            return -right
    raise ResilientFailure(f"Unknown operator: {op}{pformat(right)}")


def eval_integer_infix(op: str, left: int, right: int) -> Value:
    if op == "+":
        return _check_int(left + right)
    if op == "-":
        return _check_int(left - right)
    if op == "*":
        return _check_int(left * right)
    if op == "/":
        if right == 0:
            raise ResilientFailure("Division by zero")
        return _check_int(_int_divide(left, right))
    if op in COMPARISONS:
        return COMPARISONS[op](left, right)
    raise _unknown(left, op, right)


def eval_float_infix(op: str, left: float, right: float) -> Value:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        if right == 0.0:
            raise ResilientFailure("Division by zero")
        return left / right
    if op in COMPARISONS:
        return COMPARISONS[op](left, right)
    raise _unknown(left, op, right)


def eval_string_infix(op: str, left: str, right: str) -> Value:
    if op == "+":
        return left + right
    if op in COMPARISONS:
        return COMPARISONS[op](left, right)
    raise _unknown(left, op, right)


def eval_boolean_infix(op: str, left: bool, right: bool) -> Value:
    if op in EQUALITY:
        return COMPARISONS[op](left, right)
    raise _unknown(left, op, right)


def eval_infix(op: str, left: Value, right: Value) -> Value:
    if _is_int(left) and _is_int(right):
        return eval_integer_infix(op, left, right)
    if _is_number(left) and _is_number(right):
        return eval_float_infix(op, float(left), float(right))
    if isinstance(left, str) and isinstance(right, str):
        return eval_string_infix(op, left, right)
    if isinstance(left, bool) and isinstance(right, bool):
        return eval_boolean_infix(op, left, right)
    raise ResilientFailure(f"Type mismatch: {pformat(left)} {op} {pformat(right)}")
