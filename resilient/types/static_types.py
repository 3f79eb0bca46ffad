"""Static types used by the type checker.

`ANY` is an explicit escape hatch rather than a missing type: every
compatibility rule names it, and it is compatible with every other type.
"""

from __future__ import annotations

from dataclasses import dataclass


class StaticType:
    """Base class for static types."""


@dataclass(frozen=True)
class PrimitiveType(StaticType):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class AnyType(StaticType):
    def __str__(self):
        return "any"


@dataclass(frozen=True)
class FunctionType(StaticType):
    params: tuple[StaticType, ...]
    return_type: StaticType

    def __str__(self):
        return f"fn({', '.join(str(p) for p in self.params)}) -> {self.return_type}"


INT = PrimitiveType("int")
FLOAT = PrimitiveType("float")
STRING = PrimitiveType("string")
BOOL = PrimitiveType("bool")
VOID = PrimitiveType("void")
ANY = AnyType()

NUMERIC = (INT, FLOAT)

TYPE_NAMES: dict[str, StaticType] = {
    "int": INT,
    "float": FLOAT,
    "string": STRING,
    "bool": BOOL,
    "void": VOID,
    "": ANY,
}


def compatible(a: StaticType, b: StaticType) -> bool:
    """True if the types agree or either side is ANY."""
    return a == ANY or b == ANY or a == b
