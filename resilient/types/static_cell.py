from __future__ import annotations

from resilient import Value


class StaticCell:
    """Storage of one `static let` declaration.

    The declaring scope binds the name to the cell itself; reads and
    assignments go through `value`. Live-block snapshots copy the binding,
    not the cell, so a static keeps its value across rollbacks.
    """

    __slots__ = ("value",)

    def __init__(self, value: Value):
        self.value = value

    def __repr__(self):
        return f"StaticCell({self.value!r})"


def static_key(name: str, line: int, column: int) -> str:
    """Key of a declaration in the statics store, e.g. `count@3:5`."""
    return f"{name}@{line}:{column}"
