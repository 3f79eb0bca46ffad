from __future__ import annotations

from resilient import Value


class ReturnValue:
    """Control-flow marker wrapping the value of a `return` statement.

    Statement sequences stop when they see one and pass it outward; a function
    call boundary unwraps it. User code never observes the marker itself.
    """

    __slots__ = ("value",)

    def __init__(self, value: Value):
        self.value = value

    def __repr__(self):
        return f"ReturnValue({self.value!r})"
