from __future__ import annotations


class VoidType:
    """Value of statements and of functions that produce nothing. Truthy."""

    def __repr__(self): return "void"

    def __eq__(self, other):
        return isinstance(other, VoidType)

    def __hash__(self):
        return hash(VoidType)


Void = VoidType()
