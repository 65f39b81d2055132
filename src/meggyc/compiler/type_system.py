"""
Semantic types of MeggyJava expressions and statements.

The set is closed: there are no user-defined or compound types, and two types
are compatible only when they are the same member or when a typing rule
explicitly widens BYTE to INT.
"""

from __future__ import annotations

from enum import Enum, auto


class Type(Enum):
    """Semantic type inferred for an AST node."""

    INT = auto()
    BYTE = auto()
    BOOL = auto()
    VOID = auto()
    BUTTON = auto()
    COLOR = auto()

    def __str__(self) -> str:
        return self.name


NUMERIC_TYPES: frozenset[Type] = frozenset({Type.INT, Type.BYTE})


__all__ = [
    "Type",
    "NUMERIC_TYPES",
]
