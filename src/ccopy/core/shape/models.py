"""Shape models: the closed set of value categories and the cell types ccopy adds.

Every value reaching the copy engine is classified into exactly one Shape.
Python has no pointers and no interface values, so two small container types
stand in for them:

    Ref[T]      a mutable cell pointing at one value (pointer shape)
    Holder[T]   a box whose held value's type is only known at runtime
                (dynamic container shape)
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any


class Shape(Enum):
    """Structural category of a value; decides its copy strategy."""

    INVALID = auto()  # Absent/uninitialized marker, copying it is an error
    TIMESTAMP = auto()  # Calendar/time value, immutable, returned unchanged
    SCALAR = auto()  # Value-semantic immutable, returned unchanged
    OPAQUE = auto()  # Always aliased: functions, queues, locks, handles
    POINTER = auto()  # Ref cell, copied into a new cell
    DYNAMIC = auto()  # Holder, copied into a new holder of the same type
    STRUCT = auto()  # Dataclass, pydantic model or plain object with fields
    MAPPING = auto()  # dict and subclasses, keys and values copied
    ARRAY = auto()  # Fixed length: tuple, named tuple, frozenset
    SEQUENCE = auto()  # Resizable: list, deque, set, bytearray
    UNSUPPORTED = auto()  # Raw memory (ctypes, memoryview, mmap), fatal

    @property
    def passthrough(self) -> bool:
        """True if values of this shape are returned as-is."""
        return self in (Shape.TIMESTAMP, Shape.SCALAR, Shape.OPAQUE)


class Ref[T]:
    """Mutable reference cell.

    Plays the role of a pointer: two structures holding the same Ref observe
    each other's writes through ``ref.value``. A copied Ref is a new cell
    pointing at a copy of the target. Use ``None`` for "no target".

    Usage:
        @dataclass
        class Node:
            counter: Ref[int] | None = None
    """

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def get(self) -> T:
        """Return the referenced value."""
        return self.value

    def set(self, value: T) -> None:
        """Point the cell at a new value."""
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return bool(self.value == other.value)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


class Holder[T]:
    """Base class for containers whose held value's type is resolved at runtime.

    A copy allocates a new holder of the same class (without running
    ``__init__``) and stores the copy of the held value in it. State that
    subclasses keep next to the held value is not carried over.
    """

    __slots__ = ("_held",)

    def __init__(self, value: T) -> None:
        self._held = value

    def unwrap(self) -> T:
        """Return the held value."""
        return self._held

    @classmethod
    def rewrap(cls, value: Any) -> Holder[Any]:
        """Create a holder of this class around ``value`` without calling ``__init__``."""
        holder = cls.__new__(cls)
        holder._held = value
        return holder

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return bool(self._held == other._held)  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._held!r})"
