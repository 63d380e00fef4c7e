"""Core type definitions for ccopy."""

type Copied[T] = T
"""Type alias indicating a value is a deep copy of its input.

When you see `Copied[T]` in a return type, the returned value shares no
mutable state with the argument, except for values that are always aliased
(functions, queues, locks, timestamps and other opaque or immutable values).
"""
