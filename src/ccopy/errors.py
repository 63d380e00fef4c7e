"""Exceptions raised while copying.

Two families:
    CopyError and its subclasses are recoverable. They are raised for data or
    configuration conditions a caller can reasonably handle (an absent value,
    a tag with no registered transformer, a graph deeper than allowed).

    UnsupportedShapeError, TransformerTypeError and UnresolvedTagError are
    fatal. They signal a programming defect (raw memory exposed as copyable
    data, a transformer returning the wrong type, a tag hidden in an
    annotation that cannot be evaluated) and deliberately do not derive from
    CopyError, so an ``except CopyError`` boundary never hides them.
"""

from __future__ import annotations


class CopyError(Exception):
    """Base class for recoverable copy failures.

    Attributes:
        path: Location of the failing value inside the copied graph,
            e.g. ``"Order.items[2].name"``. Empty for top-level failures.
    """

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} (at {self.path})"
        return self.message


class InvalidValueError(CopyError):
    """Raised when an absent/uninitialized marker is found where a value is required."""

    pass


class MissingTransformerError(CopyError):
    """Raised when a field tag has no transformer registered for it."""

    def __init__(self, tag: str, path: str = "") -> None:
        super().__init__(f"missing copy customiser for: {tag}", path)
        self.tag = tag


class CopyDepthError(CopyError):
    """Raised when the graph is nested deeper than the configured limit.

    Copying assumes acyclic data; a cyclic graph ends here instead of
    exhausting the interpreter stack.
    """

    def __init__(self, max_depth: int, path: str = "") -> None:
        super().__init__(
            f"object graph exceeds max depth of {max_depth} (cyclic data?)", path
        )
        self.max_depth = max_depth


class TransformerSignatureError(CopyError, TypeError):
    """Raised at registry construction when a transformer cannot be used for a tag."""

    def __init__(self, tag: str, reason: str) -> None:
        super().__init__(f"invalid copy customiser for {tag!r}: {reason}")
        self.tag = tag


class UnsupportedShapeError(RuntimeError):
    """Fatal: value exposes raw memory (ctypes pointers, memoryview, mmap, ...)."""

    def __init__(self, value_type: type, path: str = "") -> None:
        location = f" at {path}" if path else ""
        super().__init__(f"unsupported type: {value_type.__qualname__}{location}")
        self.value_type = value_type
        self.path = path


class TransformerTypeError(TypeError):
    """Fatal: a transformer returned a value the field's declared type does not accept."""

    def __init__(self, tag: str, expected: str, got: type, path: str = "") -> None:
        location = f" at {path}" if path else ""
        super().__init__(
            f"copy customiser {tag!r} returned {got.__qualname__}, "
            f"expected {expected}{location}"
        )
        self.tag = tag
        self.path = path


class UnresolvedTagError(TypeError):
    """Fatal: a field annotation mentions CopyTag but cannot be evaluated.

    Usually a ``from __future__ import annotations`` module whose annotation
    names a type imported only under ``TYPE_CHECKING``. Copying the field by
    default would skip its transformer, so the field is rejected instead.
    """

    def __init__(self, owner: type, field: str, annotation: str) -> None:
        super().__init__(
            f"cannot resolve tagged annotation of {owner.__qualname__}.{field}: "
            f"{annotation!r}; import its types at runtime or use tagged()"
        )
        self.owner = owner
        self.field = field
        self.annotation = annotation
