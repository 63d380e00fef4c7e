"""Tag models: field tag markers and resolved field descriptions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


@dataclass(slots=True, frozen=True)
class CopyTag:
    """Annotated marker naming the transformer that copies a field.

    Usage:
        @dataclass
        class User:
            name: Annotated[str, CopyTag("anonymise_name")]
    """

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("CopyTag name must be a non-empty string")


class FieldOrigin(Enum):
    """Kind of structure a field was read from."""

    DATACLASS = auto()
    PYDANTIC = auto()
    PLAIN = auto()


@dataclass(slots=True, frozen=True)
class FieldSpec:
    """One field of a struct type, as seen by the copy engine.

    Attributes:
        name: Attribute name.
        tag: Transformer tag, None for a default recursive copy.
        annotation: Declared type, resolved where possible (may be a string
            or None when it cannot be resolved).
        private: True if the name starts with an underscore. Private fields
            are never read.
        origin: Which kind of structure declared the field.
        default_factory: Produces the field's declared default, None if the
            field has no default.
    """

    name: str
    tag: str | None
    annotation: Any
    private: bool
    origin: FieldOrigin
    default_factory: Callable[[], Any] | None = None

    @property
    def tagged(self) -> bool:
        """True if a transformer governs this field."""
        return self.tag is not None
