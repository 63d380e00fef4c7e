"""Registry models."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class TransformerSpec:
    """A registered transformer and the type it declares to accept.

    Attributes:
        tag: Registry key, matched against field tags.
        func: Callable receiving the field's current value and returning
            its replacement.
        expected_type: Annotation of the transformer's parameter, None when
            the parameter is unannotated.
        returns: Return annotation, None when unannotated.
    """

    tag: str
    func: Callable[[Any], Any]
    expected_type: Any = None
    returns: Any = None

    def __call__(self, value: Any) -> Any:
        return self.func(value)
