"""Shape functionality: value categories, pointer/holder cells, and classification."""

from ccopy.core.shape.models import Holder, Ref, Shape
from ccopy.core.shape.operations import (
    OPAQUE_TYPES,
    SCALAR_TYPES,
    TIMESTAMP_TYPES,
    UNSUPPORTED_TYPES,
    classify,
    is_invalid,
    is_struct,
)

__all__ = [
    # Models
    "Shape",
    "Ref",
    "Holder",
    # Operations
    "classify",
    "is_invalid",
    "is_struct",
    "SCALAR_TYPES",
    "TIMESTAMP_TYPES",
    "OPAQUE_TYPES",
    "UNSUPPORTED_TYPES",
]
