"""Core functionalities: stateless models and pure operations.

Architecture Note:
    core/ contains pure, stateless building blocks (shapes, field tags).
    The registry (registry/) and the copy engine (dispatch/) are built on top.
"""

from ccopy.core.shape import Holder, Ref, Shape, classify, is_invalid, is_struct
from ccopy.core.tags import (
    CopyTag,
    FieldOrigin,
    FieldSpec,
    plain_fields,
    runtime_classes,
    struct_fields,
    tagged,
    tagged_field,
)
from ccopy.core.types import Copied

__all__ = [
    # Types
    "Copied",
    # Shape
    "Shape",
    "Ref",
    "Holder",
    "classify",
    "is_invalid",
    "is_struct",
    # Tags
    "CopyTag",
    "FieldSpec",
    "FieldOrigin",
    "tagged",
    "tagged_field",
    "struct_fields",
    "plain_fields",
    "runtime_classes",
]
