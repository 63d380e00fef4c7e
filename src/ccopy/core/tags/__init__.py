"""Field tag functionality: declaration helpers and field descriptions."""

from ccopy.core.tags.models import CopyTag, FieldOrigin, FieldSpec
from ccopy.core.tags.operations import (
    annotated_tag,
    nested_struct_types,
    plain_fields,
    runtime_classes,
    struct_fields,
    tagged,
    tagged_field,
)

__all__ = [
    # Models
    "CopyTag",
    "FieldSpec",
    "FieldOrigin",
    # Operations
    "tagged",
    "tagged_field",
    "annotated_tag",
    "struct_fields",
    "plain_fields",
    "runtime_classes",
    "nested_struct_types",
]
