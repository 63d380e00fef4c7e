"""ccopy: customizable deep copy of object graphs.

Usage:
    from dataclasses import dataclass
    from ccopy import Config, tagged

    @dataclass
    class User:
        id: int
        name: str = tagged("anonymise_name")

    config = Config(anonymise_name=lambda name: "john doe")
    config.copy(User(id=2, name="Secret name"))
    # User(id=2, name='john doe')
"""

__version__ = "0.1.0"

# Configuration
from ccopy.config import CopySettings

# Core primitives
from ccopy.core import (
    Copied,
    CopyTag,
    Holder,
    Ref,
    Shape,
    classify,
    tagged,
    tagged_field,
)

# Copy engine
from ccopy.dispatch import Dispatcher, copy

# Errors
from ccopy.errors import (
    CopyDepthError,
    CopyError,
    InvalidValueError,
    MissingTransformerError,
    TransformerSignatureError,
    TransformerTypeError,
    UnresolvedTagError,
    UnsupportedShapeError,
)

# Registry
from ccopy.registry import Config, TransformerSpec

__all__ = [
    # Version
    "__version__",
    # Core
    "Copied",
    "CopyTag",
    "Holder",
    "Ref",
    "Shape",
    "classify",
    "tagged",
    "tagged_field",
    # Registry
    "Config",
    "TransformerSpec",
    # Copy engine
    "Dispatcher",
    "copy",
    # Config
    "CopySettings",
    # Errors
    "CopyError",
    "InvalidValueError",
    "MissingTransformerError",
    "CopyDepthError",
    "TransformerSignatureError",
    "UnsupportedShapeError",
    "TransformerTypeError",
    "UnresolvedTagError",
]
