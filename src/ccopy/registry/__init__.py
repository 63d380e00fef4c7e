"""Transformer registry."""

from ccopy.registry.models import TransformerSpec
from ccopy.registry.registry import Config, build_spec

__all__ = [
    "Config",
    "TransformerSpec",
    "build_spec",
]
