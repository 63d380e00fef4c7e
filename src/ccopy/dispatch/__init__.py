"""Recursive copy engine."""

from ccopy.dispatch.dispatcher import Dispatcher, copy

__all__ = [
    "Dispatcher",
    "copy",
]
