"""Pure functions classifying values into shapes.

The order of checks matters: timestamps and opaque handles are recognised
before anything structural, so e.g. a queue subclass carrying a ``__dict__``
is still aliased instead of being copied field by field.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import contextvars
import ctypes
import dataclasses
import datetime
import functools
import io
import logging
import mmap
import multiprocessing.queues
import queue
import re
import socket
import threading
import types
import uuid
import weakref
from array import array
from collections import deque
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel
from pydantic_core import PydanticUndefined

from ccopy.core.shape.models import Holder, Ref, Shape

INVALID_MARKERS: tuple[Any, ...] = (dataclasses.MISSING, PydanticUndefined)
"""Sentinels meaning "no value"; copying one is an InvalidValueError."""

TIMESTAMP_TYPES: tuple[type, ...] = (
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
)

SCALAR_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    Decimal,
    Fraction,
    uuid.UUID,
    Enum,
    range,
    slice,
    re.Pattern,
    PurePath,
    type(Ellipsis),
    type(NotImplemented),
)

OPAQUE_TYPES: tuple[type, ...] = (
    # Code
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.LambdaType,
    functools.partial,
    type,
    types.ModuleType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    # Channels: a copy must keep talking to the same queue
    queue.Queue,
    queue.SimpleQueue,
    asyncio.Queue,
    multiprocessing.queues.Queue,
    # Synchronisation and execution handles
    type(threading.Lock()),
    type(threading.RLock()),
    threading.Event,
    threading.Condition,
    threading.Semaphore,
    threading.Thread,
    asyncio.Lock,
    asyncio.Event,
    asyncio.Future,
    concurrent.futures.Future,
    contextvars.ContextVar,
    # Resources
    io.IOBase,
    socket.socket,
    weakref.ReferenceType,
    logging.Logger,
    BaseException,
)

UNSUPPORTED_TYPES: tuple[type, ...] = (
    memoryview,
    mmap.mmap,
    ctypes._SimpleCData,
    ctypes._Pointer,
    ctypes._CFuncPtr,
    ctypes.Array,
    ctypes.Structure,
    ctypes.Union,
)

MAPPING_TYPES: tuple[type, ...] = (dict,)
ARRAY_TYPES: tuple[type, ...] = (tuple, frozenset)
SEQUENCE_TYPES: tuple[type, ...] = (list, deque, set, bytearray, array)


def is_invalid(value: Any) -> bool:
    """Check if value is an absent/uninitialized marker.

    Args:
        value: Value to check.

    Returns:
        True for ``dataclasses.MISSING`` and ``PydanticUndefined``.
    """
    return any(value is marker for marker in INVALID_MARKERS)


def is_struct(value: Any) -> bool:
    """Check if value is a dataclass instance or a pydantic model instance."""
    if isinstance(value, BaseModel):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def has_inspectable_state(value: Any) -> bool:
    """Check if a plain object exposes its state through ``__dict__`` or ``__slots__``."""
    if hasattr(value, "__dict__"):
        return True
    return any("__slots__" in vars(klass) for klass in type(value).__mro__[:-1])


def classify(value: Any, opaque: tuple[type, ...] = ()) -> Shape:
    """Determine the shape of a value.

    Args:
        value: Value to classify.
        opaque: Extra types to always alias, on top of OPAQUE_TYPES.

    Returns:
        The value's Shape. Plain objects with inspectable state are STRUCT;
        anything with no inspectable state left over is UNSUPPORTED.
    """
    if is_invalid(value):
        return Shape.INVALID
    if isinstance(value, TIMESTAMP_TYPES):
        return Shape.TIMESTAMP
    if opaque and isinstance(value, opaque):
        return Shape.OPAQUE
    if isinstance(value, SCALAR_TYPES) or type(value) is object:
        return Shape.SCALAR
    if isinstance(value, OPAQUE_TYPES):
        return Shape.OPAQUE
    if isinstance(value, UNSUPPORTED_TYPES):
        return Shape.UNSUPPORTED
    if isinstance(value, Ref):
        return Shape.POINTER
    if isinstance(value, (Holder, types.MappingProxyType)):
        return Shape.DYNAMIC
    if is_struct(value):
        return Shape.STRUCT
    if isinstance(value, MAPPING_TYPES):
        return Shape.MAPPING
    if isinstance(value, ARRAY_TYPES):
        return Shape.ARRAY
    if isinstance(value, SEQUENCE_TYPES):
        return Shape.SEQUENCE
    if has_inspectable_state(value):
        return Shape.STRUCT
    return Shape.UNSUPPORTED
