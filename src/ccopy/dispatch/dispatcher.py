"""Recursive copy engine.

The Dispatcher classifies each value (see ``ccopy.core.shape.classify``) and
hands it to the strategy for its shape. Strategies recurse back through
``_copy`` for every child value, so a single copy is one synchronous call
stack. Tagged struct fields are the only place the registry is consulted.

Usage:
    config = Config(anonymise_name=lambda name: "john doe")
    copied = Dispatcher(config).copy(user)  # same as config.copy(user)
"""

from __future__ import annotations

import dataclasses
import functools
import logging
import types
from array import array
from collections import Counter, OrderedDict, defaultdict, deque
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from ccopy.core.shape import Holder, Ref, Shape, classify
from ccopy.core.tags import FieldSpec, plain_fields, runtime_classes, struct_fields
from ccopy.core.types import Copied
from ccopy.errors import (
    CopyDepthError,
    InvalidValueError,
    MissingTransformerError,
    TransformerTypeError,
    UnsupportedShapeError,
)

if TYPE_CHECKING:
    from ccopy.registry import Config

logger = logging.getLogger(__name__)

_UNSET = object()

_CONSTRUCTIBLE_MAPPINGS: tuple[type, ...] = (dict, OrderedDict, Counter)

type Strategy = Callable[[Any, str, int], Any]


def _attr_path(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _item_path(path: str, key: Any) -> str:
    return f"{path}[{key!r}]"


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__qualname__
    return repr(annotation)


class Dispatcher:
    """Deep copies values, one strategy per Shape.

    Args:
        config: Registry providing transformers, opaque types and settings.
    """

    __slots__ = ("_config", "_tag_key", "_max_depth", "_check_returns", "_strategies")

    def __init__(self, config: Config) -> None:
        self._config = config
        settings = config.settings
        self._tag_key = settings.tag_key
        self._max_depth = settings.max_depth
        self._check_returns = settings.check_return_types
        self._strategies: dict[Shape, Strategy] = {
            Shape.POINTER: self._copy_pointer,
            Shape.DYNAMIC: self._copy_dynamic,
            Shape.STRUCT: self._copy_struct,
            Shape.MAPPING: self._copy_mapping,
            Shape.ARRAY: self._copy_array,
            Shape.SEQUENCE: self._copy_sequence,
        }

    def copy[T](self, value: T) -> Copied[T]:
        """Deep copy value. See ``Config.copy`` for the full contract."""
        result: Copied[T] = self._copy(value, "", 0)
        return result

    def _copy(self, value: Any, path: str, depth: int) -> Any:
        if depth > self._max_depth:
            raise CopyDepthError(self._max_depth, path)

        shape = classify(value, self._config.opaque)
        if shape.passthrough:
            return value
        if shape is Shape.INVALID:
            raise InvalidValueError("invalid value", path)
        if shape is Shape.UNSUPPORTED:
            raise UnsupportedShapeError(type(value), path)
        return self._strategies[shape](value, path, depth + 1)

    # Pointer / dynamic container

    def _copy_pointer(self, ref: Ref[Any], path: str, depth: int) -> Ref[Any]:
        target = self._copy(ref.value, _attr_path(path, "value"), depth)
        cls = type(ref)
        new = cls.__new__(cls)
        new.value = target
        return new

    def _copy_dynamic(
        self, holder: Holder[Any] | types.MappingProxyType[Any, Any], path: str, depth: int
    ) -> Any:
        if isinstance(holder, types.MappingProxyType):
            return types.MappingProxyType(self._copy(holder.copy(), path, depth))
        held = self._copy(holder.unwrap(), _attr_path(path, "unwrap()"), depth)
        return type(holder).rewrap(held)

    # Struct

    def _copy_struct(self, value: Any, path: str, depth: int) -> Any:
        if isinstance(value, BaseModel):
            return self._copy_model(value, path, depth)

        cls = type(value)
        if dataclasses.is_dataclass(value):
            fields = struct_fields(cls, self._tag_key)
        else:
            fields = plain_fields(value)

        copied: dict[str, Any] = {}
        for f in fields:
            if f.private:
                continue
            current = getattr(value, f.name, _UNSET)
            if current is _UNSET:
                continue
            copied[f.name] = self._copy_field(f, current, path, depth)

        new = cls.__new__(cls)
        for f in fields:
            if f.private and f.default_factory is not None:
                object.__setattr__(new, f.name, f.default_factory())
        for name, field_value in copied.items():
            object.__setattr__(new, name, field_value)
        return new

    def _copy_instance_state(self, source: Any, new: Any, path: str, depth: int) -> None:
        """Copy public attributes a container subclass keeps in its ``__dict__``."""
        for name, attr in (getattr(source, "__dict__", None) or {}).items():
            if name.startswith("_"):
                continue
            object.__setattr__(new, name, self._copy(attr, _attr_path(path, name), depth))

    def _copy_model(self, model: BaseModel, path: str, depth: int) -> BaseModel:
        cls = type(model)
        copied: dict[str, Any] = {}
        for f in struct_fields(cls, self._tag_key):
            current = getattr(model, f.name, _UNSET)
            if current is _UNSET:
                continue
            copied[f.name] = self._copy_field(f, current, path, depth)
        for name, extra in (model.model_extra or {}).items():
            copied[name] = self._copy(extra, _attr_path(path, name), depth)
        return cls.model_construct(_fields_set=set(model.model_fields_set), **copied)

    def _copy_field(self, f: FieldSpec, current: Any, path: str, depth: int) -> Any:
        field_path = _attr_path(path, f.name)
        if not f.tagged:
            return self._copy(current, field_path, depth)

        spec = self._config.spec(f.tag)
        if spec is None:
            raise MissingTransformerError(f.tag, field_path)
        logger.debug(f"Applying copy customiser {f.tag!r} to {field_path}")
        result = spec(current)
        if self._check_returns:
            expected = runtime_classes(f.annotation)
            if expected is not None and not isinstance(result, expected):
                raise TransformerTypeError(
                    f.tag, _type_name(f.annotation), type(result), field_path
                )
        return result

    # Containers

    def _copy_mapping(self, mapping: dict[Any, Any], path: str, depth: int) -> dict[Any, Any]:
        cls = type(mapping)
        if isinstance(mapping, defaultdict):
            new = cls(mapping.default_factory)
        elif cls in _CONSTRUCTIBLE_MAPPINGS:
            new = cls()
        else:
            new = cls.__new__(cls)
        for key, item in mapping.items():
            item_path = _item_path(path, key)
            new_key = self._copy(key, item_path, depth)
            new[new_key] = self._copy(item, item_path, depth)
        self._copy_instance_state(mapping, new, path, depth)
        return new

    def _copy_array(self, items: tuple[Any, ...] | frozenset[Any], path: str, depth: int) -> Any:
        copied = [self._copy(item, _item_path(path, i), depth) for i, item in enumerate(items)]
        cls = type(items)
        if isinstance(items, frozenset):
            return cls(copied)
        if cls is tuple:
            return tuple(copied)
        if hasattr(cls, "_make"):
            return cls._make(copied)
        return tuple.__new__(cls, copied)

    def _copy_sequence(self, items: Any, path: str, depth: int) -> Any:
        cls = type(items)
        if isinstance(items, (bytearray, array)):
            return items[:]
        copied = [self._copy(item, _item_path(path, i), depth) for i, item in enumerate(items)]
        if cls is list:
            return copied
        if isinstance(items, deque):
            new = cls(copied, items.maxlen)
        else:
            new = cls.__new__(cls)
            if isinstance(items, list):
                list.extend(new, copied)
            else:
                set.update(new, copied)
        self._copy_instance_state(items, new, path, depth)
        return new


@functools.cache
def _default_config() -> Config:
    from ccopy.registry import Config

    return Config()


def copy[T](value: T, config: Config | None = None) -> Copied[T]:
    """Deep copy value with an optional transformer registry.

    Args:
        value: Any acyclic object graph.
        config: Registry to use; an empty registry when omitted, so any
            tagged field raises MissingTransformerError.

    Returns:
        An independent copy of value.
    """
    return (config if config is not None else _default_config()).copy(value)
