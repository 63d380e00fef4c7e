"""Transformer registry: tag name -> transformer.

Usage:
    def anonymise_name(name: str) -> str:
        return "john doe"

    config = Config({"anonymise_name": anonymise_name})
    config = Config(anonymise_name=anonymise_name)  # same thing

    copied = config.copy(user)
"""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from ccopy.config.settings import CopySettings
from ccopy.core.tags import nested_struct_types, runtime_classes, struct_fields
from ccopy.core.types import Copied
from ccopy.errors import MissingTransformerError, TransformerSignatureError
from ccopy.registry.models import TransformerSpec

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _resolved_hints(func: Callable[..., Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError):
        return dict(getattr(func, "__annotations__", {}) or {})


def build_spec(tag: str, func: Any, validate: bool = True) -> TransformerSpec:
    """Inspect a transformer and build its TransformerSpec.

    Args:
        tag: Registry key.
        func: Transformer callable.
        validate: Reject callables that cannot take exactly one positional argument.

    Returns:
        Spec recording the transformer's parameter and return annotations.

    Raises:
        TransformerSignatureError: If func is not callable, or (when validating)
            its signature does not accept exactly one positional argument.
    """
    if not tag:
        raise TransformerSignatureError(tag, "tag must be a non-empty string")
    if not callable(func):
        raise TransformerSignatureError(tag, f"{type(func).__name__} is not callable")

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures are accepted as-is
        return TransformerSpec(tag=tag, func=func)

    params = list(signature.parameters.values())
    if validate:
        required = [
            p for p in params if p.default is inspect.Parameter.empty and p.kind in _POSITIONAL
        ]
        keyword_only = [
            p
            for p in params
            if p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty
        ]
        takes_one = any(p.kind in _POSITIONAL for p in params) or any(
            p.kind is inspect.Parameter.VAR_POSITIONAL for p in params
        )
        if len(required) > 1 or keyword_only or not takes_one:
            raise TransformerSignatureError(
                tag, f"must accept exactly one positional argument, got {signature}"
            )

    hints = _resolved_hints(func)
    first = next((p for p in params if p.kind in _POSITIONAL), None)
    expected = hints.get(first.name) if first is not None else None
    return TransformerSpec(tag=tag, func=func, expected_type=expected, returns=hints.get("return"))


def _accepts(param_classes: tuple[type, ...], field_classes: tuple[type, ...]) -> bool:
    return all(issubclass(fc, param_classes) for fc in field_classes)


class Config(Mapping[str, Callable[[Any], Any]]):
    """Immutable registry mapping field tags to transformer functions.

    A transformer receives the current value of a tagged field and returns
    the value the copy gets in its place, of the same type.

    Signatures are checked when the registry is built. Whether every tag used
    by a type is registered is only known when a tagged field is copied,
    unless ``check()`` is called up front.

    Args:
        transformers: Mapping of tag -> transformer.
        opaque: Extra types whose values are always aliased, never copied.
        settings: Engine settings; loaded from the environment when omitted.
        **kwargs: Additional tag=transformer registrations.

    Raises:
        TransformerSignatureError: If a transformer is not callable or does
            not take exactly one positional argument.
    """

    __slots__ = ("_specs", "_opaque", "_settings")

    def __init__(
        self,
        transformers: Mapping[str, Callable[[Any], Any]] | None = None,
        /,
        *,
        opaque: tuple[type, ...] = (),
        settings: CopySettings | None = None,
        **kwargs: Callable[[Any], Any],
    ) -> None:
        self._settings = settings if settings is not None else CopySettings()
        self._opaque = tuple(opaque)
        merged = {**(transformers or {}), **kwargs}
        validate = self._settings.validate_signatures
        if not validate and merged:
            logger.warning("Transformer signature validation disabled")
        self._specs: dict[str, TransformerSpec] = {
            tag: build_spec(tag, func, validate=validate) for tag, func in merged.items()
        }
        for tag in self._specs:
            logger.debug(f"Registered copy customiser: {tag}")

    # Mapping interface

    def __getitem__(self, tag: str) -> Callable[[Any], Any]:
        return self._specs[tag].func

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        return f"Config({sorted(self._specs)!r})"

    @property
    def settings(self) -> CopySettings:
        """Engine settings used by copies made through this registry."""
        return self._settings

    @property
    def opaque(self) -> tuple[type, ...]:
        """Caller-registered types that are always aliased."""
        return self._opaque

    def spec(self, tag: str) -> TransformerSpec | None:
        """Get the TransformerSpec registered for a tag.

        Args:
            tag: Tag to look up.

        Returns:
            The TransformerSpec if registered, None otherwise.
        """
        return self._specs.get(tag)

    def extend(
        self,
        transformers: Mapping[str, Callable[[Any], Any]] | None = None,
        /,
        *,
        opaque: tuple[type, ...] = (),
        **kwargs: Callable[[Any], Any],
    ) -> Config:
        """Return a new registry with extra registrations; this one is unchanged.

        Registrations for an existing tag replace it in the new registry.
        """
        merged = {**dict(self), **(transformers or {}), **kwargs}
        return Config(merged, opaque=self._opaque + tuple(opaque), settings=self._settings)

    def check(self, *types: type) -> Config:
        """Validate up front that the given struct types can be copied.

        Walks every dataclass/pydantic type given, and every struct type
        reachable through their field annotations.

        Args:
            *types: Dataclass or pydantic model types.

        Returns:
            self, for chaining.

        Raises:
            MissingTransformerError: If a field tag has no registration.
            TransformerSignatureError: If a transformer's annotated parameter
                type does not accept the field's declared type.
            TypeError: If a given type is not a dataclass or pydantic model.
        """
        seen: set[type] = set()
        pending = list(types)
        while pending:
            cls = pending.pop()
            if cls in seen:
                continue
            seen.add(cls)
            for f in struct_fields(cls, self._settings.tag_key):
                if f.private:
                    continue
                if not f.tagged:
                    pending.extend(nested_struct_types(f.annotation) - seen)
                    continue
                spec = self._specs.get(f.tag)
                if spec is None:
                    raise MissingTransformerError(f.tag, f"{cls.__qualname__}.{f.name}")
                param_classes = runtime_classes(spec.expected_type)
                field_classes = runtime_classes(f.annotation)
                if param_classes is None or field_classes is None:
                    continue
                if not _accepts(param_classes, field_classes):
                    raise TransformerSignatureError(
                        f.tag,
                        f"parameter type {spec.expected_type!r} does not accept "
                        f"{cls.__qualname__}.{f.name}: {f.annotation!r}",
                    )
        return self

    def copy[T](self, value: T) -> Copied[T]:
        """Deep copy a value, applying registered transformers to tagged fields.

        Private fields (leading underscore) are not read. Opaque values
        (functions, queues, locks, ...) and timestamps are shared with the
        original.

        Args:
            value: Any acyclic object graph.

        Returns:
            An independent copy of value.

        Raises:
            InvalidValueError: If an absent marker (MISSING) is met.
            MissingTransformerError: If a tagged field has no registration.
            CopyDepthError: If the graph is deeper than settings.max_depth.
            UnsupportedShapeError: Fatal, raw memory found in the graph.
            TransformerTypeError: Fatal, transformer returned the wrong type.
        """
        # Late import to avoid circular dependency
        from ccopy.dispatch import Dispatcher

        result: Copied[T] = Dispatcher(self).copy(value)
        return result
