"""Pure functions declaring field tags and describing struct fields.

Tags can be declared four ways:

    @dataclass
    class User:
        name: str = tagged("anonymise_name")                   # field metadata
        email: Annotated[str, CopyTag("anonymise_email")] = ""  # Annotated marker

    class Account(BaseModel):
        owner: str = tagged_field("anonymise_name")            # json_schema_extra
        iban: Annotated[str, CopyTag("mask")]                   # Annotated marker

    class Legacy:
        __ccopy_tags__ = {"name": "anonymise_name"}             # plain classes
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
import types
import typing
from typing import Annotated, Any, Literal, TypeVar, Union

from pydantic import BaseModel, Field

from ccopy.config.settings import DEFAULT_TAG_KEY
from ccopy.core.tags.models import CopyTag, FieldOrigin, FieldSpec
from ccopy.errors import UnresolvedTagError

logger = logging.getLogger(__name__)

PLAIN_TAGS_ATTR = "__ccopy_tags__"


def tagged(tag: str, *, key: str = DEFAULT_TAG_KEY, **field_kwargs: Any) -> Any:
    """Declare a dataclass field copied by the transformer registered under ``tag``.

    Args:
        tag: Registry key of the transformer.
        key: Metadata key holding the tag (must match CopySettings.tag_key).
        **field_kwargs: Passed through to ``dataclasses.field``.

    Returns:
        A ``dataclasses.field`` carrying the tag in its metadata.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[key] = tag
    return dataclasses.field(metadata=metadata, **field_kwargs)


def tagged_field(tag: str, *, key: str = DEFAULT_TAG_KEY, **field_kwargs: Any) -> Any:
    """Declare a pydantic model field copied by the transformer registered under ``tag``.

    Args:
        tag: Registry key of the transformer.
        key: Key holding the tag inside ``json_schema_extra``.
        **field_kwargs: Passed through to ``pydantic.Field``.

    Returns:
        A pydantic ``FieldInfo`` carrying the tag.
    """
    extra = dict(field_kwargs.pop("json_schema_extra", None) or {})
    extra[key] = tag
    return Field(json_schema_extra=extra, **field_kwargs)


def _resolve_annotation(klass: type, name: str, raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    # A throwaway class carrying only this field, so one bad annotation
    # cannot hide the others.
    field_holder = type(
        klass.__name__, (), {"__annotations__": {name: raw}, "__module__": klass.__module__}
    )
    localns = {
        klass.__name__: klass,
        **{p.__name__: p for p in getattr(klass, "__type_params__", ())},
        **vars(klass),
    }
    try:
        return typing.get_type_hints(field_holder, localns=localns, include_extras=True)[name]
    except (NameError, TypeError, SyntaxError) as e:
        logger.debug(f"Cannot resolve {klass.__qualname__}.{name}: {raw!r} ({e})")
        return raw


@functools.lru_cache(maxsize=1024)
def _type_hints(cls: type) -> dict[str, Any]:
    """Resolve annotations of ``cls`` field by field, keeping Annotated metadata.

    A field whose string annotation cannot be evaluated (a ``TYPE_CHECKING``
    import, a type local to a function) keeps the raw string; the other
    fields are still resolved.
    """
    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        for name, raw in inspect.get_annotations(klass).items():
            hints[name] = _resolve_annotation(klass, name, raw)
    return hints


def _check_unresolved_tag(cls: type, name: str, annotation: Any) -> None:
    if isinstance(annotation, str) and CopyTag.__name__ in annotation:
        raise UnresolvedTagError(cls, name, annotation)


def annotated_tag(annotation: Any) -> str | None:
    """Return the CopyTag name carried by an ``Annotated[...]`` annotation, if any."""
    if typing.get_origin(annotation) is not Annotated:
        return None
    for extra in annotation.__metadata__:
        if isinstance(extra, CopyTag):
            return extra.name
    return None


def strip_annotated(annotation: Any) -> Any:
    """Return the underlying type of an ``Annotated[...]`` annotation."""
    if typing.get_origin(annotation) is Annotated:
        return typing.get_args(annotation)[0]
    return annotation


def _dataclass_default(f: dataclasses.Field[Any]) -> Any:
    if f.default is not dataclasses.MISSING:
        default = f.default
        return lambda: default
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory
    return None


def _dataclass_fields(cls: type, tag_key: str) -> tuple[FieldSpec, ...]:
    hints = _type_hints(cls)
    specs = []
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        tag = f.metadata.get(tag_key) or annotated_tag(annotation)
        if tag is None:
            _check_unresolved_tag(cls, f.name, annotation)
        specs.append(
            FieldSpec(
                name=f.name,
                tag=tag,
                annotation=strip_annotated(annotation),
                private=f.name.startswith("_"),
                origin=FieldOrigin.DATACLASS,
                default_factory=_dataclass_default(f),
            )
        )
    return tuple(specs)


def _pydantic_fields(cls: type[BaseModel], tag_key: str) -> tuple[FieldSpec, ...]:
    specs = []
    for name, info in cls.model_fields.items():
        tag = None
        if isinstance(info.json_schema_extra, dict):
            tag = info.json_schema_extra.get(tag_key)
        if tag is None:
            tag = next((m.name for m in info.metadata if isinstance(m, CopyTag)), None)
        specs.append(
            FieldSpec(
                name=name,
                tag=tag,
                annotation=info.annotation,
                private=False,
                origin=FieldOrigin.PYDANTIC,
            )
        )
    return tuple(specs)


@functools.lru_cache(maxsize=1024)
def struct_fields(cls: type, tag_key: str = DEFAULT_TAG_KEY) -> tuple[FieldSpec, ...]:
    """Describe the declared fields of a dataclass or pydantic model type.

    Args:
        cls: Dataclass or BaseModel subclass.
        tag_key: Metadata key tags are declared under.

    Returns:
        Field descriptions in declaration order.

    Raises:
        TypeError: If cls is neither a dataclass nor a pydantic model.
        UnresolvedTagError: If a field annotation mentions CopyTag but cannot
            be evaluated.
    """
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return _pydantic_fields(cls, tag_key)
    if dataclasses.is_dataclass(cls):
        return _dataclass_fields(cls, tag_key)
    raise TypeError(f"{cls.__qualname__} is not a dataclass or pydantic model")


def _instance_attributes(obj: Any) -> list[str]:
    names = list(getattr(obj, "__dict__", {}))
    for klass in type(obj).__mro__[:-1]:
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__") or slot in names:
                continue
            # Private slots are never read, not even to test whether they are set
            if slot.startswith("_"):
                continue
            if hasattr(obj, slot):
                names.append(slot)
    return names


def plain_fields(obj: Any) -> tuple[FieldSpec, ...]:
    """Describe the attributes of a plain (non-dataclass, non-pydantic) object.

    Fields are the attributes currently set on the instance. Tags come from
    the class' ``__ccopy_tags__`` mapping of attribute name to tag.
    """
    cls = type(obj)
    tags = getattr(cls, PLAIN_TAGS_ATTR, None) or {}
    hints = _type_hints(cls)
    return tuple(
        FieldSpec(
            name=name,
            tag=tags.get(name),
            annotation=strip_annotated(hints.get(name, Any)),
            private=name.startswith("_"),
            origin=FieldOrigin.PLAIN,
        )
        for name in _instance_attributes(obj)
    )


def runtime_classes(annotation: Any) -> tuple[type, ...] | None:
    """Reduce an annotation to the classes ``isinstance`` can check.

    Args:
        annotation: A resolved type annotation.

    Returns:
        Tuple of classes a value must be an instance of, or None when the
        annotation cannot be checked at runtime (Any, TypeVars, Literal,
        unresolved strings, non runtime-checkable protocols, classes that
        reject isinstance). TypedDicts reduce to ``dict``.
    """
    annotation = strip_annotated(annotation)
    if annotation is None or annotation is type(None):
        return (type(None),)
    if annotation is Any or isinstance(annotation, (str, TypeVar, typing.ForwardRef)):
        return None
    origin = typing.get_origin(annotation)
    if origin is Literal:
        return None
    if origin is Union or origin is types.UnionType:
        classes: list[type] = []
        for arg in typing.get_args(annotation):
            arg_classes = runtime_classes(arg)
            if arg_classes is None:
                return None
            classes.extend(arg_classes)
        return tuple(classes)
    if origin is not None:
        annotation = origin
    if not isinstance(annotation, type):
        return None
    # TypedDict values are plain dicts at runtime
    if typing.is_typeddict(annotation):
        return (dict,)
    if getattr(annotation, "_is_protocol", False) and not getattr(
        annotation, "_is_runtime_protocol", False
    ):
        return None
    # Numeric tower: an int is acceptable where a float is declared
    if annotation is float:
        return (float, int)
    if annotation is complex:
        return (complex, float, int)
    try:
        isinstance(None, annotation)
    except TypeError:
        # Classes that refuse isinstance checks
        return None
    return (annotation,)


def nested_struct_types(annotation: Any) -> set[type]:
    """Collect dataclass and pydantic model types reachable from an annotation.

    ``list[Address] | None`` yields ``{Address}``.
    """
    found: set[type] = set()
    annotation = strip_annotated(annotation)
    if (
        typing.get_origin(annotation) is None
        and isinstance(annotation, type)
        and (dataclasses.is_dataclass(annotation) or issubclass(annotation, BaseModel))
    ):
        found.add(annotation)
    for arg in typing.get_args(annotation):
        if arg is Ellipsis or isinstance(arg, (list, str)):
            continue
        found |= nested_struct_types(arg)
    return found
