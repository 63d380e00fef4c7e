"""Tests for the transformer registry."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TypedDict

import pytest
from pydantic import BaseModel

from ccopy import (
    Config,
    CopyError,
    CopySettings,
    MissingTransformerError,
    TransformerSignatureError,
    tagged,
    tagged_field,
)


def anonymise_name(name: str) -> str:
    return "john doe"


def first_only(data: list[str]) -> list[str]:
    return data[:1]


@dataclass
class Inner:
    data: list[str] = tagged("first_only")


@dataclass
class Outer:
    inner: Inner
    name: str = tagged("anonymise_name")
    count: int = 0


@dataclass
class WithOptional:
    name: str | None = tagged("anonymise_name", default=None)


class Profile(BaseModel):
    nickname: str = tagged_field("nickname")
    outer: Outer | None = None


class PostalAddress(TypedDict):
    street: str
    city: str


@dataclass
class Recipient:
    address: PostalAddress = tagged("redact_address")


@pytest.fixture
def config(settings):
    return Config(
        {"anonymise_name": anonymise_name, "first_only": first_only}, settings=settings
    )


def test_config_is_a_read_only_mapping(config):
    assert isinstance(config, Mapping)
    assert len(config) == 2
    assert set(config) == {"anonymise_name", "first_only"}
    assert config["anonymise_name"] is anonymise_name
    assert "missing" not in config
    with pytest.raises(TypeError):
        config["other"] = anonymise_name  # type: ignore[index]


def test_keyword_registrations_are_merged(settings):
    config = Config({"a": anonymise_name}, b=first_only, settings=settings)
    assert set(config) == {"a", "b"}


def test_spec_records_annotations(config):
    spec = config.spec("first_only")

    assert spec is not None
    assert spec.tag == "first_only"
    assert spec.expected_type == list[str]
    assert spec.returns == list[str]
    assert spec(["1", "2"]) == ["1"]
    assert config.spec("missing") is None


def test_spec_of_unannotated_transformer(settings):
    config = Config(anonymise=lambda value: value, settings=settings)
    assert config.spec("anonymise").expected_type is None


def test_non_callable_transformer_rejected(settings):
    """Bad registrations fail when the registry is built, not mid-copy.

    Why: construction-time errors are cheaper to find than copy-time ones.
    """
    with pytest.raises(TransformerSignatureError) as exc_info:
        Config(broken="not a function", settings=settings)  # type: ignore[arg-type]

    assert exc_info.value.tag == "broken"
    assert isinstance(exc_info.value, CopyError)
    assert isinstance(exc_info.value, TypeError)


@pytest.mark.parametrize(
    "func",
    [
        lambda: None,
        lambda a, b: a,
        lambda a, *, flag: a,
    ],
)
def test_wrong_arity_rejected(settings, func):
    with pytest.raises(TransformerSignatureError):
        Config(broken=func, settings=settings)


@pytest.mark.parametrize(
    "func",
    [
        lambda a, b=1: a,
        lambda *args: args[0],
        lambda a, *, flag=False: a,
        str.upper,
    ],
)
def test_single_argument_callables_accepted(settings, func):
    config = Config(ok=func, settings=settings)
    assert config["ok"] is func


def test_empty_tag_rejected(settings):
    with pytest.raises(TransformerSignatureError):
        Config({"": anonymise_name}, settings=settings)


def test_signature_validation_can_be_disabled():
    settings = CopySettings(_env_file=None, validate_signatures=False)
    config = Config(two=lambda a, b: a, settings=settings)
    assert "two" in config


def test_extend_returns_new_registry(config):
    replacement = lambda name: "jane doe"  # noqa: E731
    extended = config.extend(anonymise_name=replacement, extra=first_only)

    assert extended is not config
    assert extended["anonymise_name"] is replacement
    assert "extra" in extended
    assert config["anonymise_name"] is anonymise_name
    assert "extra" not in config
    assert extended.settings is config.settings


def test_extend_adds_opaque_types(config):
    class Handle:
        pass

    extended = config.extend(opaque=(Handle,))
    assert extended.opaque == (Handle,)
    assert config.opaque == ()


def test_check_passes_for_complete_registry(config):
    assert config.check(Outer) is config


def test_check_reports_missing_tag(settings):
    config = Config(anonymise_name=anonymise_name, settings=settings)

    with pytest.raises(MissingTransformerError) as exc_info:
        config.check(Outer)

    assert exc_info.value.tag == "first_only"
    assert exc_info.value.path == "Inner.data"


def test_check_follows_nested_pydantic_and_optional_fields(config):
    with pytest.raises(MissingTransformerError) as exc_info:
        config.check(Profile)
    assert exc_info.value.tag == "nickname"

    config.extend(nickname=anonymise_name).check(Profile)


def test_check_rejects_incompatible_parameter_type(settings):
    def count_items(items: list[str]) -> list[str]:
        return items

    config = Config(anonymise_name=count_items, first_only=first_only, settings=settings)

    with pytest.raises(TransformerSignatureError, match="anonymise_name"):
        config.check(Outer)


def test_check_requires_parameter_to_accept_none(config, settings):
    with pytest.raises(TransformerSignatureError):
        config.check(WithOptional)

    def maybe_anonymise(name: str | None) -> str | None:
        return None if name is None else "john doe"

    Config(anonymise_name=maybe_anonymise, settings=settings).check(WithOptional)


def test_check_skips_unannotated_transformers(settings):
    config = Config(anonymise_name=lambda n: n, first_only=lambda d: d, settings=settings)
    config.check(Outer, WithOptional)


def test_check_ignores_private_fields(settings):
    @dataclass
    class Hidden:
        _secret: str = field(default="", metadata={"ccopy": "never_registered"})

    Config(settings=settings).check(Hidden)


def test_check_rejects_non_struct_types(config):
    with pytest.raises(TypeError):
        config.check(int)


def test_repr_lists_tags(config):
    assert repr(config) == "Config(['anonymise_name', 'first_only'])"


def test_check_accepts_typed_dict_fields(settings):
    """Why: TypedDict classes refuse issubclass, they are dicts at runtime."""

    def redact_address(address: PostalAddress) -> PostalAddress:
        return {"street": "hidden", "city": address["city"]}

    def redact_as_mapping(address: dict[str, str]) -> dict[str, str]:
        return address

    Config(redact_address=redact_address, settings=settings).check(Recipient)
    Config(redact_address=redact_as_mapping, settings=settings).check(Recipient)

    with pytest.raises(TransformerSignatureError, match="redact_address"):
        Config(redact_address=anonymise_name, settings=settings).check(Recipient)
