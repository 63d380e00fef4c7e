"""End-to-end anonymisation scenarios."""

from dataclasses import dataclass, field

import pytest

from ccopy import Config, MissingTransformerError, Ref, copy, tagged


def anonymise_name(name: str) -> str:
    return "not important"


def anonymise_data(data: list[str]) -> list[str]:
    if not data:
        return data
    return data[:1]


@dataclass
class Payload:
    data: list[str] = tagged("anonymise_data")


@dataclass
class Envelope:
    data: Payload
    name: str = tagged("anonymise_name")
    c: int = 0
    d: Payload | None = None


@dataclass
class Person:
    a: int
    name: str = tagged("anonymise_name")


@dataclass
class Pointer:
    a: Ref[int] | None = tagged("fn", default=None)


@pytest.fixture
def config(settings):
    return Config(
        {"anonymise_name": anonymise_name, "anonymise_data": anonymise_data}, settings=settings
    )


def test_anonymise_nested_struct(config):
    original = Envelope(name="important", c=1, data=Payload(data=["1", "2"]))
    copied = config.copy(original)

    assert copied.name == anonymise_name(original.name)
    assert copied.data.data == ["1"]
    assert copied.c == 1
    assert copied.d is None
    assert original.data.data == ["1", "2"]


def test_anonymise_name_scenario(settings):
    config = Config(anonymise_name=lambda name: "john doe", settings=settings)

    assert config.copy(Person(a=2, name="Secret name")) == Person(a=2, name="john doe")


def test_none_stays_none(empty_config):
    assert empty_config.copy(None) is None
    assert empty_config.copy(Envelope(data=Payload([]), name="x")).d is None


def test_transformer_fills_none_pointer(settings):
    config = Config(fn=lambda a: Ref(1), settings=settings)
    copied = config.copy(Pointer())

    assert copied.a is not None
    assert copied.a.get() == 1


def test_tagged_field_with_empty_registry(empty_config):
    @dataclass
    class T:
        a: int = tagged("A", default=0)

    with pytest.raises(MissingTransformerError, match="missing copy customiser for: A"):
        empty_config.copy(T())


def test_snapshot_isolation(config):
    """A snapshot taken with copy() is unaffected by later writes."""

    @dataclass
    class Inventory:
        items: dict[str, list[int]] = field(default_factory=dict)

    live = Inventory(items={"apples": [1, 2]})
    snapshot = copy(live)

    live.items["apples"].append(3)
    live.items["pears"] = [4]

    assert snapshot.items == {"apples": [1, 2]}
