"""Tests for tags declared in modules with postponed annotation evaluation.

Annotations here are strings until resolved; some of them name types that
only exist for the type checker.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated

import pytest

from ccopy import Config, CopyTag, MissingTransformerError, UnresolvedTagError, tagged
from ccopy.core.tags import struct_fields

if TYPE_CHECKING:
    from decimal import Decimal
    from uuid import UUID


@dataclass
class Account:
    name: Annotated[str, CopyTag("anonymise")]
    balance: Decimal | None = None


@dataclass
class Session:
    token: Annotated[UUID, CopyTag("mask")]


@dataclass
class Ticket:
    token: UUID = tagged("mask")
    seat: str = ""


def test_one_unresolvable_field_does_not_hide_annotated_tag():
    """Why: a failing annotation on another field must not drop the tag."""
    fields = {f.name: f for f in struct_fields(Account)}

    assert fields["name"].tag == "anonymise"
    assert fields["name"].annotation is str
    assert fields["balance"].tag is None
    assert fields["balance"].annotation == "Decimal | None"


def test_annotated_tag_applied_despite_type_checking_import(settings):
    config = Config(anonymise=lambda name: "john doe", settings=settings)
    copied = config.copy(Account("Secret name"))

    assert copied.name == "john doe"
    assert copied.balance is None


def test_annotated_tag_still_required_despite_type_checking_import(empty_config):
    with pytest.raises(MissingTransformerError) as exc_info:
        empty_config.copy(Account("Secret name"))

    assert exc_info.value.tag == "anonymise"
    assert exc_info.value.path == "name"


def test_unresolvable_annotated_tag_is_rejected(settings):
    """Why: copying the field by default would leak the value untransformed."""
    config = Config(mask=lambda token: "***", settings=settings)

    with pytest.raises(UnresolvedTagError) as exc_info:
        config.copy(Session("not-a-uuid"))

    assert exc_info.value.owner is Session
    assert exc_info.value.field == "token"
    assert "CopyTag" in str(exc_info.value)


def test_unresolvable_annotated_tag_is_rejected_by_check(settings):
    config = Config(mask=lambda token: "***", settings=settings)

    with pytest.raises(UnresolvedTagError):
        config.check(Session)


def test_metadata_tag_works_with_unresolvable_annotation(settings):
    config = Config(mask=lambda token: "***", settings=settings)
    copied = config.copy(Ticket("0000", "12A"))

    assert copied.token == "***"
    assert copied.seat == "12A"
