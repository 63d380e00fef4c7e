"""Take redacted snapshots of pydantic models before exporting them.

Tagged fields are replaced during the copy, the live objects keep their
values. ``Config.check`` validates the registry against the model types once
at startup.
"""

import logging
from datetime import UTC, datetime
from typing import Annotated

from pydantic import BaseModel, Field

from ccopy import Config, CopyError, CopyTag, tagged_field


class Card(BaseModel):
    number: Annotated[str, CopyTag("mask_card")]
    expires: datetime


class Customer(BaseModel):
    name: str = tagged_field("anonymise_name")
    email: str = tagged_field("anonymise_email")
    cards: list[Card] = Field(default_factory=list)
    tags: dict[str, list[str]] = Field(default_factory=dict)


def mask_card(number: str) -> str:
    return "*" * (len(number) - 4) + number[-4:]


def anonymise_email(email: str) -> str:
    _, _, domain = email.partition("@")
    return f"redacted@{domain}"


REDACT = Config(
    anonymise_name=lambda name: "john doe",
    anonymise_email=anonymise_email,
    mask_card=mask_card,
).check(Customer)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    live = Customer(
        name="Jane Roe",
        email="jane@example.com",
        cards=[Card(number="4111111111111111", expires=datetime(2030, 1, 1, tzinfo=UTC))],
        tags={"segment": ["gold"]},
    )

    try:
        snapshot = REDACT.copy(live)
    except CopyError as e:
        raise SystemExit(f"snapshot failed: {e}") from e

    live.tags["segment"].append("vip")
    print(snapshot.model_dump_json(indent=2))
    print(f"live tags={live.tags}, snapshot tags={snapshot.tags}")
