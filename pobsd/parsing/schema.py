"""Game record schema (Pydantic models).

These models are the contract between the database parser and the query engine. A `Game` is built
once per record block and never mutated afterwards; every optional field is either a real value or
`None`, never an empty string or an empty collection.
"""

from __future__ import annotations

import zlib
from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Status(StrEnum):
    """Run status level, as given by the leading digit of the `Status` field."""

    unknown = "unknown"
    does_not_run = "does_not_run"
    launches = "launches"
    major_bugs = "major_bugs"
    medium_impact = "medium_impact"
    minor_bugs = "minor_bugs"
    completable = "completable"
    perfect = "perfect"


STATUS_BY_LEVEL: dict[str, Status] = {
    "0": Status.does_not_run,
    "1": Status.launches,
    "2": Status.major_bugs,
    "3": Status.medium_impact,
    "4": Status.minor_bugs,
    "5": Status.completable,
    "6": Status.perfect,
}


class Store(StrEnum):
    """Storefronts recognized in `Store` URLs."""

    steam = "steam"
    gog = "gog"
    humble_bundle = "humble_bundle"
    itch_io = "itch_io"
    epic = "epic"
    unknown = "unknown"


class StoreLink(BaseModel):
    """A single storefront URL with the store it points to."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str
    store: Store = Store.unknown
    store_id: int | None = None


class GameStatus(BaseModel):
    """The `Status` field: raw text plus the level and test date found in it."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str = Field(min_length=1)
    level: Status = Status.unknown
    tested_on: date | None = None


_TEXT_FIELDS = ("cover", "engine", "setup", "runtime", "hints", "version")
_COLLECTION_FIELDS = ("stores", "genres", "tags", "devs", "publis")


class Game(BaseModel):
    """A single title of the games database.

    Only `name` is required. Multi-valued fields keep the order of the source line.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    cover: str | None = None
    engine: str | None = None
    setup: str | None = None
    runtime: str | None = None
    stores: tuple[StoreLink, ...] | None = None
    hints: str | None = None
    genres: tuple[str, ...] | None = None
    tags: tuple[str, ...] | None = None
    year: int | None = None
    devs: tuple[str, ...] | None = None
    publis: tuple[str, ...] | None = None
    version: str | None = None
    status: GameStatus | None = None
    added: date | None = None
    updated: date | None = None
    igdb_id: int | None = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_text_is_unset(cls, value: Any) -> Any:
        """Map blank strings to `None` so that "absent" has a single representation."""

        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator(*_COLLECTION_FIELDS, mode="after")
    @classmethod
    def empty_collection_is_unset(cls, value: tuple[Any, ...] | None) -> tuple[Any, ...] | None:
        """Map empty collections to `None`."""

        return value or None

    @property
    def uid(self) -> int:
        """Stable 32-bit identifier derived from the name and the date the entry was added."""

        added = self.added.isoformat() if self.added is not None else ""
        return zlib.crc32(f"{added}\t{self.name}".encode("utf-8"))

    @property
    def ordering_name(self) -> str:
        """Name used for alphabetical listings (lowercased, leading "the "/"a " removed)."""

        name = self.name.casefold()
        for article in ("the ", "a "):
            if name.startswith(article):
                return name.removeprefix(article)
        return name
