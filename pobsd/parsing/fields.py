"""Field lines of the games database.

Every line of the database is `Key<TAB>Value`. Keys are case-sensitive and map 1:1 to `Game`
attributes; values are converted according to the key (plain text, comma-separated items,
whitespace-separated store URLs, integers, calendar dates or a run status).

A key written alone on its line (no tab) is a field with a blank value, which is how the database
writes empty fields.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pobsd.parsing.dates import parse_annotation_date, parse_calendar_date
from pobsd.parsing.schema import STATUS_BY_LEVEL, Game, GameStatus, Status
from pobsd.parsing.stores import parse_store_links


class MalformedLineError(ValueError):
    """Raised when a database line cannot be converted into a field value."""

    def __init__(self, reason: str, *, key: FieldKey | None = None) -> None:
        super().__init__(reason)
        self.key = key


class FieldKey(StrEnum):
    """Recognized keys, in the order the database writes them."""

    game = "Game"
    cover = "Cover"
    engine = "Engine"
    setup = "Setup"
    runtime = "Runtime"
    store = "Store"
    hints = "Hints"
    genre = "Genre"
    tags = "Tags"
    year = "Year"
    dev = "Dev"
    publisher = "Pub"
    version = "Version"
    status = "Status"
    added = "Added"
    updated = "Updated"
    igdb_id = "IgdbId"


RECORD_START_KEY = FieldKey.game

FIELD_ATTRIBUTES: dict[FieldKey, str] = {
    FieldKey.game: "name",
    FieldKey.cover: "cover",
    FieldKey.engine: "engine",
    FieldKey.setup: "setup",
    FieldKey.runtime: "runtime",
    FieldKey.store: "stores",
    FieldKey.hints: "hints",
    FieldKey.genre: "genres",
    FieldKey.tags: "tags",
    FieldKey.year: "year",
    FieldKey.dev: "devs",
    FieldKey.publisher: "publis",
    FieldKey.version: "version",
    FieldKey.status: "status",
    FieldKey.added: "added",
    FieldKey.updated: "updated",
    FieldKey.igdb_id: "igdb_id",
}

_KEYS_BY_NAME: dict[str, FieldKey] = {key.value: key for key in FieldKey}


@dataclass(frozen=True)
class FieldValue:
    """A converted field line. `value` is `None` when the field is blank."""

    key: FieldKey
    value: Any

    @property
    def attribute(self) -> str:
        return FIELD_ATTRIBUTES[self.key]


def split_line(line: str) -> tuple[str, str | None]:
    """Split a line on its first tab.

    Returns:
        `(key, value)` where `value` is `None` if the line holds no tab at all.
    """

    key, sep, value = line.partition("\t")
    if not sep:
        return line.rstrip(), None
    return key, value


def split_items(value: str, separator: str = ",") -> tuple[str, ...]:
    """Split a multi-valued field, dropping blank items and surrounding whitespace."""

    return tuple(item.strip() for item in value.split(separator) if item.strip())


def _parse_integer(value: str) -> int:
    if not value.isdecimal():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


def parse_status(value: str) -> GameStatus:
    """Parse a `Status` value such as `5 completable (2021-03-02)` or `runs (2022-05-13)`."""

    text = value.strip()
    return GameStatus(
        text=text,
        level=STATUS_BY_LEVEL.get(text[:1], Status.unknown),
        tested_on=parse_annotation_date(text),
    )


def _parse_text(value: str) -> str:
    return value


_CONVERTERS: dict[FieldKey, Callable[[str], Any]] = {
    FieldKey.game: _parse_text,
    FieldKey.cover: _parse_text,
    FieldKey.engine: _parse_text,
    FieldKey.setup: _parse_text,
    FieldKey.runtime: _parse_text,
    FieldKey.store: parse_store_links,
    FieldKey.hints: _parse_text,
    FieldKey.genre: split_items,
    FieldKey.tags: split_items,
    FieldKey.year: _parse_integer,
    FieldKey.dev: split_items,
    FieldKey.publisher: split_items,
    FieldKey.version: _parse_text,
    FieldKey.status: parse_status,
    FieldKey.added: parse_calendar_date,
    FieldKey.updated: parse_calendar_date,
    FieldKey.igdb_id: _parse_integer,
}


def parse_field(line: str) -> FieldValue:
    """Convert one database line into a `FieldValue`.

    Raises:
        MalformedLineError: If the key is unknown, the tab separator is missing, or the value
            cannot be converted for its key.
    """

    name, raw_value = split_line(line)
    key = _KEYS_BY_NAME.get(name)
    if key is None:
        if raw_value is None:
            raise MalformedLineError("missing tab separator")
        raise MalformedLineError(f"unknown field {name!r}")

    value = (raw_value or "").strip()
    if not value:
        return FieldValue(key=key, value=None)

    try:
        converted = _CONVERTERS[key](value)
    except ValueError as exc:
        raise MalformedLineError(f"invalid {key.value} value: {exc}", key=key) from exc

    # Multi-valued fields made only of separators are blank.
    if converted == ():
        return FieldValue(key=key, value=None)
    return FieldValue(key=key, value=converted)


def _render_value(key: FieldKey, value: Any) -> str:
    if key == FieldKey.store:
        return " ".join(link.url for link in value)
    if key in {FieldKey.genre, FieldKey.tags, FieldKey.dev, FieldKey.publisher}:
        return ", ".join(value)
    if key == FieldKey.status:
        return value.text
    if key in {FieldKey.added, FieldKey.updated}:
        return value.isoformat()
    return str(value)


def render_game(game: Game) -> str:
    """Render a game the way it appears in the database (one line per key, fixed order)."""

    lines: list[str] = []
    for key in FieldKey:
        value = getattr(game, FIELD_ATTRIBUTES[key])
        if value is None:
            lines.append(key.value)
        else:
            lines.append(f"{key.value}\t{_render_value(key, value)}")
    return "\n".join(lines)
