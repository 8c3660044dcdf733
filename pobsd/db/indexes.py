"""Lookup indexes over a parsed games collection.

Every index maps a normalized key to the ordered positions (into the collection) of the games
holding that value. Positions are unique per key and ascending, so a bucket keeps the order of the
original collection.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from pobsd.parsing.schema import Game


class Dimension(StrEnum):
    """Indexed game attributes."""

    name = "name"
    year = "year"
    engine = "engine"
    runtime = "runtime"
    genre = "genre"
    tag = "tag"
    dev = "dev"
    publisher = "publisher"
    status = "status"


def normalize_text_key(value: str) -> str:
    """Normalize a free-text value for case-insensitive lookups."""

    return value.strip().casefold()


def _text(value: str | None) -> list[tuple[Hashable, str]]:
    if value is None:
        return []
    return [(normalize_text_key(value), value)]


def _items(values: tuple[str, ...] | None) -> list[tuple[Hashable, str]]:
    return [(normalize_text_key(value), value) for value in values or ()]


def _year(game: Game) -> list[tuple[Hashable, str]]:
    if game.year is None:
        return []
    return [(game.year, str(game.year))]


def _status(game: Game) -> list[tuple[Hashable, str]]:
    if game.status is None:
        return []
    return [(game.status.level, game.status.level.value)]


# Each extractor returns `(key, label)` pairs: `key` is what lookups compare against, `label`
# is the spelling shown in listings.
_EXTRACTORS: dict[Dimension, Callable[[Game], list[tuple[Hashable, str]]]] = {
    Dimension.name: lambda game: _text(game.name),
    Dimension.year: _year,
    Dimension.engine: lambda game: _text(game.engine),
    Dimension.runtime: lambda game: _text(game.runtime),
    Dimension.genre: lambda game: _items(game.genres),
    Dimension.tag: lambda game: _items(game.tags),
    Dimension.dev: lambda game: _items(game.devs),
    Dimension.publisher: lambda game: _items(game.publis),
    Dimension.status: _status,
}


def game_values(dimension: Dimension, game: Game) -> list[str]:
    """Values a game holds for a dimension, as written in the database."""

    return [label for _, label in _EXTRACTORS[dimension](game)]


@dataclass(frozen=True)
class Index:
    """One indexed dimension: key -> ascending positions, plus the first spelling of each key."""

    dimension: Dimension
    positions: dict[Hashable, tuple[int, ...]]
    labels: dict[Hashable, str]

    def lookup(self, key: Hashable) -> tuple[int, ...]:
        return self.positions.get(key, ())

    def values(self) -> list[str]:
        """Distinct values of the dimension, sorted by key."""

        return [self.labels[key] for key in sorted(self.labels)]

    def items(self) -> list[tuple[str, tuple[int, ...]]]:
        """`(value, positions)` pairs, sorted by key."""

        return [(self.labels[key], self.positions[key]) for key in sorted(self.labels)]


def build_index(dimension: Dimension, games: Sequence[Game]) -> Index:
    extract = _EXTRACTORS[dimension]
    buckets: dict[Hashable, list[int]] = {}
    labels: dict[Hashable, str] = {}
    for position, game in enumerate(games):
        for key, label in extract(game):
            bucket = buckets.setdefault(key, [])
            # A game listing the same item twice is indexed once.
            if bucket and bucket[-1] == position:
                continue
            bucket.append(position)
            labels.setdefault(key, label)
    return Index(
        dimension=dimension,
        positions={key: tuple(bucket) for key, bucket in buckets.items()},
        labels=labels,
    )


def build_indexes(
        games: Sequence[Game],
        dimensions: Iterable[Dimension] = tuple(Dimension),
) -> dict[Dimension, Index]:
    """Build the indexes of the given dimensions (all of them by default)."""

    return {dimension: build_index(dimension, games) for dimension in dimensions}
