"""Chained, narrowing queries over a `GameDataBase`.

A `QueryResult` is an ordered subset of the database (collection order). Each `by_*` filter
returns a new, narrower `QueryResult` and leaves the receiver untouched, so a result can be reused
as the starting point of several queries. Filters only intersect, which makes them commutative.

`by_*` filters compare whole values through the indexes. `filter_by_*` filters are substring
searches, case-sensitive or not depending on the `SearchType`.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pobsd.db.indexes import Dimension, game_values, normalize_text_key
from pobsd.parsing.schema import STATUS_BY_LEVEL, Game, Status

if TYPE_CHECKING:
    from pobsd.db.database import GameDataBase
    from pobsd.db.filters import GameFilter


class MalformedQueryArgumentError(ValueError):
    """Raised when a filter argument cannot be interpreted as the expected type."""


class SearchType(StrEnum):
    """Case handling of substring searches."""

    case_sensitive = "case_sensitive"
    not_case_sensitive = "not_case_sensitive"


def contains_pattern(value: str, pattern: str, search_type: SearchType) -> bool:
    if search_type == SearchType.case_sensitive:
        return pattern in value
    return pattern.casefold() in value.casefold()


def coerce_year(value: Any) -> int:
    """Accept an `int` or a decimal string as a release year."""

    if isinstance(value, bool):
        raise MalformedQueryArgumentError(f"invalid year: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    raise MalformedQueryArgumentError(f"invalid year: {value!r}")


def coerce_status(value: Any) -> Status:
    """Accept a `Status`, its value (`"completable"`) or its numeric level (`5` or `"5"`)."""

    if isinstance(value, Status):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str):
        text = value.strip()
        if text in STATUS_BY_LEVEL:
            return STATUS_BY_LEVEL[text]
        try:
            return Status(text.casefold())
        except ValueError:
            pass
    raise MalformedQueryArgumentError(f"invalid status: {value!r}")


def coerce_search_type(value: Any) -> SearchType:
    try:
        return SearchType(value)
    except ValueError:
        raise MalformedQueryArgumentError(f"invalid search type: {value!r}") from None


def coerce_text(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise MalformedQueryArgumentError(f"invalid {what}: expected a string, got {value!r}")
    return value


class QueryResult:
    """An ordered, reusable subset of a games database."""

    def __init__(self, database: GameDataBase, positions: tuple[int, ...]) -> None:
        self._database = database
        self._positions = positions

    def _narrow(self, dimension: Dimension, key: Any) -> QueryResult:
        bucket = set(self._database.indexes[dimension].lookup(key))
        return QueryResult(self._database, tuple(p for p in self._positions if p in bucket))

    def by_year(self, year: int | str) -> QueryResult:
        return self._narrow(Dimension.year, coerce_year(year))

    def by_engine(self, engine: str) -> QueryResult:
        return self._narrow(Dimension.engine, normalize_text_key(coerce_text(engine, "engine")))

    def by_runtime(self, runtime: str) -> QueryResult:
        return self._narrow(Dimension.runtime, normalize_text_key(coerce_text(runtime, "runtime")))

    def by_genre(self, genre: str) -> QueryResult:
        return self._narrow(Dimension.genre, normalize_text_key(coerce_text(genre, "genre")))

    def by_tag(self, tag: str) -> QueryResult:
        return self._narrow(Dimension.tag, normalize_text_key(coerce_text(tag, "tag")))

    def by_dev(self, dev: str) -> QueryResult:
        return self._narrow(Dimension.dev, normalize_text_key(coerce_text(dev, "developer")))

    def by_publisher(self, publisher: str) -> QueryResult:
        key = normalize_text_key(coerce_text(publisher, "publisher"))
        return self._narrow(Dimension.publisher, key)

    def by_status(self, status: Status | str | int) -> QueryResult:
        return self._narrow(Dimension.status, coerce_status(status))

    def by_name(self, needle: str) -> QueryResult:
        """Keep the games whose name contains `needle` (case-insensitive)."""

        return self.filter_by_name(needle)

    def _filter(
            self,
            dimension: Dimension,
            pattern: str,
            search_type: SearchType | str,
    ) -> QueryResult:
        text = coerce_text(pattern, dimension.value)
        mode = coerce_search_type(search_type)
        games = self._database.games
        return QueryResult(
            self._database,
            tuple(
                p
                for p in self._positions
                if any(contains_pattern(v, text, mode) for v in game_values(dimension, games[p]))
            ),
        )

    # Substring filters. A game matches when one of its values for the dimension contains the
    # pattern; multi-valued fields match on any item.

    def filter_by_name(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self._filter(Dimension.name, pattern, search_type)

    def filter_by_engine(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self._filter(Dimension.engine, pattern, search_type)

    def filter_by_runtime(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self._filter(Dimension.runtime, pattern, search_type)

    def filter_by_genre(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self._filter(Dimension.genre, pattern, search_type)

    def filter_by_tag(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self._filter(Dimension.tag, pattern, search_type)

    def filter_by_year(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        """Substring match on the written year (`"201"` matches 2011 and 2019)."""

        return self._filter(Dimension.year, pattern, search_type)

    def filter_by_dev(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self._filter(Dimension.dev, pattern, search_type)

    def filter_by_publisher(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self._filter(Dimension.publisher, pattern, search_type)

    def apply(self, game_filter: GameFilter) -> QueryResult:
        """Apply every criterion set on `game_filter` (logical AND)."""

        result = self
        if game_filter.name is not None:
            result = result.by_name(game_filter.name)
        if game_filter.year is not None:
            result = result.by_year(game_filter.year)
        if game_filter.engine is not None:
            result = result.by_engine(game_filter.engine)
        if game_filter.runtime is not None:
            result = result.by_runtime(game_filter.runtime)
        if game_filter.genre is not None:
            result = result.by_genre(game_filter.genre)
        if game_filter.tag is not None:
            result = result.by_tag(game_filter.tag)
        if game_filter.dev is not None:
            result = result.by_dev(game_filter.dev)
        if game_filter.publisher is not None:
            result = result.by_publisher(game_filter.publisher)
        if game_filter.status is not None:
            result = result.by_status(game_filter.status)
        return result

    def into_inner(self) -> list[Game]:
        """Return the matching games, in collection order."""

        return [self._database.games[p] for p in self._positions]

    @property
    def count(self) -> int:
        return len(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[Game]:
        return iter(self.into_inner())

    def __repr__(self) -> str:
        return f"QueryResult(count={self.count})"

    def get(self, index: int) -> Game | None:
        """Return the game at `index` within this result, or `None` if out of range."""

        if not -len(self._positions) <= index < len(self._positions):
            return None
        return self._database.games[self._positions[index]]

    def first(self) -> Game | None:
        return self.get(0)

    def sorted(self) -> list[Game]:
        """Return the matching games in alphabetical order (leading articles ignored)."""

        return sorted(self.into_inner(), key=lambda game: (game.ordering_name, game.name))
