"""In-memory games database.

`GameDataBase` takes a finished collection of games and builds every lookup index once. It never
mutates the games or its indexes afterwards, so one instance can serve read-only queries from
several threads. Loading a new collection means building a new `GameDataBase`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pobsd.db.indexes import Dimension, Index, build_indexes, normalize_text_key
from pobsd.db.query_result import (
    MalformedQueryArgumentError,
    QueryResult,
    SearchType,
    coerce_text,
)
from pobsd.parsing.schema import Game, Store

logger = logging.getLogger(__name__)


class GameDataBase:
    """Indexed, read-only view over a games collection."""

    def __init__(self, games: Iterable[Game]) -> None:
        self.games: tuple[Game, ...] = tuple(games)
        self.indexes: dict[Dimension, Index] = build_indexes(self.games)

        self._by_uid: dict[int, int] = {}
        self._by_steam_id: dict[int, int] = {}
        for position, game in enumerate(self.games):
            self._by_uid.setdefault(game.uid, position)
            for link in game.stores or ():
                if link.store == Store.steam and link.store_id is not None:
                    self._by_steam_id.setdefault(link.store_id, position)

        logger.debug(
            "database indexes built games=%d dimensions=%d",
            len(self.games),
            len(self.indexes),
        )

    def __len__(self) -> int:
        return len(self.games)

    def __repr__(self) -> str:
        return f"GameDataBase(games={len(self.games)})"

    def all(self) -> QueryResult:
        """Return every game, in collection order."""

        return QueryResult(self, tuple(range(len(self.games))))

    def search_by_name(
            self,
            needle: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        """Substring search on names (case-insensitive by default). An empty needle matches all."""

        return self.all().filter_by_name(needle, search_type)

    def get_exact(self, name: str) -> QueryResult:
        """Case-insensitive exact name match. Duplicated names all match."""

        key = normalize_text_key(coerce_text(name, "name"))
        return QueryResult(self, self.indexes[Dimension.name].lookup(key))

    def get_game_by_id(self, uid: int) -> Game | None:
        position = self._by_uid.get(uid)
        return None if position is None else self.games[position]

    def get_game_by_steam_id(self, app_id: int) -> Game | None:
        """Return the first game linking to the given Steam application id."""

        position = self._by_steam_id.get(app_id)
        return None if position is None else self.games[position]

    def match_by_ids(self, uids: Iterable[int]) -> QueryResult:
        """Return the games with the given uids, in the order given. Unknown uids are skipped."""

        positions: list[int] = []
        for uid in uids:
            if isinstance(uid, bool) or not isinstance(uid, int):
                raise MalformedQueryArgumentError(f"invalid game id: {uid!r}")
            position = self._by_uid.get(uid)
            if position is not None and position not in positions:
                positions.append(position)
        return QueryResult(self, tuple(positions))

    def match_by_year(self, year: int | str) -> QueryResult:
        return self.all().by_year(year)

    def match_by_engine(self, engine: str) -> QueryResult:
        return self.all().by_engine(engine)

    def match_by_runtime(self, runtime: str) -> QueryResult:
        return self.all().by_runtime(runtime)

    def match_by_genre(self, genre: str) -> QueryResult:
        return self.all().by_genre(genre)

    def match_by_tag(self, tag: str) -> QueryResult:
        return self.all().by_tag(tag)

    def match_by_dev(self, dev: str) -> QueryResult:
        return self.all().by_dev(dev)

    def match_by_publisher(self, publisher: str) -> QueryResult:
        return self.all().by_publisher(publisher)

    def get_all_engines(self) -> list[str]:
        return self.indexes[Dimension.engine].values()

    def get_all_runtimes(self) -> list[str]:
        return self.indexes[Dimension.runtime].values()

    def get_all_genres(self) -> list[str]:
        return self.indexes[Dimension.genre].values()

    def get_all_tags(self) -> list[str]:
        return self.indexes[Dimension.tag].values()

    def get_all_years(self) -> list[int]:
        return sorted(self.indexes[Dimension.year].positions)

    def get_all_devs(self) -> list[str]:
        return self.indexes[Dimension.dev].values()

    def get_all_publishers(self) -> list[str]:
        return self.indexes[Dimension.publisher].values()

    def search_by_engine(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self.all().filter_by_engine(pattern, search_type)

    def search_by_runtime(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self.all().filter_by_runtime(pattern, search_type)

    def search_by_genre(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self.all().filter_by_genre(pattern, search_type)

    def search_by_tag(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self.all().filter_by_tag(pattern, search_type)

    def search_by_year(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self.all().filter_by_year(pattern, search_type)

    def search_by_dev(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self.all().filter_by_dev(pattern, search_type)

    def search_by_publisher(
            self,
            pattern: str,
            search_type: SearchType | str = SearchType.not_case_sensitive,
    ) -> QueryResult:
        return self.all().filter_by_publisher(pattern, search_type)

    def _values_with_ids(self, dimension: Dimension) -> list[tuple[str, list[int]]]:
        return [
            (value, [self.games[p].uid for p in positions])
            for value, positions in self.indexes[dimension].items()
        ]

    def get_all_engines_with_ids(self) -> list[tuple[str, list[int]]]:
        """Distinct engines, sorted, each with the uids of the games using it."""

        return self._values_with_ids(Dimension.engine)

    def get_all_runtimes_with_ids(self) -> list[tuple[str, list[int]]]:
        return self._values_with_ids(Dimension.runtime)

    def get_all_genres_with_ids(self) -> list[tuple[str, list[int]]]:
        return self._values_with_ids(Dimension.genre)

    def get_all_tags_with_ids(self) -> list[tuple[str, list[int]]]:
        return self._values_with_ids(Dimension.tag)

    def get_all_years_with_ids(self) -> list[tuple[int, list[int]]]:
        return [(int(year), uids) for year, uids in self._values_with_ids(Dimension.year)]

    def get_all_devs_with_ids(self) -> list[tuple[str, list[int]]]:
        return self._values_with_ids(Dimension.dev)

    def get_all_publishers_with_ids(self) -> list[tuple[str, list[int]]]:
        return self._values_with_ids(Dimension.publisher)
