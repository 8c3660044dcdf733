"""PlayOnBSD games database: parser and in-memory query engine."""

from __future__ import annotations

from pobsd.db.database import GameDataBase
from pobsd.db.filters import GameFilter
from pobsd.db.query_result import MalformedQueryArgumentError, QueryResult, SearchType
from pobsd.parsing.fields import MalformedLineError, render_game
from pobsd.parsing.parser import (
    ParseDiagnostic,
    Parser,
    ParserResult,
    ParsingMode,
    SourceUnavailableError,
    WithError,
    WithoutError,
    parse,
)
from pobsd.parsing.schema import Game, GameStatus, Status, Store, StoreLink

__all__ = [
    "Game",
    "GameDataBase",
    "GameFilter",
    "GameStatus",
    "MalformedLineError",
    "MalformedQueryArgumentError",
    "ParseDiagnostic",
    "Parser",
    "ParserResult",
    "ParsingMode",
    "QueryResult",
    "SearchType",
    "SourceUnavailableError",
    "Status",
    "Store",
    "StoreLink",
    "WithError",
    "WithoutError",
    "parse",
    "render_game",
]
