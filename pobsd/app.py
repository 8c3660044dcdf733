"""Application composition root.

This module wires settings, the parser and the query engine together: it reads the configured
database file once and exposes the resulting `GameDataBase`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pobsd.config.settings import Settings
from pobsd.db.database import GameDataBase
from pobsd.parsing.parser import ParseDiagnostic, Parser, WithError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class App:
    """Loaded games database plus the diagnostics produced while parsing it."""

    settings: Settings
    database: GameDataBase
    diagnostics: tuple[ParseDiagnostic, ...] = ()


def create_app(settings: Settings, path: str | os.PathLike[str] | None = None) -> App:
    """Parse the games database and build the query engine.

    `path` overrides `settings.database_path`.

    Raises:
        RuntimeError: If no database path is configured.
        SourceUnavailableError: If the database file cannot be read.
    """

    db_path = Path(path) if path is not None else settings.database_path
    if db_path is None:
        raise RuntimeError("No games database configured: pass a path or set POBSD_DATABASE")

    result = Parser(settings.parsing_mode).load_from_file(db_path)
    diagnostics = result.diagnostics if isinstance(result, WithError) else ()

    logger.info(
        "games database loaded path=%s games=%d diagnostics=%d",
        db_path,
        len(result.games),
        len(diagnostics),
    )
    return App(settings=settings, database=GameDataBase(result.games), diagnostics=diagnostics)
