"""Pytest configuration.

Tests import the `pobsd` package straight from the repository root, so `pytest` works without
installing the project. Shared fixtures load the sample database under `tests/data/`.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `import pobsd...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from pobsd.db.database import GameDataBase  # noqa: E402
from pobsd.parsing.parser import Parser, ParsingMode  # noqa: E402
from pobsd.parsing.schema import Game  # noqa: E402

DATA_DIR = Path(__file__).resolve().parent / "data"
SAMPLE_DB = DATA_DIR / "test-games.db"


@pytest.fixture()
def sample_db_path() -> Path:
    return SAMPLE_DB


@pytest.fixture()
def sample_games() -> tuple[Game, ...]:
    return Parser(ParsingMode.strict).load_from_file(SAMPLE_DB).games


@pytest.fixture()
def sample_database(sample_games: tuple[Game, ...]) -> GameDataBase:
    return GameDataBase(sample_games)
