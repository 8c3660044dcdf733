"""Tests for the application composition root."""

from __future__ import annotations

from pathlib import Path

import pytest

from pobsd.app import create_app
from pobsd.config.settings import Settings
from pobsd.parsing.parser import ParsingMode, SourceUnavailableError

BROKEN_DB = "Game\tFirst\nPlatform\tOpenBSD\nGame\tSecond\nYear\tsoon\nGame\tThird\n"


@pytest.fixture()
def broken_db_path(tmp_path: Path) -> Path:
    path = tmp_path / "broken.db"
    path.write_text(BROKEN_DB, encoding="utf-8")
    return path


def test_create_app_from_settings(sample_db_path: Path) -> None:
    app = create_app(Settings(_env_file=None, database_path=sample_db_path))
    assert len(app.database) == 6
    assert app.diagnostics == ()


def test_path_argument_overrides_settings(sample_db_path: Path, tmp_path: Path) -> None:
    settings = Settings(_env_file=None, database_path=tmp_path / "missing.db")
    app = create_app(settings, sample_db_path)
    assert len(app.database) == 6


def test_create_app_without_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POBSD_DATABASE", raising=False)
    with pytest.raises(RuntimeError, match="No games database configured"):
        create_app(Settings(_env_file=None))


def test_create_app_with_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SourceUnavailableError):
        create_app(Settings(_env_file=None), tmp_path / "missing.db")


def test_relaxed_app_keeps_diagnostics(broken_db_path: Path) -> None:
    app = create_app(Settings(_env_file=None), broken_db_path)
    assert len(app.database) == 3
    assert [d.line_number for d in app.diagnostics] == [2, 4]


def test_strict_app_truncates(broken_db_path: Path) -> None:
    settings = Settings(_env_file=None, parsing_mode=ParsingMode.strict)
    app = create_app(settings, broken_db_path)
    assert len(app.database) == 0
    assert [d.line_number for d in app.diagnostics] == [2]
