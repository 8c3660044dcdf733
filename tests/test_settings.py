"""Tests for environment settings and logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from pobsd.config.logging import configure_logging, resolve_log_level
from pobsd.config.settings import Settings, load_settings
from pobsd.parsing.parser import ParsingMode

ENV_VARS = ("POBSD_DATABASE", "POBSD_PARSING_MODE", "LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's local `.env` out of the tests.
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.database_path is None
    assert settings.parsing_mode == ParsingMode.relaxed
    assert settings.log_level == "INFO"


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POBSD_DATABASE", "/var/db/games.db")
    monkeypatch.setenv("POBSD_PARSING_MODE", " Strict ")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()
    assert settings.database_path == Path("/var/db/games.db")
    assert settings.parsing_mode == ParsingMode.strict
    assert settings.log_level == "DEBUG"


def test_values_from_env_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "POBSD_PARSING_MODE=strict\nUNRELATED_SETTING=1\n",
        encoding="utf-8",
    )
    assert load_settings().parsing_mode == ParsingMode.strict


@pytest.mark.parametrize(
    ("name", "value"),
    [("POBSD_PARSING_MODE", "lenient"), ("LOG_LEVEL", "CHATTY")],
)
def test_invalid_configuration_raises_runtime_error(
        monkeypatch: pytest.MonkeyPatch,
        name: str,
        value: str,
) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError, match="Invalid environment configuration"):
        load_settings()


def test_configure_logging_quiets_third_party_loggers() -> None:
    configure_logging("debug")
    assert logging.getLogger("dateparser").level == logging.WARNING
    assert logging.getLogger("tzlocal").level == logging.WARNING


def test_resolve_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_log_level() == "INFO"
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert resolve_log_level() == "WARNING"
    assert resolve_log_level(" debug ") == "DEBUG"
