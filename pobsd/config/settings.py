"""Environment configuration and validation.

Settings are loaded from environment variables, optionally via a local `.env` file, and validated
once at startup so that a bad parsing mode or log level is reported before any parsing happens.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pobsd.parsing.parser import ParsingMode

_LOG_LEVEL_NAMES = frozenset(logging.getLevelNamesMapping())


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    database_path: Path | None = Field(default=None, alias="POBSD_DATABASE")
    parsing_mode: ParsingMode = Field(default=ParsingMode.relaxed, alias="POBSD_PARSING_MODE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("parsing_mode", mode="before")
    @classmethod
    def normalize_parsing_mode(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that the level is one `logging` knows (`DEBUG`, `INFO`, ...)."""

        level = value.strip().upper()
        if level not in _LOG_LEVEL_NAMES:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVEL_NAMES)}")
        return level


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
