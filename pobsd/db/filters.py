"""Composite game filter.

`GameFilter` bundles several narrowing criteria so that callers (the CLI, an API layer) can build a
query from optional inputs and apply it in one call with `QueryResult.apply`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from pobsd.db.query_result import coerce_status, coerce_year
from pobsd.parsing.schema import Status


class GameFilter(BaseModel):
    """Optional criteria; every criterion left as `None` is ignored."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = None
    year: int | None = None
    engine: str | None = None
    runtime: str | None = None
    genre: str | None = None
    tag: str | None = None
    dev: str | None = None
    publisher: str | None = None
    status: Status | None = None

    @field_validator("name", "engine", "runtime", "genre", "tag", "dev", "publisher", mode="before")
    @classmethod
    def blank_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("year", mode="before")
    @classmethod
    def parse_year_argument(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return coerce_year(value)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status_argument(cls, value: Any) -> Any:
        """Accept the same status spellings as `QueryResult.by_status` (name or 0-6 level)."""

        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return coerce_status(value)

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)
