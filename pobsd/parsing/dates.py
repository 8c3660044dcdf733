"""Date parsing utilities for the games database.

Two kinds of dates appear in the database:
    - calendar dates (`Added`, `Updated`) written as `YYYY-MM-DD`,
    - a test date annotating the `Status` field, written in parentheses at the end of the value
      (e.g. `runs (2022-05-13)`).
"""

from __future__ import annotations

import re
from datetime import date

import dateparser
from dateparser.conf import Settings as DateparserSettings

_DATEPARSER_SETTINGS = DateparserSettings().replace(
    STRICT_PARSING=True,
    DATE_ORDER="YMD",
)

_CALENDAR_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TRAILING_PARENTHESES_RE = re.compile(r"\((?P<fragment>[^()]*)\)\s*$")


def parse_calendar_date(value: str) -> date:
    """Parse a `YYYY-MM-DD` calendar date.

    Raises:
        ValueError: If the value is not a valid date in that exact form.
    """

    text = value.strip()
    if not _CALENDAR_DATE_RE.fullmatch(text):
        raise ValueError(f"expected a YYYY-MM-DD date, got {value!r}")
    return date.fromisoformat(text)


def parse_annotation_date(value: str) -> date | None:
    """Return the date written in trailing parentheses, if there is one and it parses."""

    match = _TRAILING_PARENTHESES_RE.search(value)
    if not match:
        return None

    fragment = match.group("fragment").strip()
    if not fragment:
        return None

    dt = dateparser.parse(fragment, languages=["en"], settings=_DATEPARSER_SETTINGS)
    if not dt:
        return None
    return dt.date()
