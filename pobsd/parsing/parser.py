"""Games database parser.

The parser groups lines into record blocks (a block starts at a `Game` line and runs until the next
one) and converts each block into a `Game`. Malformed lines never raise: they are reported as
`ParseDiagnostic` entries, and the parsing mode decides what happens next:
    - relaxed (default): report the line, leave the field unset, keep going to the end of input;
    - strict: report the line and stop; the block in progress is discarded.

Failing to read the source is different: it raises `SourceUnavailableError` before any parsing.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum, StrEnum
from pathlib import Path
from typing import Any, TextIO

from pobsd.parsing.fields import (
    FIELD_ATTRIBUTES,
    RECORD_START_KEY,
    MalformedLineError,
    parse_field,
)
from pobsd.parsing.schema import Game

logger = logging.getLogger(__name__)


class SourceUnavailableError(OSError):
    """Raised when the database text cannot be read (missing path, not a file, bad encoding...)."""


class ParsingMode(StrEnum):
    """How the parser reacts to a malformed line."""

    relaxed = "relaxed"
    strict = "strict"


@dataclass(frozen=True)
class ParseDiagnostic:
    """A malformed line: its 1-based position, its raw content and why it was rejected."""

    line_number: int
    line: str
    reason: str

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.reason}"


@dataclass(frozen=True)
class WithoutError:
    """Parsing produced no diagnostic."""

    games: tuple[Game, ...]


@dataclass(frozen=True)
class WithError:
    """Parsing produced at least one diagnostic.

    In strict mode `diagnostics` holds exactly one entry and `games` only the blocks completed
    before the malformed line.
    """

    games: tuple[Game, ...]
    diagnostics: tuple[ParseDiagnostic, ...]


ParserResult = WithoutError | WithError


class _BlockState(Enum):
    outside = "outside"
    in_block = "in_block"
    skipping = "skipping"


class _ParseRun:
    """State of a single parse call."""

    def __init__(self, mode: ParsingMode) -> None:
        self.mode = mode
        self.state = _BlockState.outside
        self.current: dict[str, Any] = {}
        self.games: list[Game] = []
        self.diagnostics: list[ParseDiagnostic] = []

    def run(self, data: str) -> ParserResult:
        halted = False
        for line_number, line in enumerate(data.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                self._consume(line)
            except MalformedLineError as exc:
                self._report(line_number, line, exc)
                if self.mode == ParsingMode.strict:
                    halted = True
                    break
                self._unset_failed_field(exc)

        if halted:
            logger.warning(
                "strict parsing stopped line=%d games=%d",
                self.diagnostics[-1].line_number,
                len(self.games),
            )
            self.current = {}
        else:
            self._finish_block()

        logger.info(
            "parsed games=%d diagnostics=%d mode=%s",
            len(self.games),
            len(self.diagnostics),
            self.mode,
        )
        if self.diagnostics:
            return WithError(games=tuple(self.games), diagnostics=tuple(self.diagnostics))
        return WithoutError(games=tuple(self.games))

    def _consume(self, line: str) -> None:
        field = parse_field(line)

        if field.key == RECORD_START_KEY:
            self._finish_block()
            if field.value is None:
                # No name, nothing to attach the following lines to.
                self.state = _BlockState.skipping
                raise MalformedLineError("record has no name", key=field.key)
            self.current = {field.attribute: field.value}
            self.state = _BlockState.in_block
            return

        if self.state == _BlockState.outside:
            raise MalformedLineError(f"{field.key.value} field outside a record")
        if self.state == _BlockState.skipping:
            return

        if field.value is None:
            self.current.pop(field.attribute, None)
        else:
            self.current[field.attribute] = field.value

    def _finish_block(self) -> None:
        if self.state == _BlockState.in_block and self.current.get("name"):
            self.games.append(Game(**self.current))
        self.current = {}
        self.state = _BlockState.outside

    def _unset_failed_field(self, exc: MalformedLineError) -> None:
        if exc.key is None or exc.key == RECORD_START_KEY:
            return
        if self.state == _BlockState.in_block:
            self.current.pop(FIELD_ATTRIBUTES[exc.key], None)

    def _report(self, line_number: int, line: str, exc: MalformedLineError) -> None:
        diagnostic = ParseDiagnostic(line_number=line_number, line=line, reason=str(exc))
        logger.debug("malformed line=%d reason=%s", line_number, diagnostic.reason)
        self.diagnostics.append(diagnostic)


class Parser:
    """Parse the games database from a string, a file or an open text stream.

    A `Parser` keeps no state between calls; the same instance can be reused.
    """

    def __init__(self, mode: ParsingMode | str = ParsingMode.relaxed) -> None:
        self.mode = ParsingMode(mode)

    def load_from_string(self, data: str) -> ParserResult:
        """Parse database text already held in memory."""

        return _ParseRun(self.mode).run(data)

    def load_from_file(self, path: str | os.PathLike[str]) -> ParserResult:
        """Read a UTF-8 database file and parse it.

        Raises:
            SourceUnavailableError: If the file cannot be read or decoded.
        """

        file_path = Path(path)
        try:
            data = file_path.read_text(encoding="utf-8")
        except (OSError, ValueError) as exc:
            raise SourceUnavailableError(f"cannot read games database {file_path}: {exc}") from exc
        return self.load_from_string(data)

    def load_from_stream(self, stream: TextIO) -> ParserResult:
        """Read an open stream to its end and parse it (bytes are decoded as UTF-8).

        Raises:
            SourceUnavailableError: If reading or decoding fails.
        """

        try:
            data = stream.read()
            if isinstance(data, bytes):
                data = data.decode("utf-8")
        except (OSError, ValueError) as exc:
            # ValueError covers closed streams and undecodable bytes.
            raise SourceUnavailableError(f"cannot read games database stream: {exc}") from exc
        return self.load_from_string(data)


def parse(mode: ParsingMode | str, source: str | os.PathLike[str] | TextIO) -> ParserResult:
    """Parse a games database in the given mode.

    `source` is the database text itself (`str`), a path (`os.PathLike`), or a readable stream.

    Raises:
        SourceUnavailableError: If a path or stream source cannot be read.
        TypeError: If `source` is none of the supported kinds.
    """

    parser = Parser(mode)
    if isinstance(source, str):
        return parser.load_from_string(source)
    if isinstance(source, os.PathLike):
        return parser.load_from_file(source)
    if hasattr(source, "read"):
        return parser.load_from_stream(source)
    raise TypeError(f"unsupported source type: {type(source).__name__}")
