"""Command-line query tool for the games database.

Examples:
    pobsd-query games.db --name adventures --engine godot
    pobsd-query --tag indie --sorted        # database path taken from POBSD_DATABASE
    pobsd-query games.db --strict --count

Exit status: 0 when at least one game matches, 1 when none does, 2 on a source, configuration or
argument error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from pobsd.app import create_app
from pobsd.config.logging import configure_logging
from pobsd.config.settings import load_settings
from pobsd.db.filters import GameFilter
from pobsd.db.query_result import MalformedQueryArgumentError
from pobsd.parsing.fields import render_game
from pobsd.parsing.parser import ParsingMode, SourceUnavailableError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pobsd-query",
        description="Query the PlayOnBSD games database.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="Path to the games database (defaults to POBSD_DATABASE).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first malformed line instead of skipping it.",
    )
    names = parser.add_mutually_exclusive_group()
    names.add_argument("--name", help="Case-insensitive substring of the game name.")
    names.add_argument("--exact", help="Case-insensitive exact game name.")
    parser.add_argument("--year", help="Release year.")
    parser.add_argument("--engine", help="Engine name.")
    parser.add_argument("--runtime", help="Runtime name.")
    parser.add_argument("--genre", help="Genre.")
    parser.add_argument("--tag", help="Tag.")
    parser.add_argument("--dev", help="Developer.")
    parser.add_argument("--publisher", help="Publisher.")
    parser.add_argument("--status", help="Run status, by name (completable) or level (0-6).")
    parser.add_argument(
        "--sorted",
        action="store_true",
        help="List games alphabetically instead of in database order.",
    )
    parser.add_argument(
        "--count",
        action="store_true",
        help="Only print the number of matching games.",
    )
    parser.add_argument("--log-level", help="Logging level (defaults to LOG_LEVEL or INFO).")
    return parser


def _error(message: str) -> int:
    print(f"pobsd-query: {message}", file=sys.stderr)
    return EXIT_ERROR


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point. Returns the process exit status."""

    args = build_arg_parser().parse_args(argv)

    try:
        settings = load_settings()
    except RuntimeError as exc:
        return _error(str(exc))

    configure_logging(args.log_level or settings.log_level)

    if args.strict:
        settings = settings.model_copy(update={"parsing_mode": ParsingMode.strict})

    try:
        app = create_app(settings, args.path)
    except (RuntimeError, SourceUnavailableError) as exc:
        return _error(str(exc))

    for diagnostic in app.diagnostics:
        print(diagnostic, file=sys.stderr)

    try:
        game_filter = GameFilter(
            name=args.name,
            year=args.year,
            engine=args.engine,
            runtime=args.runtime,
            genre=args.genre,
            tag=args.tag,
            dev=args.dev,
            publisher=args.publisher,
            status=args.status,
        )
    except ValidationError as exc:
        return _error(f"invalid query: {exc}")

    try:
        if args.exact is not None:
            base = app.database.get_exact(args.exact)
        else:
            base = app.database.all()
        result = base.apply(game_filter)
    except MalformedQueryArgumentError as exc:
        return _error(str(exc))

    logger.debug(
        "query done filter=%s matches=%d",
        game_filter.model_dump(exclude_none=True),
        result.count,
    )

    if args.count:
        print(result.count)
    elif result.count:
        games = result.sorted() if args.sorted else result.into_inner()
        print("\n\n".join(render_game(game) for game in games))

    return EXIT_OK if result.count else EXIT_NO_MATCH


if __name__ == "__main__":
    raise SystemExit(main())
