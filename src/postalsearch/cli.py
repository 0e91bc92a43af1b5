"""
Postal Code Lookup: command-line interface
===========================================
Thin wrapper around the postalsearch library.

Usage:
    postalsearch                                 # interactive mode
    postalsearch lookup US 90210 [--exact]       # single lookup
    postalsearch suggest US 902 [LIMIT]          # autocomplete
    postalsearch validate CA "M5V 3A8"           # yes / no
    postalsearch health                          # store status

Configuration is read from environment variables:
    POSTALSEARCH_DB          Path to the SQLite reference database
    POSTALSEARCH_LOG_LEVEL   Logging level (default WARNING)

If POSTALSEARCH_DB is not set, looks for postal_codes.db in the current
working directory.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from postalsearch import PostalSearch
from postalsearch.exceptions import DatabaseInvalid, DatabaseNotFound
from postalsearch.models import SearchResult

_USAGE = """\
usage: postalsearch [lookup CC CODE [--exact] | suggest CC PARTIAL [LIMIT]
                     | validate CC CODE | health]"""

_BANNER = """\
╔══════════════════════════════════════╗
║        Postal Code Lookup            ║
║   Country + Postal Code → Address    ║
╚══════════════════════════════════════╝
Type 'q' to quit.
"""


def _db_path() -> str:
    return os.environ.get(
        "POSTALSEARCH_DB", str(Path.cwd() / "postal_codes.db")
    )


def _configure_logging() -> None:
    level = os.environ.get("POSTALSEARCH_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_result(result: SearchResult) -> None:
    if not result.success:
        print(f"  ✗ Error: {result.error}")
        return
    if not result.results:
        print(f"  ✗ No match ({result.search_time_ms:.1f}ms)")
        return
    print(
        f"  ✓ {len(result.results)} {result.match_type.value} match(es) "
        f"in {result.search_time_ms:.1f}ms"
    )
    for match in result.results:
        record = match.record
        print(
            f"  {record.postal_code:<10} {match.similarity_score:>5.0%}  "
            f"{match.full_address}  ({record.latitude}, {record.longitude})"
        )


def _run_interactive(client: PostalSearch) -> None:
    print(_BANNER)

    while True:
        try:
            country = input("\nCountry code:  ").strip()
            if country.lower() in ("q", "quit", "exit"):
                print("Bye!")
                break
            postal_code = input("Postal code:   ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if not country or not postal_code:
            print("  ✗ Country and postal code are required.")
            continue

        _print_result(client.lookup(country, postal_code))


def _run_command(client: PostalSearch, args: list[str]) -> int:
    command, rest = args[0], args[1:]

    if command == "lookup" and len(rest) in (2, 3):
        exact_only = len(rest) == 3 and rest[2] == "--exact"
        if len(rest) == 3 and not exact_only:
            print(_USAGE, file=sys.stderr)
            return 1
        result = client.lookup(rest[0], rest[1], fuzzy=not exact_only)
        _print_result(result)
        return 0 if result.success and result.results else 1

    if command == "suggest" and len(rest) in (2, 3):
        try:
            limit = int(rest[2]) if len(rest) == 3 else 10
        except ValueError:
            print(f"Invalid limit: {rest[2]}", file=sys.stderr)
            return 1
        outcome = client.suggest(rest[0], rest[1], limit)
        if not outcome.success:
            print(f"Error: {outcome.error}", file=sys.stderr)
            return 1
        for suggestion in outcome.suggestions:
            place = ", ".join(
                p for p in (suggestion.place_name, suggestion.admin_name1) if p
            )
            print(f"  {suggestion.postal_code:<10} {place}")
        return 0

    if command == "validate" and len(rest) == 2:
        valid = client.validate(rest[0], rest[1])
        print("valid" if valid else "invalid")
        return 0 if valid else 1

    if command == "health" and not rest:
        status = client.health_check()
        for key, val in status.items():
            print(f"{key:>20}: {val}")
        return 0 if status["healthy"] else 1

    print(_USAGE, file=sys.stderr)
    return 1


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point; supports both CLI commands and interactive mode."""
    args = sys.argv[1:] if argv is None else argv
    _configure_logging()

    try:
        client = PostalSearch(_db_path())
    except (DatabaseNotFound, DatabaseInvalid) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(
            "Set POSTALSEARCH_DB or run from the directory containing "
            "postal_codes.db.",
            file=sys.stderr,
        )
        sys.exit(2)

    try:
        if args:
            sys.exit(_run_command(client, args))
        _run_interactive(client)
    finally:
        client.close()


if __name__ == "__main__":
    main()
