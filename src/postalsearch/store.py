"""Reference store interface and its SQLite implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from postalsearch._db import _DatabasePool
from postalsearch.models import PostalRecord

EXACT_LIMIT = 10
FUZZY_LIMIT = 20
PLACE_LIMIT = 15

_REQUIRED_TABLES = ["countries", "postal_codes"]

_SELECT = (
    "SELECT c.code AS country_code, pc.postal_code, pc.place_name, "
    "pc.admin_name1, pc.admin_code1, pc.admin_name2, pc.admin_code2, "
    "pc.admin_name3, pc.admin_code3, pc.latitude, pc.longitude, pc.accuracy "
    "FROM postal_codes pc JOIN countries c ON pc.country_id = c.id "
)


class PostalStore(Protocol):
    """
    Query interface the search core depends on.

    Every method is scoped to a single country and returns rows already
    capped and ordered; the search core never sees the underlying engine.

    Implementations must report query failures as PostalSearchError
    (normally StoreError wrapping the driver error). The lookup strategies
    treat those as "no rows" and carry on; any other exception aborts the
    lookup with a generic internal error.
    """

    def exact_match(self, country: str, postal_code: str) -> list[PostalRecord]:
        """Rows whose postal code equals *postal_code*, best accuracy first."""
        ...

    def fuzzy_match(self, country: str, pattern: str) -> list[PostalRecord]:
        """
        Rows whose postal code contains *pattern*, or which are a prefix of
        it, closest length first.
        """
        ...

    def place_match(self, country: str, text: str) -> list[PostalRecord]:
        """Rows whose place, region or sub-region name contains *text*."""
        ...

    def count_records(self) -> int:
        ...

    def count_countries(self) -> int:
        ...

    def close(self) -> None:
        ...


def _like_escape(text: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return (
        text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )


class SqlitePostalStore:
    """
    PostalStore backed by a read-only SQLite copy of the reference data.

    Validates on construction that the file exists and holds the
    ``countries`` and ``postal_codes`` tables.
    """

    def __init__(self, path: str | Path):
        self._pool = _DatabasePool(Path(path))
        self._pool.validate_tables(_REQUIRED_TABLES)

    def exact_match(self, country: str, postal_code: str) -> list[PostalRecord]:
        rows = self._pool.fetch_all(
            _SELECT + "WHERE c.code = ? AND pc.postal_code = ? "
            "ORDER BY pc.accuracy DESC LIMIT ?",
            (country, postal_code, EXACT_LIMIT),
        )
        return [PostalRecord.from_mapping(row) for row in rows]

    def fuzzy_match(self, country: str, pattern: str) -> list[PostalRecord]:
        # 'contains' covers 'starts with'; the reverse LIKE catches stored
        # codes that are themselves a prefix of the pattern.
        rows = self._pool.fetch_all(
            _SELECT + "WHERE c.code = ? AND ("
            "pc.postal_code LIKE ? ESCAPE '\\' "
            "OR ? LIKE REPLACE(REPLACE(REPLACE(pc.postal_code, '\\', '\\\\'), "
            "'%', '\\%'), '_', '\\_') || '%' ESCAPE '\\') "
            "ORDER BY ABS(LENGTH(pc.postal_code) - LENGTH(?)) ASC, "
            "pc.accuracy DESC, pc.postal_code ASC LIMIT ?",
            (
                country,
                f"%{_like_escape(pattern)}%",
                pattern,
                pattern,
                FUZZY_LIMIT,
            ),
        )
        return [PostalRecord.from_mapping(row) for row in rows]

    def place_match(self, country: str, text: str) -> list[PostalRecord]:
        needle = f"%{_like_escape(text)}%"
        rows = self._pool.fetch_all(
            _SELECT + "WHERE c.code = ? AND ("
            "pc.place_name LIKE ? ESCAPE '\\' "
            "OR pc.admin_name1 LIKE ? ESCAPE '\\' "
            "OR pc.admin_name2 LIKE ? ESCAPE '\\') "
            "ORDER BY pc.accuracy DESC LIMIT ?",
            (country, needle, needle, needle, PLACE_LIMIT),
        )
        return [PostalRecord.from_mapping(row) for row in rows]

    def count_records(self) -> int:
        rows = self._pool.fetch_all("SELECT COUNT(*) FROM postal_codes")
        return int(rows[0][0])

    def count_countries(self) -> int:
        rows = self._pool.fetch_all("SELECT COUNT(*) FROM countries")
        return int(rows[0][0])

    def close(self) -> None:
        self._pool.close()
