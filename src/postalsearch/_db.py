"""Internal database connection management."""

import sqlite3
import threading
from pathlib import Path

from postalsearch.exceptions import DatabaseInvalid, DatabaseNotFound, StoreError


class _DatabasePool:
    """
    Manages a single read-only SQLite connection shared by all threads.

    Holding one connection open across requests avoids repeated open/close
    cycles. Queries are serialised with a lock so threads never interleave
    on the same cursor, and the number of open connections stays at one no
    matter how many threads come and go.
    """

    def __init__(self, path: Path):
        self._path = path
        self._lock = threading.RLock()
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        """Return the open read-only connection, creating one if needed."""
        with self._lock:
            if self._conn is None:
                self._open()
            return self._conn

    def fetch_all(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """
        Run a query and return every row.

        If the database file has disappeared since the connection was
        opened, raises DatabaseNotFound. Any other driver error is wrapped
        in StoreError.
        """
        with self._lock:
            conn = self.get_connection()
            try:
                return conn.execute(sql, params).fetchall()
            except sqlite3.OperationalError as exc:
                # Connection may be stale: check whether the file still exists
                if not self._path.is_file():
                    self.close()
                    raise DatabaseNotFound(str(self._path)) from exc
                raise StoreError(str(exc)) from exc
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    def _open(self) -> None:
        """Open a fresh read-only connection."""
        if not self._path.is_file():
            raise DatabaseNotFound(str(self._path))
        self._conn = sqlite3.connect(
            f"file:{self._path}?mode=ro", uri=True, check_same_thread=False
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA query_only = ON")

    def validate_tables(self, expected: list[str]) -> None:
        """
        Check that the database contains the expected tables.

        Raises DatabaseInvalid if any are missing.
        """
        rows = self.fetch_all(
            "SELECT name FROM sqlite_master WHERE type='table'"
        )
        actual = {row[0] for row in rows}
        missing = set(expected) - actual
        if missing:
            raise DatabaseInvalid(
                str(self._path),
                f"missing tables: {', '.join(sorted(missing))}",
            )

    def close(self) -> None:
        """Close the connection if open."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
