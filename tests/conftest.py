"""Shared test fixtures: a small SQLite reference database and a fake store."""

import logging
import sqlite3
from pathlib import Path

import pytest

COUNTRIES = [
    (1, "US"),
    (2, "CA"),
    (3, "GB"),
    (4, "DE"),
    (5, "FR"),
    (6, "AU"),
]

_LA = ("California", "CA", "Los Angeles", "037", None, None)

POSTAL_CODES = [
    (1, "90210", "Beverly Hills", *_LA, 34.0901, -118.4065, 4),
    # Lower-accuracy duplicate of 90210 / Beverly Hills
    (1, "90210", "Beverly Hills", *_LA, 34.0900, -118.4060, 1),
    (1, "90211", "Beverly Hills", *_LA, 34.0650, -118.3830, 4),
    (1, "90212", "Beverly Hills", *_LA, 34.0623, -118.4024, 4),
    (1, "90209", "Beverly Hills", *_LA, 34.0736, -118.4004, 1),
    (1, "90201", "Bell", *_LA, 33.9767, -118.1710, 4),
    (1, "90202", "Bell Gardens", *_LA, 33.9653, -118.1514, 4),
    (
        1, "10001", "New York", "New York", "NY", "New York", "061",
        None, None, 40.7484, -73.9967, 4,
    ),
    (
        1, "99501", "Anchorage", "Alaska", "AK", "Anchorage", "020",
        None, None, 61.2181, -149.9003, 4,
    ),
    (
        2, "M5V 3A8", "Toronto", "Ontario", "ON", "Toronto", None,
        None, None, 43.6426, -79.3871, 6,
    ),
    (
        2, "M5V 2T6", "Toronto", "Ontario", "ON", "Toronto", None,
        None, None, 43.6452, -79.3957, 6,
    ),
    (
        3, "SW1A 2AA", "London", "England", "ENG", "Greater London",
        "11609024", None, None, 51.5034, -0.1276, 4,
    ),
    (
        4, "10115", "Berlin", "Berlin", "BE", "Kreisfreie Stadt Berlin",
        "00", "Berlin", "11000", 52.5323, 13.3846, 4,
    ),
    (
        5, "75001", "Paris 01", "Île-de-France", "11", "Paris", "75",
        "Paris", "751", 48.8592, 2.3417, 5,
    ),
    (
        6, "2000", "Sydney", "New South Wales", "NSW", "Sydney", None,
        None, None, -33.8678, 151.2073, 4,
    ),
]


@pytest.fixture()
def tmp_postal_db(tmp_path: Path) -> Path:
    """Create a small reference database with a few countries."""
    db_path = tmp_path / "postal_codes.db"
    conn = sqlite3.connect(str(db_path))
    conn.execute(
        """
        CREATE TABLE countries (
            id INTEGER PRIMARY KEY,
            code CHAR(2) NOT NULL UNIQUE
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE postal_codes (
            country_id INTEGER NOT NULL,
            postal_code VARCHAR(20) NOT NULL,
            place_name VARCHAR(180),
            admin_name1 VARCHAR(100),
            admin_code1 VARCHAR(20),
            admin_name2 VARCHAR(100),
            admin_code2 VARCHAR(20),
            admin_name3 VARCHAR(100),
            admin_code3 VARCHAR(20),
            latitude REAL,
            longitude REAL,
            accuracy INTEGER,
            FOREIGN KEY (country_id) REFERENCES countries(id)
        )
        """
    )
    conn.execute(
        "CREATE INDEX idx_country_postal ON postal_codes (country_id, postal_code)"
    )
    conn.executemany("INSERT INTO countries VALUES (?, ?)", COUNTRIES)
    conn.executemany(
        "INSERT INTO postal_codes VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        POSTAL_CODES,
    )
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture()
def test_logger() -> logging.Logger:
    return logging.getLogger("tests.postalsearch")


@pytest.fixture()
def search(tmp_postal_db: Path, test_logger: logging.Logger):
    """Create a PostalSearch client over the test database."""
    from postalsearch import PostalSearch

    c = PostalSearch(tmp_postal_db, logger=test_logger)
    yield c
    c.close()


class FakeStore:
    """
    In-memory PostalStore that records calls and can be told to fail.

    *fuzzy* maps a pattern to the rows returned for it; *fail* maps a
    method name to the exception that method raises.
    """

    def __init__(
        self,
        exact=None,
        fuzzy=None,
        place=None,
        fail=None,
        records: int = 10,
        countries: int = 1,
    ):
        self.exact = exact or []
        self.fuzzy = fuzzy or {}
        self.place = place or []
        self.fail = fail or {}
        self.records = records
        self.countries = countries
        self.calls: list[tuple] = []
        self.closed = False

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail:
            raise self.fail[name]

    def called(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def exact_match(self, country, postal_code):
        self._record("exact_match", country, postal_code)
        return list(self.exact)

    def fuzzy_match(self, country, pattern):
        self._record("fuzzy_match", country, pattern)
        return list(self.fuzzy.get(pattern, []))

    def place_match(self, country, text):
        self._record("place_match", country, text)
        return list(self.place)

    def count_records(self):
        self._record("count_records")
        return self.records

    def count_countries(self):
        self._record("count_countries")
        return self.countries

    def close(self):
        self.closed = True


@pytest.fixture()
def fake_store():
    """Factory for FakeStore instances."""
    return FakeStore
