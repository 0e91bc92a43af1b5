"""PostalSearch client: the main entry point for the library."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from postalsearch import candidates, ranking
from postalsearch.address import full_address
from postalsearch.exceptions import BatchTooLarge
from postalsearch.models import (
    MatchType,
    PostalMatch,
    PostalRecord,
    ScoredCandidate,
    SearchQuery,
    SearchResult,
    Suggestion,
    SuggestResult,
    clean_text,
)
from postalsearch.store import PostalStore, SqlitePostalStore

MAX_BATCH_SIZE = 50
DEFAULT_SUGGEST_LIMIT = 10
_MIN_PARTIAL_LENGTH = 2


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class PostalSearch:
    """
    Postal code lookup over a reference store.

    Initialise with the path to the SQLite reference database, or with any
    object implementing the PostalStore protocol. A path is validated on
    construction (file present, expected tables present).
    """

    def __init__(
        self,
        db: Union[str, Path, PostalStore],
        logger: Optional[logging.Logger] = None,
        similarity_threshold: float = ranking.SIMILARITY_THRESHOLD,
        max_results: int = ranking.MAX_RESULTS,
    ):
        if isinstance(db, (str, Path)):
            self._store: PostalStore = SqlitePostalStore(db)
        else:
            self._store = db
        self._logger = logger or logging.getLogger("postalsearch")
        self._threshold = similarity_threshold
        self._max_results = max_results

    # ── Public API ────────────────────────────────────────────────

    def lookup(
        self,
        country: Optional[str],
        postal_code: Optional[str],
        fuzzy: bool = True,
    ) -> SearchResult:
        """
        Find reference rows for a country + postal code.

        Tries an exact match first. Only when that finds nothing and
        *fuzzy* is set are the approximate strategies run. Never raises:
        invalid input and internal failures come back as a result with
        ``success=False``.
        """
        start = time.perf_counter()
        query = SearchQuery.from_raw(country, postal_code, fuzzy)

        if not query.is_valid:
            return SearchResult(
                success=False,
                query=query,
                search_time_ms=_elapsed_ms(start),
                error="Country and postal code are required",
            )

        self._logger.info(
            "Searching for %s:%s, fuzzy=%s",
            query.country_code, query.postal_code, query.fuzzy,
        )
        try:
            match_type, matches = self._search(query)
        except Exception:
            self._logger.exception(
                "Search error for %s:%s", query.country_code, query.postal_code
            )
            return SearchResult(
                success=False,
                query=query,
                search_time_ms=_elapsed_ms(start),
                error="Internal search error",
            )

        result = SearchResult(
            success=True,
            query=query,
            match_type=match_type,
            results=matches,
            search_time_ms=_elapsed_ms(start),
        )
        if matches:
            self._logger.info(
                "Found %d %s matches in %.1fms",
                len(matches), match_type.value, result.search_time_ms,
            )
        else:
            self._logger.info("No matches found in %.1fms", result.search_time_ms)
        return result

    def search_multiple(
        self, searches: Iterable[Mapping[str, Any]]
    ) -> list[SearchResult]:
        """
        Run ``lookup`` for each mapping in *searches*, in order.

        Each mapping carries ``country``, ``postal_code`` (``postalCode`` is
        accepted too) and an optional ``fuzzy`` flag defaulting to True.
        Always returns one result per search; an item that is not a mapping
        comes back as a validation failure in its place.
        """
        searches = list(searches)
        if len(searches) > MAX_BATCH_SIZE:
            raise BatchTooLarge(len(searches), MAX_BATCH_SIZE)

        results = []
        for search in searches:
            if not isinstance(search, Mapping):
                self._logger.warning("Malformed batch item %r", search)
                results.append(self.lookup(None, None))
                continue
            postal_code = search.get("postal_code", search.get("postalCode"))
            results.append(
                self.lookup(
                    search.get("country"),
                    postal_code,
                    fuzzy=search.get("fuzzy") is not False,
                )
            )
        return results

    def validate(self, country: Optional[str], postal_code: Optional[str]) -> bool:
        """Return True if the postal code exists verbatim for the country."""
        try:
            result = self.lookup(country, postal_code, fuzzy=False)
        except Exception:
            self._logger.exception("Validation error")
            return False
        return (
            result.success
            and result.match_type is MatchType.EXACT
            and bool(result.results)
        )

    def suggest(
        self,
        country: Optional[str],
        partial: Optional[str],
        limit: int = DEFAULT_SUGGEST_LIMIT,
    ) -> SuggestResult:
        """
        Autocomplete postal codes that contain or extend *partial*.

        Results keep the store's ordering, are unique per (postal code,
        place name) and are never similarity-filtered. A *limit* below 1
        gives an empty suggestion list without querying the store.
        """
        country_code = clean_text(country).upper()
        partial = clean_text(partial)

        if not country_code or len(partial) < _MIN_PARTIAL_LENGTH:
            return SuggestResult(
                success=False,
                country_code=country_code,
                partial=partial,
                error=(
                    "Country and at least 2 characters of postal code required"
                ),
            )
        if limit < 1:
            return SuggestResult(
                success=True, country_code=country_code, partial=partial
            )

        try:
            rows = self._store.fuzzy_match(country_code, partial)
        except Exception:
            self._logger.exception(
                "Suggestion error for %s:%s", country_code, partial
            )
            return SuggestResult(
                success=False,
                country_code=country_code,
                partial=partial,
                error="Internal suggestion error",
            )

        seen: set[tuple[str, str]] = set()
        suggestions: list[Suggestion] = []
        for row in rows:
            if len(suggestions) >= limit:
                break
            key = (row.postal_code, row.place_name or "")
            if key in seen:
                continue
            seen.add(key)
            suggestions.append(
                Suggestion(row.postal_code, row.place_name, row.admin_name1)
            )

        return SuggestResult(
            success=True,
            country_code=country_code,
            partial=partial,
            suggestions=suggestions,
        )

    def get_stats(self) -> Optional[dict]:
        """Record and country counts, or None if the store is unreachable."""
        try:
            return {
                "total_records": self._store.count_records(),
                "countries": self._store.count_countries(),
            }
        except Exception:
            self._logger.exception("Stats error")
            return None

    def health_check(self) -> dict:
        """
        Report whether the store is reachable and holds any data.

        Returns a dict with ``healthy``, ``stats`` and ``response_time_ms``.
        """
        start = time.perf_counter()
        stats = self.get_stats()
        if stats is None:
            return {
                "healthy": False,
                "error": "Statistics unavailable",
                "response_time_ms": _elapsed_ms(start),
            }
        return {
            "healthy": stats["total_records"] > 0,
            "stats": stats,
            "response_time_ms": _elapsed_ms(start),
        }

    def close(self) -> None:
        """Release the store's connections."""
        self._store.close()

    def __enter__(self) -> PostalSearch:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ── Private helpers ───────────────────────────────────────────

    def _search(self, query: SearchQuery) -> tuple[MatchType, list[PostalMatch]]:
        exact = candidates.exact_candidates(
            self._store, query.country_code, query.postal_code, self._logger
        )
        if exact:
            return MatchType.EXACT, [self._format(record) for record in exact]

        if query.fuzzy:
            ranked = self._find_fuzzy(query)
            if ranked:
                return MatchType.FUZZY, [
                    self._format(c.record, c.similarity_score) for c in ranked
                ]

        return MatchType.NONE, []

    def _find_fuzzy(self, query: SearchQuery) -> list[ScoredCandidate]:
        sets = candidates.fuzzy_candidate_sets(
            self._store,
            query.country_code,
            query.postal_code,
            self._logger,
            max_results=self._max_results,
        )
        return ranking.rank(
            query.postal_code,
            sets,
            threshold=self._threshold,
            limit=self._max_results,
        )

    @staticmethod
    def _format(record: PostalRecord, score: float = 1.0) -> PostalMatch:
        return PostalMatch(
            record=record,
            similarity_score=score,
            full_address=full_address(record),
        )
