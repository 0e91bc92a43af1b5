"""
Candidate retrieval strategies.

Each strategy is an independent function over a PostalStore that returns
raw rows for one country. Strategies fail soft: a store error is logged
and the strategy contributes no rows, so one failing query never sinks
the whole lookup.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from postalsearch.exceptions import PostalSearchError
from postalsearch.models import PostalRecord
from postalsearch.store import FUZZY_LIMIT, PostalStore

MAX_CANDIDATES = FUZZY_LIMIT
_PREFIX_FLOOR_RATIO = 0.6
_PREFIX_FLOOR_MIN = 2


def _fail_soft(
    label: str,
    logger: logging.Logger,
    fetch: Callable[[], list[PostalRecord]],
) -> list[PostalRecord]:
    try:
        return fetch()
    except PostalSearchError as exc:
        logger.error("%s search error: %s", label, exc)
        return []


def exact_candidates(
    store: PostalStore, country: str, postal_code: str, logger: logging.Logger
) -> list[PostalRecord]:
    """Rows whose postal code equals the query."""
    return _fail_soft(
        "Exact", logger, lambda: store.exact_match(country, postal_code)
    )


def pattern_candidates(
    store: PostalStore, country: str, postal_code: str, logger: logging.Logger
) -> list[PostalRecord]:
    """Rows related to the query by substring or prefix."""
    return _fail_soft(
        "Postal code fuzzy",
        logger,
        lambda: store.fuzzy_match(country, postal_code),
    )


def prefix_floor(length: int) -> int:
    """Shortest prefix length tried when shrinking a query of *length*."""
    return max(_PREFIX_FLOOR_MIN, math.floor(length * _PREFIX_FLOOR_RATIO))


def prefix_candidates(
    store: PostalStore,
    country: str,
    postal_code: str,
    logger: logging.Logger,
    max_results: int = MAX_CANDIDATES,
) -> list[PostalRecord]:
    """
    Re-run the pattern query on ever shorter prefixes of the query.

    Starts one character short of the full query and stops at
    ``prefix_floor(len)`` or once *max_results* rows have accumulated,
    whichever comes first.
    """

    def fetch() -> list[PostalRecord]:
        results: list[PostalRecord] = []
        floor = prefix_floor(len(postal_code))
        for length in range(len(postal_code) - 1, floor - 1, -1):
            results.extend(store.fuzzy_match(country, postal_code[:length]))
            if len(results) >= max_results:
                break
        return results

    return _fail_soft("Partial postal code", logger, fetch)


def place_candidates(
    store: PostalStore, country: str, text: str, logger: logging.Logger
) -> list[PostalRecord]:
    """Treat the query as a place or region name."""
    return _fail_soft(
        "Place name", logger, lambda: store.place_match(country, text)
    )


def fuzzy_candidate_sets(
    store: PostalStore,
    country: str,
    postal_code: str,
    logger: logging.Logger,
    max_results: int = MAX_CANDIDATES,
) -> list[list[PostalRecord]]:
    """
    Run every fuzzy strategy and return their row sets in priority order.

    Prefix shrinking is skipped when the pattern query already filled the
    candidate cap.
    """
    pattern = pattern_candidates(store, country, postal_code, logger)
    sets = [pattern]
    if len(pattern) < max_results:
        sets.append(
            prefix_candidates(store, country, postal_code, logger, max_results)
        )
    sets.append(place_candidates(store, country, postal_code, logger))
    return sets
