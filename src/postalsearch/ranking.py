"""Merge, score and order fuzzy candidates."""

from __future__ import annotations

from typing import Iterable

from postalsearch import similarity
from postalsearch.models import PostalRecord, ScoredCandidate

SIMILARITY_THRESHOLD = 0.5
SCORE_TOLERANCE = 0.01
MAX_RESULTS = 20


def dedupe(candidate_sets: Iterable[Iterable[PostalRecord]]) -> list[PostalRecord]:
    """Flatten *candidate_sets*, keeping the first row seen for each key."""
    seen: set[tuple[str, str, str]] = set()
    unique: list[PostalRecord] = []
    for rows in candidate_sets:
        for record in rows:
            if record.key in seen:
                continue
            seen.add(record.key)
            unique.append(record)
    return unique


def _sort_key(candidate: ScoredCandidate) -> tuple:
    # Scores are bucketed to SCORE_TOLERANCE so float jitter between
    # equal-quality matches cannot reorder them. Bucket edges are fixed:
    # 0.746 and 0.744 differ by less than the tolerance but land in
    # buckets 75 and 74, so they order by score, not by accuracy.
    bucket = round(candidate.similarity_score / SCORE_TOLERANCE)
    return (
        -bucket,
        -candidate.accuracy,
        candidate.postal_code,
        candidate.record.place_name or "",
    )


def rank(
    query: str,
    candidate_sets: Iterable[Iterable[PostalRecord]],
    threshold: float = SIMILARITY_THRESHOLD,
    limit: int = MAX_RESULTS,
) -> list[ScoredCandidate]:
    """
    Score every unique candidate against *query* and return the best.

    Candidates below *threshold* are dropped. The rest are ordered by
    score (ties within SCORE_TOLERANCE), then accuracy descending, then
    postal code, and truncated to *limit*.
    """
    scored = [
        ScoredCandidate(record, similarity.score(query, record.postal_code))
        for record in dedupe(candidate_sets)
    ]
    kept = [c for c in scored if c.similarity_score >= threshold]
    kept.sort(key=_sort_key)
    return kept[:limit]
