"""Postal code similarity scoring."""

from rapidfuzz.distance import Levenshtein

_LENGTH_WEIGHT = 0.1
_PREFIX_WEIGHT = 0.2


def common_prefix_length(a: str, b: str) -> int:
    """Count leading characters shared by *a* and *b*, ignoring case."""
    count = 0
    for left, right in zip(a, b):
        if left.lower() != right.lower():
            break
        count += 1
    return count


def score(query: str, candidate: str) -> float:
    """
    Score how close *candidate* (from the store) is to the user *query*.

    The base term is Levenshtein similarity normalised by the longer
    string. Two bonuses reward candidates of similar length and candidates
    sharing a leading prefix with the query, so '90213' ranks '90210' above
    '90201'. The base is clamped at 0 before the bonuses are added and the
    total is capped at 1.0.
    """
    if query == candidate:
        return 1.0

    longest = max(len(query), len(candidate))
    if longest == 0:
        return 1.0

    distance = Levenshtein.distance(query, candidate)
    base = max(0.0, 1.0 - distance / longest)

    length_bonus = min(len(query), len(candidate)) / longest * _LENGTH_WEIGHT
    prefix_bonus = (
        common_prefix_length(query, candidate) / longest * _PREFIX_WEIGHT
    )

    return min(1.0, base + length_bonus + prefix_bonus)
