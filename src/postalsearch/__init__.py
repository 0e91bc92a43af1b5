"""postalsearch: Postal code lookup with exact, fuzzy and autocomplete matching."""

from postalsearch.client import PostalSearch
from postalsearch.exceptions import (
    BatchTooLarge,
    DatabaseInvalid,
    DatabaseNotFound,
    PostalSearchError,
    StoreError,
)
from postalsearch.models import (
    MatchType,
    PostalMatch,
    PostalRecord,
    SearchResult,
    SuggestResult,
)

__all__ = [
    "PostalSearch",
    "MatchType",
    "PostalMatch",
    "PostalRecord",
    "SearchResult",
    "SuggestResult",
    "PostalSearchError",
    "DatabaseNotFound",
    "DatabaseInvalid",
    "StoreError",
    "BatchTooLarge",
]
