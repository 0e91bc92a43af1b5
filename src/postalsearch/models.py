"""Typed records and result models for postalsearch."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

_RECORD_FIELDS = (
    "country_code",
    "postal_code",
    "place_name",
    "admin_name1",
    "admin_code1",
    "admin_name2",
    "admin_code2",
    "admin_name3",
    "admin_code3",
    "latitude",
    "longitude",
    "accuracy",
)


def clean_text(value: Any) -> str:
    """Trimmed string form of a user-supplied field; None becomes ''."""
    if value is None:
        return ""
    return str(value).strip()


class MatchType(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"
    NONE = "none"


@dataclass(frozen=True)
class PostalRecord:
    """One row of the reference dataset."""

    country_code: str
    postal_code: str
    place_name: Optional[str] = None
    admin_name1: Optional[str] = None    # region / state
    admin_code1: Optional[str] = None
    admin_name2: Optional[str] = None    # sub-region / county
    admin_code2: Optional[str] = None
    admin_name3: Optional[str] = None    # locality
    admin_code3: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[int] = None       # 1 = high precision .. 6 = low

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> PostalRecord:
        """Build a record from any mapping keyed by column name."""
        return cls(**{name: row[name] for name in _RECORD_FIELDS})

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used to deduplicate candidates across strategies."""
        return (self.country_code, self.postal_code, self.place_name or "")

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in _RECORD_FIELDS}


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate row with its similarity to the query postal code."""

    record: PostalRecord
    similarity_score: float

    @property
    def accuracy(self) -> int:
        return self.record.accuracy or 0

    @property
    def postal_code(self) -> str:
        return self.record.postal_code


@dataclass(frozen=True)
class SearchQuery:
    """A normalised lookup request."""

    country_code: str
    postal_code: str
    fuzzy: bool = True

    @classmethod
    def from_raw(
        cls, country: Any, postal_code: Any, fuzzy: bool = True
    ) -> SearchQuery:
        """
        Trim both fields and upper-case the country code.

        Non-string values (e.g. a numeric postal code from JSON) are
        converted with ``str``; None becomes an empty string.
        """
        return cls(
            country_code=clean_text(country).upper(),
            postal_code=clean_text(postal_code),
            fuzzy=fuzzy,
        )

    @property
    def is_valid(self) -> bool:
        return bool(self.country_code and self.postal_code)

    def to_dict(self) -> dict:
        return {"country": self.country_code, "postal_code": self.postal_code}


@dataclass(frozen=True)
class PostalMatch:
    """A formatted lookup result ready to hand back to a caller."""

    record: PostalRecord
    similarity_score: float
    full_address: str

    def to_dict(self) -> dict:
        """Convert to a plain dictionary (useful for JSON serialisation)."""
        data = self.record.to_dict()
        data["similarity_score"] = round(self.similarity_score, 3)
        data["full_address"] = self.full_address
        return data


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one lookup, successful or not."""

    success: bool
    query: SearchQuery
    match_type: Optional[MatchType] = None
    results: list[PostalMatch] = field(default_factory=list)
    search_time_ms: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {
            "success": self.success,
            "match_type": self.match_type.value if self.match_type else None,
            "query": self.query.to_dict(),
            "results": [match.to_dict() for match in self.results],
            "search_time_ms": round(self.search_time_ms, 3),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class Suggestion:
    postal_code: str
    place_name: Optional[str]
    admin_name1: Optional[str]

    def to_dict(self) -> dict:
        return {
            "postal_code": self.postal_code,
            "place_name": self.place_name,
            "admin_name1": self.admin_name1,
        }


@dataclass(frozen=True)
class SuggestResult:
    """Autocomplete suggestions for a partial postal code."""

    success: bool
    country_code: str
    partial: str
    suggestions: list[Suggestion] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {
            "success": self.success,
            "query": {"country": self.country_code, "partial": self.partial},
            "suggestions": [s.to_dict() for s in self.suggestions],
        }
        if self.error is not None:
            data["error"] = self.error
        return data
