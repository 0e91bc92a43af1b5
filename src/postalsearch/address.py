"""Country-aware composition of a human-readable address line."""

from __future__ import annotations

from typing import Callable, Optional

from postalsearch.models import PostalRecord

_UNAVAILABLE = "Address not available"

AddressRule = Callable[[PostalRecord], list[Optional[str]]]


def _region_with_code(record: PostalRecord) -> Optional[str]:
    """'CA 90210' style fragment: region abbreviation (or name) + postal code."""
    region = record.admin_code1 or record.admin_name1
    if not region:
        return None
    return f"{region} {record.postal_code}"


def _unless_place(record: PostalRecord, value: Optional[str]) -> Optional[str]:
    return value if value != record.place_name else None


def _us(record: PostalRecord) -> list[Optional[str]]:
    # City, County, ST 90210 (county dropped when it already names the city)
    county = record.admin_name2
    if county and record.place_name and (
        record.place_name.lower() in county.lower()
    ):
        county = None
    return [record.place_name, county, _region_with_code(record)]


def _region_code_line(record: PostalRecord) -> list[Optional[str]]:
    # City, PR 1234
    return [record.place_name, _region_with_code(record)]


def _uk(record: PostalRecord) -> list[Optional[str]]:
    return [
        record.place_name,
        _unless_place(record, record.admin_name2),
        _unless_place(record, record.admin_name1),
        record.postal_code,
    ]


def _european(record: PostalRecord) -> list[Optional[str]]:
    # 75001 Paris, Region
    city = (
        f"{record.postal_code} {record.place_name}" if record.place_name else None
    )
    return [city, _unless_place(record, record.admin_name1)]


def _default(record: PostalRecord) -> list[Optional[str]]:
    return [
        record.place_name,
        _unless_place(record, record.admin_name2),
        _unless_place(record, record.admin_name1),
        record.postal_code,
    ]


ADDRESS_RULES: dict[str, AddressRule] = {
    "US": _us,
    "CA": _region_code_line,
    "AU": _region_code_line,
    "GB": _uk,
    "UK": _uk,
    "DE": _european,
    "FR": _european,
    "IT": _european,
    "ES": _european,
}


def clean_parts(parts: list[Optional[str]]) -> list[str]:
    """Trim fragments, drop empties and consecutive case-insensitive repeats."""
    cleaned: list[str] = []
    for part in parts:
        if not part or not part.strip():
            continue
        part = part.strip()
        if cleaned and cleaned[-1].lower() == part.lower():
            continue
        cleaned.append(part)
    return cleaned


def full_address(record: PostalRecord) -> str:
    """
    Compose the display address for *record* using its country's rule.

    Countries without a rule use the default 'place, sub-region, region,
    postal code' order.
    """
    rule = ADDRESS_RULES.get(record.country_code, _default)
    parts = clean_parts(rule(record))
    if parts:
        return ", ".join(parts)
    return record.postal_code or _UNAVAILABLE
