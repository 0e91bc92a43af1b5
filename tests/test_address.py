"""Tests for postalsearch.address module."""

import pytest

from postalsearch.address import ADDRESS_RULES, clean_parts, full_address
from postalsearch.models import PostalRecord


class TestCleanParts:
    def test_drops_empty_and_blank(self):
        assert clean_parts(["a", None, "", "   ", "b"]) == ["a", "b"]

    def test_trims(self):
        assert clean_parts(["  Paris ", "France"]) == ["Paris", "France"]

    def test_consecutive_duplicates_ignore_case(self):
        assert clean_parts(["Berlin", "berlin", "Germany"]) == ["Berlin", "Germany"]

    def test_non_consecutive_duplicates_kept(self):
        assert clean_parts(["A", "B", "a"]) == ["A", "B", "a"]


class TestFullAddress:
    def test_us(self):
        record = PostalRecord(
            "US", "90210", "Beverly Hills", "California", "CA", "Los Angeles", "037"
        )
        assert full_address(record) == "Beverly Hills, Los Angeles, CA 90210"

    def test_us_county_containing_place_is_dropped(self):
        record = PostalRecord(
            "US", "90012", "Los Angeles", "California", "CA", "Los Angeles County"
        )
        assert full_address(record) == "Los Angeles, CA 90012"

    def test_us_falls_back_to_state_name(self):
        record = PostalRecord("US", "99501", "Anchorage", "Alaska")
        assert full_address(record) == "Anchorage, Alaska 99501"

    @pytest.mark.parametrize(
        ("country", "code", "place", "region", "region_code", "expected"),
        [
            ("CA", "M5V 3A8", "Toronto", "Ontario", "ON", "Toronto, ON M5V 3A8"),
            ("AU", "2000", "Sydney", "New South Wales", "NSW", "Sydney, NSW 2000"),
        ],
    )
    def test_region_code_countries(
        self, country, code, place, region, region_code, expected
    ):
        record = PostalRecord(country, code, place, region, region_code)
        assert full_address(record) == expected

    @pytest.mark.parametrize("country", ["GB", "UK"])
    def test_uk(self, country: str):
        record = PostalRecord(
            country, "SW1A 2AA", "London", "England", "ENG", "Greater London"
        )
        assert full_address(record) == "London, Greater London, England, SW1A 2AA"

    def test_uk_skips_regions_equal_to_place(self):
        record = PostalRecord("GB", "M1 1AE", "Manchester", "England", None, "Manchester")
        assert full_address(record) == "Manchester, England, M1 1AE"

    @pytest.mark.parametrize(
        ("country", "code", "place", "region", "expected"),
        [
            ("FR", "75001", "Paris 01", "Île-de-France", "75001 Paris 01, Île-de-France"),
            ("DE", "10115", "Berlin", "Berlin", "10115 Berlin"),
            ("IT", "00184", "Roma", "Lazio", "00184 Roma, Lazio"),
            ("ES", "28001", "Madrid", "Comunidad de Madrid", "28001 Madrid, Comunidad de Madrid"),
        ],
    )
    def test_european(self, country, code, place, region, expected):
        record = PostalRecord(country, code, place, region)
        assert full_address(record) == expected

    def test_default_rule(self):
        record = PostalRecord(
            "JP", "100-0001", "Chiyoda", "Tokyo", "40", "Chiyoda-ku"
        )
        assert "JP" not in ADDRESS_RULES
        assert full_address(record) == "Chiyoda, Chiyoda-ku, Tokyo, 100-0001"

    def test_default_rule_suppresses_repeated_fragment(self):
        record = PostalRecord(
            "NZ", "6011", "Wellington", "Wellington", None, "wellington "
        )
        assert full_address(record) == "Wellington, 6011"

    def test_falls_back_to_postal_code(self):
        assert full_address(PostalRecord("CA", "H0H 0H0")) == "H0H 0H0"

    def test_nothing_available(self):
        assert full_address(PostalRecord("XX", "")) == "Address not available"
