"""
Validator Tests - Unit Tests for Input Normalization

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fuelify.shared.validators (functions under test)
"""
import math

import pytest

from fuelify.domain.errors import InvalidArgumentError
from fuelify.domain.models import FuelGrade
from fuelify.shared.validators import (
    normalize_actor,
    normalize_grade,
    parse_price,
    validate_station_id,
    validate_timezone,
)


class TestParsePrice:
    def test_accepts_numbers_and_numeric_strings(self):
        assert parse_price(3.49) == 3.49
        assert parse_price(4) == 4.0
        assert parse_price("3.50") == 3.5
        assert parse_price("  2.999 ") == 2.999

    @pytest.mark.parametrize("raw", ["-5", -1, 0, "0", "0.0"])
    def test_rejects_non_positive(self, raw):
        with pytest.raises(InvalidArgumentError, match="greater than zero"):
            parse_price(raw)

    @pytest.mark.parametrize("raw", ["abc", "3.5.1", [], {}])
    def test_rejects_non_numeric(self, raw):
        with pytest.raises(InvalidArgumentError, match="numeric"):
            parse_price(raw)

    @pytest.mark.parametrize("raw", ["nan", "inf", "1e400", math.inf, math.nan, 10 ** 400])
    def test_rejects_non_finite(self, raw):
        with pytest.raises(InvalidArgumentError, match="finite"):
            parse_price(raw)

    @pytest.mark.parametrize("raw", [None, "", "   ", True, False])
    def test_rejects_missing(self, raw):
        with pytest.raises(InvalidArgumentError, match="required"):
            parse_price(raw)


class TestNormalizeGrade:
    def test_known_grades(self):
        assert normalize_grade("regular") is FuelGrade.REGULAR
        assert normalize_grade(" Diesel ") is FuelGrade.DIESEL
        assert normalize_grade("PREMIUM") is FuelGrade.PREMIUM
        assert normalize_grade(FuelGrade.MIDGRADE) is FuelGrade.MIDGRADE

    def test_unknown_grade(self):
        with pytest.raises(InvalidArgumentError, match="Unknown fuelType"):
            normalize_grade("kerosene")

    @pytest.mark.parametrize("raw", [None, "", 3])
    def test_missing_grade(self, raw):
        with pytest.raises(InvalidArgumentError, match="required"):
            normalize_grade(raw)


class TestNormalizeActor:
    def test_defaults_to_staff(self):
        assert normalize_actor(None) == "Staff"
        assert normalize_actor("") == "Staff"
        assert normalize_actor("   ") == "Staff"

    def test_trims_and_collapses_whitespace(self):
        assert normalize_actor("  Bob   Smith ") == "Bob Smith"

    def test_caps_length(self):
        assert len(normalize_actor("x" * 500)) == 80


class TestStationIdAndTimezone:
    def test_station_id_trimmed(self):
        assert validate_station_id(" 1 ") == "1"
        assert validate_station_id(2) == "2"

    @pytest.mark.parametrize("raw", [None, "", "  ", True])
    def test_station_id_required(self, raw):
        with pytest.raises(InvalidArgumentError, match="stationId"):
            validate_station_id(raw)

    def test_timezones(self):
        assert validate_timezone("UTC")
        assert validate_timezone("America/New_York")
        assert not validate_timezone("Mars/Olympus_Mons")
        assert not validate_timezone("")
