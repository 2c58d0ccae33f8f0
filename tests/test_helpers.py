"""
Tests for utils: date/number helpers, RUT utilities and validations.
"""
from datetime import date, datetime

import pytest

from utils.helpers import (
    clean_text,
    format_days,
    normalize_number,
    normalize_period,
    normalize_search_text,
    parse_iso_date,
    parse_sheet_date,
)
from utils.rut import compute_check_digit, format_rut, is_valid_rut, normalize_rut_canonical, sanitize_rut
from utils.validations import (
    sanitize_filename,
    validate_category,
    validate_date_range,
    validate_file_extension,
    validate_request_type,
    validate_severity,
)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

class TestParseIsoDate:
    def test_plain_iso(self):
        assert parse_iso_date("2024-03-04") == date(2024, 3, 4)

    def test_iso_with_time_part(self):
        assert parse_iso_date("2024-03-04T10:30:00") == date(2024, 3, 4)

    def test_date_and_datetime_objects(self):
        assert parse_iso_date(date(2024, 3, 4)) == date(2024, 3, 4)
        assert parse_iso_date(datetime(2024, 3, 4, 8, 0)) == date(2024, 3, 4)

    @pytest.mark.parametrize("value", [None, "", "   ", "04/03/2024", "2024-13-01", "2023-02-29", 20240304])
    def test_rejects_everything_else(self, value):
        assert parse_iso_date(value) is None


class TestParseSheetDate:
    @pytest.mark.parametrize("value", [
        "2026-01-06",
        "2026-01-06T00:00:00",
        "06/01/2026",
        "6-1-2026",
        "martes, 06 de enero de 2026",
        "6 de Enero de 2026",
        date(2026, 1, 6),
        datetime(2026, 1, 6, 12, 0),
    ])
    def test_accepted_forms(self, value):
        assert parse_sheet_date(value) == "2026-01-06"

    @pytest.mark.parametrize("value", [None, "", "nan", "31/02/2024", "06 de brumario de 2026", "next week"])
    def test_invalid_values_become_empty(self, value):
        assert parse_sheet_date(value) == ""


# ---------------------------------------------------------------------------
# Numbers and text
# ---------------------------------------------------------------------------

class TestNormalizeNumber:
    def test_comma_decimal(self):
        assert normalize_number("1,5", 0) == 1.5

    def test_numeric_values(self):
        assert normalize_number(3, 0) == 3.0
        assert normalize_number(" 2.5 ", 0) == 2.5

    @pytest.mark.parametrize("value", ["", None, "abc", True, float("nan"), "nan"])
    def test_fallback(self, value):
        assert normalize_number(value, 7) == 7


def test_normalize_period():
    assert normalize_period("2023") == "2023"
    assert normalize_period("", today=date(2025, 6, 1)) == "2025"
    assert normalize_period("23", today=date(2025, 6, 1)) == "2025"


def test_format_days():
    assert format_days(3.0) == "3"
    assert format_days(2.5) == "2.5"
    assert format_days(-1) == "-1"
    assert format_days(None) == "0"


def test_normalize_search_text():
    assert normalize_search_text("  José ÑÚÑEZ ") == "jose nunez"
    assert normalize_search_text(None) == ""


def test_clean_text():
    assert clean_text(None) == ""
    assert clean_text(float("nan")) == ""
    assert clean_text("  Ana ") == "Ana"
    assert clean_text(5) == "5"


# ---------------------------------------------------------------------------
# RUT
# ---------------------------------------------------------------------------

class TestRut:
    def test_sanitize(self):
        assert sanitize_rut("12.345.678-k") == "12345678K"

    def test_canonical(self):
        assert normalize_rut_canonical("12.345.678-5") == "12345678-5"
        assert normalize_rut_canonical("6000000k") == "6000000-K"
        assert normalize_rut_canonical("K") == ""
        assert normalize_rut_canonical(None) == ""

    def test_format(self):
        assert format_rut("12345678-5") == "12.345.678-5"
        assert format_rut("9876543-3") == "9.876.543-3"
        assert format_rut("") == ""

    @pytest.mark.parametrize("body,expected", [
        ("12345678", "5"),
        ("9876543", "3"),
        ("6000000", "K"),
        ("2100000", "0"),
    ])
    def test_check_digit(self, body, expected):
        assert compute_check_digit(body) == expected

    @pytest.mark.parametrize("value", ["12345678-5", "12.345.678-5", "6000000-k", "2100000-0"])
    def test_valid(self, value):
        assert is_valid_rut(value)

    @pytest.mark.parametrize("value", ["12345678-4", "123456-0", "123456789-1", "", "abc"])
    def test_invalid(self, value):
        assert not is_valid_rut(value)


# ---------------------------------------------------------------------------
# Validations
# ---------------------------------------------------------------------------

class TestValidations:
    def test_date_range(self):
        assert validate_date_range(date(2024, 3, 4), date(2024, 3, 4))
        assert not validate_date_range(date(2024, 3, 5), date(2024, 3, 4))
        assert not validate_date_range(None, date(2024, 3, 4))

    def test_vocabularies(self):
        assert validate_severity("error")
        assert not validate_severity("fatal")
        assert validate_category("overlap")
        assert not validate_category("misc")
        assert validate_request_type("FL")
        assert not validate_request_type("fl")

    def test_sanitize_filename(self):
        assert sanitize_filename('a/b:c?.csv') == "a_b_c_.csv"
        assert sanitize_filename(" .. ") == "unnamed"

    def test_file_extension(self):
        assert validate_file_extension("decrees.CSV", ["csv", ".xlsx"])
        assert validate_file_extension("decrees.xlsx", ["csv", ".xlsx"])
        assert not validate_file_extension("decrees.pdf", ["csv"])
        assert not validate_file_extension("decrees", ["csv"])
