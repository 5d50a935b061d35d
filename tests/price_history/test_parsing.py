"""Tests for spreadsheet cell parsing."""

from datetime import date, datetime

import pandas as pd
import pytest

from src.price_history.parsing import (
    as_text,
    excel_serial_to_date,
    is_missing,
    parse_date_cell,
    parse_date_string,
    parse_float,
    parse_int,
    parse_price,
    parse_year,
    pick,
)


class TestMissing:
    @pytest.mark.parametrize("value", [None, float("nan"), pd.NaT, "", "   "])
    def test_missing(self, value):
        assert is_missing(value)

    @pytest.mark.parametrize("value", [0, "0", "ZX200-6", date(2024, 1, 1)])
    def test_present(self, value):
        assert not is_missing(value)

    def test_pick_first_present_alias(self):
        row = {"MODELO": float("nan"), "Modelo": "ZX200-6", "model": "PC200-8"}
        assert pick(row, "MODELO", "Modelo", "model") == "ZX200-6"
        assert pick(row, "MARCA", "Marca") is None

    def test_as_text(self):
        assert as_text(320145.0) == "320145"
        assert as_text("  LOT-1 ") == "LOT-1"
        assert as_text(float("nan")) is None


class TestNumbers:
    @pytest.mark.parametrize("value,expected", [
        (6500, 6500),
        (2019.0, 2019),
        (pd.Series([7]).iloc[0], 7),
        ("6500 hrs", 6500),
        (" 42", 42),
        ("abc", None),
        (float("nan"), None),
        (None, None),
    ])
    def test_parse_int(self, value, expected):
        assert parse_int(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (47000, 47000.0),
        ("1.5e3", 1500.0),
        ("850 USD", 850.0),
        (".5", 0.5),
        ("n/a", None),
        ("inf", None),
        (float("inf"), None),
    ])
    def test_parse_float(self, value, expected):
        assert parse_float(value) == expected

    def test_parse_float_default(self):
        assert parse_float(None, 0.0) == 0.0
        assert parse_float("n/a", 0.0) == 0.0

    @pytest.mark.parametrize("value,expected", [
        (47000, 47000.0),
        ("65000", 65000.0),
        (0, None),
        (-5, None),
        ("n/a", None),
    ])
    def test_parse_price(self, value, expected):
        assert parse_price(value) == expected


class TestYears:
    @pytest.mark.parametrize("value,expected", [
        (2019, 2019),
        ("2018", 2018),
        (1980, 1980),
        (2030, 2030),
        (1975, None),
        (2031, None),
        (43521, 2019),
        (None, None),
    ])
    def test_parse_year(self, value, expected):
        assert parse_year(value) == expected

    def test_excel_serial(self):
        assert excel_serial_to_date(43466) == date(2019, 1, 1)

    def test_excel_serial_out_of_range(self):
        assert excel_serial_to_date(99999999) is None
        assert excel_serial_to_date(-800000) is None

    def test_huge_year_is_implausible(self):
        assert parse_year(7000000) is None


class TestDates:
    @pytest.mark.parametrize("text,expected", [
        ("2024-02-26", date(2024, 2, 26)),
        ("26/02/2024", date(2024, 2, 26)),
        ("26-02-2024", date(2024, 2, 26)),
        ("6/2/2024", date(2024, 2, 6)),
        ("26/02/24", date(2024, 2, 26)),
        ("26/02/99", date(1999, 2, 26)),
        ("2024/2/6", date(2024, 2, 6)),
        ("02/26/2024", date(2024, 2, 26)),
        ("26 Feb 2024", date(2024, 2, 26)),
    ])
    def test_parse_date_string(self, text, expected):
        assert parse_date_string(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", None, "not a date"])
    def test_unparseable(self, text):
        assert parse_date_string(text) is None

    def test_date_cell_from_datetime(self):
        assert parse_date_cell(datetime(2024, 1, 5, 10, 30)) == date(2024, 1, 5)
        assert parse_date_cell(pd.Timestamp("2023-08-15")) == date(2023, 8, 15)

    def test_date_cell_from_serial(self):
        assert parse_date_cell(43466) == date(2019, 1, 1)

    def test_date_cell_from_string(self):
        assert parse_date_cell("15/08/2023") == date(2023, 8, 15)

    def test_date_cell_missing(self):
        assert parse_date_cell(float("nan")) is None

    def test_date_cell_out_of_range_serial(self):
        assert parse_date_cell(99999999) is None
        assert parse_date_cell(float("inf")) is None
