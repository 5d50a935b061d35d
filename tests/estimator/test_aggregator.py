"""Tests for the weighted mean aggregator."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.common.exceptions import InvalidInputError
from src.estimator.aggregator import WeightedAggregator, coerce_price
from src.estimator.matcher import is_prefix_match
from src.estimator.models import HistoricalRecord, LiveRecord

TODAY = date(2025, 6, 1)


class TestCoercePrice:
    @pytest.mark.parametrize("value,expected", [
        (50000, 50000.0),
        (50000.5, 50000.5),
        (Decimal("42000"), 42000.0),
        (" 65000 ", 65000.0),
    ])
    def test_valid(self, value, expected):
        assert coerce_price(value) == expected

    @pytest.mark.parametrize("value", [
        None, True, "n/a", "", float("nan"), float("inf"), 0, -100, [50000],
        Decimal("sNaN"), Decimal("NaN"), 10 ** 400,
    ])
    def test_invalid(self, value):
        with pytest.raises(InvalidInputError):
            coerce_price(value)


class TestWeightedAggregator:
    def test_identical_weights_give_arithmetic_mean(self):
        records = [HistoricalRecord(model="ZX200-6", price=p) for p in (50000, 55000, 60000, 65000, 70000)]
        result = WeightedAggregator().aggregate(records, "ZX200-6", TODAY)
        assert result.value == pytest.approx(60000)
        assert result.count == 5
        assert result.skipped == 0

    def test_single_record_returns_its_price(self):
        records = [HistoricalRecord(model="ZX200-6", price=50000, year=2019)]
        result = WeightedAggregator().aggregate(records, "ZX200-6", TODAY)
        assert result.value == 50000

    def test_relevance_weighting(self):
        records = [
            HistoricalRecord(model="ZX200-6", price=100000, record_date=date(2025, 1, 1)),
            HistoricalRecord(model="ZX200-3", price=50000, record_date=date(2025, 1, 1)),
        ]
        result = WeightedAggregator().aggregate(records, "ZX200-6", TODAY)
        expected = (100000 * 1.0 + 50000 * 0.85) / 1.85
        assert result.value == pytest.approx(expected)
        assert [s.relevance for s in result.samples] == [100, 85]

    def test_recency_weighting(self):
        records = [
            HistoricalRecord(model="ZX200-6", price=100, record_date=date(2025, 1, 1)),
            HistoricalRecord(model="ZX200-6", price=200, record_date=date(2024, 1, 1)),
        ]
        result = WeightedAggregator().aggregate(records, "ZX200-6", TODAY)
        assert result.value == pytest.approx((100 * 1.0 + 200 * 0.5) / 1.5)
        assert [s.years_ago for s in result.samples] == [0, 1]

    def test_unrelated_records_dropped_not_skipped(self):
        records = [
            HistoricalRecord(model="ZX200-6", price=50000),
            HistoricalRecord(model="PC200-8", price=90000),
        ]
        result = WeightedAggregator().aggregate(records, "ZX200-6", TODAY)
        assert result.value == 50000
        assert result.count == 1
        assert result.skipped == 0

    def test_malformed_prices_skipped(self):
        records = [
            HistoricalRecord(model="ZX200-6", price=50000),
            HistoricalRecord(model="ZX200-6", price="n/a"),
            HistoricalRecord(model="ZX200-6", price=float("nan")),
            HistoricalRecord(model="ZX200-6", price=None),
            HistoricalRecord(model="ZX200-6", price=-5),
            HistoricalRecord(model="ZX200-6", price=Decimal("sNaN")),
        ]
        result = WeightedAggregator().aggregate(records, "ZX200-6", TODAY)
        assert result.value == 50000
        assert result.count == 1
        assert result.skipped == 5

    def test_numeric_string_price_accepted(self):
        result = WeightedAggregator().aggregate(
            [HistoricalRecord(model="ZX200-6", price="50000")], "ZX200-6", TODAY
        )
        assert result.value == 50000

    def test_no_records(self):
        result = WeightedAggregator().aggregate([], "ZX200-6", TODAY)
        assert result.value is None
        assert result.count == 0
        assert result.prices == []

    def test_mean_within_price_range(self):
        prices = [31000.3, 47250.9, 52000.1, 68999.7, 75500.0]
        records = [
            HistoricalRecord(model="ZX200-6", price=p, year=2010 + i)
            for i, p in enumerate(prices)
        ]
        result = WeightedAggregator().aggregate(records, "ZX200-6", TODAY)
        assert min(prices) <= result.value <= max(prices)

    def test_live_inclusion_prefix_only(self):
        records = [
            LiveRecord(model="ZX200-6", price=60000, created_at=datetime(2025, 1, 10)),
            LiveRecord(model="ZX200-3", price=40000, created_at=datetime(2025, 1, 10)),
        ]
        result = WeightedAggregator(inclusion=is_prefix_match).aggregate(records, "ZX200-6", TODAY)
        assert result.value == 60000
        assert result.count == 1

    def test_median_policy_for_unknown_ages(self):
        records = [
            HistoricalRecord(model="ZX200-6", price=100, record_date=date(2025, 1, 1)),
            HistoricalRecord(model="ZX200-6", price=300, record_date=date(2022, 1, 1)),
            HistoricalRecord(model="ZX200-6", price=200),
        ]
        result = WeightedAggregator(unknown_recency="median").aggregate(records, "ZX200-6", TODAY)
        # Known weights 1.0 and 0.25 -> median 0.625 for the undated record
        expected = (100 * 1.0 + 300 * 0.25 + 200 * 0.625) / (1.0 + 0.25 + 0.625)
        assert result.value == pytest.approx(expected)

    def test_weighted_mean_zero_weight(self):
        assert WeightedAggregator.weighted_mean([]) is None
