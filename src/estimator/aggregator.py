"""Weighted mean of matched record prices.

Each record contributes ``price * (relevance / 100) * recency_weight``;
the result is divided by the sum of the weights.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from datetime import date
from decimal import Decimal
from typing import Any, Union

from ..common.exceptions import InvalidInputError
from .matcher import is_related_model, model_relevance
from .models import AggregateResult, HistoricalRecord, LiveRecord, ScoredRecord
from .recency import UNKNOWN_MAX, recency_weights, years_ago

logger = logging.getLogger(__name__)

PriceRecord = Union[HistoricalRecord, LiveRecord]


def coerce_price(value: Any) -> float:
    """Return ``value`` as a positive finite float or raise InvalidInputError."""
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(f"Price is not numeric: {value!r}")
    if not isinstance(value, (int, float, Decimal, str)):
        raise InvalidInputError(f"Price is not numeric: {value!r}")
    try:
        price = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        # Decimal("sNaN") and ints beyond float range fail here
        raise InvalidInputError(f"Price is not numeric: {value!r}") from None

    if not math.isfinite(price):
        raise InvalidInputError(f"Price is not finite: {value!r}")
    if price <= 0:
        raise InvalidInputError(f"Price must be positive: {value!r}")
    return price


class WeightedAggregator:
    """Combines relevance and recency into a weighted mean price.

    Usage:
        aggregator = WeightedAggregator()
        result = aggregator.aggregate(records, "ZX200-6", today=date(2025, 6, 1))
        result.value    # weighted mean, or None when nothing matched
        result.skipped  # records dropped for malformed prices
    """

    def __init__(
        self,
        inclusion: Callable[[str, str | None], bool] = is_related_model,
        unknown_recency: str = UNKNOWN_MAX,
    ) -> None:
        self.inclusion = inclusion
        self.unknown_recency = unknown_recency

    def aggregate(
        self,
        records: Iterable[PriceRecord],
        query_model: str,
        today: date | None = None,
    ) -> AggregateResult:
        """Score matching records and compute their weighted mean.

        Args:
            records: Historical or live records, in ranked order.
            query_model: Model being priced.
            today: Reference date for record ages (default: today).

        Returns:
            AggregateResult with value None when no record contributed.
        """
        today = today or date.today()
        matched: list[tuple[PriceRecord, int, float, int | None]] = []
        skipped = 0

        for record in records:
            if not self.inclusion(query_model, record.model):
                continue
            relevance = model_relevance(query_model, record.model)
            try:
                price = coerce_price(record.price)
            except InvalidInputError as e:
                skipped += 1
                logger.warning("Skipping %s record for %s: %s", type(record).__name__, record.model, e)
                continue
            age = years_ago(record.record_date, record.year, today)
            matched.append((record, relevance, price, age))

        weights = recency_weights([age for *_, age in matched], self.unknown_recency)

        samples = [
            ScoredRecord(
                model=record.model,
                price=price,
                relevance=relevance,
                recency_weight=weight,
                year=record.year,
                hours=record.hours,
                record_date=record.record_date,
                years_ago=age,
            )
            for (record, relevance, price, age), weight in zip(matched, weights)
        ]

        return AggregateResult(value=self.weighted_mean(samples), samples=samples, skipped=skipped)

    @staticmethod
    def weighted_mean(samples: list[ScoredRecord]) -> float | None:
        """``sum(price * weight) / sum(weight)``; None when the weight sum is zero."""
        total_weight = sum(s.weight for s in samples)
        if total_weight <= 0:
            return None
        mean = sum(s.price * s.weight for s in samples) / total_weight
        # Float rounding must not push the mean outside its inputs
        prices = [s.price for s in samples]
        return min(max(mean, min(prices)), max(prices))
