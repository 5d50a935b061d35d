"""Historical price estimator.

Aggregates imported history (auction results, PVP sheets) and live
transactional records into one confidence-rated price suggestion.

Steps per request:
1. Fetch historical and live records for the model (read-only).
2. Weighted mean per source: relevance (model match) x recency.
3. Blend the two means with the use case trust ratios.
4. Label confidence by sample count; report the literal price range.
"""

from __future__ import annotations

import logging
from datetime import date

from ..common.config import EstimatorSettings, Settings, settings as default_settings
from ..common.exceptions import InvalidQueryError
from ..common.models import Estimate, QuerySpec, SampleCounts, UseCase
from .aggregator import WeightedAggregator
from .blender import SourceBlender
from .fetchers import RecordFetcher, SQLiteRecordFetcher
from .matcher import is_prefix_match, is_related_model

logger = logging.getLogger(__name__)


class PriceEstimator:
    """Suggest auction prices, PVP and spare-parts values from history.

    The estimator holds no per-request state; the same inputs and fetched
    records always yield the same Estimate.

    Usage:
        estimator = PriceEstimator(SQLiteRecordFetcher(db_path))
        estimate = estimator.estimate("auction", "ZX200-6", year=2019, hours=6500)
        print(estimate.value, estimate.confidence)
    """

    def __init__(
        self,
        fetcher: RecordFetcher | None = None,
        settings: Settings | EstimatorSettings | None = None,
    ) -> None:
        settings = settings or default_settings
        if isinstance(settings, Settings):
            self.fetcher = fetcher or SQLiteRecordFetcher(settings.database.abs_path)
            self.settings = settings.estimator
        else:
            self.fetcher = fetcher or SQLiteRecordFetcher()
            self.settings = settings

        self.blender = SourceBlender(self.settings.confidence)
        self._historical_aggregator = WeightedAggregator(
            inclusion=is_related_model, unknown_recency=self.settings.unknown_recency
        )
        self._live_aggregator = WeightedAggregator(
            inclusion=is_prefix_match, unknown_recency=self.settings.unknown_recency
        )

    def build_query(
        self,
        use_case: UseCase | str,
        model: str | None,
        year: int | None = None,
        hours: int | None = None,
    ) -> QuerySpec:
        """Validate request inputs and apply the use case tolerances."""
        use_case = _parse_use_case(use_case)
        if model is None or not str(model).strip():
            raise InvalidQueryError("Modelo es requerido")

        profile = self.settings.for_use_case(use_case.value)
        return QuerySpec(
            model=str(model),
            year=year or None,
            hours=hours or None,
            year_tolerance=profile.year_tolerance,
            hours_tolerance=profile.hours_tolerance,
        )

    def estimate(
        self,
        use_case: UseCase | str,
        model: str | None,
        year: int | None = None,
        hours: int | None = None,
        cost_for_margin: float | None = None,
        today: date | None = None,
    ) -> Estimate:
        """Estimate a price for ``model``.

        Args:
            use_case: ``auction``, ``pvp`` or ``repuestos``.
            model: Machine model, e.g. "ZX200-6". Required.
            year: Optional machine year; narrows history to +/- tolerance.
            hours: Optional machine hours; narrows history to +/- tolerance.
            cost_for_margin: Landed cost; for PVP, enforces the minimum margin.
            today: Reference date for record ages (default: today).

        Returns:
            Estimate. No matching data is a normal result with
            confidence SIN_DATOS and value None.

        Raises:
            InvalidQueryError: model missing or use case unknown.
        """
        use_case = _parse_use_case(use_case)
        query = self.build_query(use_case, model, year, hours)
        profile = self.settings.for_use_case(use_case.value)
        today = today or date.today()

        historical_records = self.fetcher.fetch_historical(
            use_case, query, profile.historical_limit, today
        )
        live_records = self.fetcher.fetch_live(use_case, query, profile.live_limit, today)

        historical = self._historical_aggregator.aggregate(historical_records, query.model, today)
        live = self._live_aggregator.aggregate(live_records, query.model, today)

        value = self.blender.blend(
            historical.value,
            live.value,
            historical_weight=profile.historical_weight,
            live_weight=profile.live_weight,
        )
        confidence = self.blender.confidence_label(historical.count, live.count)
        price_range = self.blender.price_range(historical.prices + live.prices)

        margin = None
        if use_case == UseCase.PVP and value is not None and cost_for_margin and cost_for_margin > 0:
            value, margin = self.apply_min_margin(value, cost_for_margin, self.settings.min_margin_pct)

        estimate = Estimate(
            value=value,
            confidence=confidence,
            range=price_range,
            sample_counts=SampleCounts(historical=historical.count, live=live.count),
            historical_value=historical.value,
            live_value=live.value,
            suggested_margin=margin,
            skipped_records=historical.skipped + live.skipped,
            historical_samples=[s.to_sample() for s in historical.samples],
            live_samples=[s.to_sample() for s in live.samples],
        )

        logger.info(
            "Suggestion %s for %s (year=%s, hours=%s): value=%s confidence=%s historical=%d live=%d skipped=%d",
            use_case.value,
            query.model,
            query.year,
            query.hours,
            f"{value:,.0f}" if value is not None else None,
            confidence.value,
            historical.count,
            live.count,
            estimate.skipped_records,
        )
        return estimate

    @staticmethod
    def apply_min_margin(value: float, cost: float, min_margin_pct: float) -> tuple[float, float]:
        """Raise ``value`` so its margin over ``cost`` is at least ``min_margin_pct``.

        Returns:
            (value, margin_pct) after enforcement.
        """
        margin = (value / cost - 1) * 100
        if margin < min_margin_pct:
            return cost * (1 + min_margin_pct / 100), min_margin_pct
        return value, margin


def _parse_use_case(use_case: UseCase | str) -> UseCase:
    try:
        return UseCase(use_case)
    except ValueError:
        raise InvalidQueryError(f"Unknown use case: {use_case!r}") from None
