"""Blending of the historical and live weighted means into one estimate.

Confidence labels by sample count (defaults):
- no samples: SIN_DATOS
- historical only, >= 5 samples; or both sources, >= 5 in total: ALTA
- historical only, 1-4; live only, >= 3; both sources, < 5 in total: MEDIA
- live only, < 3: BAJA
"""

from __future__ import annotations

import math

from ..common.config import ConfidenceSettings
from ..common.exceptions import InvalidInputError
from ..common.models import Confidence, PriceRange


class SourceBlender:
    """Merges per-source means using fixed trust ratios.

    Usage:
        blender = SourceBlender()
        value = blender.blend(60000, 66000, historical_weight=0.7, live_weight=0.3)
        label = blender.confidence_label(historical_count=5, live_count=3)
    """

    def __init__(self, thresholds: ConfidenceSettings | None = None) -> None:
        self.thresholds = thresholds or ConfidenceSettings()

    @staticmethod
    def blend(
        historical: float | None,
        live: float | None,
        historical_weight: float = 0.7,
        live_weight: float = 0.3,
    ) -> float | None:
        """Weighted blend of both means, or whichever one exists."""
        for label, value in (("historical", historical), ("live", live)):
            if value is not None and not math.isfinite(value):
                raise InvalidInputError(f"{label} mean is not finite: {value!r}")

        if historical is not None and live is not None:
            total = historical_weight + live_weight
            if total <= 0:
                raise InvalidInputError("Blend weights must not both be zero")
            return (historical * historical_weight + live * live_weight) / total
        if historical is not None:
            return historical
        return live

    def confidence_label(self, historical_count: int, live_count: int) -> Confidence:
        """Confidence from how many records backed each source."""
        total = historical_count + live_count
        if total == 0:
            return Confidence.SIN_DATOS

        if historical_count and live_count:
            return Confidence.ALTA if total >= self.thresholds.high_total else Confidence.MEDIA
        if historical_count:
            return Confidence.ALTA if historical_count >= self.thresholds.high_total else Confidence.MEDIA
        return Confidence.MEDIA if live_count >= self.thresholds.live_medium else Confidence.BAJA

    @staticmethod
    def price_range(prices: list[float]) -> PriceRange:
        """Literal min/max of every matched price, independent of the mean."""
        if not prices:
            return PriceRange()
        return PriceRange(min=min(prices), max=max(prices))
