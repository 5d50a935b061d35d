"""Recency weighting: newer records count more in the weighted mean."""

from __future__ import annotations

from datetime import date
from statistics import median

UNKNOWN_MAX = "max"
UNKNOWN_MEDIAN = "median"


def years_ago(
    record_date: date | None,
    year: int | None,
    today: date | None = None,
) -> int | None:
    """Whole years elapsed since the record.

    Uses ``record_date`` when present, else Jan-1 of ``year``. Returns
    None when neither is known. Dates in the future count as age 0.
    """
    today = today or date.today()
    if record_date is None:
        if year is None:
            return None
        try:
            record_date = date(int(year), 1, 1)
        except (TypeError, ValueError):
            return None

    age = today.year - record_date.year
    if (today.month, today.day) < (record_date.month, record_date.day):
        age -= 1
    return max(age, 0)


def recency_weight(age: int | None) -> float:
    """Decay weight ``1 / (age + 1)``; unknown age gets the maximum weight."""
    if age is None:
        return 1.0
    return 1.0 / (max(age, 0) + 1)


def recency_weights(ages: list[int | None], unknown: str = UNKNOWN_MAX) -> list[float]:
    """Weights for a set of ages.

    Args:
        ages: Age in whole years per record, None when unknown.
        unknown: ``"max"`` gives unknown ages weight 1; ``"median"`` gives
            them the median weight of the known ages in the same set.

    Returns:
        One weight per age, in order.
    """
    if unknown not in (UNKNOWN_MAX, UNKNOWN_MEDIAN):
        raise ValueError(f"Unknown recency policy: {unknown!r}")

    known = [recency_weight(a) for a in ages if a is not None]
    fallback = 1.0
    if unknown == UNKNOWN_MEDIAN and known:
        fallback = median(known)

    return [recency_weight(a) if a is not None else fallback for a in ages]
