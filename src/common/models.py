"""Shared Pydantic data models for the machinery price engine.

These models define the data contracts between the estimator and its
callers (CLIs, host applications). All modules import from here.
"""

from __future__ import annotations

import math
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, field_validator


# === Enums ===

class UseCase(str, Enum):
    """Kinds of price suggestion."""
    AUCTION = "auction"
    PVP = "pvp"
    REPUESTOS = "repuestos"


class HistorySource(str, Enum):
    """Imported history tables."""
    AUCTION = "auction"
    PVP = "pvp"


class Confidence(str, Enum):
    """Confidence label of an estimate, ordered SIN_DATOS < BAJA < MEDIA < ALTA."""
    SIN_DATOS = "SIN_DATOS"
    BAJA = "BAJA"
    MEDIA = "MEDIA"
    ALTA = "ALTA"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK = {
    Confidence.SIN_DATOS: 0,
    Confidence.BAJA: 1,
    Confidence.MEDIA: 2,
    Confidence.ALTA: 3,
}

# Key of the suggested value in the response payload, per use case
RESPONSE_VALUE_KEYS = {
    UseCase.AUCTION: "price",
    UseCase.PVP: "pvp",
    UseCase.REPUESTOS: "rptos",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


# === Query ===

class QuerySpec(BaseModel):
    """Search parameters for one suggestion request."""
    model: str
    year: int | None = None
    hours: int | None = None
    year_tolerance: int = Field(default=3, ge=0)
    hours_tolerance: int = Field(default=2000, ge=0)

    @field_validator("model")
    @classmethod
    def _strip_model(cls, value: str) -> str:
        return value.strip()


# === Estimate ===

class PriceRange(BaseModel):
    """Literal min/max of every matched price."""
    min: float | None = None
    max: float | None = None


class SampleCounts(BaseModel):
    """Number of records that contributed from each source."""
    historical: int = Field(default=0, ge=0)
    live: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.historical + self.live


class SampleRecord(BaseModel):
    """A matched record as shown to the caller."""
    model: str
    year: int | None = None
    hours: int | None = None
    price: float
    record_date: date | None = None
    relevance: int | None = None


class Estimate(BaseModel):
    """Confidence-rated price estimate for a machine model.

    ``value`` lies within ``range`` except for a PVP estimate lifted by the
    minimum margin over a given cost, which can exceed ``range.max``.
    ``suggested_margin`` is set in that case.
    """
    value: float | None = None
    confidence: Confidence = Confidence.SIN_DATOS
    range: PriceRange = Field(default_factory=PriceRange)
    sample_counts: SampleCounts = Field(default_factory=SampleCounts)
    historical_value: float | None = None
    live_value: float | None = None
    suggested_margin: float | None = None
    skipped_records: int = Field(default=0, ge=0)
    historical_samples: list[SampleRecord] = []
    live_samples: list[SampleRecord] = []

    @property
    def has_data(self) -> bool:
        return self.confidence != Confidence.SIN_DATOS

    def to_response(
        self,
        use_case: UseCase | str,
        historical_preview: int = 5,
        live_preview: int = 3,
    ) -> dict:
        """Render the JSON payload consumed by the UI layer.

        ``price_range`` is always the literal spread of the matched prices, so a
        margin-lifted ``suggested_pvp`` can sit above ``price_range.max``.
        """
        use_case = UseCase(use_case)
        key = RESPONSE_VALUE_KEYS[use_case]
        counts = self.sample_counts

        response: dict = {
            f"suggested_{key}": round_half_up(self.value) if self.value is not None else None,
        }
        if use_case == UseCase.PVP:
            response["suggested_margin"] = (
                round(self.suggested_margin, 2) if self.suggested_margin is not None else None
            )
        response.update({
            "confidence": self.confidence.value,
            "confidence_score": counts.total,
            "price_range": {"min": self.range.min, "max": self.range.max},
            "sources": {
                "historical": counts.historical,
                "current": counts.live,
                "total": counts.total,
            },
            "sample_records": {
                "historical": [
                    _sample_payload(s, key, with_relevance=True)
                    for s in self.historical_samples[:historical_preview]
                ],
                "current": [
                    _sample_payload(s, key, with_relevance=False)
                    for s in self.live_samples[:live_preview]
                ],
            },
            "skipped_records": self.skipped_records,
        })
        if not self.has_data:
            response["message"] = "No hay datos históricos suficientes para sugerir precio"
        return response


def _sample_payload(sample: SampleRecord, key: str, with_relevance: bool) -> dict:
    payload = {
        "model": sample.model,
        "year": sample.year,
        "hours": sample.hours,
        key: sample.price,
        "date": sample.record_date.isoformat() if sample.record_date else None,
    }
    if with_relevance:
        payload["relevance"] = sample.relevance
    return payload
