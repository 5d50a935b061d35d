"""Data models for historical and live price records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from ..common.models import SampleRecord


@dataclass(frozen=True)
class HistoricalRecord:
    """An imported auction or PVP history row.

    ``price`` is kept as read from storage so malformed values can be
    detected and skipped during aggregation.
    """

    model: str
    price: Any
    brand: str | None = None
    year: int | None = None
    hours: int | None = None
    record_date: date | None = None
    source: str = "auction"  # auction | pvp

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "brand": self.brand,
            "year": self.year,
            "hours": self.hours,
            "price": self.price,
            "record_date": self.record_date.isoformat() if self.record_date else None,
            "source": self.source,
        }


@dataclass(frozen=True)
class LiveRecord:
    """A price produced by the transactional flows (won auction, consolidated machine)."""

    model: str
    price: Any
    created_at: datetime | None = None
    year: int | None = None
    hours: int | None = None
    status: str = ""

    @property
    def record_date(self) -> date | None:
        return self.created_at.date() if self.created_at else None

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "year": self.year,
            "hours": self.hours,
            "price": self.price,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "status": self.status,
        }


@dataclass
class ScoredRecord:
    """A matched record with its relevance and recency weight."""

    model: str
    price: float
    relevance: int
    recency_weight: float
    year: int | None = None
    hours: int | None = None
    record_date: date | None = None
    years_ago: int | None = None

    @property
    def weight(self) -> float:
        return (self.relevance / 100) * self.recency_weight

    def to_sample(self) -> SampleRecord:
        return SampleRecord(
            model=self.model,
            year=self.year,
            hours=self.hours,
            price=self.price,
            record_date=self.record_date,
            relevance=self.relevance,
        )


@dataclass
class AggregateResult:
    """Weighted mean of one source plus the records that produced it."""

    value: float | None = None
    samples: list[ScoredRecord] = field(default_factory=list)
    skipped: int = 0

    @property
    def count(self) -> int:
        return len(self.samples)

    @property
    def prices(self) -> list[float]:
        return [s.price for s in self.samples]
