"""Read-only record fetchers backing the estimator.

The SQL filter is a coarse superset of the matcher rules (family token
containment); relevance ranking and the sample cap are applied here in
Python, and the estimator re-applies the matcher to whatever it receives.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Protocol

from ..common.database import get_connection
from ..common.models import QuerySpec, UseCase
from .matcher import family_token, model_relevance
from .models import HistoricalRecord, LiveRecord
from .recency import years_ago

logger = logging.getLogger(__name__)

# Purchase years outside this window are treated as unknown
MIN_VALID_YEAR = 1980
MAX_VALID_YEAR = 2030

WON_AUCTION_STATUS = "GANADA"


class RecordFetcher(Protocol):
    """Supplies already-filtered records to the estimator."""

    def fetch_historical(
        self, use_case: UseCase, query: QuerySpec, limit: int, today: date
    ) -> list[HistoricalRecord]: ...

    def fetch_live(
        self, use_case: UseCase, query: QuerySpec, limit: int, today: date
    ) -> list[LiveRecord]: ...


# Family token of the stored model, mirroring matcher.family_token
_ROW_FAMILY_SQL = (
    "CASE WHEN instr({col}, '-') > 1 "
    "THEN substr({col}, 1, instr({col}, '-') - 1) ELSE {col} END"
)

_FAMILY_FILTER_SQL = (
    "(instr({col}, :family) > 0 OR (length({col}) > 0 AND instr(:model, "
    + _ROW_FAMILY_SQL
    + ") > 0))"
)

_PREFIX_FILTER_SQL = (
    "({col} = :model OR substr({col}, 1, length(:model)) = :model "
    "OR (length({col}) > 0 AND substr(:model, 1, length({col})) = {col}))"
)

_RANGE_FILTER_SQL = (
    "(:year IS NULL OR {year} BETWEEN :year - :year_tol AND :year + :year_tol) "
    "AND (:hours IS NULL OR {hours} BETWEEN :hours - :hours_tol AND :hours + :hours_tol)"
)

_HISTORICAL_SQL = {
    UseCase.AUCTION: f"""
        SELECT model, brand, year, hours, precio_comprado AS price,
               fecha_subasta AS record_date, NULL AS purchase_year
        FROM auction_price_history
        WHERE precio_comprado IS NOT NULL
          AND {_FAMILY_FILTER_SQL.format(col="model")}
          AND {_RANGE_FILTER_SQL.format(year="year", hours="hours")}
    """,
    UseCase.PVP: f"""
        SELECT modelo AS model, NULL AS brand, anio AS year, hour AS hours,
               pvp_est AS price, NULL AS record_date, fecha AS purchase_year
        FROM pvp_history
        WHERE pvp_est IS NOT NULL AND pvp_est > 0
          AND {_FAMILY_FILTER_SQL.format(col="modelo")}
          AND {_RANGE_FILTER_SQL.format(year="anio", hours="hour")}
    """,
    UseCase.REPUESTOS: f"""
        SELECT modelo AS model, NULL AS brand, anio AS year, hour AS hours,
               rptos AS price, NULL AS record_date, fecha AS purchase_year
        FROM pvp_history
        WHERE rptos IS NOT NULL AND rptos > 0
          AND {_FAMILY_FILTER_SQL.format(col="modelo")}
          AND {_RANGE_FILTER_SQL.format(year="anio", hours="hour")}
    """,
}

_LIVE_SQL = {
    UseCase.AUCTION: f"""
        SELECT m.model AS model, m.year AS year, m.hours AS hours,
               a.price_max AS price, a.created_at AS created_at, a.status AS status,
               ABS(m.year - COALESCE(:year, m.year)) AS year_diff,
               ABS(m.hours - COALESCE(:hours, m.hours)) AS hours_diff
        FROM auctions a
        LEFT JOIN machines m ON a.machine_id = m.id
        WHERE a.status = '{WON_AUCTION_STATUS}'
          AND a.price_max IS NOT NULL
          AND m.model IS NOT NULL
          AND {_PREFIX_FILTER_SQL.format(col="m.model")}
          AND {_RANGE_FILTER_SQL.format(year="m.year", hours="m.hours")}
        ORDER BY a.created_at DESC, year_diff ASC, hours_diff ASC
        LIMIT :limit
    """,
    UseCase.PVP: f"""
        SELECT model, year, hours, pvp_est AS price, created_at, '' AS status,
               ABS(year - COALESCE(:year, year)) AS year_diff,
               ABS(hours - COALESCE(:hours, hours)) AS hours_diff
        FROM management
        WHERE pvp_est IS NOT NULL AND pvp_est > 0
          AND model IS NOT NULL
          AND {_PREFIX_FILTER_SQL.format(col="model")}
          AND {_RANGE_FILTER_SQL.format(year="year", hours="hours")}
        ORDER BY created_at DESC, year_diff ASC, hours_diff ASC
        LIMIT :limit
    """,
    UseCase.REPUESTOS: f"""
        SELECT model, year, hours, rptos AS price, created_at, '' AS status,
               ABS(year - COALESCE(:year, year)) AS year_diff,
               ABS(hours - COALESCE(:hours, hours)) AS hours_diff
        FROM management
        WHERE rptos IS NOT NULL AND rptos > 0
          AND model IS NOT NULL
          AND {_PREFIX_FILTER_SQL.format(col="model")}
          AND {_RANGE_FILTER_SQL.format(year="year", hours="hours")}
        ORDER BY created_at DESC, year_diff ASC, hours_diff ASC
        LIMIT :limit
    """,
}


class SQLiteRecordFetcher:
    """Fetch historical and live records from the SQLite store.

    Usage:
        fetcher = SQLiteRecordFetcher("data/machinery_prices.db")
        query = QuerySpec(model="ZX200-6", year=2019)
        records = fetcher.fetch_historical(UseCase.AUCTION, query, limit=20, today=date.today())
    """

    def __init__(self, db_path: str | Path | None = None) -> None:
        self.db_path = db_path

    def fetch_historical(
        self, use_case: UseCase, query: QuerySpec, limit: int, today: date
    ) -> list[HistoricalRecord]:
        """Related history rows, ranked by relevance, recency, year and hours closeness."""
        source = "auction" if use_case == UseCase.AUCTION else "pvp"
        conn = get_connection(self.db_path)
        try:
            rows = conn.execute(_HISTORICAL_SQL[use_case], self._params(query)).fetchall()
        finally:
            conn.close()

        records = [self._historical_from_row(row, source) for row in rows]
        ranked = self.rank_historical(records, query, today)[:limit]
        logger.debug(
            "Historical %s for %s: %d candidates, %d kept", use_case.value, query.model, len(rows), len(ranked)
        )
        return ranked

    def fetch_live(
        self, use_case: UseCase, query: QuerySpec, limit: int, today: date
    ) -> list[LiveRecord]:
        """Live rows matching the model exactly or by prefix, newest first."""
        params = self._params(query)
        params["limit"] = limit
        conn = get_connection(self.db_path)
        try:
            rows = conn.execute(_LIVE_SQL[use_case], params).fetchall()
        finally:
            conn.close()

        records = [self._live_from_row(row) for row in rows]
        logger.debug("Live %s for %s: %d records", use_case.value, query.model, len(records))
        return records

    @staticmethod
    def rank_historical(
        records: list[HistoricalRecord], query: QuerySpec, today: date
    ) -> list[HistoricalRecord]:
        """Drop unrelated records and order the rest, best first.

        Order: relevance desc, years ago asc (unknown last),
        year difference asc, hours difference asc.
        """
        def _diff(value: int | None, target: int | None) -> float:
            if value is None:
                return float("inf")
            if target is None:
                return 0
            return abs(value - target)

        scored = []
        for record in records:
            relevance = model_relevance(query.model, record.model)
            if relevance is None:
                continue
            age = years_ago(record.record_date, record.year, today)
            key = (
                -relevance,
                age is None,
                age or 0,
                _diff(record.year, query.year),
                _diff(record.hours, query.hours),
            )
            scored.append((key, record))

        scored.sort(key=lambda item: item[0])
        return [record for _, record in scored]

    @staticmethod
    def _params(query: QuerySpec) -> dict:
        return {
            "model": query.model,
            "family": family_token(query.model),
            "year": query.year,
            "hours": query.hours,
            "year_tol": query.year_tolerance,
            "hours_tol": query.hours_tolerance,
        }

    @staticmethod
    def _historical_from_row(row: sqlite3.Row, source: str) -> HistoricalRecord:
        return HistoricalRecord(
            model=row["model"],
            brand=row["brand"],
            year=row["year"],
            hours=row["hours"],
            price=row["price"],
            record_date=_record_date(row["record_date"], row["purchase_year"]),
            source=source,
        )

    @staticmethod
    def _live_from_row(row: sqlite3.Row) -> LiveRecord:
        return LiveRecord(
            model=row["model"],
            year=row["year"],
            hours=row["hours"],
            price=row["price"],
            created_at=_parse_timestamp(row["created_at"]),
            status=row["status"] or "",
        )


def _record_date(raw_date: str | None, purchase_year: int | None) -> date | None:
    """Record date from an ISO date column or a purchase-year column."""
    if raw_date:
        try:
            return date.fromisoformat(str(raw_date)[:10])
        except ValueError:
            logger.warning("Ignoring unparseable record date: %r", raw_date)
            return None
    if purchase_year is not None:
        try:
            year = int(purchase_year)
        except (TypeError, ValueError):
            return None
        if MIN_VALID_YEAR <= year <= MAX_VALID_YEAR:
            return date(year, 1, 1)
    return None


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError:
        logger.warning("Ignoring unparseable timestamp: %r", raw)
        return None
