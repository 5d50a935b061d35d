"""Summary statistics and bulk clearing of the imported history tables."""

from __future__ import annotations

import logging
from pathlib import Path

from ..common.database import get_connection
from .parsing import MAX_VALID_YEAR, MIN_VALID_YEAR

logger = logging.getLogger(__name__)

_AUCTION_STATS_SQL = f"""
    SELECT
        COUNT(*) AS total_records,
        COUNT(DISTINCT model) AS unique_models,
        MIN(CASE WHEN year BETWEEN {MIN_VALID_YEAR} AND {MAX_VALID_YEAR} THEN year END) AS oldest_year,
        MAX(CASE WHEN year BETWEEN {MIN_VALID_YEAR} AND {MAX_VALID_YEAR} THEN year END) AS newest_year,
        AVG(CASE WHEN precio_comprado > 0 THEN precio_comprado END) AS avg_price,
        MIN(CASE WHEN precio_comprado > 0 THEN precio_comprado END) AS min_price,
        MAX(CASE WHEN precio_comprado > 0 THEN precio_comprado END) AS max_price
    FROM auction_price_history
"""

_PVP_STATS_SQL = """
    SELECT
        COUNT(*) AS total_records,
        COUNT(DISTINCT modelo) AS unique_models,
        MIN(anio) AS oldest_year,
        MAX(anio) AS newest_year,
        AVG(pvp_est) AS avg_pvp,
        AVG(rptos) AS avg_rptos
    FROM pvp_history
"""


class HistoryStats:
    """Read-only summaries and admin bulk-clear of the history tables.

    Usage:
        stats = HistoryStats("data/machinery_prices.db")
        stats.auction_stats()["unique_models"]
    """

    def __init__(self, db_path: str | Path | None = None) -> None:
        self.db_path = db_path

    def auction_stats(self) -> dict:
        """Counts, plausible year span and positive price spread of the auction history."""
        return self._fetch_one(_AUCTION_STATS_SQL)

    def pvp_stats(self) -> dict:
        """Counts, year span, average PVP and average spare parts of the PVP history."""
        return self._fetch_one(_PVP_STATS_SQL)

    def clear_auction_history(self) -> int:
        """Delete every imported auction record. Returns the number of rows deleted."""
        return self._clear("auction_price_history")

    def clear_pvp_history(self) -> int:
        """Delete every imported PVP record. Returns the number of rows deleted."""
        return self._clear("pvp_history")

    def _fetch_one(self, sql: str) -> dict:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(sql).fetchone()
            return dict(row)
        finally:
            conn.close()

    def _clear(self, table: str) -> int:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(f"DELETE FROM {table}")
            conn.commit()
            logger.info("Cleared %d rows from %s", cursor.rowcount, table)
            return cursor.rowcount
        finally:
            conn.close()
