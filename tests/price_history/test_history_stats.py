"""Tests for history statistics and bulk clearing."""

import pytest

from src.price_history.stats import HistoryStats


class TestAuctionStats:
    def test_stats(self, temp_db, add_auction_history):
        add_auction_history("ZX200-6", 50000, year=2019)
        add_auction_history("ZX200-3", 40000, year=2015)
        add_auction_history("PC200-8", None, year=1975)

        stats = HistoryStats(temp_db).auction_stats()
        assert stats["total_records"] == 3
        assert stats["unique_models"] == 3
        assert stats["oldest_year"] == 2015
        assert stats["newest_year"] == 2019
        assert stats["avg_price"] == pytest.approx(45000)
        assert stats["min_price"] == 40000
        assert stats["max_price"] == 50000

    def test_empty(self, temp_db):
        stats = HistoryStats(temp_db).auction_stats()
        assert stats["total_records"] == 0
        assert stats["avg_price"] is None

    def test_clear(self, temp_db, add_auction_history):
        add_auction_history("ZX200-6", 50000)
        add_auction_history("ZX200-3", 40000)
        stats = HistoryStats(temp_db)
        assert stats.clear_auction_history() == 2
        assert stats.auction_stats()["total_records"] == 0
        assert stats.clear_auction_history() == 0


class TestPvpStats:
    def test_stats(self, temp_db, add_pvp_history):
        add_pvp_history("PC200-8", pvp_est=75000, rptos=15000, anio=2019)
        add_pvp_history("ZX200-5", pvp_est=95000, rptos=18000, anio=2018)

        stats = HistoryStats(temp_db).pvp_stats()
        assert stats["total_records"] == 2
        assert stats["unique_models"] == 2
        assert stats["oldest_year"] == 2018
        assert stats["newest_year"] == 2019
        assert stats["avg_pvp"] == pytest.approx(85000)
        assert stats["avg_rptos"] == pytest.approx(16500)

    def test_clear(self, temp_db, add_pvp_history):
        add_pvp_history("PC200-8", pvp_est=75000)
        stats = HistoryStats(temp_db)
        assert stats.clear_pvp_history() == 1
        assert stats.pvp_stats()["total_records"] == 0
