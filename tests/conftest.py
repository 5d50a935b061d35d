"""Shared test fixtures for the machinery price engine."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.config import Settings
from src.common.database import get_connection, init_db


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def today() -> date:
    """Fixed reference date so record ages are deterministic."""
    return date(2025, 6, 1)


@pytest.fixture
def temp_db(tmp_path) -> Path:
    """Provide the path of an initialized temporary SQLite database."""
    db_file = tmp_path / "test_prices.db"
    init_db(db_file)
    return db_file


@pytest.fixture
def db_conn(temp_db):
    """Provide an initialized SQLite connection from temp_db."""
    conn = get_connection(temp_db)
    yield conn
    conn.close()


@pytest.fixture
def test_settings(temp_db) -> Settings:
    """Default settings pointing at the temporary database."""
    return Settings(database={"db_path": str(temp_db)})


@pytest.fixture
def add_auction_history(db_conn):
    """Insert rows into auction_price_history."""
    def _add(model, price, year=None, hours=None, fecha_subasta=None, brand=None):
        db_conn.execute(
            """INSERT INTO auction_price_history
               (model, brand, year, hours, precio_comprado, fecha_subasta)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (model, brand, year, hours, price, fecha_subasta),
        )
        db_conn.commit()
    return _add


@pytest.fixture
def add_pvp_history(db_conn):
    """Insert rows into pvp_history."""
    def _add(modelo, pvp_est=0, rptos=0, anio=None, hour=None, fecha=None):
        db_conn.execute(
            """INSERT INTO pvp_history (modelo, anio, hour, pvp_est, rptos, fecha)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (modelo, anio, hour, pvp_est, rptos, fecha),
        )
        db_conn.commit()
    return _add


@pytest.fixture
def add_won_auction(db_conn):
    """Insert a machine and an auction for it."""
    def _add(model, price_max, status="GANADA", year=None, hours=None, created_at="2025-01-15 10:00:00"):
        cursor = db_conn.execute(
            "INSERT INTO machines (model, year, hours) VALUES (?, ?, ?)",
            (model, year, hours),
        )
        db_conn.execute(
            "INSERT INTO auctions (machine_id, status, price_max, created_at) VALUES (?, ?, ?, ?)",
            (cursor.lastrowid, status, price_max, created_at),
        )
        db_conn.commit()
    return _add


@pytest.fixture
def add_management(db_conn):
    """Insert rows into the management (consolidated) table."""
    def _add(model, pvp_est=None, rptos=None, year=None, hours=None, created_at="2025-01-15 10:00:00"):
        db_conn.execute(
            """INSERT INTO management (model, year, hours, pvp_est, rptos, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (model, year, hours, pvp_est, rptos, created_at),
        )
        db_conn.commit()
    return _add
