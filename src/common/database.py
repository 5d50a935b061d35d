"""SQLite database utilities for the machinery price engine.

Provides connection management and table initialization.
The schema is fixed and versioned here; queries elsewhere rely on it
instead of inspecting columns at runtime.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from .config import settings

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# SQL for creating the core tables
_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS auction_price_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    model TEXT NOT NULL,
    brand TEXT,
    serial TEXT,
    year INTEGER,
    hours INTEGER,
    precio_comprado REAL,
    fecha_subasta TEXT,
    proveedor TEXT,
    lot_number TEXT,
    imported_by TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS pvp_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    provee TEXT,
    modelo TEXT NOT NULL,
    serie TEXT,
    anio INTEGER,
    hour INTEGER,
    precio REAL,
    inland REAL DEFAULT 0,
    cif_usd REAL DEFAULT 0,
    cif REAL DEFAULT 0,
    gastos_pto REAL DEFAULT 0,
    flete REAL DEFAULT 0,
    trasld REAL DEFAULT 0,
    rptos REAL DEFAULT 0,
    proyectado REAL DEFAULT 0,
    pvp_est REAL DEFAULT 0,
    fecha INTEGER,
    imported_by TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS machines (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    brand TEXT,
    model TEXT,
    serial TEXT,
    year INTEGER,
    hours INTEGER,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS auctions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_id INTEGER,
    status TEXT NOT NULL DEFAULT 'PENDIENTE',
    price_max REAL,
    created_at TEXT DEFAULT (datetime('now')),
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);

CREATE TABLE IF NOT EXISTS management (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    model TEXT,
    year INTEGER,
    hours INTEGER,
    pvp_est REAL,
    rptos REAL,
    costo_arancel REAL,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_auction_history_model ON auction_price_history(model);
CREATE INDEX IF NOT EXISTS idx_pvp_history_modelo ON pvp_history(modelo);
CREATE INDEX IF NOT EXISTS idx_auctions_status ON auctions(status);
CREATE INDEX IF NOT EXISTS idx_management_model ON management(model);
"""


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled."""
    path = Path(db_path) if db_path else settings.database.abs_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(db_path: str | Path | None = None) -> None:
    """Create all tables if they don't exist."""
    conn = get_connection(db_path)
    try:
        conn.executescript(_CREATE_TABLES_SQL)
        conn.execute(f"PRAGMA user_version={SCHEMA_VERSION}")
        conn.commit()
        logger.info("Database schema v%d initialized at %s", SCHEMA_VERSION, db_path or settings.database.abs_path)
    finally:
        conn.close()
