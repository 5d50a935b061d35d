"""Spreadsheet import of auction and PVP price history.

Reads the first sheet of an Excel workbook (or a CSV file), maps the
flexible column names used by the purchasing team, and bulk-inserts the
rows in batches. Rows are immutable once imported; the only way to remove
them is a bulk clear (see stats.py).
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, TypeVar

import pandas as pd

from ..common.database import get_connection
from ..common.exceptions import ImportFileError
from .models import AuctionHistoryRow, ImportResult, PvpHistoryRow
from .parsing import (
    as_text,
    parse_date_cell,
    parse_float,
    parse_int,
    parse_price,
    parse_year,
    pick,
)

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = {".xlsx", ".xls"}
CSV_EXTENSIONS = {".csv"}

Row = TypeVar("Row", AuctionHistoryRow, PvpHistoryRow)


class RowError(ValueError):
    """A spreadsheet row that cannot be imported."""


def parse_auction_row(row: Mapping[str, Any]) -> AuctionHistoryRow:
    """Map one auction spreadsheet row to an AuctionHistoryRow."""
    model = as_text(pick(row, "MODELO", "Modelo", "model", "Model"))
    if not model:
        raise RowError("Modelo es requerido")

    return AuctionHistoryRow(
        model=model,
        brand=as_text(pick(row, "MARCA", "Marca", "brand", "Brand")),
        serial=as_text(pick(row, "SERIE", "Serie", "Serial", "SERIAL")),
        year=parse_year(pick(row, "AÑO", "Año", "YEAR", "Year", "year")),
        hours=parse_int(pick(row, "HORAS", "Horas", "HOURS", "Hours", "hours")),
        precio=parse_price(pick(row, "PRECIO", "Precio", "PRECIO_COMPRADO", "precio")),
        fecha_subasta=parse_date_cell(pick(row, "FECHA", "Fecha", "FECHA_SUBASTA", "fecha_subasta")),
        proveedor=as_text(pick(row, "PROVEEDOR", "Proveedor", "SUPPLIER", "supplier")),
        lot_number=as_text(pick(row, "LOT", "Lot", "LOTE", "Lote", "lot_number")),
    )


def parse_pvp_row(row: Mapping[str, Any]) -> PvpHistoryRow:
    """Map one PVP spreadsheet row to a PvpHistoryRow."""
    modelo = as_text(pick(row, "MODELO", "Modelo", "MODEL"))
    if not modelo:
        raise RowError("Modelo es requerido")

    return PvpHistoryRow(
        provee=as_text(pick(row, "PROVEE", "Proveedor", "PROVEEDOR")),
        modelo=modelo,
        serie=as_text(pick(row, "SERIE", "Serie", "SERIAL")),
        anio=parse_int(pick(row, "AÑO", "Año", "YEAR", "Year")),
        hour=parse_int(pick(row, "HOUR", "Hours", "HORAS", "Horas")),
        precio=parse_float(pick(row, "PRECIO", "Precio")),
        inland=parse_float(pick(row, "INLAND", "Inland"), 0.0),
        cif_usd=parse_float(pick(row, "CIF /USD", "CIF/USD", "CIF_USD"), 0.0),
        cif=parse_float(pick(row, "CIF", "Cif"), 0.0),
        gastos_pto=parse_float(pick(row, "GASTOS PTO", "GASTOS_PTO", "gastos_pto"), 0.0),
        flete=parse_float(pick(row, "FLETE", "Flete"), 0.0),
        trasld=parse_float(pick(row, "TRASLD", "Traslado", "TRASLADO"), 0.0),
        rptos=parse_float(pick(row, "RPTOS", "Repuestos", "REPUESTOS"), 0.0),
        proyectado=parse_float(pick(row, "proyectado", "PROYECTADO", "Proyectado"), 0.0),
        pvp_est=parse_float(pick(row, "PVP EST", "PVP_EST", "pvp_est"), 0.0),
        fecha=parse_int(pick(row, "FECHA", "Fecha", "fecha", "AÑO_COMPRA", "año_compra")),
    )


def read_rows(path: str | Path) -> list[dict[str, Any]]:
    """Read the first sheet of an Excel file, or a CSV file, as row dicts."""
    path = Path(path)
    if not path.exists():
        raise ImportFileError(f"File not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_EXTENSIONS:
            df = pd.read_excel(path, sheet_name=0)
        elif suffix in CSV_EXTENSIONS:
            try:
                df = pd.read_csv(path, encoding="utf-8")
            except UnicodeDecodeError:
                df = pd.read_csv(path, encoding="latin-1")
        else:
            raise ImportFileError("Solo se permiten archivos Excel (.xlsx, .xls) o CSV")
    except (ValueError, OSError) as e:
        raise ImportFileError(f"Could not read {path.name}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")


class HistoryImporter:
    """Import auction and PVP history spreadsheets into SQLite.

    Usage:
        importer = HistoryImporter("data/machinery_prices.db")
        result = importer.import_auction("Historico_Subastas.xlsx", imported_by="admin")
        print(result.imported, result.errors)
    """

    BATCH_SIZE = 100

    def __init__(self, db_path: str | Path | None = None, batch_size: int | None = None) -> None:
        self.db_path = db_path
        self.batch_size = batch_size or self.BATCH_SIZE

    def import_auction(self, path: str | Path, imported_by: str | None = None) -> ImportResult:
        """Import an auction results sheet into auction_price_history."""
        rows = read_rows(path)
        return self._import(
            rows, parse_auction_row, "auction_price_history", AuctionHistoryRow.COLUMNS, imported_by
        )

    def import_pvp(self, path: str | Path, imported_by: str | None = None) -> ImportResult:
        """Import a PVP / spare parts sheet into pvp_history."""
        rows = read_rows(path)
        return self._import(rows, parse_pvp_row, "pvp_history", PvpHistoryRow.COLUMNS, imported_by)

    def _import(
        self,
        raw_rows: list[dict[str, Any]],
        parse_row: Callable[[Mapping[str, Any]], Row],
        table: str,
        columns: tuple[str, ...],
        imported_by: str | None,
    ) -> ImportResult:
        result = ImportResult(total=len(raw_rows))

        valid_rows: list[Row] = []
        for i, raw in enumerate(raw_rows):
            try:
                valid_rows.append(parse_row(raw))
            except RowError as e:
                # +2: header row and 1-based numbering
                result.errors.append(f"Fila {i + 2}: {e}")

        if valid_rows:
            result.imported = self._insert(table, columns, valid_rows, imported_by, result.errors)

        logger.info(
            "Imported %d/%d rows into %s (%d errors)",
            result.imported, result.total, table, len(result.errors),
        )
        return result

    def _insert(
        self,
        table: str,
        columns: tuple[str, ...],
        rows: list[Row],
        imported_by: str | None,
        errors: list[str],
    ) -> int:
        """Insert in batches; a failing batch is retried row by row."""
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"

        imported = 0
        conn = get_connection(self.db_path)
        try:
            for start in range(0, len(rows), self.batch_size):
                batch = rows[start:start + self.batch_size]
                try:
                    with conn:
                        conn.executemany(sql, [r.to_params(imported_by) for r in batch])
                    imported += len(batch)
                except sqlite3.Error:
                    logger.warning(
                        "Batch insert into %s failed, retrying %d rows one by one",
                        table, len(batch), exc_info=True,
                    )
                    imported += self._insert_one_by_one(conn, sql, batch, imported_by, errors)
        finally:
            conn.close()
        return imported

    @staticmethod
    def _insert_one_by_one(
        conn: sqlite3.Connection,
        sql: str,
        batch: list[Row],
        imported_by: str | None,
        errors: list[str],
    ) -> int:
        inserted = 0
        for row in batch:
            try:
                with conn:
                    conn.execute(sql, row.to_params(imported_by))
                inserted += 1
            except sqlite3.Error as e:
                model = getattr(row, "model", None) or getattr(row, "modelo", "")
                errors.append(f"Error insertando {model}: {e}")
        return inserted
