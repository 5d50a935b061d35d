"""Data models for imported price history rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class AuctionHistoryRow:
    """One auction result from an imported spreadsheet."""

    COLUMNS = (
        "model", "brand", "serial", "year", "hours", "precio_comprado",
        "fecha_subasta", "proveedor", "lot_number", "imported_by",
    )

    model: str
    brand: str | None = None
    serial: str | None = None
    year: int | None = None
    hours: int | None = None
    precio: float | None = None
    fecha_subasta: date | None = None
    proveedor: str | None = None
    lot_number: str | None = None

    def to_params(self, imported_by: str | None = None) -> tuple:
        return (
            self.model,
            self.brand,
            self.serial,
            self.year,
            self.hours,
            self.precio,
            self.fecha_subasta.isoformat() if self.fecha_subasta else None,
            self.proveedor,
            self.lot_number,
            imported_by,
        )


@dataclass
class PvpHistoryRow:
    """One consolidated machine (costs, spare parts, estimated PVP) from a PVP sheet."""

    COLUMNS = (
        "provee", "modelo", "serie", "anio", "hour", "precio", "inland",
        "cif_usd", "cif", "gastos_pto", "flete", "trasld", "rptos",
        "proyectado", "pvp_est", "fecha", "imported_by",
    )

    modelo: str
    provee: str | None = None
    serie: str | None = None
    anio: int | None = None
    hour: int | None = None
    precio: float | None = None
    inland: float = 0.0
    cif_usd: float = 0.0
    cif: float = 0.0
    gastos_pto: float = 0.0
    flete: float = 0.0
    trasld: float = 0.0
    rptos: float = 0.0
    proyectado: float = 0.0
    pvp_est: float = 0.0
    fecha: int | None = None  # purchase year

    def to_params(self, imported_by: str | None = None) -> tuple:
        return (
            self.provee,
            self.modelo,
            self.serie,
            self.anio,
            self.hour,
            self.precio,
            self.inland,
            self.cif_usd,
            self.cif,
            self.gastos_pto,
            self.flete,
            self.trasld,
            self.rptos,
            self.proyectado,
            self.pvp_est,
            self.fecha,
            imported_by,
        )


@dataclass
class ImportResult:
    """Outcome of a spreadsheet import."""

    imported: int = 0
    total: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        result = {"success": True, "imported": self.imported, "total": self.total}
        if self.errors:
            result["errors"] = self.errors
        return result
