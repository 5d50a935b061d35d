"""Excel import templates with example rows and an instructions sheet."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)

INSTRUCTIONS_SHEET = "Instrucciones"

AUCTION_EXAMPLES = [
    {"MODELO": "PC200-8", "SERIE": "320145", "AÑO": 2019, "HORAS": 6500, "PRECIO": 47000,
     "FECHA": "26/02/2024", "PROVEEDOR": "RITCHIE BROS", "LOT": "LOT-12345"},
    {"MODELO": "ZX200-5", "SERIE": "456789", "AÑO": 2018, "HORAS": 7200, "PRECIO": 65000,
     "FECHA": "15/08/2023", "PROVEEDOR": "IRONPLANET", "LOT": "LOT-67890"},
    {"MODELO": "CAT320D", "SERIE": "789012", "AÑO": 2020, "HORAS": 5800, "PRECIO": 55000,
     "FECHA": "", "PROVEEDOR": "GREEN AUCTION", "LOT": "LOT-45678"},
]
AUCTION_WIDTHS = [15, 12, 8, 10, 12, 15, 20, 12]
AUCTION_INSTRUCTIONS = [
    "1. Complete los datos siguiendo el formato de los ejemplos",
    "2. MODELO es obligatorio",
    "3. FECHA puede estar vacía o en formato: DD/MM/YYYY, DD-MM-YYYY, YYYY-MM-DD",
    "4. PRECIO debe ser el valor pagado en la subasta",
    "5. Puede agregar todas las filas que necesite",
    "6. Borre las filas de ejemplo antes de importar sus datos",
]

PVP_EXAMPLES = [
    {"PROVEE": "EIKOH", "MODELO": "PC200-8", "SERIE": "320145", "AÑO": 2019, "HOUR": 6500,
     "PRECIO": 42000, "INLAND": 800, "CIF /USD": 850, "CIF": 45000, "GASTOS PTO": 2500,
     "FLETE": 3000, "TRASLD": 1500, "RPTOS": 15000, "proyectado": 67000, "PVP EST": 75000,
     "FECHA": 2023},
    {"PROVEE": "KATA", "MODELO": "ZX200-5", "SERIE": "456789", "AÑO": 2018, "HOUR": 7200,
     "PRECIO": 58000, "INLAND": 900, "CIF /USD": 950, "CIF": 62000, "GASTOS PTO": 2800,
     "FLETE": 3200, "TRASLD": 1600, "RPTOS": 18000, "proyectado": 88000, "PVP EST": 95000,
     "FECHA": 2023},
    {"PROVEE": "SOGO", "MODELO": "CAT320D", "SERIE": "789012", "AÑO": 2020, "HOUR": 5800,
     "PRECIO": 48000, "INLAND": 850, "CIF /USD": 900, "CIF": 52000, "GASTOS PTO": 2600,
     "FLETE": 3100, "TRASLD": 1550, "RPTOS": 16000, "proyectado": 75000, "PVP EST": 82000,
     "FECHA": 2022},
]
PVP_WIDTHS = [12, 15, 12, 8, 10, 12, 10, 12, 12, 12, 10, 10, 12, 12, 12, 8]
PVP_INSTRUCTIONS = [
    "1. Complete los datos siguiendo el formato de los ejemplos",
    "2. MODELO es obligatorio",
    "3. AÑO debe ser el año de la máquina (ej: 2019)",
    "4. FECHA debe ser el año de compra (ej: 2023, 2024)",
    "5. RPTOS y PVP EST son importantes para las sugerencias",
    "6. Los demás campos ayudan al cálculo pero no son obligatorios",
    "7. Puede agregar todas las filas que necesite",
    "8. Borre las filas de ejemplo antes de importar sus datos",
    "",
    "NOTA: Respete exactamente los nombres de las columnas",
]


def write_auction_template(path: str | Path) -> Path:
    """Write the auction history template workbook."""
    return _write_template(path, "Histórico Subastas", AUCTION_EXAMPLES, AUCTION_WIDTHS, AUCTION_INSTRUCTIONS)


def write_pvp_template(path: str | Path) -> Path:
    """Write the PVP / spare parts history template workbook."""
    return _write_template(path, "Histórico PVP", PVP_EXAMPLES, PVP_WIDTHS, PVP_INSTRUCTIONS)


def _write_template(
    path: str | Path,
    sheet_name: str,
    examples: list[dict],
    widths: list[int],
    instructions: list[str],
) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(examples).to_excel(writer, sheet_name=sheet_name, index=False)
        _set_widths(writer.sheets[sheet_name], widths)

        pd.DataFrame({"INSTRUCCIONES": instructions}).to_excel(
            writer, sheet_name=INSTRUCTIONS_SHEET, index=False
        )
        _set_widths(writer.sheets[INSTRUCTIONS_SHEET], [80])

    logger.info("Template written to %s", path)
    return path


def _set_widths(worksheet, widths: list[int]) -> None:
    for i, width in enumerate(widths, start=1):
        worksheet.column_dimensions[get_column_letter(i)].width = width
