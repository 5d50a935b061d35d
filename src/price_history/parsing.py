"""Cell parsing helpers for imported spreadsheets.

Spreadsheet cells arrive as pandas/numpy scalars, Python numbers, strings,
timestamps or NaN. These helpers normalize them with lenient, prefix-based
number parsing ("6500 hrs" -> 6500) and multi-format date parsing.
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

# Excel serial day 0 (1900 date system, including the 1900 leap-year bug)
EXCEL_EPOCH = date(1899, 12, 30)

MIN_VALID_YEAR = 1980
MAX_VALID_YEAR = 2030

_INT_PREFIX = re.compile(r"^\s*([-+]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DAY_FIRST = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})$")
_DAY_FIRST_SHORT = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](\d{2})$")
_YEAR_FIRST = re.compile(r"^(\d{4})[/\-](\d{1,2})[/\-](\d{1,2})$")


def is_missing(value: Any) -> bool:
    """True for None, NaN/NaT and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def pick(row: Mapping[str, Any], *keys: str) -> Any:
    """First non-missing value among the column aliases ``keys``."""
    for key in keys:
        value = row.get(key)
        if not is_missing(value):
            return value
    return None


def as_text(value: Any) -> str | None:
    """Cell as a stripped string; integral floats lose their ``.0``."""
    if is_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_int(value: Any) -> int | None:
    """Integer from a number or the leading digits of a string."""
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
        if not math.isfinite(number):
            return None
        return int(number)
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else None


def parse_float(value: Any, default: float | None = None) -> float | None:
    """Finite float from a number or the leading number of a string, else ``default``."""
    if is_missing(value) or isinstance(value, bool):
        return default
    if isinstance(value, numbers.Real):
        number = float(value)
    else:
        match = _FLOAT_PREFIX.match(str(value))
        if not match:
            return default
        number = float(match.group(1))
    return number if math.isfinite(number) else default


def excel_serial_to_date(serial: float) -> date | None:
    """Convert an Excel serial day number to a date; None when out of range."""
    try:
        return EXCEL_EPOCH + timedelta(days=int(serial))
    except (OverflowError, ValueError):
        logger.warning("Excel serial date out of range: %r", serial)
        return None


def parse_year(value: Any) -> int | None:
    """Machine year; Excel serial dates become their year, implausible years None."""
    year = parse_int(value)
    if year is None:
        return None
    if year > 10000:
        serial_date = excel_serial_to_date(year)
        if serial_date is None:
            return None
        year = serial_date.year
    if year < MIN_VALID_YEAR or year > MAX_VALID_YEAR:
        return None
    return year


def parse_price(value: Any) -> float | None:
    """Positive finite price or None."""
    price = parse_float(value)
    if price is None or price <= 0:
        return None
    return price


def parse_date_cell(value: Any) -> date | None:
    """Date from a datetime, an Excel serial number, or a date string."""
    if is_missing(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return excel_serial_to_date(float(value))
    return parse_date_string(str(value))


def parse_date_string(text: str | None) -> date | None:
    """Parse a date written in one of the usual spreadsheet formats.

    Supported, tried in order:
    - YYYY-MM-DD
    - DD/MM/YYYY, DD-MM-YYYY
    - DD/MM/YY (00-49 -> 20xx, 50-99 -> 19xx)
    - YYYY/MM/DD, YYYY-M-D
    - MM/DD/YYYY when the day-first reading is not a valid date
    - anything pandas can parse

    Returns:
        The date, or None if nothing matched.
    """
    if not text or not text.strip():
        return None
    text = text.strip()

    if match := _ISO_DATE.match(text):
        year, month, day = (int(g) for g in match.groups())
        if parsed := _safe_date(year, month, day):
            return parsed

    if match := _DAY_FIRST.match(text):
        day, month, year = (int(g) for g in match.groups())
        if parsed := _safe_date(year, month, day):
            return parsed
        # Day-first failed; try the US month-first reading
        if parsed := _safe_date(year, day, month):
            return parsed

    if match := _DAY_FIRST_SHORT.match(text):
        day, month, short_year = (int(g) for g in match.groups())
        year = 2000 + short_year if short_year < 50 else 1900 + short_year
        if parsed := _safe_date(year, month, day):
            return parsed

    if match := _YEAR_FIRST.match(text):
        year, month, day = (int(g) for g in match.groups())
        if parsed := _safe_date(year, month, day):
            return parsed

    timestamp = pd.to_datetime(text, errors="coerce")
    if not pd.isna(timestamp):
        return timestamp.date()

    logger.warning("Could not parse date: %r", text)
    return None


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None
