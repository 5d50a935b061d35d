"""Price History Module - Spreadsheet import, stats and templates for the history tables."""

from .importer import HistoryImporter, read_rows
from .models import AuctionHistoryRow, ImportResult, PvpHistoryRow
from .parsing import parse_date_string
from .stats import HistoryStats
from .templates import write_auction_template, write_pvp_template

__all__ = [
    "HistoryImporter",
    "HistoryStats",
    "AuctionHistoryRow",
    "PvpHistoryRow",
    "ImportResult",
    "read_rows",
    "parse_date_string",
    "write_auction_template",
    "write_pvp_template",
]
