"""CLI entry point for the price history tables.

Usage:
    python -m src.price_history.main init-db
    python -m src.price_history.main import-auction Historico_Subastas.xlsx --imported-by admin
    python -m src.price_history.main import-pvp Historico_PVP.xlsx
    python -m src.price_history.main stats auction
    python -m src.price_history.main clear pvp --yes
    python -m src.price_history.main template auction data/exports/Template_Subastas.xlsx
"""

from __future__ import annotations

import argparse
import json
import logging

from ..common.config import Settings
from ..common.database import init_db
from ..common.exceptions import PriceEngineError
from ..common.logging import setup_logging
from .importer import HistoryImporter
from .stats import HistoryStats
from .templates import write_auction_template, write_pvp_template

logger = logging.getLogger(__name__)

TABLES = ["auction", "pvp"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Price History: import, stats and templates")
    parser.add_argument("--config", type=str, help="Settings YAML (default: config/settings.yaml)")
    parser.add_argument("--db", type=str, help="SQLite database path (overrides settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database schema")

    for name, label in (("import-auction", "auction results"), ("import-pvp", "PVP / spare parts")):
        cmd = sub.add_parser(name, help=f"Import a {label} spreadsheet (.xlsx, .xls, .csv)")
        cmd.add_argument("file", type=str)
        cmd.add_argument("--imported-by", type=str, help="User recorded as importer")

    stats = sub.add_parser("stats", help="Show history statistics")
    stats.add_argument("table", choices=TABLES)

    clear = sub.add_parser("clear", help="Delete every imported record of a table")
    clear.add_argument("table", choices=TABLES)
    clear.add_argument("--yes", action="store_true", help="Confirm the bulk delete")

    template = sub.add_parser("template", help="Write an Excel import template")
    template.add_argument("table", choices=TABLES)
    template.add_argument("output", type=str)

    return parser


def main(argv: list[str] | None = None) -> dict:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    settings = Settings.load(args.config)
    db_path = args.db or settings.database.abs_path
    init_db(db_path)

    try:
        result = _run(parser, args, db_path)
    except PriceEngineError as e:
        parser.error(str(e))

    print(json.dumps(result, ensure_ascii=False, indent=2, default=str))
    return result


def _run(parser: argparse.ArgumentParser, args: argparse.Namespace, db_path) -> dict:
    if args.command == "init-db":
        return {"success": True, "database": str(db_path)}

    if args.command in ("import-auction", "import-pvp"):
        importer = HistoryImporter(db_path)
        if args.command == "import-auction":
            result = importer.import_auction(args.file, imported_by=args.imported_by)
        else:
            result = importer.import_pvp(args.file, imported_by=args.imported_by)
        for error in result.errors:
            logger.warning("  %s", error)
        return result.to_dict()

    stats = HistoryStats(db_path)
    if args.command == "stats":
        return stats.auction_stats() if args.table == "auction" else stats.pvp_stats()

    if args.command == "clear":
        if not args.yes:
            parser.error("clear deletes every imported record; pass --yes to confirm")
        deleted = stats.clear_auction_history() if args.table == "auction" else stats.clear_pvp_history()
        return {"success": True, "deleted": deleted}

    writer = write_auction_template if args.table == "auction" else write_pvp_template
    return {"success": True, "template": str(writer(args.output))}


if __name__ == "__main__":
    main()
