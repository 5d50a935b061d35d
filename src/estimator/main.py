"""CLI entry point for price suggestions.

Usage:
    python -m src.estimator.main --use-case auction --model ZX200-6
    python -m src.estimator.main --use-case auction --model ZX200-6 --year 2019 --hours 6500
    python -m src.estimator.main --use-case pvp --model PC200-8 --cost 52000 --output data/exports/pvp.json
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date

from ..common.config import Settings
from ..common.database import init_db
from ..common.exceptions import PriceEngineError
from ..common.logging import setup_logging
from ..common.models import UseCase
from .estimator import PriceEstimator
from .fetchers import SQLiteRecordFetcher

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Machinery Price Suggestions")
    parser.add_argument(
        "--use-case",
        type=str,
        default=UseCase.AUCTION.value,
        choices=[u.value for u in UseCase],
        help="Suggestion type: auction max price, PVP or spare parts (default: auction)",
    )
    parser.add_argument("--model", type=str, required=True, help="Machine model (e.g., 'ZX200-6')")
    parser.add_argument("--year", type=int, help="Machine year")
    parser.add_argument("--hours", type=int, help="Machine hours")
    parser.add_argument(
        "--cost",
        type=float,
        help="Landed cost (costo arancel) used to enforce the minimum PVP margin",
    )
    parser.add_argument("--today", type=date.fromisoformat, help="Reference date YYYY-MM-DD (default: today)")
    parser.add_argument("--config", type=str, help="Settings YAML (default: config/settings.yaml)")
    parser.add_argument("--db", type=str, help="SQLite database path (overrides settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--output", type=str, help="Output JSON file path")
    return parser


def main(argv: list[str] | None = None) -> dict:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    settings = Settings.load(args.config)
    db_path = args.db or settings.database.abs_path
    init_db(db_path)

    estimator = PriceEstimator(SQLiteRecordFetcher(db_path), settings.estimator)

    try:
        estimate = estimator.estimate(
            args.use_case,
            args.model,
            year=args.year,
            hours=args.hours,
            cost_for_margin=args.cost,
            today=args.today,
        )
    except PriceEngineError as e:
        parser.error(str(e))

    response = estimate.to_response(args.use_case)

    logger.info("=== %s suggestion for %s ===", args.use_case, args.model)
    for key, value in response.items():
        if key != "sample_records":
            logger.info("  %s: %s", key, value)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(response, f, ensure_ascii=False, indent=2, default=str)
        logger.info("Output written to %s", args.output)
    else:
        print(json.dumps(response, ensure_ascii=False, indent=2, default=str))

    return response


if __name__ == "__main__":
    main()
