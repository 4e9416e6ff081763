"""ET revenue rollup entrypoint.

Usage:
    python main.py reports/XC_EXC_0612.csv reports/RGR_0612.csv --tag JSG41+CM41

Environment variables (also read from ``.env`` beside this file):
    ROLLUP_TARGET_THRESHOLD, ROLLUP_TARGET_MULTIPLIER, ROLLUP_MILESTONE_THRESHOLD,
    ROLLUP_LOG_LEVEL, ROLLUP_REFERENCE_PATH, ROLLUP_OUTPUT_DIR
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv
from loguru import logger

from revenue_rollup.application.report_service import run_report
from revenue_rollup.config import load_settings
from revenue_rollup.infrastructure.reference_repository import load_reference_tables


LOG_FORMAT = "{time:HH:mm:ss} | {level:<7} | {message}"


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Roll up advertising report CSVs by campaign, ET, creative and advertiser.")
    parser.add_argument("files", nargs="+", type=Path, help="Report CSV files (SUBID and REV columns required)")
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument("--campaign", help="Export records and creatives for one campaign")
    scope.add_argument("--tag", help="Export records and creatives for one ET (combined names accepted)")
    parser.add_argument("--search", help="Creative-name substring to group in the summary")
    parser.add_argument("--output-dir", type=Path, help="Directory for CSV/JSON/XLSX outputs")
    parser.add_argument("--reference", type=Path, help="JSON file with target_revenue and tag_info tables")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv(Path(__file__).resolve().parent / ".env")
    args = build_parser().parse_args(argv)

    settings = load_settings()
    if args.output_dir is not None:
        settings = replace(settings, output_dir=args.output_dir)
    if args.reference is not None:
        settings = replace(settings, reference_path=args.reference)
    configure_logging(settings.log_level)

    tables = load_reference_tables(settings.reference_path)
    result = run_report(
        args.files,
        settings=settings,
        tables=tables,
        campaign=args.campaign,
        tag=args.tag,
        search=args.search,
    )

    for error in result.upload.errors:
        logger.error("{}", error.message)
    if not result.upload.batches:
        logger.error("No report could be processed")
        return 1

    summary = result.summary
    logger.info(
        "Total revenue {:,.2f} across {} campaigns, {} ETs, {} advertisers",
        summary["total_revenue"],
        summary["counts"]["campaigns"],
        summary["counts"]["tags"],
        summary["counts"]["advertisers"],
    )
    if summary["milestone_reached"]:
        logger.success("Revenue milestone reached")
    for name, path in result.outputs.items():
        logger.info("Saved {}: {}", name, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
