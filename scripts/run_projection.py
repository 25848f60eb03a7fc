#!/usr/bin/env python3
"""Run the EIR income projection over a loan file.

Reads loans from a .xlsx or .csv file, projects each one and writes:
- an Excel workbook with an "All Cases" sheet and one sheet per agreement,
- optionally CSV and/or JSON copies of the consolidated records.

Usage:
    python scripts/run_projection.py loans.xlsx
    python scripts/run_projection.py loans.csv --output-dir out --csv --json --workers 4
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from eir_projection.batch import PortfolioProjection, export
from eir_projection.config import ProjectionConfig
from eir_projection.exceptions import EIRProjectionError
from eir_projection.logging import setup_logging
from eir_projection.models import ProductType
from eir_projection.sinks import ConsoleSink, CsvFileSink, ExcelWorkbookSink, JsonFileSink
from eir_projection.sources import read_rows

logger = logging.getLogger(__name__)


def _report_progress(completed: int, total: int) -> None:
    step = max(1, total // 10)
    if completed == total or completed % step == 0:
        logger.info("Progress: %d/%d loans", completed, total)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Project EIR income for a loan portfolio")
    parser.add_argument("input", type=Path, help="Loan file (.xlsx or .csv)")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for output files (default: EIR_OUTPUT_DIR or ./output)",
    )
    parser.add_argument(
        "--product-type",
        choices=[p.value for p in ProductType],
        default=None,
        help="Product assumed for rows without one (default: Other Products)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker threads (default: EIR_WORKERS or 1)",
    )
    parser.add_argument("--csv", action="store_true", help="Also write a CSV file")
    parser.add_argument("--json", action="store_true", help="Also write a JSON file")
    parser.add_argument(
        "--print",
        dest="print_records",
        type=int,
        default=0,
        metavar="N",
        help="Print the first N records to the console",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default="standard",
        help="Log output format",
    )

    args = parser.parse_args()

    try:
        config = ProjectionConfig.from_env()
    except (EIRProjectionError, ValueError) as e:
        parser.error(f"Invalid configuration: {e}")
    if args.output_dir is not None:
        config.output.output_dir = args.output_dir
    if args.product_type is not None:
        config.default_product_type = ProductType(args.product_type)
    if args.workers is not None:
        config.workers = args.workers

    setup_logging(config.log_level, args.log_format)

    logger.info("=" * 60)
    logger.info("EIR Income Projection")
    logger.info("=" * 60)
    logger.info("Input: %s", args.input)
    logger.info("Default product: %s", config.default_product_type.value)
    logger.info("Output: %s", config.output.output_dir)
    logger.info("=" * 60)

    try:
        rows = read_rows(args.input)
    except EIRProjectionError as e:
        logger.error("%s", e)
        return 1

    runner = PortfolioProjection(config, progress=_report_progress)
    store = runner.run_rows(rows)

    if store.succeeded:
        output_dir = config.output.output_dir
        stamp = date.today().isoformat()
        workbook = ExcelWorkbookSink(
            output_dir / f"EIR_Projection_{stamp}.xlsx", config.output.date_format
        )
        export(store, workbook, per_loan=True)
        workbook.close()

        if args.csv:
            csv_sink = CsvFileSink(output_dir, config.output.date_format)
            export(store, csv_sink, name=f"EIR_Projection_{stamp}")
            csv_sink.close()
        if args.json:
            json_sink = JsonFileSink(output_dir, pretty=config.output.pretty_json)
            export(store, json_sink, name=f"EIR_Projection_{stamp}")
            json_sink.close()
        if args.print_records:
            console = ConsoleSink(pretty=False, max_records=args.print_records)
            export(store, console)
            console.close()

    summary = store.summary()
    if store.errors:
        logger.warning(
            "Processed %d/%d loans. Errors:\n%s",
            summary["succeeded"],
            summary["loans"],
            "\n".join(store.errors),
        )
    else:
        logger.info("Successfully processed %d loan cases", summary["loans"])

    return 0 if store.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
