#!/usr/bin/env python3
"""Generate loan input files for the EIR projection.

Writes either the three-row input template or a synthetic portfolio.

Usage:
    python scripts/generate_sample_loans.py --template EIR_Input_Template.xlsx
    python scripts/generate_sample_loans.py --loans 500 --seed 42 --output sample_loans.csv
"""

import argparse
import csv
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from eir_projection.generators import LoanCaseGenerator, to_input_row
from eir_projection.logging import setup_logging
from eir_projection.sinks import write_input_template

logger = logging.getLogger(__name__)


def write_portfolio(path: Path, count: int, seed: int) -> Path:
    """Write ``count`` synthetic loans to a CSV or XLSX file."""
    generator = LoanCaseGenerator(seed=seed)
    rows = [to_input_row(case) for case in generator.generate_batch(count)]
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".csv":
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=list(rows[0]))
            writer.writeheader()
            writer.writerows(rows)
    else:
        from openpyxl import Workbook

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Loans"
        sheet.append(list(rows[0]))
        for row in rows:
            sheet.append(list(row.values()))
        workbook.save(path)

    logger.info("Saved %d loans to %s", count, path)
    return path


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate loan input files")
    parser.add_argument(
        "--template",
        type=Path,
        default=None,
        help="Write the input template to this path (.xlsx or .csv)",
    )
    parser.add_argument(
        "--loans",
        type=int,
        default=100,
        help="Number of synthetic loans to generate (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("local/sample_loans.csv"),
        help="Output file for the synthetic portfolio",
    )
    args = parser.parse_args()

    setup_logging()

    if args.template is not None:
        path = write_input_template(args.template)
        logger.info("Template written to %s", path)
        return

    if args.loans < 1:
        parser.error("--loans must be at least 1")
    write_portfolio(args.output, args.loans, args.seed)


if __name__ == "__main__":
    main()
