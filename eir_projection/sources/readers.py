"""Readers that turn loan files into header-keyed rows."""

import csv
import logging
import zipfile
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from eir_projection.exceptions import InvalidInputError, SourceError

logger = logging.getLogger(__name__)


def read_csv_rows(path: str | Path) -> list[dict[str, Any]]:
    """Read a CSV loan file with a header row."""
    with open(path, newline="", encoding="utf-8-sig") as f:
        return [dict(row) for row in csv.DictReader(f)]


def read_excel_rows(path: str | Path) -> list[dict[str, Any]]:
    """Read the first worksheet of an .xlsx loan file.

    The first row holds headers; fully empty rows are skipped.
    """
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        rows = sheet.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        names = [str(cell).strip() if cell is not None else "" for cell in header]
        records = []
        for values in rows:
            if all(value is None or value == "" for value in values):
                continue
            records.append(
                {name: value for name, value in zip(names, values) if name}
            )
        return records
    finally:
        workbook.close()


def read_rows(path: str | Path) -> list[dict[str, Any]]:
    """Read loan rows from a CSV or Excel file, chosen by extension.

    Raises
    ------
    SourceError
        If the file is missing, unreadable or of an unsupported type.
    InvalidInputError
        If the file holds no data rows.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".csv", ".xlsx", ".xlsm"):
        raise SourceError(f"Unsupported loan file type: {path.suffix or path.name}")
    if not path.exists():
        raise SourceError(f"Loan file not found: {path}")

    try:
        rows = read_csv_rows(path) if suffix == ".csv" else read_excel_rows(path)
    except (OSError, ValueError, KeyError, zipfile.BadZipFile, InvalidFileException) as e:
        raise SourceError(f"Failed to read {path}: {e}") from e

    if not rows:
        raise InvalidInputError(f"No data found in {path.name}")

    logger.info("Read %d loan rows from %s", len(rows), path)
    return rows
