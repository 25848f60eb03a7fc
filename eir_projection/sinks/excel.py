"""Excel workbook sink built on openpyxl.

The workbook opens with an "All Cases" sheet that stacks every loan
(header repeated per loan, one blank row between loans), followed by one
sheet per agreement.
"""

import re
from pathlib import Path
from typing import Any, Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font

from eir_projection.exceptions import SinkError
from eir_projection.models import ProjectionRecord
from eir_projection.sinks.serialization import OUTPUT_HEADERS, record_to_row, sanitize_cell

CONSOLIDATED_SHEET = "All Cases"
MAX_SHEET_NAME = 31

COLUMN_WIDTHS = (18, 16, 16, 14, 20, 16, 14, 14, 14, 12, 12, 14, 14, 10, 16, 12)

TEMPLATE_HEADERS = (
    "Agreement Number",
    "Product Type",
    "Repayment Frequency",
    "Amount Financed",
    "Tenure",
    "Disbursement Date",
    "Amort IRR",
    "Advance EMI",
    "Upfront Income",
    "Upfront Expense",
)

TEMPLATE_ROWS = (
    ("AGR001", "Other Products", "Monthly", 100000, 36, "15/01/2025", 12.5, 0, 2500, 500),
    ("AGR002", "Tractor", "Quarterly", 150000, 36, "20/02/2025", 11.75, 0, 3200, 750),
    ("AGR003", "Tractor", "Halfyearly", 200000, 36, "10/03/2025", 12.0, 0, 4000, 800),
)

_INVALID_SHEET_CHARS = re.compile(r"[\\/?*\[\]:'\"]")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def safe_sheet_name(name: Any, existing: Iterable[str] = ()) -> str:
    """Turn an agreement id into a unique, Excel-legal sheet name."""
    cleaned = _INVALID_SHEET_CHARS.sub("_", str(name) if name is not None else "Sheet")
    cleaned = _CONTROL_CHARS.sub("", cleaned).strip()[:MAX_SHEET_NAME]
    if not cleaned:
        cleaned = "Sheet"

    taken = set(existing)
    candidate = cleaned
    counter = 1
    while candidate in taken:
        suffix = f"_{counter}"
        candidate = cleaned[: MAX_SHEET_NAME - len(suffix)] + suffix
        counter += 1
    return candidate


class ExcelWorkbookSink:
    """Collect projection records into a single .xlsx workbook."""

    def __init__(self, path: str | Path, date_format: str = "%d/%m/%Y") -> None:
        """Initialize Excel sink.

        Parameters
        ----------
        path : str | Path
            Workbook file to write on ``close()``.
        date_format : str
            strftime format for date cells.
        """
        self.path = Path(path)
        self.date_format = date_format
        self._batches: list[tuple[str, list[ProjectionRecord]]] = []

    def write_batch(self, entity_type: str, records: list[ProjectionRecord]) -> None:
        """Queue one loan's records as its own sheet."""
        self._batches.append((entity_type, list(records)))

    def close(self) -> None:
        """Build the workbook and save it."""
        workbook = Workbook()
        consolidated = workbook.active
        consolidated.title = CONSOLIDATED_SHEET
        self._write_consolidated(consolidated)

        names = [CONSOLIDATED_SHEET]
        for entity_type, records in self._batches:
            sheet_name = safe_sheet_name(entity_type, names)
            names.append(sheet_name)
            sheet = workbook.create_sheet(sheet_name)
            _append_block(sheet, records, self.date_format)
            _set_widths(sheet)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            workbook.save(self.path)
        except OSError as e:
            raise SinkError(f"Failed to write {self.path}: {e}") from e
        print(f"Workbook written to: {self.path} ({len(self._batches)} loans)")

    def _write_consolidated(self, sheet: Any) -> None:
        for position, (_, records) in enumerate(self._batches):
            if position:
                sheet.append([])
            _append_block(sheet, records, self.date_format)
        _set_widths(sheet)


def _append_block(sheet: Any, records: Sequence[ProjectionRecord], date_format: str) -> None:
    sheet.append(list(OUTPUT_HEADERS))
    for cell in sheet[sheet.max_row]:
        cell.font = Font(bold=True)
    for record in records:
        sheet.append(record_to_row(record, date_format))


def _set_widths(sheet: Any) -> None:
    from openpyxl.utils import get_column_letter

    for index, width in enumerate(COLUMN_WIDTHS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width


def write_input_template(path: str | Path) -> Path:
    """Write a sample input file (.xlsx or .csv) with the accepted headers."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".csv":
        import csv

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(TEMPLATE_HEADERS)
            writer.writerows(TEMPLATE_ROWS)
        return path

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Template"
    sheet.append(list(TEMPLATE_HEADERS))
    for row in TEMPLATE_ROWS:
        sheet.append([sanitize_cell(value) for value in row])
    workbook.save(path)
    return path
