"""Loan file intake: readers and tolerant row parsing."""

from eir_projection.sources.parsing import (
    COLUMN_ALIASES,
    parse_amort_irr,
    parse_date,
    parse_decimal,
    parse_loan_case,
)
from eir_projection.sources.readers import read_csv_rows, read_excel_rows, read_rows

__all__ = [
    "COLUMN_ALIASES",
    "parse_amort_irr",
    "parse_date",
    "parse_decimal",
    "parse_loan_case",
    "read_csv_rows",
    "read_excel_rows",
    "read_rows",
]
