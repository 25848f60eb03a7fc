"""Shared serialization utilities for sinks."""

import math
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from eir_projection.models import ProjectionRecord

OUTPUT_HEADERS: tuple[str, ...] = (
    "Agreement Number",
    "Product Type",
    "Amount Financed",
    "Tenure (Months)",
    "Repayment Frequency",
    "No. of Installments",
    "Disbursement",
    "First EMI",
    "Last EMI",
    "Amort IRR (%)",
    "Advance EMI",
    "Upfront Income",
    "Upfront Expense",
    "Month",
    "Step C EIR Income",
    "EIR Income",
)


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return {k: serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert a flat dataclass without deep-copying its values."""
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return float(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, float) and not math.isfinite(value):
        return 0.0
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def sanitize_cell(value: Any) -> Any:
    """Make a value safe for a spreadsheet cell.

    None becomes an empty string and non-finite numbers become 0.
    """
    if value is None:
        return ""
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, Decimal):
        return float(value) if value.is_finite() else 0
    if isinstance(value, Enum):
        return value.value
    return value


def record_to_row(record: ProjectionRecord, date_format: str = "%d/%m/%Y") -> list[Any]:
    """Cells of one output record in ``OUTPUT_HEADERS`` order."""
    values = [
        record.agreement_id,
        record.product_type,
        record.amount_financed,
        record.tenure_months,
        record.repayment_frequency,
        record.number_of_installments,
        record.disbursement_date.strftime(date_format),
        record.first_installment_date.strftime(date_format),
        record.last_installment_date.strftime(date_format),
        record.amort_irr,
        record.advance_emi,
        record.upfront_income,
        record.upfront_expense,
        record.month,
        record.step_c_eir_income,
        record.eir_income,
    ]
    return [sanitize_cell(value) for value in values]
