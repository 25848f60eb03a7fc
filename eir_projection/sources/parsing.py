"""Tolerant conversion of raw spreadsheet rows into LoanCase records."""

import math
import re
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from eir_projection.exceptions import InvalidInputError
from eir_projection.models import LoanCase, ProductType, RepaymentFrequency

# Header names accepted per field; the first non-empty one wins.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "agreement_id": ("Agreement Number", "agreement_number", "AgreementNumber"),
    "product_type": ("Product Type", "product_type", "ProductType"),
    "repayment_frequency": ("Repayment Frequency", "repayment_frequency", "RepaymentFrequency"),
    "amount_financed": ("Amount Financed", "amount_financed", "AmountFinanced"),
    "tenure_months": ("Tenure", "tenure"),
    "disbursement_date": (
        "Disbursement Date",
        "disbursement_date",
        "DisbursementDate",
        "Disbursement",
    ),
    "amort_irr": ("Amort IRR", "amort_irr", "AmortIRR", "Amort IRR (%)"),
    "advance_emi": ("Advance EMI", "advance_emi", "AdvanceEMI"),
    "upfront_income": ("Upfront Income", "upfront_income", "UpfrontIncome"),
    "upfront_expense": ("Upfront Expense", "upfront_expense", "UpfrontExpense"),
}

EXCEL_EPOCH = date(1899, 12, 30)

_DAY_FIRST = re.compile(r"^\s*(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})\s*$")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def lookup(row: Mapping[str, Any], field_name: str) -> Any:
    """Value of a field under any of its aliases, or None."""
    for alias in COLUMN_ALIASES[field_name]:
        value = row.get(alias)
        if not _is_blank(value):
            return value
    return None


def parse_date(value: Any) -> date | None:
    """Parse a disbursement date as found in loan files.

    Accepts ``date``/``datetime`` objects, Excel serial day numbers, ISO
    strings and day-first ``dd/mm/yyyy`` strings. Returns None when the
    value cannot be read as a date.

    Slash dates are always day-first, so ``01/02/2025`` is 1 February even
    though a month-first reading would also be valid.
    """
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        try:
            return EXCEL_EPOCH + timedelta(days=int(value))
        except (OverflowError, ValueError):
            return None
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    match = _DAY_FIRST.match(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None
    return None


def parse_decimal(value: Any, default: Decimal | None = None) -> Decimal | None:
    """Parse a numeric cell, tolerating thousands separators."""
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(str(value).strip().replace(",", ""))
        except InvalidOperation:
            return None
    # Finite as a Decimal is not enough: 1e400 overflows to inf as a float
    if not result.is_finite() or not math.isfinite(float(result)):
        return None
    return result


def parse_amort_irr(value: Any) -> Decimal | None:
    """Contractual rate as a percentage.

    Missing values read as 0. Values below 1 are taken as fractions and
    scaled to percent.
    """
    rate = parse_decimal(value, default=Decimal("0"))
    if rate is None:
        return None
    return rate * 100 if rate < 1 else rate


def parse_loan_case(
    row: Mapping[str, Any],
    index: int,
    default_product_type: ProductType = ProductType.OTHER,
) -> LoanCase:
    """Build a LoanCase from one raw row.

    Parameters
    ----------
    row : Mapping[str, Any]
        Header-to-value mapping for one loan.
    index : int
        Zero-based row position, used to name loans without an agreement number.
    default_product_type : ProductType
        Product assumed when the row has none.

    Returns
    -------
    LoanCase
        Normalized loan record.

    Raises
    ------
    InvalidInputError
        When a required field is missing or unreadable.
    """
    raw_id = lookup(row, "agreement_id")
    if isinstance(raw_id, float) and raw_id.is_integer():
        raw_id = int(raw_id)
    agreement = str(raw_id).strip() if raw_id is not None else f"LOAN_{index + 1}"

    def fail(reason: str) -> InvalidInputError:
        return InvalidInputError(f"{reason} for agreement {agreement}", agreement_id=agreement)

    disbursement_date = parse_date(lookup(row, "disbursement_date"))
    if disbursement_date is None:
        raise fail("Invalid disbursement date")

    amount_financed = parse_decimal(lookup(row, "amount_financed"))
    if amount_financed is None:
        raise fail("Missing or non-numeric amount financed")

    tenure = parse_decimal(lookup(row, "tenure_months"))
    if tenure is None:
        raise fail("Missing or non-numeric tenure")

    amort_irr = parse_amort_irr(lookup(row, "amort_irr"))
    if amort_irr is None:
        raise fail("Non-numeric amort IRR")

    amounts: dict[str, Decimal] = {}
    for name in ("advance_emi", "upfront_income", "upfront_expense"):
        amount = parse_decimal(lookup(row, name), default=Decimal("0"))
        if amount is None:
            raise fail(f"Non-numeric {name.replace('_', ' ')}")
        amounts[name] = amount

    raw_product = lookup(row, "product_type")
    raw_frequency = lookup(row, "repayment_frequency")
    try:
        product_type = (
            ProductType.parse(raw_product) if raw_product is not None else default_product_type
        )
        frequency = (
            RepaymentFrequency.parse(raw_frequency)
            if raw_frequency is not None
            else RepaymentFrequency.MONTHLY
        )
    except ValueError as e:
        raise fail(str(e)) from e

    return LoanCase(
        agreement_id=agreement,
        amount_financed=amount_financed,
        tenure_months=int(tenure),
        disbursement_date=disbursement_date,
        amort_irr=amort_irr,
        product_type=product_type,
        repayment_frequency=frequency,
        **amounts,
    )
