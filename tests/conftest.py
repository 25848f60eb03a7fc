"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from eir_projection.engine import project_loan
from eir_projection.models import (
    LoanCase,
    ProductType,
    ProjectionRecord,
    RepaymentFrequency,
)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def sample_case() -> LoanCase:
    """Monthly loan disbursed before the cutoff day."""
    return LoanCase(
        agreement_id="AGR001",
        amount_financed=Decimal("100000"),
        tenure_months=36,
        disbursement_date=date(2025, 1, 15),
        amort_irr=Decimal("12.5"),
        product_type=ProductType.OTHER,
        repayment_frequency=RepaymentFrequency.MONTHLY,
        upfront_income=Decimal("2500"),
        upfront_expense=Decimal("500"),
    )


@pytest.fixture
def late_monthly_case() -> LoanCase:
    """Monthly loan disbursed after the cutoff day."""
    return LoanCase(
        agreement_id="AGR004",
        amount_financed=Decimal("50000"),
        tenure_months=24,
        disbursement_date=date(2025, 1, 25),
        amort_irr=Decimal("14"),
        upfront_income=Decimal("1200"),
        upfront_expense=Decimal("300"),
    )


@pytest.fixture
def tractor_case() -> LoanCase:
    """Quarterly tractor loan disbursed on the cutoff day."""
    return LoanCase(
        agreement_id="AGR002",
        amount_financed=Decimal("150000"),
        tenure_months=36,
        disbursement_date=date(2025, 2, 20),
        amort_irr=Decimal("11.75"),
        product_type=ProductType.TRACTOR,
        repayment_frequency=RepaymentFrequency.QUARTERLY,
        upfront_income=Decimal("3200"),
        upfront_expense=Decimal("750"),
    )


@pytest.fixture
def halfyearly_case() -> LoanCase:
    """Half-yearly tractor loan disbursed before the cutoff day."""
    return LoanCase(
        agreement_id="AGR003",
        amount_financed=Decimal("200000"),
        tenure_months=36,
        disbursement_date=date(2025, 3, 10),
        amort_irr=Decimal("12.0"),
        product_type=ProductType.TRACTOR,
        repayment_frequency=RepaymentFrequency.HALFYEARLY,
        upfront_income=Decimal("4000"),
        upfront_expense=Decimal("800"),
    )


@pytest.fixture
def sample_records(sample_case: LoanCase) -> list[ProjectionRecord]:
    """Projection output of the monthly sample loan."""
    return project_loan(sample_case)
