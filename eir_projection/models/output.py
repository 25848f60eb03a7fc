"""Flat output records."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from eir_projection.models.enums import ProductType, RepaymentFrequency


@dataclass
class ProjectionRecord:
    """One (loan, calendar month) row of the EIR income projection."""

    agreement_id: str
    product_type: ProductType
    amount_financed: Decimal
    tenure_months: int
    repayment_frequency: RepaymentFrequency
    number_of_installments: int
    disbursement_date: date
    first_installment_date: date
    last_installment_date: date
    amort_irr: Decimal
    advance_emi: Decimal
    upfront_income: Decimal
    upfront_expense: Decimal
    month: str  # e.g. "Jan-25"
    step_c_eir_income: float | None
    eir_income: float


@dataclass
class ProjectionResult:
    """Success or failure of projecting one loan."""

    agreement_id: str
    records: list[ProjectionRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
