"""Loan input model."""

import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from eir_projection.models.enums import ProductType, RepaymentFrequency


@dataclass
class LoanCase:
    """One normalized loan record, the input of the projection pipeline."""

    agreement_id: str
    amount_financed: Decimal
    tenure_months: int
    disbursement_date: date
    amort_irr: Decimal  # Nominal annual percent (e.g. 12.5 for 12.5%)
    product_type: ProductType = ProductType.OTHER
    repayment_frequency: RepaymentFrequency = RepaymentFrequency.MONTHLY
    upfront_income: Decimal = Decimal("0")
    upfront_expense: Decimal = Decimal("0")
    advance_emi: Decimal = Decimal("0")

    @property
    def months_per_installment(self) -> int:
        return self.repayment_frequency.months_per_installment

    @property
    def number_of_installments(self) -> int:
        # Halves round up
        return math.floor(self.tenure_months / self.months_per_installment + 0.5)

    @property
    def net_principal(self) -> Decimal:
        """Principal actually outstanding after the advance installment."""
        return self.amount_financed - self.advance_emi

    @property
    def revised_loan_value(self) -> Decimal:
        """Principal base once upfront fees and the advance are folded in."""
        return (
            self.amount_financed
            - self.upfront_income
            + self.upfront_expense
            - self.advance_emi
        )
