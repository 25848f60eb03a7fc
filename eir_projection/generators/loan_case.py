"""Synthetic loan-case generator for demos and sample files."""

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterator

from eir_projection.engine.installment import installment_amount, periodic_rate
from eir_projection.generators.base import BaseGenerator
from eir_projection.models import LoanCase, ProductType, RepaymentFrequency
from eir_projection.sources.parsing import COLUMN_ALIASES

CENTS = Decimal("0.01")


def _money(value: float) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


class LoanCaseGenerator(BaseGenerator):
    """Generate plausible loan records for the EIR projection.

    Rates and fee levels are kept where the effective rate stays within the
    default goal-seek bracket: upfront expense never exceeds upfront income,
    and only monthly loans take an advance installment.
    """

    # Amount financed ranges by product (in thousands)
    AMOUNT_RANGES = {
        ProductType.OTHER: (25, 500),
        ProductType.TRACTOR: (300, 1200),
    }

    FREQUENCIES = {
        ProductType.OTHER: [RepaymentFrequency.MONTHLY],
        ProductType.TRACTOR: [
            RepaymentFrequency.MONTHLY,
            RepaymentFrequency.BIMONTHLY,
            RepaymentFrequency.QUARTERLY,
            RepaymentFrequency.HALFYEARLY,
        ],
    }

    TENURES = [12, 18, 24, 36, 48, 60]

    def __init__(
        self,
        seed: int | None = None,
        start_date: date = date(2025, 1, 1),
        end_date: date = date(2025, 12, 31),
        tractor_share: float = 0.3,
        advance_emi_rate: float = 0.2,
    ) -> None:
        super().__init__(seed)
        self.start_date = start_date
        self.end_date = end_date
        self.tractor_share = tractor_share
        self.advance_emi_rate = advance_emi_rate

    def generate(self) -> LoanCase:
        """Generate one loan case."""
        rng = self.random
        product = ProductType.TRACTOR if rng.random() < self.tractor_share else ProductType.OTHER
        frequency = rng.choice(self.FREQUENCIES[product])
        low, high = self.AMOUNT_RANGES[product]
        amount = Decimal(rng.randint(low, high) * 1000)
        tenure = rng.choice(
            [t for t in self.TENURES if t % frequency.months_per_installment == 0]
        )
        amort_irr = Decimal(str(round(rng.uniform(11.0, 20.0), 2)))

        upfront_income = _money(float(amount) * rng.uniform(0.005, 0.025))
        upfront_expense = _money(float(amount) * rng.uniform(0.0, 0.004))

        advance_emi = Decimal("0")
        if frequency == RepaymentFrequency.MONTHLY and rng.random() < self.advance_emi_rate:
            periods = tenure // frequency.months_per_installment
            rate = periodic_rate(float(amort_irr) / 100, frequency.months_per_installment)
            advance_emi = _money(installment_amount(rate, periods, float(amount)))

        span = (self.end_date - self.start_date).days
        disbursed = self.start_date + timedelta(days=rng.randint(0, max(span, 0)))

        prefix = "TR" if product == ProductType.TRACTOR else "OP"
        return LoanCase(
            agreement_id=self.fake.bothify(text=f"{prefix}########"),
            amount_financed=amount,
            tenure_months=tenure,
            disbursement_date=disbursed,
            amort_irr=amort_irr,
            product_type=product,
            repayment_frequency=frequency,
            upfront_income=upfront_income,
            upfront_expense=upfront_expense,
            advance_emi=advance_emi,
        )

    def generate_batch(self, count: int) -> Iterator[LoanCase]:
        """Generate ``count`` loan cases."""
        for _ in range(count):
            yield self.generate()


def to_input_row(case: LoanCase) -> dict[str, Any]:
    """Render a loan case under the primary input headers."""
    headers = {name: aliases[0] for name, aliases in COLUMN_ALIASES.items()}
    return {
        headers["agreement_id"]: case.agreement_id,
        headers["product_type"]: case.product_type.value,
        headers["repayment_frequency"]: case.repayment_frequency.value,
        headers["amount_financed"]: float(case.amount_financed),
        headers["tenure_months"]: case.tenure_months,
        headers["disbursement_date"]: case.disbursement_date.strftime("%d/%m/%Y"),
        headers["amort_irr"]: float(case.amort_irr),
        headers["advance_emi"]: float(case.advance_emi),
        headers["upfront_income"]: float(case.upfront_income),
        headers["upfront_expense"]: float(case.upfront_expense),
    }
