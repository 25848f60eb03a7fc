"""End-to-end EIR projection for a single loan.

``run_projection`` is a pure function of its inputs: it keeps no state
between calls, so loans can be projected in any order or concurrently.
"""

import logging
import math
from decimal import Decimal

from eir_projection.config import DEFAULT_CONFIG, ProjectionConfig
from eir_projection.engine.contractual import build_contractual_schedule
from eir_projection.engine.dates import first_installment_date
from eir_projection.engine.differencer import build_income_schedule
from eir_projection.engine.solver import build_effective_schedule
from eir_projection.engine.splitter import split_monthly
from eir_projection.exceptions import EIRProjectionError, InvalidInputError
from eir_projection.models import (
    LoanCase,
    LoanSchedules,
    ProjectionRecord,
    ProjectionResult,
)

logger = logging.getLogger(__name__)


def validate_loan_case(case: LoanCase) -> LoanCase:
    """Reject loan records that cannot produce a meaningful schedule.

    Raises
    ------
    InvalidInputError
        Naming the agreement and the offending field.
    """
    agreement = case.agreement_id

    def fail(reason: str) -> None:
        raise InvalidInputError(f"Invalid loan {agreement}: {reason}", agreement_id=agreement)

    if case.disbursement_date is None:
        fail("missing disbursement date")
    for name in ("amount_financed", "amort_irr", "upfront_income", "upfront_expense", "advance_emi"):
        if not _is_finite(getattr(case, name)):
            fail(f"{name} is not a finite number, got {getattr(case, name)}")
    if case.amount_financed <= 0:
        fail(f"amount financed must be positive, got {case.amount_financed}")
    if case.tenure_months <= 0:
        fail(f"tenure must be positive, got {case.tenure_months}")
    if case.number_of_installments < 1:
        fail(
            f"tenure of {case.tenure_months} months gives no "
            f"{case.repayment_frequency.value.lower()} installments"
        )
    if case.amort_irr < 0:
        fail(f"amort IRR must not be negative, got {case.amort_irr}")
    for name in ("upfront_income", "upfront_expense", "advance_emi"):
        if getattr(case, name) < 0:
            fail(f"{name} must not be negative, got {getattr(case, name)}")
    if case.net_principal <= 0:
        fail("advance EMI must be less than amount financed")
    if case.revised_loan_value <= 0:
        fail(f"revised loan value must be positive, got {case.revised_loan_value}")
    return case


def _is_finite(value: Decimal) -> bool:
    if isinstance(value, Decimal) and not value.is_finite():
        return False
    return math.isfinite(float(value))


def build_schedules(case: LoanCase, config: ProjectionConfig = DEFAULT_CONFIG) -> LoanSchedules:
    """Run Steps A to D for one validated loan."""
    validate_loan_case(case)

    step_a = build_contractual_schedule(case, config.schedule)
    step_b, goal_seek = build_effective_schedule(case, step_a, config.solver, config.schedule)
    step_c = build_income_schedule(step_a, step_b)
    step_d = split_monthly(case, step_c, config.schedule)

    return LoanSchedules(
        step_a=step_a,
        step_b=step_b,
        step_c=step_c,
        step_d=step_d,
        goal_seek=goal_seek,
        first_installment_date=first_installment_date(
            case.disbursement_date, case.product_type, config.schedule
        ),
        last_installment_date=step_a[-1].emi_date,
    )


def project_loan(case: LoanCase, config: ProjectionConfig = DEFAULT_CONFIG) -> list[ProjectionRecord]:
    """Monthly EIR income records for one loan.

    Raises
    ------
    EIRProjectionError
        If the loan is invalid or its schedules are inconsistent.
    """
    schedules = build_schedules(case, config)
    places = config.output.decimal_places

    return [
        ProjectionRecord(
            agreement_id=case.agreement_id,
            product_type=case.product_type,
            amount_financed=case.amount_financed,
            tenure_months=case.tenure_months,
            repayment_frequency=case.repayment_frequency,
            number_of_installments=case.number_of_installments,
            disbursement_date=case.disbursement_date,
            first_installment_date=schedules.first_installment_date,
            last_installment_date=schedules.last_installment_date,
            amort_irr=case.amort_irr,
            advance_emi=case.advance_emi,
            upfront_income=case.upfront_income,
            upfront_expense=case.upfront_expense,
            month=row.month_label,
            step_c_eir_income=(
                round(row.step_c_eir_income, places)
                if row.step_c_eir_income is not None
                else None
            ),
            eir_income=round(row.col_c, places),
        )
        for row in schedules.step_d
    ]


def run_projection(case: LoanCase, config: ProjectionConfig = DEFAULT_CONFIG) -> ProjectionResult:
    """Project one loan, returning failures as a result instead of raising."""
    try:
        records = project_loan(case, config)
    except EIRProjectionError as e:
        logger.warning(
            "Projection failed for %s: %s",
            case.agreement_id,
            e,
            extra={"agreement_id": case.agreement_id},
        )
        return ProjectionResult(agreement_id=case.agreement_id, error=str(e))
    return ProjectionResult(agreement_id=case.agreement_id, records=records)


def total_fee_effect(case: LoanCase) -> Decimal:
    """Net fee/advance effect recognized over the loan's life."""
    return case.net_principal - case.revised_loan_value
