"""Contractual (IGAAP) amortization schedule, Step A."""

import logging

from eir_projection.config import DEFAULT_CONFIG, ScheduleConfig
from eir_projection.engine.dates import (
    add_months,
    days_between,
    first_installment_date,
    month_end,
)
from eir_projection.engine.installment import installment_amount, periodic_rate
from eir_projection.models import LoanCase, ScheduleRow

logger = logging.getLogger(__name__)


def opening_rows(
    principal: float,
    annual_rate: float,
    case: LoanCase,
    config: ScheduleConfig = DEFAULT_CONFIG.schedule,
) -> tuple[ScheduleRow, ScheduleRow]:
    """Disbursement row and stub accrual row shared by Steps A and B.

    The stub row accrues interest from the disbursement date to the end of
    the disbursement month. It is reported only; installment rows accrue
    from the disbursement date again.
    """
    disbursed_on = case.disbursement_date
    stub_end = month_end(disbursed_on)
    stub_days = days_between(disbursed_on, stub_end)
    stub_interest = principal * annual_rate * stub_days / config.day_count_basis

    disbursement = ScheduleRow(
        month=0,
        emi_date=disbursed_on,
        emi=-principal,
        closing_balance=0.0,
    )
    stub = ScheduleRow(
        month=1,
        emi_date=stub_end,
        emi=0.0,
        closing_balance=principal + stub_interest,
        opening_balance=principal,
        interest=stub_interest,
        days=stub_days,
    )
    return disbursement, stub


def build_contractual_schedule(
    case: LoanCase,
    config: ScheduleConfig = DEFAULT_CONFIG.schedule,
) -> tuple[ScheduleRow, ...]:
    """Build the contractual amortization table for a loan.

    Parameters
    ----------
    case : LoanCase
        Validated loan record.
    config : ScheduleConfig
        Day-count basis, installment cap and balance snap tolerance.

    Returns
    -------
    tuple[ScheduleRow, ...]
        Disbursement row, stub row, then one row per installment. The last
        installment absorbs rounding so the closing balance is exactly zero.
    """
    annual_rate = float(case.amort_irr) / 100
    principal = float(case.net_principal)
    periods = case.number_of_installments
    step = case.months_per_installment

    level_payment = installment_amount(
        periodic_rate(annual_rate, step), periods, float(case.amount_financed)
    )

    rows = list(opening_rows(principal, annual_rate, case, config))

    previous_date = case.disbursement_date
    opening = principal
    due = first_installment_date(case.disbursement_date, case.product_type, config)
    count = 0

    while count < periods and count < config.max_installments:
        days = days_between(previous_date, due)
        interest = opening * annual_rate * days / config.day_count_basis
        payoff = opening + interest
        if count + 1 < periods:
            emi = min(level_payment, payoff)
        else:
            emi = payoff
        closing = payoff - emi
        if abs(closing) < config.balance_snap_tolerance:
            closing = 0.0

        rows.append(
            ScheduleRow(
                month=count + 2,
                emi_date=due,
                emi=emi,
                closing_balance=closing,
                opening_balance=opening,
                interest=interest,
                days=days,
            )
        )

        count += 1
        previous_date = due
        opening = closing
        due = add_months(due, step)
        if closing <= 0:
            break

    if count < periods and opening > 0:
        logger.warning(
            "Schedule for %s truncated at %d of %d installments (balance %.4f)",
            case.agreement_id,
            count,
            periods,
            opening,
            extra={"agreement_id": case.agreement_id},
        )

    return tuple(rows)
