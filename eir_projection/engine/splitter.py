"""Calendar-month reallocation of period EIR income, Step D.

Income is recognized per installment period in Step C. Reporting happens
per calendar month, so each month gets:

- ``col_a``: the current installment's income net of what earlier months
  already accrued towards it,
- ``col_b``: the accrual carried forward towards the next installment,
- ``col_c = col_a + col_b``: the reported monthly EIR income.

The sum of ``col_c`` over all months equals the sum of Step C income.
"""

from datetime import date
from typing import Sequence

from eir_projection.config import DEFAULT_CONFIG, ScheduleConfig
from eir_projection.engine.dates import (
    add_months,
    days_between,
    days_in_month,
    is_before_cutoff,
    iter_months,
    month_end,
    month_label,
    month_start,
)
from eir_projection.exceptions import ScheduleError
from eir_projection.models import LoanCase, StepCRow, StepDRow
from eir_projection.models.enums import RepaymentFrequency


def _daily_income(row: StepCRow) -> float:
    if not row.days:
        raise ScheduleError(f"Installment period {row.month} has no day count")
    return row.eir_income / row.days


def _forward_accrual(row: StepCRow, emi_day: int) -> float:
    """Share of ``row``'s income accrued before its own installment month."""
    return _daily_income(row) * (row.days - emi_day)


def _month_key(value: date) -> tuple[int, int]:
    return value.year, value.month


def split_monthly(
    case: LoanCase,
    income_rows: Sequence[StepCRow],
    config: ScheduleConfig = DEFAULT_CONFIG.schedule,
) -> tuple[StepDRow, ...]:
    """Spread Step C income over calendar months.

    Parameters
    ----------
    case : LoanCase
        Loan the schedule belongs to.
    income_rows : Sequence[StepCRow]
        Step C table.
    config : ScheduleConfig
        Cutoff day and EMI days.

    Returns
    -------
    tuple[StepDRow, ...]
        One row per reported month, in calendar order. Empty when the loan
        has no installment income.
    """
    installments = [row for row in income_rows if row.eir_income is not None]
    if not installments:
        return ()

    emi_day = config.emi_day(case.product_type)
    before_cutoff = is_before_cutoff(case.disbursement_date, config)

    if case.repayment_frequency == RepaymentFrequency.MONTHLY:
        return _split_monthly_frequency(case, installments, emi_day, before_cutoff)
    return _split_periodic_frequency(case, installments, emi_day, before_cutoff)


def _split_monthly_frequency(
    case: LoanCase,
    installments: list[StepCRow],
    emi_day: int,
    before_cutoff: bool,
) -> tuple[StepDRow, ...]:
    disbursed_on = case.disbursement_date
    first = installments[0]
    by_month: dict[tuple[int, int], StepCRow] = {}
    for row in installments:
        by_month.setdefault(_month_key(row.emi_date), row)

    months = list(iter_months(disbursed_on, installments[-1].emi_date))

    forward: list[float] = []
    for index, start in enumerate(months):
        if index == 0:
            col_b = _daily_income(first) * days_between(disbursed_on, month_end(disbursed_on))
        elif index == 1 and not before_cutoff:
            col_b = _daily_income(first) * days_in_month(start)
        else:
            upcoming = by_month.get(_month_key(add_months(start, 1)))
            col_b = _forward_accrual(upcoming, emi_day) if upcoming else 0.0
        forward.append(col_b)

    rows: list[StepDRow] = []
    accrued = 0.0
    for index, start in enumerate(months):
        current = by_month.get(_month_key(start))
        col_a = 0.0
        if index > 0 and current is not None:
            if not before_cutoff and current.month == first.month:
                # Late disbursements accrue over several months before the first EMI
                col_a = current.eir_income - accrued
            else:
                col_a = current.eir_income - forward[index - 1]
        col_b = forward[index]
        accrued += col_b
        rows.append(
            StepDRow(
                month_start=start,
                month_label=month_label(start),
                step_c_eir_income=current.eir_income if current else None,
                col_a=col_a,
                col_b=col_b,
                col_c=col_a + col_b,
            )
        )
    return tuple(rows)


def _split_periodic_frequency(
    case: LoanCase,
    installments: list[StepCRow],
    emi_day: int,
    before_cutoff: bool,
) -> tuple[StepDRow, ...]:
    disbursed_on = case.disbursement_date
    first = installments[0]
    daily = _daily_income(first)

    rows: list[StepDRow] = []
    col_b = daily * days_between(disbursed_on, month_end(disbursed_on))
    rows.append(_accrual_only_row(month_start(disbursed_on), col_b))
    carried = col_b

    if not before_cutoff:
        current = add_months(month_start(disbursed_on), 1)
        first_month = month_start(first.emi_date)
        while current < first_month:
            col_b = daily * days_in_month(current)
            rows.append(_accrual_only_row(current, col_b))
            carried += col_b
            current = add_months(current, 1)

    for position, row in enumerate(installments):
        col_a = row.eir_income - carried
        if position + 1 < len(installments):
            col_b = _forward_accrual(installments[position + 1], emi_day)
        else:
            col_b = 0.0
        start = month_start(row.emi_date)
        rows.append(
            StepDRow(
                month_start=start,
                month_label=month_label(start),
                step_c_eir_income=row.eir_income,
                col_a=col_a,
                col_b=col_b,
                col_c=col_a + col_b,
            )
        )
        carried = col_b
    return tuple(rows)


def _accrual_only_row(start: date, col_b: float) -> StepDRow:
    return StepDRow(
        month_start=start,
        month_label=month_label(start),
        step_c_eir_income=None,
        col_a=0.0,
        col_b=col_b,
        col_c=col_b,
    )
