"""Calendar helpers for schedule construction.

Month arithmetic goes through ``dateutil.relativedelta`` so that adding
months rolls over years and clamps to month ends the calendar way, never
by counting fixed numbers of days.
"""

from datetime import date
from typing import Iterator

from dateutil.relativedelta import relativedelta

from eir_projection.config import DEFAULT_CONFIG, ScheduleConfig
from eir_projection.models.enums import ProductType


def add_months(value: date, months: int) -> date:
    """Shift a date by whole calendar months."""
    return value + relativedelta(months=months)


def month_start(value: date) -> date:
    return value.replace(day=1)


def month_end(value: date) -> date:
    """Last calendar day of the month containing ``value``."""
    return month_start(value) + relativedelta(months=1, days=-1)


def days_in_month(value: date) -> int:
    return month_end(value).day


def days_between(start: date, end: date) -> int:
    """Absolute number of calendar days between two dates."""
    return abs((end - start).days)


def iter_months(first: date, last: date) -> Iterator[date]:
    """Yield the first day of every month from ``first`` through ``last``."""
    current = month_start(first)
    stop = month_start(last)
    while current <= stop:
        yield current
        current = add_months(current, 1)


def month_label(value: date) -> str:
    """Short month label, e.g. ``Jan-25``."""
    return value.strftime("%b-%y")


def is_before_cutoff(disbursement_date: date, config: ScheduleConfig = DEFAULT_CONFIG.schedule) -> bool:
    """True when the disbursement falls before the billing-cycle cutoff day."""
    return disbursement_date.day < config.cutoff_day


def first_installment_date(
    disbursement_date: date,
    product_type: ProductType,
    config: ScheduleConfig = DEFAULT_CONFIG.schedule,
) -> date:
    """Date of the first installment.

    Disbursements before the cutoff day pay on the product's EMI day of the
    next month; later ones skip to the month after next.
    """
    offset = 1 if is_before_cutoff(disbursement_date, config) else 2
    return add_months(month_start(disbursement_date), offset).replace(
        day=config.emi_day(product_type)
    )
