"""Numeric core: contractual schedule, goal-seek, income difference and monthly split."""

from eir_projection.engine.contractual import build_contractual_schedule
from eir_projection.engine.dates import add_months, first_installment_date
from eir_projection.engine.differencer import build_income_schedule
from eir_projection.engine.installment import installment_amount, periodic_rate
from eir_projection.engine.pipeline import (
    build_schedules,
    project_loan,
    run_projection,
    validate_loan_case,
)
from eir_projection.engine.solver import (
    build_effective_schedule,
    goal_seek_rate,
    terminal_balance,
)
from eir_projection.engine.splitter import split_monthly

__all__ = [
    "add_months",
    "build_contractual_schedule",
    "build_effective_schedule",
    "build_income_schedule",
    "build_schedules",
    "first_installment_date",
    "goal_seek_rate",
    "installment_amount",
    "periodic_rate",
    "project_loan",
    "run_projection",
    "split_monthly",
    "terminal_balance",
    "validate_loan_case",
]
