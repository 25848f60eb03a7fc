"""Row types of the intermediate schedule tables (Steps A to D)."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ScheduleRow:
    """One row of an amortization table (Step A or Step B).

    ``month`` is 0 for the disbursement, 1 for the stub accrual to the end
    of the disbursement month, and 2..N for installment periods.
    """

    month: int
    emi_date: date
    emi: float  # negative at disbursement
    closing_balance: float
    opening_balance: float | None = None
    interest: float = 0.0
    days: int | None = None


@dataclass(frozen=True)
class StepCRow:
    """Unamortized balance gap between Step A and Step B."""

    month: int
    emi_date: date
    unamortized: float
    eir_income: float | None = None
    days: int | None = None


@dataclass(frozen=True)
class StepDRow:
    """Calendar-month allocation of EIR income."""

    month_start: date
    month_label: str
    step_c_eir_income: float | None
    col_a: float
    col_b: float
    col_c: float


@dataclass(frozen=True)
class GoalSeekResult:
    """Outcome of the effective-rate bisection."""

    rate: float
    residual: float
    iterations: int
    converged: bool


@dataclass(frozen=True)
class LoanSchedules:
    """All intermediate tables produced for one loan."""

    step_a: tuple[ScheduleRow, ...]
    step_b: tuple[ScheduleRow, ...]
    step_c: tuple[StepCRow, ...]
    step_d: tuple[StepDRow, ...]
    goal_seek: GoalSeekResult
    first_installment_date: date
    last_installment_date: date
