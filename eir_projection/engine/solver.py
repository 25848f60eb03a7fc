"""Goal-seek of the effective rate and the effective-yield schedule, Step B."""

import logging
from typing import Sequence

from eir_projection.config import DEFAULT_CONFIG, ScheduleConfig, SolverConfig
from eir_projection.engine.contractual import opening_rows
from eir_projection.exceptions import ScheduleError
from eir_projection.models import GoalSeekResult, LoanCase, ScheduleRow

logger = logging.getLogger(__name__)


def installment_rows(schedule: Sequence[ScheduleRow]) -> tuple[ScheduleRow, ...]:
    """Installment rows (month 2 onwards) of a schedule."""
    return tuple(row for row in schedule if row.month >= 2)


def terminal_balance(
    principal: float,
    installments: Sequence[ScheduleRow],
    rate: float,
    day_count_basis: int = 365,
) -> float:
    """Closing balance after replaying ``installments`` on ``principal`` at ``rate``.

    Interest accrues simple over each row's day count; the contractual
    cashflow amounts are paid unchanged.
    """
    if not installments:
        raise ScheduleError("Cannot goal-seek a schedule without installments")
    balance = principal
    for row in installments:
        balance += balance * rate * row.days / day_count_basis - row.emi
    return balance


def goal_seek_rate(
    principal: float,
    installments: Sequence[ScheduleRow],
    config: SolverConfig = DEFAULT_CONFIG.solver,
    day_count_basis: int = 365,
) -> GoalSeekResult:
    """Find the nominal annual rate that fully amortizes ``principal``.

    The terminal balance grows with the rate, so bisection moves the upper
    bound down whenever the residual is positive. The search stops once the
    residual is within tolerance, or after ``max_iterations`` using the last
    midpoint.

    Parameters
    ----------
    principal : float
        Revised loan value to amortize.
    installments : Sequence[ScheduleRow]
        Contractual installment rows supplying days and cashflow amounts.
    config : SolverConfig
        Bracket, tolerance and iteration limit.
    day_count_basis : int
        Days per year.

    Returns
    -------
    GoalSeekResult
        Rate found and its residual. ``converged`` is False when the root
        was not inside the bracket.
    """
    low, high = config.low, config.high
    mid = residual = 0.0
    iteration = 0
    for iteration in range(1, config.max_iterations + 1):
        mid = (low + high) / 2
        residual = terminal_balance(principal, installments, mid, day_count_basis)
        if abs(residual) < config.tolerance:
            return GoalSeekResult(rate=mid, residual=residual, iterations=iteration, converged=True)
        if residual > 0:
            high = mid
        else:
            low = mid

    # Both bounds moved: the root was bracketed and precision ran out first
    converged = low > config.low and high < config.high
    return GoalSeekResult(rate=mid, residual=residual, iterations=iteration, converged=converged)


def build_effective_schedule(
    case: LoanCase,
    contractual: Sequence[ScheduleRow],
    solver_config: SolverConfig = DEFAULT_CONFIG.solver,
    schedule_config: ScheduleConfig = DEFAULT_CONFIG.schedule,
) -> tuple[tuple[ScheduleRow, ...], GoalSeekResult]:
    """Build the effective-yield table for a loan.

    Returns the table together with the goal-seek outcome.
    """
    principal = float(case.revised_loan_value)
    installments = installment_rows(contractual)
    basis = schedule_config.day_count_basis

    result = goal_seek_rate(principal, installments, solver_config, basis)
    if not result.converged:
        logger.warning(
            "Effective rate for %s not bracketed by [%.2f, %.2f]: rate=%.6f residual=%.6f",
            case.agreement_id,
            solver_config.low,
            solver_config.high,
            result.rate,
            result.residual,
            extra={"agreement_id": case.agreement_id},
        )
    else:
        logger.debug(
            "Effective rate for %s: %.8f after %d iterations",
            case.agreement_id,
            result.rate,
            result.iterations,
            extra={"agreement_id": case.agreement_id},
        )

    rows = list(opening_rows(principal, result.rate, case, schedule_config))
    opening = principal
    for row in installments:
        interest = opening * result.rate * row.days / basis
        closing = opening + interest - row.emi
        rows.append(
            ScheduleRow(
                month=row.month,
                emi_date=row.emi_date,
                emi=row.emi,
                closing_balance=closing,
                opening_balance=opening,
                interest=interest,
                days=row.days,
            )
        )
        opening = closing

    return tuple(rows), result
