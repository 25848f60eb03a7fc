"""Period EIR income from the gap between Steps A and B, Step C."""

from typing import Sequence

from eir_projection.exceptions import ScheduleError
from eir_projection.models import ScheduleRow, StepCRow


def build_income_schedule(
    contractual: Sequence[ScheduleRow],
    effective: Sequence[ScheduleRow],
) -> tuple[StepCRow, ...]:
    """Difference the contractual and effective tables row by row.

    Row 0 carries the net fee/advance effect at disbursement. From row 2 on,
    EIR income is the period decrease of the unamortized gap; row 2 is
    measured against row 0 because the stub row is informational.
    """
    if len(contractual) != len(effective):
        raise ScheduleError(
            f"Schedules differ in length: {len(contractual)} vs {len(effective)}"
        )
    if len(contractual) < 2:
        raise ScheduleError("Schedules must contain disbursement and stub rows")

    rows: list[StepCRow] = []
    for a, b in zip(contractual, effective):
        if a.month == 0:
            unamortized = -(a.emi - b.emi)
            income = None
        else:
            unamortized = a.closing_balance - b.closing_balance
            if a.month == 1:
                income = None
            elif a.month == 2:
                income = rows[0].unamortized - unamortized
            else:
                income = rows[-1].unamortized - unamortized
        rows.append(
            StepCRow(
                month=a.month,
                emi_date=a.emi_date,
                unamortized=unamortized,
                eir_income=income,
                days=a.days,
            )
        )
    return tuple(rows)
