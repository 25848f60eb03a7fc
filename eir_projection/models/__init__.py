"""Domain models for EIR income projection."""

from eir_projection.models.enums import ProductType, RepaymentFrequency
from eir_projection.models.loan import LoanCase
from eir_projection.models.output import ProjectionRecord, ProjectionResult
from eir_projection.models.schedule import (
    GoalSeekResult,
    LoanSchedules,
    ScheduleRow,
    StepCRow,
    StepDRow,
)

__all__ = [
    "GoalSeekResult",
    "LoanCase",
    "LoanSchedules",
    "ProductType",
    "ProjectionRecord",
    "ProjectionResult",
    "RepaymentFrequency",
    "ScheduleRow",
    "StepCRow",
    "StepDRow",
]
