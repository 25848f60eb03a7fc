"""EIR income projection for loan portfolios.

Builds, per loan, the contractual amortization schedule, the effective
yield schedule once upfront fees and advance installments are folded in,
the period income difference between the two, and its calendar-month
allocation.
"""

__version__ = "0.1.0"

from eir_projection.exceptions import (
    ConfigurationError,
    EIRProjectionError,
    InvalidInputError,
    ScheduleError,
    SinkError,
    SourceError,
)
from eir_projection.models import (
    LoanCase,
    ProductType,
    ProjectionRecord,
    ProjectionResult,
    RepaymentFrequency,
)
from eir_projection.config import ProjectionConfig
from eir_projection.engine import build_schedules, project_loan, run_projection
from eir_projection.batch import PortfolioProjection

__all__ = [
    "__version__",
    "ConfigurationError",
    "EIRProjectionError",
    "InvalidInputError",
    "LoanCase",
    "PortfolioProjection",
    "ProductType",
    "ProjectionConfig",
    "ProjectionRecord",
    "ProjectionResult",
    "RepaymentFrequency",
    "ScheduleError",
    "SinkError",
    "SourceError",
    "build_schedules",
    "project_loan",
    "run_projection",
]
