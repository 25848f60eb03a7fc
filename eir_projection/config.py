"""Configuration management for eir-projection."""

from dataclasses import dataclass, field
from pathlib import Path

from eir_projection.exceptions import ConfigurationError
from eir_projection.models.enums import ProductType


@dataclass
class ScheduleConfig:
    """Contractual schedule and calendar conventions."""

    day_count_basis: int = 365
    max_installments: int = 100
    balance_snap_tolerance: float = 1e-4
    cutoff_day: int = 20  # disbursements on/after this day skip a billing cycle
    emi_day_other: int = 3
    emi_day_tractor: int = 5

    def emi_day(self, product_type: ProductType) -> int:
        """Day of month on which installments fall for a product."""
        if product_type == ProductType.TRACTOR:
            return self.emi_day_tractor
        return self.emi_day_other


@dataclass
class SolverConfig:
    """Goal-seek (bisection) settings for the effective rate."""

    low: float = 0.10
    high: float = 0.60
    tolerance: float = 1e-8
    max_iterations: int = 100


@dataclass
class OutputConfig:
    """Output configuration."""

    output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False
    decimal_places: int = 4
    date_format: str = "%d/%m/%Y"


@dataclass
class ProjectionConfig:
    """Main configuration for eir-projection."""

    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    workers: int = 1
    log_level: str = "INFO"
    default_product_type: ProductType = ProductType.OTHER

    def validate(self) -> "ProjectionConfig":
        """Check internal consistency, returning self.

        Raises
        ------
        ConfigurationError
            If any setting is out of range.
        """
        if self.schedule.day_count_basis <= 0:
            raise ConfigurationError("day_count_basis must be positive")
        if self.schedule.max_installments <= 0:
            raise ConfigurationError("max_installments must be positive")
        if not 1 <= self.schedule.cutoff_day <= 31:
            raise ConfigurationError(f"cutoff_day out of range: {self.schedule.cutoff_day}")
        for day in (self.schedule.emi_day_other, self.schedule.emi_day_tractor):
            if not 1 <= day <= 28:
                raise ConfigurationError(f"EMI day must be within 1..28, got {day}")
        if self.solver.low >= self.solver.high:
            raise ConfigurationError(
                f"Solver bracket is empty: [{self.solver.low}, {self.solver.high}]"
            )
        if self.solver.max_iterations <= 0:
            raise ConfigurationError("max_iterations must be positive")
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        return self

    @classmethod
    def from_env(cls) -> "ProjectionConfig":
        """Create config from environment variables."""
        import os

        schedule = ScheduleConfig(
            max_installments=int(os.getenv("EIR_MAX_INSTALLMENTS", "100")),
            cutoff_day=int(os.getenv("EIR_CUTOFF_DAY", "20")),
        )

        solver = SolverConfig(
            low=float(os.getenv("EIR_SOLVER_LOW", "0.10")),
            high=float(os.getenv("EIR_SOLVER_HIGH", "0.60")),
            tolerance=float(os.getenv("EIR_SOLVER_TOLERANCE", "1e-8")),
            max_iterations=int(os.getenv("EIR_SOLVER_MAX_ITERATIONS", "100")),
        )

        output = OutputConfig(
            output_dir=Path(os.getenv("EIR_OUTPUT_DIR", "output")),
            pretty_json=os.getenv("EIR_PRETTY_JSON", "false").lower() == "true",
        )

        product = os.getenv("EIR_DEFAULT_PRODUCT_TYPE")
        try:
            default_product = ProductType.parse(product) if product else ProductType.OTHER
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        return cls(
            schedule=schedule,
            solver=solver,
            output=output,
            workers=int(os.getenv("EIR_WORKERS", "1")),
            log_level=os.getenv("EIR_LOG_LEVEL", "INFO"),
            default_product_type=default_product,
        ).validate()


DEFAULT_CONFIG = ProjectionConfig()
