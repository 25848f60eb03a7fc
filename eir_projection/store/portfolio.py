"""In-memory store for the results of a portfolio run."""

from dataclasses import dataclass, field

from eir_projection.models import ProjectionRecord, ProjectionResult


@dataclass
class ProjectionStore:
    """Projection results of one batch, kept in input order.

    Agreement ids are not required to be unique; a repeated id simply
    appears twice, as it does in the source file.
    """

    results: list[ProjectionResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    total: int = 0

    def add_result(self, result: ProjectionResult) -> None:
        """Add the outcome of one loan to the store."""
        self.total += 1
        if result.ok:
            self.results.append(result)
        else:
            self.failed.append(result.agreement_id)
            self.errors.append(f"{result.agreement_id}: {result.error}")

    def all_records(self) -> list[ProjectionRecord]:
        """Records of every successful loan, loan by loan."""
        return [record for result in self.results for record in result.records]

    @property
    def succeeded(self) -> int:
        return len(self.results)

    def summary(self) -> dict[str, int]:
        """Get counts of loans and output rows."""
        return {
            "loans": self.total,
            "succeeded": self.succeeded,
            "failed": len(self.failed),
            "records": sum(len(result.records) for result in self.results),
        }
