"""Portfolio runs: project many loans with per-loan error isolation."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Mapping, Sequence

from eir_projection.config import DEFAULT_CONFIG, ProjectionConfig
from eir_projection.engine.pipeline import run_projection
from eir_projection.exceptions import InvalidInputError
from eir_projection.models import LoanCase, ProjectionResult
from eir_projection.sources.parsing import parse_loan_case
from eir_projection.store import ProjectionStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class PortfolioProjection:
    """Run the EIR projection over a batch of loans.

    A loan that fails (unreadable row, invalid values, inconsistent
    schedule) is left out of the output and reported as one
    ``"<agreement>: <message>"`` error; the rest of the batch carries on.

    Loans are independent, so with ``workers > 1`` they are projected on a
    thread pool. Results always come back in input order.
    """

    def __init__(
        self,
        config: ProjectionConfig | None = None,
        *,
        workers: int | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the runner.

        Parameters
        ----------
        config : ProjectionConfig | None
            Projection settings (defaults apply when None).
        workers : int | None
            Thread count; overrides ``config.workers``.
        progress : ProgressCallback | None
            Called with ``(completed, total)`` after every loan.
        """
        self.config = config or DEFAULT_CONFIG
        self.workers = workers if workers is not None else self.config.workers
        self.progress = progress
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._completed = 0

    def cancel(self) -> None:
        """Stop starting new loans. Finished results are kept."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(self, cases: Sequence[LoanCase]) -> ProjectionStore:
        """Project already-normalized loan cases."""
        return self._run(list(cases))

    def run_rows(self, rows: Sequence[Mapping[str, Any]]) -> ProjectionStore:
        """Parse raw rows and project them.

        Rows that cannot be parsed count as failed loans.
        """
        items: list[LoanCase | ProjectionResult] = []
        for index, row in enumerate(rows):
            try:
                items.append(
                    parse_loan_case(row, index, self.config.default_product_type)
                )
            except InvalidInputError as e:
                agreement = e.agreement_id or f"LOAN_{index + 1}"
                logger.warning(
                    "Skipping row %d: %s", index + 1, e, extra={"agreement_id": agreement}
                )
                items.append(ProjectionResult(agreement_id=agreement, error=str(e)))
        return self._run(items)

    def _run(self, items: list[LoanCase | ProjectionResult]) -> ProjectionStore:
        total = len(items)
        self._completed = 0
        store = ProjectionStore()

        logger.info("Projecting %d loans with %d worker(s)", total, self.workers)
        t0 = time.perf_counter()

        if self.workers > 1 and total > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                futures = [executor.submit(self._project, item, total) for item in items]
                outcomes = [future.result() for future in futures]
        else:
            outcomes = [self._project(item, total) for item in items]

        for outcome in outcomes:
            if outcome is not None:
                store.add_result(outcome)

        summary = store.summary()
        logger.info(
            "Projected %d/%d loans (%d records) in %.2fs",
            summary["succeeded"],
            total,
            summary["records"],
            time.perf_counter() - t0,
        )
        if self.cancelled:
            logger.warning("Run cancelled after %d of %d loans", summary["loans"], total)
        return store

    def _project(self, item: LoanCase | ProjectionResult, total: int) -> ProjectionResult | None:
        if self.cancelled:
            return None
        if isinstance(item, ProjectionResult):
            result = item
        else:
            result = run_projection(item, self.config)

        with self._lock:
            self._completed += 1
            completed = self._completed
        if self.progress is not None:
            self.progress(completed, total)
        return result


def export(store: ProjectionStore, sink: Any, *, per_loan: bool = False, name: str = "eir_projection") -> None:
    """Write a store's records to a sink.

    With ``per_loan`` each agreement becomes its own batch (one sheet per
    loan in a workbook); otherwise all records go out as a single batch.
    """
    if per_loan:
        for result in store.results:
            sink.write_batch(result.agreement_id, result.records)
    else:
        sink.write_batch(name, store.all_records())
