"""Tests for portfolio runs."""

import logging
from dataclasses import replace
from decimal import Decimal
from pathlib import Path

import pytest
from openpyxl import load_workbook

from eir_projection.batch import PortfolioProjection, export
from eir_projection.config import ProjectionConfig
from eir_projection.models import LoanCase, ProductType
from eir_projection.sinks import ExcelWorkbookSink, JsonFileSink


def portfolio(sample_case: LoanCase, tractor_case: LoanCase, halfyearly_case: LoanCase) -> list[LoanCase]:
    broken = replace(sample_case, agreement_id="BAD1", amount_financed=Decimal("0"))
    return [sample_case, broken, tractor_case, halfyearly_case]


class TestPortfolioProjection:
    """Tests for PortfolioProjection."""

    def test_partial_failure(
        self, sample_case: LoanCase, tractor_case: LoanCase, halfyearly_case: LoanCase
    ) -> None:
        """Test one bad loan does not stop the batch."""
        store = PortfolioProjection().run(portfolio(sample_case, tractor_case, halfyearly_case))

        assert [result.agreement_id for result in store.results] == ["AGR001", "AGR002", "AGR003"]
        assert store.failed == ["BAD1"]
        assert len(store.errors) == 1
        assert store.errors[0].startswith("BAD1: Invalid loan BAD1")
        assert store.summary() == {"loans": 4, "succeeded": 3, "failed": 1, "records": 37 + 14 + 7}

    def test_workers_preserve_order(
        self, sample_case: LoanCase, tractor_case: LoanCase, halfyearly_case: LoanCase
    ) -> None:
        """Test threaded runs match sequential ones."""
        cases = portfolio(sample_case, tractor_case, halfyearly_case) * 3

        sequential = PortfolioProjection(workers=1).run(cases)
        threaded = PortfolioProjection(workers=4).run(cases)

        assert threaded.results == sequential.results
        assert threaded.errors == sequential.errors

    def test_workers_from_config(self) -> None:
        """Test the worker count defaults to the config."""
        assert PortfolioProjection(ProjectionConfig(workers=3)).workers == 3
        assert PortfolioProjection(ProjectionConfig(workers=3), workers=2).workers == 2

    def test_progress(self, sample_case: LoanCase, tractor_case: LoanCase) -> None:
        """Test progress is reported after every loan."""
        calls: list[tuple[int, int]] = []

        PortfolioProjection(progress=lambda done, total: calls.append((done, total))).run(
            [sample_case, tractor_case]
        )

        assert calls == [(1, 2), (2, 2)]

    def test_cancel(self, sample_case: LoanCase, tractor_case: LoanCase) -> None:
        """Test cancelling keeps finished loans and skips the rest."""
        runner = PortfolioProjection(progress=lambda done, total: runner.cancel())

        store = runner.run([sample_case, tractor_case, sample_case])

        assert runner.cancelled
        assert store.total == 1
        assert [result.agreement_id for result in store.results] == ["AGR001"]

    def test_run_rows(self) -> None:
        """Test raw rows are parsed, with bad rows reported."""
        rows = [
            {
                "Agreement Number": "R1",
                "Amount Financed": "100000",
                "Tenure": "24",
                "Disbursement Date": "10/04/2025",
                "Amort IRR": "13",
                "Upfront Income": "1500",
            },
            {
                "Agreement Number": "R2",
                "Amount Financed": "80000",
                "Tenure": "12",
                "Disbursement Date": "someday",
                "Amort IRR": "13",
            },
            {
                "Amount Financed": "80000",
                "Tenure": "12",
                "Disbursement Date": "2025-05-02",
                "Amort IRR": "13",
                "Repayment Frequency": "Weekly",
            },
        ]

        store = PortfolioProjection().run_rows(rows)

        assert [result.agreement_id for result in store.results] == ["R1"]
        assert store.failed == ["R2", "LOAN_3"]
        assert store.errors[0] == "R2: Invalid disbursement date for agreement R2"
        assert "Unknown repayment frequency" in store.errors[1]

    def test_run_rows_overflowing_amount(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test an amount too large for float arithmetic fails that loan."""
        row = {
            "Agreement Number": "BIG",
            "Amount Financed": "1e400",
            "Tenure": 12,
            "Disbursement Date": "2025-01-15",
            "Amort IRR": 12,
        }

        with caplog.at_level(logging.WARNING, logger="eir_projection"):
            store = PortfolioProjection().run_rows([row])

        assert store.results == []
        assert store.errors == ["BIG: Missing or non-numeric amount financed for agreement BIG"]
        assert caplog.records[0].agreement_id == "BIG"

    def test_run_rows_default_product(self) -> None:
        """Test the configured default product applies to rows without one."""
        config = ProjectionConfig(default_product_type=ProductType.TRACTOR)
        row = {
            "Agreement Number": "T1",
            "Amount Financed": "300000",
            "Tenure": "36",
            "Disbursement Date": "10/04/2025",
            "Amort IRR": "12",
            "Repayment Frequency": "Quarterly",
        }

        store = PortfolioProjection(config).run_rows([row])
        record = store.results[0].records[0]

        assert record.product_type == ProductType.TRACTOR
        assert record.first_installment_date.day == 5


class TestExport:
    """Tests for export."""

    def test_per_loan_workbook(
        self, sample_case: LoanCase, tractor_case: LoanCase, halfyearly_case: LoanCase, tmp_path: Path
    ) -> None:
        """Test each successful loan becomes a sheet."""
        store = PortfolioProjection().run(portfolio(sample_case, tractor_case, halfyearly_case))
        sink = ExcelWorkbookSink(tmp_path / "projection.xlsx")

        export(store, sink, per_loan=True)
        sink.close()

        assert load_workbook(tmp_path / "projection.xlsx").sheetnames == [
            "All Cases",
            "AGR001",
            "AGR002",
            "AGR003",
        ]

    def test_single_batch(self, sample_case: LoanCase, tmp_path: Path) -> None:
        """Test all records go out under one name."""
        store = PortfolioProjection().run([sample_case])
        sink = JsonFileSink(tmp_path)

        export(store, sink, name="portfolio")

        assert (tmp_path / "portfolio.json").exists()
