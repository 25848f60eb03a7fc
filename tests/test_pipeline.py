"""Tests for the single-loan projection pipeline."""

import json
import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from eir_projection.config import ProjectionConfig, SolverConfig
from eir_projection.engine.pipeline import (
    build_schedules,
    project_loan,
    run_projection,
    total_fee_effect,
    validate_loan_case,
)
from eir_projection.exceptions import InvalidInputError
from eir_projection.logging import JsonFormatter
from eir_projection.models import LoanCase, RepaymentFrequency


class TestValidateLoanCase:
    """Tests for validate_loan_case."""

    def test_valid_case_passes(self, sample_case: LoanCase) -> None:
        """Test a well-formed loan is returned unchanged."""
        assert validate_loan_case(sample_case) is sample_case

    @pytest.mark.parametrize(
        "changes, message",
        [
            ({"amount_financed": Decimal("0")}, "amount financed"),
            ({"amount_financed": Decimal("-5")}, "amount financed"),
            ({"tenure_months": 0}, "tenure"),
            ({"amort_irr": Decimal("-1")}, "amort IRR"),
            ({"upfront_income": Decimal("-10")}, "upfront_income"),
            ({"upfront_expense": Decimal("-10")}, "upfront_expense"),
            ({"advance_emi": Decimal("100000")}, "advance EMI"),
            ({"upfront_income": Decimal("101000")}, "revised loan value"),
        ],
    )
    def test_rejects_degenerate_loans(
        self, sample_case: LoanCase, changes: dict, message: str
    ) -> None:
        """Test degenerate values raise naming the agreement."""
        with pytest.raises(InvalidInputError, match=message) as exc_info:
            validate_loan_case(replace(sample_case, **changes))

        assert exc_info.value.agreement_id == "AGR001"
        assert "AGR001" in str(exc_info.value)

    @pytest.mark.parametrize(
        "field",
        ["amount_financed", "amort_irr", "upfront_income", "upfront_expense", "advance_emi"],
    )
    @pytest.mark.parametrize("value", [Decimal("1e400"), Decimal("NaN"), Decimal("-Infinity")])
    def test_rejects_non_finite_amounts(
        self, sample_case: LoanCase, field: str, value: Decimal
    ) -> None:
        """Test amounts that do not survive float arithmetic are rejected."""
        with pytest.raises(InvalidInputError, match="not a finite number") as exc_info:
            validate_loan_case(replace(sample_case, **{field: value}))

        assert exc_info.value.agreement_id == "AGR001"

    def test_rejects_zero_installments(self, sample_case: LoanCase) -> None:
        """Test a tenure too short for its frequency is rejected."""
        case = replace(
            sample_case,
            tenure_months=2,
            repayment_frequency=RepaymentFrequency.HALFYEARLY,
        )

        with pytest.raises(InvalidInputError, match="halfyearly installments"):
            validate_loan_case(case)

    def test_rejects_missing_date(self, sample_case: LoanCase) -> None:
        """Test a loan without a disbursement date is rejected."""
        with pytest.raises(InvalidInputError, match="disbursement date"):
            validate_loan_case(replace(sample_case, disbursement_date=None))


class TestBuildSchedules:
    """Tests for build_schedules."""

    def test_tables_align(self, sample_case: LoanCase) -> None:
        """Test Steps A, B and C share row structure."""
        schedules = build_schedules(sample_case)

        assert len(schedules.step_a) == len(schedules.step_b) == len(schedules.step_c) == 38
        assert len(schedules.step_d) == 37
        assert schedules.goal_seek.converged

    def test_installment_dates(self, sample_case: LoanCase) -> None:
        """Test first and last installment dates."""
        schedules = build_schedules(sample_case)

        assert schedules.first_installment_date == date(2025, 2, 3)
        assert schedules.last_installment_date == date(2028, 1, 3)

    def test_invalid_case_raises(self, sample_case: LoanCase) -> None:
        """Test validation runs before scheduling."""
        with pytest.raises(InvalidInputError):
            build_schedules(replace(sample_case, tenure_months=-1))


class TestProjectLoan:
    """Tests for project_loan."""

    def test_record_per_month(self, sample_case: LoanCase) -> None:
        """Test one record per calendar month with loan attributes."""
        records = project_loan(sample_case)

        assert len(records) == 37
        first = records[0]
        assert first.agreement_id == "AGR001"
        assert first.number_of_installments == 36
        assert first.first_installment_date == date(2025, 2, 3)
        assert first.last_installment_date == date(2028, 1, 3)
        assert first.amount_financed == Decimal("100000")
        assert first.month == "Jan-25"
        assert first.step_c_eir_income is None
        assert records[1].step_c_eir_income is not None

    def test_values_rounded(self, sample_case: LoanCase) -> None:
        """Test reported amounts are rounded to four places."""
        for record in project_loan(sample_case):
            assert record.eir_income == round(record.eir_income, 4)

    def test_custom_rounding(self, sample_case: LoanCase) -> None:
        """Test the configured number of decimal places."""
        config = ProjectionConfig()
        config.output.decimal_places = 2

        for record in project_loan(sample_case, config):
            assert record.eir_income == round(record.eir_income, 2)

    def test_income_totals_fee_effect(self, sample_case: LoanCase) -> None:
        """Test reported income adds up to the net fee effect."""
        total = sum(record.eir_income for record in project_loan(sample_case))

        assert total == pytest.approx(float(total_fee_effect(sample_case)), abs=1e-2)

    def test_net_expense_gives_negative_income(self, sample_case: LoanCase) -> None:
        """Test net upfront expense is recognized as negative income."""
        case = replace(sample_case, upfront_income=Decimal("0"), upfront_expense=Decimal("1500"))
        records = project_loan(case)

        assert sum(record.eir_income for record in records) == pytest.approx(-1500.0, abs=1e-2)

    def test_deterministic(self, sample_case: LoanCase) -> None:
        """Test repeated runs give identical output."""
        assert project_loan(sample_case) == project_loan(sample_case)


class TestRunProjection:
    """Tests for run_projection."""

    def test_success(self, sample_case: LoanCase) -> None:
        """Test a valid loan yields records and no error."""
        result = run_projection(sample_case)

        assert result.ok
        assert result.agreement_id == "AGR001"
        assert len(result.records) == 37

    def test_failure_is_captured(self, sample_case: LoanCase) -> None:
        """Test errors become a failed result instead of raising."""
        result = run_projection(replace(sample_case, amount_financed=Decimal("0")))

        assert not result.ok
        assert result.records == []
        assert "AGR001" in result.error

    def test_unconverged_solver_still_projects(self, sample_case: LoanCase) -> None:
        """Test a narrow bracket logs but still produces records."""
        config = ProjectionConfig(solver=SolverConfig(low=0.20, high=0.30))

        result = run_projection(sample_case, config)

        assert result.ok
        assert len(result.records) == 37

    def test_failure_logged_with_agreement(
        self, sample_case: LoanCase, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test failure warnings carry the agreement for structured logs."""
        with caplog.at_level(logging.WARNING, logger="eir_projection"):
            result = run_projection(replace(sample_case, amount_financed=Decimal("1e400")))

        assert not result.ok
        record = caplog.records[-1]
        assert record.agreement_id == "AGR001"
        assert json.loads(JsonFormatter().format(record))["agreement_id"] == "AGR001"

    def test_very_long_tenure_is_truncated(self, sample_case: LoanCase) -> None:
        """Test an absurd tenure is capped instead of overflowing."""
        result = run_projection(replace(sample_case, tenure_months=10**6))

        assert result.ok
        assert result.records
