"""Tests for custom exception hierarchy."""

from eir_projection.exceptions import (
    ConfigurationError,
    EIRProjectionError,
    InvalidInputError,
    ScheduleError,
    SinkError,
    SourceError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_base_error_is_exception(self) -> None:
        assert isinstance(EIRProjectionError("test"), Exception)

    def test_invalid_input_is_projection_error(self) -> None:
        assert isinstance(InvalidInputError("test"), EIRProjectionError)

    def test_schedule_error_is_projection_error(self) -> None:
        assert isinstance(ScheduleError("test"), EIRProjectionError)

    def test_configuration_error_is_projection_error(self) -> None:
        assert isinstance(ConfigurationError("test"), EIRProjectionError)

    def test_source_error_is_projection_error(self) -> None:
        assert isinstance(SourceError("test"), EIRProjectionError)

    def test_sink_error_is_projection_error(self) -> None:
        assert isinstance(SinkError("test"), EIRProjectionError)

    def test_invalid_input_carries_agreement(self) -> None:
        err = InvalidInputError("Invalid disbursement date for agreement AGR9", agreement_id="AGR9")
        assert err.agreement_id == "AGR9"
        assert str(err) == "Invalid disbursement date for agreement AGR9"

    def test_invalid_input_agreement_optional(self) -> None:
        assert InvalidInputError("No data found in loans.csv").agreement_id is None
