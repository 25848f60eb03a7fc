"""Custom exception hierarchy for eir-projection."""


class EIRProjectionError(Exception):
    """Base exception for all eir-projection errors."""


class InvalidInputError(EIRProjectionError):
    """Raised when a loan record is malformed or degenerate."""

    def __init__(self, message: str, agreement_id: str | None = None) -> None:
        super().__init__(message)
        self.agreement_id = agreement_id


class ScheduleError(EIRProjectionError):
    """Raised when intermediate schedule tables are inconsistent."""


class ConfigurationError(EIRProjectionError):
    """Raised when configuration is invalid or missing."""


class SourceError(EIRProjectionError):
    """Raised when an input file cannot be read."""


class SinkError(EIRProjectionError):
    """Raised when a sink operation fails."""
