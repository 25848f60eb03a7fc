"""Synthetic data generators."""

from eir_projection.generators.base import BaseGenerator
from eir_projection.generators.loan_case import LoanCaseGenerator, to_input_row

__all__ = ["BaseGenerator", "LoanCaseGenerator", "to_input_row"]
