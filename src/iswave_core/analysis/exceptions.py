# src/iswave_core/analysis/exceptions.py
"""
Defines custom, diagnosable exceptions for the response analysis services.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class ResponseFitError(DiagnosableError):
    """Raised when amplitude and phase cannot be extracted from a solution."""
    frequency: float
    details: str

    def __str__(self):
        return f"Response analysis failed at {self.frequency:.4e} Hz: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Response Analysis Error",
            details=self.details,
            suggestion="Check that the oscillating solution covers whole periods and that its current is finite. A tighter solver tolerance often helps.",
            context={'frequency': f"{self.frequency:.4e} Hz"}
        )
