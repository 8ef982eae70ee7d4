# src/iswave_core/simulation/exceptions.py
"""
Defines the diagnosable exceptions and warnings of the sweep execution phase.

All exceptions inherit from `DiagnosableError`, so they can be caught
explicitly, caught together under the common base, and are guaranteed to
render a user-facing report via `get_diagnostic_report()`.

Phase validity problems are not exceptions: they are handled inside the
validation ladder and surfaced as `PhaseOutOfRangeWarning`.
"""
from dataclasses import dataclass
from typing import Any

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class InvalidRangeError(DiagnosableError, ValueError):
    """
    Raised for malformed sweep parameters (non-positive frequency bound or
    point count below one). The sweep is never started.
    """
    details: str
    user_input: Any = None

    def __str__(self):
        return f"Invalid sweep range: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Sweep Range",
            details=self.details,
            suggestion="Both frequency bounds must be finite and > 0 Hz, and the number of points must be an integer >= 1.",
            context={'user_input': self.user_input}
        )


@dataclass()
class StateNormalizationError(DiagnosableError):
    """
    Raised when an intensity entry cannot be turned into the asymmetric
    half-cell the simulator expects.
    """
    entry_name: str
    details: str

    def __str__(self):
        return f"Cannot prepare entry '{self.entry_name}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Device State Normalization Error",
            details=self.details,
            suggestion="Provide a state splitter when sweeping open-circuit (symmetric) device states, or pass a half-cell state.",
            context={'entry': self.entry_name}
        )


class PhaseOutOfRangeWarning(UserWarning):
    """
    Emitted when every validation pass failed to bring the measured phase into
    [0, pi/2]. The last available fit is still recorded.
    """
    pass
