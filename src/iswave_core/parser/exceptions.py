# src/iswave_core/parser/exceptions.py
"""
Defines custom, diagnosable exceptions for loading run descriptions.

`ParsingError` covers file-level and value-level problems (missing file,
invalid YAML, a quantity with the wrong unit); `SchemaValidationError` covers
structural problems reported by the Cerberus schema.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """Common base class for all run description loading errors."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the run description file.",
            context={}
        )


@dataclass(frozen=True)
class ParsingError(BaseParsingError):
    """Raised for file-system issues, invalid YAML, or values that cannot be converted."""
    details: str
    file_path: Path

    def __str__(self):
        return f"Parsing error in file '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Run Description Parsing Error",
            details=self.details,
            suggestion="Ensure the file exists, is valid YAML, and that quantities carry compatible units (e.g. '1 MHz', '1 mV').",
            context={'source_file': self.file_path}
        )


@dataclass(frozen=True)
class SchemaValidationError(BaseParsingError):
    """Raised when the YAML is valid but does not match the run description schema."""
    errors: Dict[str, Any]
    file_path: Path

    def _error_lines(self):
        return [f"  - Field '{field}': {messages}" for field, messages in sorted(self.errors.items())]

    def __str__(self):
        return (
            f"Run description schema validation failed for file '{self.file_path}':\n"
            + "\n".join(self._error_lines())
        )

    def get_diagnostic_report(self) -> str:
        details = (
            "The structure of the run description does not conform to the required schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n" + "\n".join(self._error_lines())
        )
        return format_diagnostic_report(
            error_type="Run Description Schema Error",
            details=details,
            suggestion="Correct the listed fields. 'sweep' and 'oscillation' are required; unknown keys are rejected.",
            context={'source_file': self.file_path}
        )
