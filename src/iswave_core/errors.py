# src/iswave_core/errors.py
"""
Error types shared by the whole package.

Errors a user can act on (a bad sweep range, an unreadable run description,
an entry that cannot be prepared) carry their own report. The report names
the entry, file, value or frequency involved and says what to change.
"""
import logging
from typing import Any, Dict, Protocol, abstractmethod
from typing import runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class ISwaveError(Exception):
    """Root of the errors raised by the public sweep functions."""
    pass

class ConfigurationError(ISwaveError):
    """
    A YAML run description was rejected before any simulation ran.
    `str(error)` is the report of the underlying parsing error.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """Anything that can describe its own failure as a report."""
    def get_diagnostic_report(self) -> str:
        ...

class DiagnosableError(Exception, Diagnosable):
    """Base for exceptions that must provide `get_diagnostic_report`."""
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        raise NotImplementedError


# --- Report Formatting ---

_CONTEXT_LABELS = (
    ("entry", "Entry"),
    ("source_file", "Source File"),
    ("user_input", "User Input"),
    ("frequency", "Frequency"),
)
_RULE_WIDTH = 72


def _indented(text: str):
    return [f"  {line}" for line in text.splitlines()]


def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    Builds the multi-line report shown for a diagnosable error.

    Only the context keys listed in `_CONTEXT_LABELS` are shown, in that
    order, and only when their value is not None. `user_input` is quoted so
    that empty strings and whitespace stay visible.
    """
    title = " ISwave Core diagnostic "
    lines = ["", title.center(_RULE_WIDTH, "="), f"{'Error Type:':<16}{error_type}"]
    for key, label in _CONTEXT_LABELS:
        value = context.get(key)
        if value is None:
            continue
        shown = f"'{value}'" if key == "user_input" else value
        lines.append(f"{label + ':':<16}{shown}")

    lines.append("")
    lines.append("Details:")
    lines.extend(_indented(details))
    if suggestion:
        lines.append("")
        lines.append("Suggestion:")
        lines.extend(_indented(suggestion))
    lines.append("=" * _RULE_WIDTH)
    return "\n".join(lines)
