# src/iswave_core/sinks.py
"""
Receivers for named sweep outputs.

Callers that want every intermediate oscillating solution, or the final
result, under a stable name inject a sink into `run_impedance_sweep` instead
of relying on any shared namespace. The names are valid Python identifiers so
that they can be used directly as attribute or variable names.
"""
import logging
import re
from typing import Dict, Iterator

from .data_structures import OscillatingSolution

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 63
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def make_valid_name(raw: str) -> str:
    """
    Turns an arbitrary string into an identifier: invalid characters become
    underscores, a leading non-letter gets an 'x' prefix, and the result is
    truncated to MAX_NAME_LENGTH characters.
    """
    name = _INVALID_CHARS.sub("_", raw.strip())
    if not name or not name[0].isalpha():
        name = "x" + name
    return name[:MAX_NAME_LENGTH]


def solution_name(entry_name: str, frequency: float) -> str:
    return make_valid_name(f"{entry_name}_Freq_{frequency:.10g}_ISwave")


def result_name(sol_name: str) -> str:
    return make_valid_name(f"ISwave_{sol_name}")


class InMemorySink:
    """
    A dictionary-backed sink implementing both `ISolutionSink` and `IResultSink`.
    Later outputs with the same name replace earlier ones.
    """

    def __init__(self):
        self.solutions: Dict[str, OscillatingSolution] = {}
        self.results: Dict[str, object] = {}

    def on_solution_produced(self, name: str, solution: OscillatingSolution) -> None:
        if name in self.solutions:
            logger.warning(f"Solution name '{name}' produced twice. Overwriting the stored solution.")
        self.solutions[name] = solution

    def on_result_produced(self, name: str, result) -> None:
        self.results[name] = result

    def __contains__(self, name: str) -> bool:
        return name in self.solutions or name in self.results

    def __iter__(self) -> Iterator[str]:
        yield from self.solutions
        yield from self.results

    def __len__(self) -> int:
        return len(self.solutions) + len(self.results)
