# src/iswave_core/capabilities.py
"""
Defines the collaborator contracts of the sweep using `typing.Protocol`.

The sweep engine never depends on a concrete device simulator, response
analyzer or storage backend. It asks for an object that satisfies one of the
protocols below, which keeps the control logic testable with small scripted
doubles and lets callers plug in any numerical backend.

Key elements:
- ISimulator: integrates the device under a sinusoidal bias for one frequency.
- IResponseAnalyzer: extracts bias, amplitude and phase from an oscillating solution.
- IStateSplitter: cuts a symmetric open-circuit device in half and reports its Vdc.
- ISolutionSink / IResultSink: receivers for named intermediate solutions and results.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, Tuple, runtime_checkable

from .base_enums import BoundaryCondition
from .data_structures import DeviceState, OscillatingSolution, ResponseAnalysis, StartPoint

if TYPE_CHECKING:
    from .simulation.results import ImpedanceSweepResult

logger = logging.getLogger(__name__)


@runtime_checkable
class ISimulator(Protocol):
    """
    Integrates the device equations under V(t) = Vdc + delta_v * sin(2*pi*f*t).

    CONTRACT:
    1.  The simulator must not mutate `start`. It returns a new solution.
    2.  When `start` is an `OscillatingSolution`, the run continues from its
        final state.
    3.  Numerical failures are raised, not encoded in the returned solution.
    """

    def simulate(
        self,
        start: StartPoint,
        bc: BoundaryCondition,
        delta_v: float,
        frequency: float,
        periods: int,
        tpoints_per_period: int,
        use_last_point_as_start: bool,
        minimal_mode: bool,
        rel_tol: float,
    ) -> OscillatingSolution:
        ...


@runtime_checkable
class IResponseAnalyzer(Protocol):
    """
    Extracts (bias, amplitude, phase) for the total and the ionic-drift current.

    `demodulate=True` asks for the fast demodulation estimate; `False` asks for
    the slower least-squares fit. `minimal_mode=True` means no plotting or
    other side output.
    """

    def analyze(
        self,
        solution: OscillatingSolution,
        minimal_mode: bool,
        demodulate: bool,
    ) -> ResponseAnalysis:
        ...


@runtime_checkable
class IStateSplitter(Protocol):
    """Splits an open-circuit symmetric device into a half cell and its DC bias."""

    def split(self, state: DeviceState, bc: BoundaryCondition) -> Tuple[DeviceState, float]:
        ...


@runtime_checkable
class ISolutionSink(Protocol):
    """Receives each oscillating solution under a derived, identifier-safe name."""

    def on_solution_produced(self, name: str, solution: OscillatingSolution) -> None:
        ...


@runtime_checkable
class IResultSink(Protocol):
    """Receives the final sweep result under a derived, identifier-safe name."""

    def on_result_produced(self, name: str, result: "ImpedanceSweepResult") -> None:
        ...
