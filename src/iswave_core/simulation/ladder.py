# src/iswave_core/simulation/ladder.py
"""
The phase-validity ladder for a single (intensity, frequency) cell.

Demodulation is fast but folds phases into (-pi/2, pi/2), so a current that
leads the voltage by nearly 90 degrees can be reported near -90 degrees. The
ladder spends extra compute only when the phase looks suspicious:

    DEMODULATED               simulate at the base tolerance, demodulate
    TOLERANCE_RETRIED         phase within `phase_margin` of 0 or pi/2:
                              tighten tolerance, simulate again, demodulate
    FITTED_FALLBACK           phase outside [0, pi/2]: fit the existing solution
    TOLERANCE_RETRIED_FITTED  still outside: tighten tolerance again,
                              simulate again, fit

Each transition is gated only by the phase predicates below. The ladder never
raises because of a phase; whatever the last stage produced is returned.
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum

from ..base_enums import BoundaryCondition
from ..capabilities import IResponseAnalyzer, ISimulator
from ..constants import MAX_VALID_PHASE_RAD
from ..data_structures import OscillatingSolution, ResponseAnalysis, StartPoint
from .config import SweepSettings

logger = logging.getLogger(__name__)


class LadderStage(Enum):
    """The last stage of the ladder that produced the recorded fit."""
    DEMODULATED = "demodulated"
    TOLERANCE_RETRIED = "tolerance_retried"
    FITTED_FALLBACK = "fitted_fallback"
    TOLERANCE_RETRIED_FITTED = "tolerance_retried_fitted"

    def __str__(self):
        return self.value


def is_phase_near_bounds(phase: float, margin: float) -> bool:
    """True when the phase is within `margin` of 0 or pi/2, or outside them."""
    return phase < margin or phase > MAX_VALID_PHASE_RAD - margin


def is_phase_out_of_range(phase: float) -> bool:
    """True when the phase lies outside [0, pi/2]."""
    return phase < 0 or abs(phase) > MAX_VALID_PHASE_RAD


@dataclass(frozen=True)
class CellOutcome:
    """
    The result of running the ladder for one frequency.

    Attributes:
        analysis: The accepted fit for total and ionic current.
        solution: The oscillating solution the accepted fit was extracted from.
        stage: The last ladder stage that ran.
        rel_tol: The solver tolerance used for `solution`.
        simulations: How many times the simulator was called for this cell.
    """
    analysis: ResponseAnalysis
    solution: OscillatingSolution
    stage: LadderStage
    rel_tol: float
    simulations: int

    @property
    def phase(self) -> float:
        return self.analysis.total.phase

    @property
    def phase_valid(self) -> bool:
        # False for NaN, which the ladder predicates let through.
        return 0 <= self.phase <= MAX_VALID_PHASE_RAD


class ValidityController:
    """
    Runs the simulate/analyze/validate ladder for one frequency at a time.

    The controller holds the per-run configuration only; the start point is
    passed to every `resolve` call, so the same controller serves both the
    sequential and the fixed-start sweep.
    """
    def __init__(
        self,
        simulator: ISimulator,
        analyzer: IResponseAnalyzer,
        settings: SweepSettings,
        bc: BoundaryCondition,
        delta_v: float,
        sequential: bool,
        minimal_mode: bool = True,
        prefer_demodulation: bool = True,
    ):
        self.simulator = simulator
        self.analyzer = analyzer
        self.settings = settings
        self.bc = bc
        self.delta_v = delta_v
        self.sequential = sequential
        self.minimal_mode = minimal_mode
        self.prefer_demodulation = prefer_demodulation

    def resolve(self, start: StartPoint, frequency: float) -> CellOutcome:
        """
        Simulates and analyzes one frequency, escalating through the ladder
        while the measured phase stays suspicious.

        Args:
            start: The state the first simulation starts from. In sequential
                   mode this is also the start of every retry.
            frequency: The oscillation frequency (Hz).

        Returns:
            The accepted `CellOutcome`.
        """
        rel_tol = self.settings.base_rel_tol
        solution = self._simulate(start, frequency, rel_tol)
        analysis = self._analyze(solution, demodulate=self.prefer_demodulation)
        stage = LadderStage.DEMODULATED
        simulations = 1

        if is_phase_near_bounds(analysis.total.phase, self.settings.phase_margin):
            logger.info(
                f"Freq: {frequency:.4g} Hz; phase is {math.degrees(analysis.total.phase):.4g} degrees, "
                f"extremely small, close to pi/2 or out of the 0-pi/2 range. Increasing solver accuracy and simulating again."
            )
            rel_tol /= self.settings.tolerance_factor
            solution = self._simulate(self._retry_start(start, solution), frequency, rel_tol)
            analysis = self._analyze(solution, demodulate=self.prefer_demodulation)
            stage = LadderStage.TOLERANCE_RETRIED
            simulations += 1

        if is_phase_out_of_range(analysis.total.phase):
            logger.info(
                f"Freq: {frequency:.4g} Hz; phase from {analysis.method} is odd: "
                f"{math.degrees(analysis.total.phase):.4g} degrees. Confirming by fitting."
            )
            analysis = self._analyze(solution, demodulate=False)
            stage = LadderStage.FITTED_FALLBACK
            logger.info(f"Freq: {frequency:.4g} Hz; phase from fitting is {math.degrees(analysis.total.phase):.4g} degrees.")

        if is_phase_out_of_range(analysis.total.phase):
            logger.warning(
                f"Freq: {frequency:.4g} Hz; fitted phase is {math.degrees(analysis.total.phase):.4g} degrees, "
                f"out of the 0-pi/2 range. Increasing solver accuracy and simulating again."
            )
            rel_tol /= self.settings.tolerance_factor
            solution = self._simulate(self._retry_start(start, solution), frequency, rel_tol)
            analysis = self._analyze(solution, demodulate=False)
            stage = LadderStage.TOLERANCE_RETRIED_FITTED
            simulations += 1

        logger.debug(
            f"Freq: {frequency:.4g} Hz accepted at stage '{stage}' with phase "
            f"{math.degrees(analysis.total.phase):.4g} degrees (rel_tol={rel_tol:.1e}, {simulations} simulation(s))."
        )
        return CellOutcome(
            analysis=analysis,
            solution=solution,
            stage=stage,
            rel_tol=rel_tol,
            simulations=simulations,
        )

    def _retry_start(self, start: StartPoint, latest: OscillatingSolution) -> StartPoint:
        # Sequential sweeps always restart from the pre-oscillation state.
        return start if self.sequential else latest

    def _simulate(self, start: StartPoint, frequency: float, rel_tol: float) -> OscillatingSolution:
        return self.simulator.simulate(
            start,
            self.bc,
            self.delta_v,
            frequency,
            self.settings.periods,
            self.settings.tpoints_per_period,
            not self.sequential,
            False,
            rel_tol,
        )

    def _analyze(self, solution: OscillatingSolution, demodulate: bool) -> ResponseAnalysis:
        return self.analyzer.analyze(solution, self.minimal_mode, demodulate)
