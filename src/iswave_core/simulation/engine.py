# src/iswave_core/simulation/engine.py
"""
Defines the `SweepEngine`, the service that walks the (intensity, frequency)
grid of an impedance spectroscopy run.

The engine holds no state of its own between runs. It operates on a
`SweepContext` (the "what") and delegates every single-frequency decision to
the `ValidityController` (the "how" of one cell).
"""
import logging
import math
import warnings
from typing import List, Tuple

import numpy as np

from ..data_structures import DeviceState, IntensityEntry, StartPoint
from ..sinks import solution_name
from .context import SweepContext
from .exceptions import PhaseOutOfRangeWarning, StateNormalizationError
from .ladder import CellOutcome, LadderStage, ValidityController
from .planner import allocate_sweep_matrices
from .results import ImpedanceSweepResult, PhaseDiagnostic, aggregate_results

logger = logging.getLogger(__name__)


class SweepEngine:
    """
    Orchestrates the sweep: one row per intensity entry, one column per frequency.
    Cells are computed strictly in order.
    """
    def __init__(self, context: SweepContext):
        self.context: SweepContext = context
        self.freq_array_hz: np.ndarray = context.freq_array_hz
        self.controller = ValidityController(
            simulator=context.simulator,
            analyzer=context.analyzer,
            settings=context.settings,
            bc=context.bc,
            delta_v=context.delta_v,
            sequential=context.sequential,
            minimal_mode=not context.do_graphics,
        )
        logger.debug(f"SweepEngine initialized for {len(context.entries)} entries x {len(self.freq_array_hz)} frequencies.")

    def execute_sweep(self) -> ImpedanceSweepResult:
        """Runs every cell and returns the aggregated result."""
        entries = self.context.entries
        num_freqs = len(self.freq_array_hz)
        matrices = allocate_sweep_matrices(len(entries), num_freqs)
        simulations = np.zeros((len(entries), num_freqs), dtype=int)
        stages: List[List[LadderStage]] = []
        diagnostics: List[PhaseDiagnostic] = []
        vdc_array = np.zeros(len(entries), dtype=float)
        intensity_array = np.zeros(len(entries), dtype=float)

        logger.info("Doing the impedance spectroscopy at various light intensities.")
        for i, entry in enumerate(entries):
            intensity_array[i] = entry.light_intensity
            start_state, vdc_array[i] = self.prepare_start_state(entry)
            logger.info(
                f"Entry {i + 1}/{len(entries)} '{entry.name}': intensity {entry.light_intensity:g}, "
                f"Vdc {vdc_array[i]:.4g} V."
            )

            row_stages: List[LadderStage] = []
            current_start: StartPoint = start_state
            for j, freq_hz in enumerate(self.freq_array_hz):
                start = current_start if self.context.sequential else start_state
                outcome = self.controller.resolve(start, float(freq_hz))
                self._record(matrices, i, j, outcome)
                simulations[i, j] = outcome.simulations
                row_stages.append(outcome.stage)

                if not outcome.phase_valid:
                    diagnostics.append(self._report_invalid_phase(i, entry, float(freq_hz), outcome))

                if self.context.solution_sink is not None:
                    self.context.solution_sink.on_solution_produced(
                        solution_name(entry.name, float(freq_hz)), outcome.solution
                    )

                if self.context.sequential:
                    current_start = outcome.solution
            stages.append(row_stages)

        return aggregate_results(
            sol_name=entries[0].name,
            vdc=vdc_array,
            intensity=intensity_array,
            freq_array=self.freq_array_hz,
            matrices=matrices,
            stages=stages,
            simulations=simulations,
            settings=self.context.settings,
            bc=self.context.bc,
            delta_v=self.context.delta_v,
            phase_diagnostics=diagnostics,
        )

    def prepare_start_state(self, entry: IntensityEntry) -> Tuple[DeviceState, float]:
        """
        Turns an entry into the asymmetric half-cell the simulator starts from,
        together with its DC bias.

        Open-circuit (symmetric) states are split by the configured splitter,
        which also reports Vdc. Other states are used as they are, with Vdc
        taken from the quasi-Fermi levels at the contacts. In frozen-ion mode
        the ionic mobility of the resulting state is set to zero.
        """
        state = entry.state
        if state.parameters.open_circuit:
            if self.context.splitter is None:
                raise StateNormalizationError(
                    entry_name=entry.name,
                    details="The device state is at open circuit but no state splitter was provided.",
                )
            half_state, vdc = self.context.splitter.split(state, self.context.bc)
        else:
            half_state, vdc = state, state.boundary_vdc

        if self.context.frozen_ions:
            half_state = half_state.with_parameters(ion_mobility=0.0)
        return half_state, float(vdc)

    @staticmethod
    def _record(matrices, i: int, j: int, outcome: CellOutcome) -> None:
        total = outcome.analysis.total
        ionic = outcome.analysis.ionic
        matrices["j_bias"][i, j] = total.bias
        matrices["j_amp"][i, j] = total.amplitude
        matrices["j_phase"][i, j] = total.phase
        matrices["j_i_bias"][i, j] = ionic.bias
        matrices["j_i_amp"][i, j] = ionic.amplitude
        matrices["j_i_phase"][i, j] = ionic.phase
        matrices["tmax"][i, j] = outcome.solution.tmax

    @staticmethod
    def _report_invalid_phase(i: int, entry: IntensityEntry, freq_hz: float, outcome: CellOutcome) -> PhaseDiagnostic:
        message = (
            f"Entry '{entry.name}', Freq: {freq_hz:.4g} Hz; phase is still "
            f"{math.degrees(outcome.phase):.4g} degrees after stage '{outcome.stage}'. Recording it as is."
        )
        logger.warning(message)
        warnings.warn(message, PhaseOutOfRangeWarning, stacklevel=3)
        return PhaseDiagnostic(
            entry_index=i,
            entry_name=entry.name,
            frequency=freq_hz,
            phase=outcome.phase,
            stage=outcome.stage,
        )
