# src/iswave_core/simulation/results.py
"""
Defines the immutable result record of an impedance sweep and the
aggregation step that builds it.

Every matrix has one row per intensity entry (in input order) and one column
per frequency (in sweep order). Arrays are made read-only when the record is
built, so a result cannot be altered after the fact.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

import numpy as np

from ..analysis.spectra import derive_impedance_spectra
from ..base_enums import BoundaryCondition
from .config import SweepSettings
from .ladder import LadderStage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseDiagnostic:
    """A cell whose phase stayed outside [0, pi/2] after the whole validation ladder."""
    entry_index: int
    entry_name: str
    frequency: float
    phase: float
    stage: LadderStage


@dataclass(frozen=True, eq=False)
class ImpedanceSweepResult:
    """
    The final, user-facing result of an impedance spectroscopy sweep.

    Attributes:
        sol_name: Display name of the first intensity entry.
        vdc: DC bias of each entry (V), shape (n_entries,).
        intensity: Light intensity of each entry, shape (n_entries,).
        freq: Frequency matrix (Hz), each row is the frequency list.
        tmax: Simulated time span of each accepted solution (s).
        periods, tpoints: Oscillation periods and total time samples per solution.
        bc: Boundary-condition mode of the run.
        delta_v: Voltage oscillation amplitude (V).
        j_bias, j_amp, j_phase: Total current fit, amplitudes are <= 0.
        j_i_bias, j_i_amp, j_i_phase: Ionic-drift current fit.
        impedance_abs, impedance_re, impedance_im, cap: Spectra from the total current.
        impedance_i_abs, impedance_i_re, impedance_i_im, cap_idrift: Spectra from the ionic current.
        stages: Last validation stage that ran for each cell.
        simulations: Simulator calls spent on each cell.
        phase_diagnostics: Cells whose phase could not be brought into [0, pi/2].
    """
    sol_name: str
    vdc: np.ndarray
    intensity: np.ndarray
    freq: np.ndarray
    tmax: np.ndarray
    periods: int
    tpoints: int
    bc: BoundaryCondition
    delta_v: float
    j_bias: np.ndarray
    j_amp: np.ndarray
    j_phase: np.ndarray
    j_i_bias: np.ndarray
    j_i_amp: np.ndarray
    j_i_phase: np.ndarray
    impedance_abs: np.ndarray
    impedance_re: np.ndarray
    impedance_im: np.ndarray
    cap: np.ndarray
    impedance_i_abs: np.ndarray
    impedance_i_re: np.ndarray
    impedance_i_im: np.ndarray
    cap_idrift: np.ndarray
    stages: Tuple[Tuple[LadderStage, ...], ...]
    simulations: np.ndarray
    phase_diagnostics: Tuple[PhaseDiagnostic, ...] = ()

    def __post_init__(self):
        for value in vars(self).values():
            if isinstance(value, np.ndarray):
                value.setflags(write=False)

    @property
    def sun_index(self) -> np.ndarray:
        """Row indices of the entries measured at exactly 1 sun (possibly empty)."""
        return np.flatnonzero(self.intensity == 1)

    @property
    def frequencies(self) -> np.ndarray:
        """The frequency list of the sweep."""
        return self.freq[0] if self.freq.shape[0] else np.array([], dtype=float)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.j_amp.shape


def aggregate_results(
    sol_name: str,
    vdc: Sequence[float],
    intensity: Sequence[float],
    freq_array: np.ndarray,
    matrices: Dict[str, np.ndarray],
    stages: Sequence[Sequence[LadderStage]],
    simulations: np.ndarray,
    settings: SweepSettings,
    bc: BoundaryCondition,
    delta_v: float,
    phase_diagnostics: Sequence[PhaseDiagnostic] = (),
) -> ImpedanceSweepResult:
    """
    Derives the impedance spectra from the recorded fits and packages
    everything into an `ImpedanceSweepResult`.
    """
    n_entries = len(intensity)
    freq_matrix = np.tile(np.asarray(freq_array, dtype=float), (n_entries, 1))

    total = derive_impedance_spectra(delta_v, matrices["j_amp"], matrices["j_phase"], freq_matrix)
    ionic = derive_impedance_spectra(delta_v, matrices["j_i_amp"], matrices["j_i_phase"], freq_matrix)

    result = ImpedanceSweepResult(
        sol_name=sol_name,
        vdc=np.array(vdc, dtype=float),
        intensity=np.array(intensity, dtype=float),
        freq=freq_matrix,
        tmax=matrices["tmax"].copy(),
        periods=settings.periods,
        tpoints=settings.tpoints,
        bc=bc,
        delta_v=delta_v,
        j_bias=matrices["j_bias"].copy(),
        j_amp=matrices["j_amp"].copy(),
        j_phase=matrices["j_phase"].copy(),
        j_i_bias=matrices["j_i_bias"].copy(),
        j_i_amp=matrices["j_i_amp"].copy(),
        j_i_phase=matrices["j_i_phase"].copy(),
        impedance_abs=total.impedance_abs,
        impedance_re=total.impedance_re,
        impedance_im=total.impedance_im,
        cap=total.capacitance,
        impedance_i_abs=ionic.impedance_abs,
        impedance_i_re=ionic.impedance_re,
        impedance_i_im=ionic.impedance_im,
        cap_idrift=ionic.capacitance,
        stages=tuple(tuple(row) for row in stages),
        simulations=np.array(simulations, dtype=int),
        phase_diagnostics=tuple(phase_diagnostics),
    )
    logger.debug(f"Aggregated sweep result '{sol_name}' with shape {result.shape}.")
    return result
