# src/iswave_core/analysis/spectra.py
"""
Closed-form conversion of current amplitude and phase into impedance and
capacitance spectra.

With V(t) = Vdc + deltaV * sin(wt) and J(t) = bias + amplitude * sin(wt + phase),
a positive voltage perturbation gives a negative current amplitude in this
model, so the impedance magnitude is -deltaV / amplitude.
"""
import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImpedanceSpectra:
    """
    Impedance and apparent capacitance matrices, all with the shape of the inputs.

    Attributes:
        impedance_abs: |Z| in ohm (for current densities, ohm * area).
        impedance_re: Resistive component, |Z| * cos(phase).
        impedance_im: Reactive component, |Z| * sin(phase).
        capacitance: sin(phase) / (w * |Z|), the imaginary part of 1 / (w * Z).
    """
    impedance_abs: np.ndarray
    impedance_re: np.ndarray
    impedance_im: np.ndarray
    capacitance: np.ndarray


def derive_impedance_spectra(
    delta_v: float,
    amplitude: np.ndarray,
    phase: np.ndarray,
    frequency: np.ndarray,
) -> ImpedanceSpectra:
    """
    Derives impedance and capacitance from amplitude and phase matrices.

    A zero amplitude is a legitimate, if degenerate, measurement: it yields
    infinite or NaN values for that cell and never raises.

    Args:
        delta_v: Voltage oscillation amplitude (V).
        amplitude: Current amplitude matrix, expected <= 0.
        phase: Current phase matrix (rad).
        frequency: Frequency matrix (Hz), broadcastable against `amplitude`.
    """
    amplitude = np.asarray(amplitude, dtype=float)
    phase = np.asarray(phase, dtype=float)
    frequency = np.asarray(frequency, dtype=float)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        impedance_abs = -delta_v / amplitude
        impedance_re = impedance_abs * np.cos(phase)
        impedance_im = impedance_abs * np.sin(phase)
        pulsatance = 2 * np.pi * frequency
        capacitance = np.sin(phase) / (pulsatance * impedance_abs)

    if not np.all(np.isfinite(impedance_abs)):
        logger.debug("Impedance spectra contain non-finite values (zero current amplitude).")

    return ImpedanceSpectra(
        impedance_abs=impedance_abs,
        impedance_re=impedance_re,
        impedance_im=impedance_im,
        capacitance=capacitance,
    )
