# src/iswave_core/analysis/response.py
"""
Reference implementation of `IResponseAnalyzer`.

The current of an oscillating solution is modelled as
J(t) = bias + amplitude * sin(w*t + phase), with the applied voltage
V(t) = Vdc + deltaV * sin(w*t) sharing the same time origin. Only the last
whole periods of the solution are analysed, so the start-up transient does
not bias the estimate.
"""
import logging
import math
from typing import Tuple

import numpy as np
from scipy.integrate import trapezoid
from scipy.optimize import curve_fit

from ..base_enums import ExtractionMethod
from ..data_structures import FitCoefficients, OscillatingSolution, ResponseAnalysis
from .exceptions import ResponseFitError

logger = logging.getLogger(__name__)


def demodulate_response(time: np.ndarray, current: np.ndarray, omega: float) -> FitCoefficients:
    """
    Lock-in style estimate of bias, amplitude and phase.

    The in-phase and quadrature components are obtained by integrating the
    current against sin(w*t) and cos(w*t) over the window, which must span an
    integer number of periods. The phase comes from arctan, so it is folded
    into (-pi/2, pi/2): a phase just above pi/2 is reported near -pi/2.
    """
    span = time[-1] - time[0]
    in_phase = 2.0 / span * trapezoid(current * np.sin(omega * time), time)
    quadrature = 2.0 / span * trapezoid(current * np.cos(omega * time), time)
    bias = trapezoid(current, time) / span

    amplitude = -math.hypot(in_phase, quadrature)
    with np.errstate(divide="ignore", invalid="ignore"):
        phase = float(np.arctan(np.float64(quadrature) / np.float64(in_phase)))
    return FitCoefficients(bias=float(bias), amplitude=float(amplitude), phase=phase)


def normalize_fit(bias: float, amplitude: float, phase: float) -> FitCoefficients:
    """Forces a non-positive amplitude and wraps the phase into (-pi, pi]."""
    if amplitude > 0:
        amplitude = -amplitude
        phase += math.pi
    phase = math.pi - (math.pi - phase) % (2 * math.pi)
    return FitCoefficients(bias=float(bias), amplitude=float(amplitude), phase=float(phase))


def fit_response(
    time: np.ndarray,
    current: np.ndarray,
    omega: float,
    initial: FitCoefficients,
    maxfev: int = 10000,
) -> FitCoefficients:
    """
    Least-squares fit of a sinusoid with known angular frequency.

    Raises:
        RuntimeError, ValueError: propagated from `scipy.optimize.curve_fit`.
    """
    def model(t, bias, amplitude, phase):
        return bias + amplitude * np.sin(omega * t + phase)

    amplitude_guess = initial.amplitude
    if not np.isfinite(amplitude_guess) or amplitude_guess == 0:
        amplitude_guess = -0.5 * float(np.ptp(current)) or -1.0
    phase_guess = initial.phase if np.isfinite(initial.phase) else 0.0

    popt, _ = curve_fit(
        model, time, current,
        p0=[initial.bias, amplitude_guess, phase_guess],
        maxfev=maxfev,
    )
    return normalize_fit(*popt)


class ResponseAnalyzer:
    """
    Extracts amplitude and phase of the total and ionic-drift current.

    Args:
        settle_fraction: Fraction of the simulated periods discarded as start-up
                         transient. At least one whole period is always kept.
        maxfev: Maximum function evaluations for the least-squares fit.
    """
    def __init__(self, settle_fraction: float = 0.5, maxfev: int = 10000):
        if not 0 <= settle_fraction < 1:
            raise ValueError(f"settle_fraction must be in [0, 1), got {settle_fraction}.")
        self.settle_fraction = settle_fraction
        self.maxfev = maxfev

    def analyze(self, solution: OscillatingSolution, minimal_mode: bool, demodulate: bool) -> ResponseAnalysis:
        omega = 2 * math.pi * solution.frequency
        time, current, ionic_current = self._settled_window(solution)

        total = demodulate_response(time, current, omega)
        ionic = demodulate_response(time, ionic_current, omega)
        method = ExtractionMethod.DEMODULATION
        if not demodulate:
            try:
                total = fit_response(time, current, omega, total, self.maxfev)
                ionic = fit_response(time, ionic_current, omega, ionic, self.maxfev)
            except (RuntimeError, ValueError) as e:
                raise ResponseFitError(frequency=solution.frequency, details=str(e)) from e
            method = ExtractionMethod.FIT

        if not minimal_mode:
            logger.info(
                f"Freq: {solution.frequency:.4g} Hz; {method}: J amplitude {total.amplitude:.4e}, "
                f"phase {math.degrees(total.phase):.4g} deg; ionic amplitude {ionic.amplitude:.4e}, "
                f"phase {math.degrees(ionic.phase):.4g} deg."
            )
        return ResponseAnalysis(total=total, ionic=ionic, method=method)

    def _settled_window(self, solution: OscillatingSolution) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        time = np.asarray(solution.time, dtype=float)
        if time.size < 3:
            raise ResponseFitError(
                frequency=solution.frequency,
                details=f"The solution has {time.size} time points, at least 3 are needed.",
            )
        period = 1.0 / solution.frequency
        total_periods = max(1, int(round((time[-1] - time[0]) / period)))
        kept_periods = max(1, int(round(total_periods * (1 - self.settle_fraction))))
        window_start = time[-1] - kept_periods * period
        # Half a sample of slack so the first sample of the window is not lost to rounding.
        slack = 0.5 * float(np.min(np.diff(time)))
        mask = time >= window_start - slack
        return (
            time[mask],
            np.asarray(solution.current, dtype=float)[mask],
            np.asarray(solution.ionic_current, dtype=float)[mask],
        )
