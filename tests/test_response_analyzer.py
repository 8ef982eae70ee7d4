# tests/test_response_analyzer.py
import math

import numpy as np
import pytest

from iswave_core import (
    BoundaryCondition,
    ExtractionMethod,
    OscillatingSolution,
    ResponseAnalyzer,
    ResponseFitError,
)
from iswave_core.analysis.response import demodulate_response, normalize_fit


def _solution(state_factory, amplitude, phase, bias=1e-3, frequency=1e3, periods=20, tpp=40,
              transient=0.0, ionic_ratio=0.2):
    time = np.linspace(0.0, periods / frequency, 1 + periods * tpp)
    omega = 2 * math.pi * frequency
    steady = amplitude * np.sin(omega * time + phase)
    # A decaying start-up transient that is gone by the second half of the run.
    decay = transient * np.exp(-3 * time * frequency)
    return OscillatingSolution(
        time=time,
        applied_voltage=1e-3 * np.sin(omega * time),
        current=bias + steady + decay,
        ionic_current=ionic_ratio * steady,
        final_state=state_factory(),
        frequency=frequency,
        delta_v=1e-3,
        bc=BoundaryCondition.SELECTIVE,
        periods=periods,
        tpoints_per_period=tpp,
        rel_tol=1e-6,
        tmax=periods / frequency,
    )


@pytest.mark.parametrize("phase", [0.05, 0.6, 1.2, 1.5])
def test_demodulation_recovers_amplitude_and_phase(state_factory, phase):
    solution = _solution(state_factory, amplitude=-2e-4, phase=phase)
    analysis = ResponseAnalyzer().analyze(solution, minimal_mode=True, demodulate=True)

    assert analysis.method is ExtractionMethod.DEMODULATION
    assert analysis.total.amplitude == pytest.approx(-2e-4, rel=1e-9)
    assert analysis.total.phase == pytest.approx(phase, abs=1e-9)
    assert analysis.total.bias == pytest.approx(1e-3, rel=1e-9)
    assert analysis.ionic.amplitude == pytest.approx(-4e-5, rel=1e-9)
    assert analysis.ionic.phase == pytest.approx(phase, abs=1e-9)


def test_demodulation_folds_phases_just_above_half_pi(state_factory):
    solution = _solution(state_factory, amplitude=-2e-4, phase=math.pi / 2 + 0.05)
    analysis = ResponseAnalyzer().analyze(solution, minimal_mode=True, demodulate=True)
    assert analysis.total.phase == pytest.approx(-math.pi / 2 + 0.05, abs=1e-9)


def test_fitting_keeps_phases_above_half_pi(state_factory):
    solution = _solution(state_factory, amplitude=-2e-4, phase=math.pi / 2 + 0.05)
    analysis = ResponseAnalyzer().analyze(solution, minimal_mode=True, demodulate=False)

    assert analysis.method is ExtractionMethod.FIT
    assert analysis.total.amplitude == pytest.approx(-2e-4, rel=1e-6)
    assert analysis.total.phase == pytest.approx(math.pi / 2 + 0.05, abs=1e-6)
    assert analysis.total.bias == pytest.approx(1e-3, rel=1e-6)


def test_start_up_transient_is_excluded(state_factory):
    solution = _solution(state_factory, amplitude=-2e-4, phase=0.7, transient=5e-3)
    analysis = ResponseAnalyzer().analyze(solution, minimal_mode=False, demodulate=True)
    assert analysis.total.amplitude == pytest.approx(-2e-4, rel=1e-4)
    assert analysis.total.phase == pytest.approx(0.7, abs=1e-4)


def test_positive_amplitude_is_normalized_to_negative():
    fit = normalize_fit(bias=0.0, amplitude=3.0, phase=-2.0)
    assert fit.amplitude == -3.0
    assert fit.phase == pytest.approx(math.pi - 2.0)


@pytest.mark.parametrize("raw, wrapped", [
    (0.3, 0.3),
    (math.pi, math.pi),
    (-math.pi, math.pi),
    (3 * math.pi / 2, -math.pi / 2),
    (-5.0, -5.0 + 2 * math.pi),
])
def test_phase_is_wrapped_into_half_open_interval(raw, wrapped):
    assert normalize_fit(0.0, -1.0, raw).phase == pytest.approx(wrapped)


def test_silent_current_has_zero_amplitude():
    time = np.linspace(0.0, 1.0, 401)
    fit = demodulate_response(time, np.zeros_like(time), 2 * math.pi * 10)
    assert fit.amplitude == 0.0
    assert math.isnan(fit.phase)


def test_too_short_solution_raises(state_factory):
    solution = _solution(state_factory, amplitude=-1e-4, phase=0.3, periods=1, tpp=1)
    with pytest.raises(ResponseFitError, match="at least 3"):
        ResponseAnalyzer().analyze(solution, minimal_mode=True, demodulate=True)


def test_invalid_settle_fraction_rejected():
    with pytest.raises(ValueError):
        ResponseAnalyzer(settle_fraction=1.0)
