# tests/conftest.py
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

import numpy as np
import pytest

from iswave_core import (
    BoundaryCondition,
    DeviceParameters,
    DeviceState,
    ExtractionMethod,
    FitCoefficients,
    IntensityEntry,
    OscillatingSolution,
    ResponseAnalysis,
)


def make_state(
    efn_right: float = 0.9,
    efp_left: float = 0.1,
    light_intensity: float = 0.0,
    open_circuit: bool = False,
    ion_mobility: float = 1e-10,
    num_points: int = 5,
) -> DeviceState:
    """A small device state whose boundary Vdc is efn_right - efp_left."""
    efn = np.linspace(0.0, efn_right, num_points)
    efp = np.linspace(efp_left, -0.5, num_points)
    params = DeviceParameters(light_intensity=light_intensity, open_circuit=open_circuit, ion_mobility=ion_mobility)
    return DeviceState(efn=efn, efp=efp, parameters=params)


def _time_grid(frequency: float, periods: int, tpoints_per_period: int):
    tmax = periods / frequency
    return np.linspace(0.0, tmax, 1 + periods * tpoints_per_period), tmax


def _state_of(start):
    return start.final_state if isinstance(start, OscillatingSolution) else start


@dataclass
class SimulatorCall:
    start: Any
    bc: BoundaryCondition
    delta_v: float
    frequency: float
    periods: int
    tpoints_per_period: int
    use_last_point_as_start: bool
    minimal_mode: bool
    rel_tol: float
    solution: Optional[OscillatingSolution] = None


class RecordingSimulator:
    """Returns flat solutions and records every call, including the solution it returned."""

    def __init__(self, fail_at_call: Optional[int] = None):
        self.calls: List[SimulatorCall] = []
        self.fail_at_call = fail_at_call

    def simulate(self, start, bc, delta_v, frequency, periods, tpoints_per_period,
                 use_last_point_as_start, minimal_mode, rel_tol):
        call = SimulatorCall(start, bc, delta_v, frequency, periods, tpoints_per_period,
                             use_last_point_as_start, minimal_mode, rel_tol)
        self.calls.append(call)
        if self.fail_at_call is not None and len(self.calls) == self.fail_at_call:
            raise RuntimeError("solver diverged")
        time, tmax = _time_grid(frequency, periods, tpoints_per_period)
        state = _state_of(start)
        call.solution = OscillatingSolution(
            time=time,
            applied_voltage=delta_v * np.sin(2 * math.pi * frequency * time),
            current=np.zeros_like(time),
            ionic_current=np.zeros_like(time),
            final_state=DeviceState(efn=state.efn.copy(), efp=state.efp.copy(), parameters=state.parameters),
            frequency=frequency,
            delta_v=delta_v,
            bc=bc,
            periods=periods,
            tpoints_per_period=tpoints_per_period,
            rel_tol=rel_tol,
            tmax=tmax,
        )
        return call.solution


@dataclass
class AnalyzerCall:
    solution: OscillatingSolution
    minimal_mode: bool
    demodulate: bool


class ScriptedAnalyzer:
    """
    Returns the phases of `script` in order, one per call; the last phase is
    repeated once the script is exhausted. `phase_for` overrides the script
    with a function of (frequency, demodulate).
    """

    def __init__(self, script: Sequence[float] = (0.5,),
                 phase_for: Optional[Callable[[float, bool], float]] = None,
                 amplitude: float = -1e-3):
        self.script = list(script)
        self.phase_for = phase_for
        self.amplitude = amplitude
        self.calls: List[AnalyzerCall] = []

    def analyze(self, solution, minimal_mode, demodulate):
        self.calls.append(AnalyzerCall(solution, minimal_mode, demodulate))
        if self.phase_for is not None:
            phase = self.phase_for(solution.frequency, demodulate)
        else:
            phase = self.script[min(len(self.calls), len(self.script)) - 1]
        method = ExtractionMethod.DEMODULATION if demodulate else ExtractionMethod.FIT
        return ResponseAnalysis(
            total=FitCoefficients(bias=1e-4, amplitude=self.amplitude, phase=phase),
            ionic=FitCoefficients(bias=2e-5, amplitude=self.amplitude / 10, phase=phase / 2),
            method=method,
        )


class RCSimulator:
    """
    Steady-state response of a lumped device, Rs in series with (Rp || C).

    The current follows the model's sign convention,
    J(t) = bias - (delta_v / |Z|) * sin(w*t - arg Z), so the expected fit is
    amplitude = -delta_v / |Z| and phase = -arg Z. The ionic current is a fixed
    fraction of the oscillating part, scaled by the start state's ion mobility.
    """

    def __init__(self, rs: float = 10.0, rp: float = 1e4, c: float = 1e-8,
                 bias: float = 2e-3, ionic_fraction: float = 0.1):
        self.rs, self.rp, self.c = rs, rp, c
        self.bias = bias
        self.ionic_fraction = ionic_fraction
        self.calls = 0

    def impedance(self, frequency: float) -> complex:
        omega = 2 * math.pi * frequency
        return self.rs + self.rp / (1 + 1j * omega * self.rp * self.c)

    def simulate(self, start, bc, delta_v, frequency, periods, tpoints_per_period,
                 use_last_point_as_start, minimal_mode, rel_tol):
        self.calls += 1
        state = _state_of(start)
        time, tmax = _time_grid(frequency, periods, tpoints_per_period)
        z = self.impedance(frequency)
        omega = 2 * math.pi * frequency
        oscillating = -(delta_v / abs(z)) * np.sin(omega * time - np.angle(z))
        ionic_scale = self.ionic_fraction if state.parameters.ion_mobility > 0 else 0.0
        return OscillatingSolution(
            time=time,
            applied_voltage=delta_v * np.sin(omega * time),
            current=self.bias + oscillating,
            ionic_current=ionic_scale * oscillating,
            final_state=state,
            frequency=frequency,
            delta_v=delta_v,
            bc=bc,
            periods=periods,
            tpoints_per_period=tpoints_per_period,
            rel_tol=rel_tol,
            tmax=tmax,
        )


class StubSplitter:
    """Halves an open-circuit state and reports a fixed Vdc."""

    def __init__(self, vdc: float = 0.42):
        self.vdc = vdc
        self.calls = []
        self.half_states = []

    def split(self, state, bc):
        self.calls.append((state, bc))
        half = state.with_parameters(open_circuit=False)
        self.half_states.append(half)
        return half, self.vdc


@pytest.fixture
def state_factory():
    return make_state


@pytest.fixture
def dark_entry():
    return IntensityEntry.from_state(make_state(light_intensity=0.0), "dark")


@pytest.fixture
def recording_simulator():
    return RecordingSimulator()


@pytest.fixture
def rc_simulator():
    return RCSimulator()


@pytest.fixture
def scripted_analyzer_factory():
    return ScriptedAnalyzer


@pytest.fixture
def splitter():
    return StubSplitter()


@pytest.fixture
def simulator_factory():
    return RecordingSimulator


@pytest.fixture
def rc_simulator_factory():
    return RCSimulator
