# src/iswave_core/data_structures.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Union

import numpy as np

from .base_enums import BoundaryCondition, ExtractionMethod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceParameters:
    """
    The subset of device parameters the sweep reads or changes. Everything else
    the simulator needs travels in `DeviceState.payload`.
    """
    light_intensity: float
    open_circuit: bool = False
    ion_mobility: float = 0.0
    tmax: float = 0.0


@dataclass(frozen=True, eq=False)
class DeviceState:
    """
    An immutable snapshot of a simulated device at one point in time.

    Equality is identity: two snapshots are only "the same" state when they are
    the same object, which is what the sequential sweep relies on.

    Attributes:
        efn: Electron quasi-Fermi level across the mesh (eV).
        efp: Hole quasi-Fermi level across the mesh (eV).
        parameters: The parameters the sweep reads or overrides.
        payload: Opaque simulator-specific data (mesh, carrier and ion profiles, ...).
    """
    efn: np.ndarray
    efp: np.ndarray
    parameters: DeviceParameters
    payload: Any = None

    def with_parameters(self, **changes: Any) -> "DeviceState":
        """Returns a copy of this state with some parameters replaced."""
        return replace(self, parameters=replace(self.parameters, **changes))

    @property
    def boundary_vdc(self) -> float:
        """DC bias across the device, from the quasi-Fermi levels at the two contacts."""
        return float(self.efn[-1] - self.efp[0])


@dataclass(frozen=True)
class IntensityEntry:
    """One background illumination condition to sweep."""
    state: DeviceState
    name: str
    light_intensity: float

    @classmethod
    def from_state(cls, state: DeviceState, name: str) -> "IntensityEntry":
        return cls(state=state, name=name, light_intensity=state.parameters.light_intensity)


@dataclass(frozen=True, eq=False)
class OscillatingSolution:
    """
    The time-resolved response of a device to a sinusoidal voltage, as
    produced by a simulator for a single frequency.

    The time vector holds `1 + periods * tpoints_per_period` samples.
    `final_state` is the device at the last time point; simulators that are
    handed an `OscillatingSolution` as their start point continue from it.
    """
    time: np.ndarray
    applied_voltage: np.ndarray
    current: np.ndarray
    ionic_current: np.ndarray
    final_state: DeviceState
    frequency: float
    delta_v: float
    bc: BoundaryCondition
    periods: int
    tpoints_per_period: int
    rel_tol: float
    tmax: float
    payload: Any = field(default=None, repr=False)


# Anything a simulator accepts as the starting point of a run.
StartPoint = Union[DeviceState, OscillatingSolution]


@dataclass(frozen=True)
class FitCoefficients:
    """
    Bias, amplitude and phase of a sinusoidal current, J = bias + amplitude * sin(wt + phase).
    Phase is in radians; in this model the amplitude is expected to be negative.
    """
    bias: float
    amplitude: float
    phase: float


@dataclass(frozen=True)
class ResponseAnalysis:
    """The output of a response analyzer for one oscillating solution."""
    total: FitCoefficients
    ionic: FitCoefficients
    method: ExtractionMethod
