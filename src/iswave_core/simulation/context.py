# src/iswave_core/simulation/context.py
"""
Defines the `SweepContext`, the complete and immutable input of one sweep.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..base_enums import BoundaryCondition
from ..capabilities import IResponseAnalyzer, ISimulator, ISolutionSink, IStateSplitter
from ..data_structures import IntensityEntry
from .config import SweepSettings


@dataclass(frozen=True)
class SweepContext:
    """
    Everything a `SweepEngine` needs: the entries and frequencies to sweep,
    the run options, and the collaborators. Frozen so that a run's initial
    conditions cannot change while it executes.
    """
    entries: Tuple[IntensityEntry, ...]
    freq_array_hz: np.ndarray
    delta_v: float
    bc: BoundaryCondition
    sequential: bool
    frozen_ions: bool
    settings: SweepSettings
    simulator: ISimulator
    analyzer: IResponseAnalyzer
    splitter: Optional[IStateSplitter] = None
    solution_sink: Optional[ISolutionSink] = None
    do_graphics: bool = False
