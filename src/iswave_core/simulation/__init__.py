# src/iswave_core/simulation/__init__.py
from .exceptions import (
    InvalidRangeError,
    StateNormalizationError,
    PhaseOutOfRangeWarning,
)
from .config import SweepSettings, SweepConfig
from .planner import plan_frequencies, allocate_sweep_matrices
from .ladder import LadderStage, CellOutcome, ValidityController, is_phase_near_bounds, is_phase_out_of_range
from .results import ImpedanceSweepResult, PhaseDiagnostic, aggregate_results
from .context import SweepContext
from .engine import SweepEngine
from .execution import run_impedance_sweep, run_impedance_sweep_from_config

__all__ = [
    # Exceptions and warnings
    "InvalidRangeError",
    "StateNormalizationError",
    "PhaseOutOfRangeWarning",
    # Configuration
    "SweepSettings",
    "SweepConfig",
    # Planner
    "plan_frequencies",
    "allocate_sweep_matrices",
    # Validation ladder
    "LadderStage",
    "CellOutcome",
    "ValidityController",
    "is_phase_near_bounds",
    "is_phase_out_of_range",
    # Results
    "ImpedanceSweepResult",
    "PhaseDiagnostic",
    "aggregate_results",
    # Engine and API
    "SweepContext",
    "SweepEngine",
    "run_impedance_sweep",
    "run_impedance_sweep_from_config",
]
