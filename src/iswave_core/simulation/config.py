# src/iswave_core/simulation/config.py
import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from ..base_enums import BoundaryCondition
from ..constants import (
    DEFAULT_BASE_REL_TOL,
    DEFAULT_PERIODS,
    DEFAULT_TPOINTS_PER_PERIOD,
    PHASE_MARGIN_RAD,
    TOLERANCE_REDUCTION_FACTOR,
)
from .exceptions import InvalidRangeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepSettings:
    """
    Numerical knobs of the sweep. The defaults are the values the validation
    ladder was tuned with; change them only with care.
    """
    periods: int = DEFAULT_PERIODS
    tpoints_per_period: int = DEFAULT_TPOINTS_PER_PERIOD
    base_rel_tol: float = DEFAULT_BASE_REL_TOL
    tolerance_factor: float = TOLERANCE_REDUCTION_FACTOR
    phase_margin: float = PHASE_MARGIN_RAD

    def __post_init__(self):
        if self.periods < 1:
            raise InvalidRangeError(details=f"periods must be >= 1, got {self.periods}.", user_input=self.periods)
        if self.tpoints_per_period < 1:
            raise InvalidRangeError(
                details=f"tpoints_per_period must be >= 1, got {self.tpoints_per_period}.",
                user_input=self.tpoints_per_period,
            )
        if not (self.base_rel_tol > 0 and math.isfinite(self.base_rel_tol)):
            raise InvalidRangeError(details=f"base_rel_tol must be > 0, got {self.base_rel_tol}.", user_input=self.base_rel_tol)
        if not self.tolerance_factor > 1:
            raise InvalidRangeError(
                details=f"tolerance_factor must be > 1, got {self.tolerance_factor}.",
                user_input=self.tolerance_factor,
            )
        if not 0 <= self.phase_margin < math.pi / 4:
            raise InvalidRangeError(
                details=f"phase_margin must be in [0, pi/4), got {self.phase_margin}.",
                user_input=self.phase_margin,
            )

    @property
    def tpoints(self) -> int:
        """Total number of time samples of one oscillating solution."""
        return 1 + self.tpoints_per_period * self.periods


@dataclass(frozen=True)
class SweepConfig:
    """A complete run description, as loaded from a YAML file."""
    start_freq: float
    end_freq: float
    num_points: int
    delta_v: float
    bc: BoundaryCondition
    sequential: bool = False
    frozen_ions: bool = False
    do_graphics: bool = False
    name: Optional[str] = None
    settings: SweepSettings = field(default_factory=SweepSettings)
