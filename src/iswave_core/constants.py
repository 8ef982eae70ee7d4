# --- src/iswave_core/constants.py ---
import logging
import math

logger = logging.getLogger(__name__)

# --- Sweep Defaults ---

#: Number of complete oscillation periods simulated per frequency. Dark
#: solutions need at least ~20 periods for a stable demodulated phase.
DEFAULT_PERIODS: int = 20

#: Time samples per period. A multiple of 4 keeps quarter-period points on the grid.
DEFAULT_TPOINTS_PER_PERIOD: int = 10 * 4

#: Relative tolerance handed to the simulator on the first attempt at each frequency.
DEFAULT_BASE_REL_TOL: float = 1.0e-6

#: Divisor applied to the solver tolerance at each tolerance-tightening retry.
TOLERANCE_REDUCTION_FACTOR: float = 100.0

#: Margin (radians) inside [0, pi/2] below which a demodulated phase is re-checked.
PHASE_MARGIN_RAD: float = 0.006

#: Upper bound of the physically valid phase range.
MAX_VALID_PHASE_RAD: float = math.pi / 2

logger.debug("Defined sweep constants: DEFAULT_PERIODS, DEFAULT_TPOINTS_PER_PERIOD, DEFAULT_BASE_REL_TOL")
