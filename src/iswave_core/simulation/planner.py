# src/iswave_core/simulation/planner.py
"""
Frequency sweep planning and result pre-allocation.
"""
import logging
import numbers
from typing import Dict

import numpy as np

from .exceptions import InvalidRangeError

logger = logging.getLogger(__name__)

# Every per-cell quantity recorded by the sweep engine.
RECORDED_QUANTITIES = (
    "j_bias", "j_amp", "j_phase",
    "j_i_bias", "j_i_amp", "j_i_phase",
    "tmax",
)


def plan_frequencies(start_freq: float, end_freq: float, num_points: int) -> np.ndarray:
    """
    Builds `num_points` frequencies evenly spaced in log-space from
    `start_freq` to `end_freq`, both included. The sequence decreases when
    `start_freq > end_freq`.

    Raises:
        InvalidRangeError: if a bound is not a finite positive number or
                           `num_points` is not an integer >= 1.
    """
    for label, bound in (("start frequency", start_freq), ("end frequency", end_freq)):
        if not np.isfinite(bound) or bound <= 0:
            raise InvalidRangeError(
                details=f"The {label} must be a finite value > 0 Hz, got {bound!r}.",
                user_input=bound,
            )
    if isinstance(num_points, bool) or not isinstance(num_points, numbers.Integral):
        raise InvalidRangeError(
            details=f"The number of frequency points must be an integer, got {type(num_points).__name__}.",
            user_input=num_points,
        )
    if num_points < 1:
        raise InvalidRangeError(
            details=f"The number of frequency points must be >= 1, got {num_points}.",
            user_input=num_points,
        )

    freq_array = np.logspace(np.log10(start_freq), np.log10(end_freq), int(num_points), dtype=float)
    # logspace goes through 10**log10(x), pin the endpoints to the requested values.
    freq_array[0] = start_freq
    if num_points > 1:
        freq_array[-1] = end_freq
    logger.debug(f"Planned {num_points} frequencies from {start_freq:.4e} Hz to {end_freq:.4e} Hz.")
    return freq_array


def allocate_sweep_matrices(num_entries: int, num_freqs: int) -> Dict[str, np.ndarray]:
    """Zero-filled (num_entries x num_freqs) matrix for every recorded quantity."""
    return {name: np.zeros((num_entries, num_freqs), dtype=float) for name in RECORDED_QUANTITIES}
