"""
Rate of turn estimation from a stream of headings.
"""

import logging
import math
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .window import Sample, SlidingWindow
from ..math.constants import DEFAULT_WINDOW_SIZE, MIN_WINDOW_SIZE, MS_PER_SECOND
from ..math.utils import circular_mean, normalize_angle
from ..math.regression import least_squares_slope

logger = logging.getLogger(__name__)


class EstimatorState(Enum):
    """Lifecycle of an estimator."""

    FILLING = "filling"      # Window not yet over capacity, no output
    PRODUCING = "producing"  # Every new sample yields one estimate


@dataclass
class RegressionInput:
    """
    Data fed to the slope fit for one estimation.

    mean: Circular mean of the window angles (radians, [0, 2*pi))
    relative_times: Seconds since the first sample of the window
    normalized_angles: Angles re-centered on the mean, in (-pi, pi]
    """

    mean: float
    relative_times: np.ndarray
    normalized_angles: np.ndarray


class RateOfTurnEstimator:
    """
    Estimates angular rate of turn (rad/s) over a sliding window.

    Each window is re-centered on its own circular mean before the
    least-squares fit, so headings crossing north do not produce a
    spurious 2*pi jump.
    """

    def __init__(self, capacity: int = DEFAULT_WINDOW_SIZE,
                 sink: Optional[Callable[[float], None]] = None):
        """
        Initialize the estimator.

        Args:
            capacity: Number of samples in the regression window
            sink: Called with every estimate (rad/s). Exceptions it raises
                are logged and do not affect the estimator.
        """
        if capacity < 0:
            raise ValueError(f"Window capacity must be non-negative, got {capacity}")
        if capacity < MIN_WINDOW_SIZE:
            logger.warning("Window capacity %d is below %d, estimates will be NaN",
                           capacity, MIN_WINDOW_SIZE)

        self.window = SlidingWindow(capacity)
        self.sink = sink
        self.state = EstimatorState.FILLING

        # Statistics
        self.sample_count = 0
        self.estimate_count = 0
        self.sink_error_count = 0
        self.last_rate: Optional[float] = None

    @property
    def capacity(self) -> int:
        return self.window.capacity

    def update(self, timestamp: int, angle: float) -> Optional[float]:
        """Feed one reading; see add_sample()."""
        return self.add_sample(Sample(timestamp=int(timestamp), angle=float(angle)))

    def add_sample(self, sample: Sample) -> Optional[float]:
        """
        Add a sample and estimate once the window is full.

        Args:
            sample: New heading sample

        Returns:
            Rate of turn in rad/s, or None while the window is still filling
        """
        self.window.push(sample)
        self.sample_count += 1

        if not self.window.is_over_capacity():
            return None

        self.window.evict_oldest()
        self.state = EstimatorState.PRODUCING

        rate = self.estimate()
        self.estimate_count += 1
        self.last_rate = rate

        self._emit(rate)
        return rate

    def regression_input(self) -> Optional[RegressionInput]:
        """
        Build the regression input for the current window.

        Returns:
            RegressionInput, or None if the window is empty
        """
        if len(self.window) == 0:
            return None

        timestamps, angles = self.window.to_arrays()
        mean = circular_mean(angles)

        # Time origin is the first sample of this window, not of the stream
        relative_times = (timestamps - timestamps[0]) / MS_PER_SECOND
        normalized_angles = np.array([normalize_angle(a - mean) for a in angles])

        return RegressionInput(mean=mean,
                               relative_times=relative_times,
                               normalized_angles=normalized_angles)

    def estimate(self) -> float:
        """
        Rate of turn for the current window contents.

        Does not modify the window, so repeated calls give the same value.

        Returns:
            Rate in rad/s, NaN with fewer than two samples, +inf when all
            samples share a timestamp
        """
        regression = self.regression_input()
        if regression is None:
            return math.nan

        return least_squares_slope(regression.relative_times,
                                   regression.normalized_angles)

    def _emit(self, rate: float) -> None:
        logger.debug("Rate of turn %.6f rad/s over %d samples", rate, len(self.window))

        if self.sink is None:
            return

        try:
            self.sink(rate)
        except Exception:
            self.sink_error_count += 1
            logger.exception("Failed to publish rate of turn")

    def reset(self) -> None:
        """Drop all samples and return to the filling state."""
        self.window.clear()
        self.state = EstimatorState.FILLING
        self.last_rate = None

    def close(self) -> None:
        """Teardown: clear the window and detach the sink."""
        self.reset()
        self.sink = None

    def get_statistics(self) -> dict:
        """Get estimator statistics."""
        return {
            'state': self.state.value,
            'capacity': self.capacity,
            'window_length': len(self.window),
            'samples': self.sample_count,
            'estimates': self.estimate_count,
            'sink_errors': self.sink_error_count,
            'last_rate': self.last_rate
        }
