"""
Mathematical utilities for rate of turn estimation.
"""

from .utils import (normalize_angle, normalize_angle_full, wrap_angle,
                    circular_mean, degrees_to_radians, radians_to_degrees)
from .regression import least_squares_slope
from .constants import *

__all__ = [
    "normalize_angle",
    "normalize_angle_full",
    "wrap_angle",
    "circular_mean",
    "least_squares_slope",
    "degrees_to_radians",
    "radians_to_degrees",
]
