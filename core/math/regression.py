"""
Least-squares line fitting.
"""

import logging
import math

import numpy as np

logger = logging.getLogger(__name__)


def least_squares_slope(x, y):
    """
    Slope of the ordinary least-squares line through (x, y).

    Uses the closed form

        slope = (N*sum(xy) - sum(x)*sum(y)) / (N*sum(x^2) - sum(x)^2)

    Args:
        x: Abscissae (e.g. seconds)
        y: Ordinates, same length as x

    Returns:
        float: The slope. NaN with fewer than two points, +inf when all
        x values are identical.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    if x.shape != y.shape:
        raise ValueError(f"x and y must have the same length ({x.size} != {y.size})")

    n = x.size
    if n < 2:
        logger.warning("At least two points are needed to compute a slope, got %d", n)
        return math.nan

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_x_squared = float(np.sum(x * x))

    numerator = n * sum_xy - sum_x * sum_y
    denominator = n * sum_x_squared - sum_x * sum_x

    if denominator == 0:
        return math.inf

    return numerator / denominator
