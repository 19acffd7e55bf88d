"""
Angle utility functions for rate of turn estimation.
"""

import numpy as np
import math

from .constants import PI, TWO_PI


def normalize_angle(angle):
    """
    Normalize an angle difference to (-pi, pi] with a single correction.

    Only valid for inputs in (-3*pi, 3*pi), which covers the difference
    between any two angles already in [0, 2*pi). Use normalize_angle_full
    for arbitrary input.

    Args:
        angle (float): Angle in radians

    Returns:
        float: Normalized angle in (-pi, pi]
    """
    if angle > PI:
        angle -= TWO_PI
    elif angle < -PI:
        angle += TWO_PI
    return angle


def normalize_angle_full(angle):
    """
    Normalize an angle of any magnitude to (-pi, pi].

    Args:
        angle (float): Angle in radians

    Returns:
        float: Normalized angle in (-pi, pi]
    """
    angle = angle - TWO_PI * round(angle / TWO_PI)
    # round() ties to even, so -pi can come back unchanged
    if angle <= -PI:
        angle += TWO_PI
    return angle


def wrap_angle(angle):
    """
    Wrap angle to [0, 2*pi) range.

    Args:
        angle (float): Angle in radians

    Returns:
        float: Wrapped angle in [0, 2*pi)
    """
    angle = angle % TWO_PI
    # Tiny negative inputs round up to exactly 2*pi
    if angle >= TWO_PI:
        angle -= TWO_PI
    return angle


def degrees_to_radians(degrees):
    """Convert degrees to radians."""
    return degrees * math.pi / 180.0


def radians_to_degrees(radians):
    """Convert radians to degrees."""
    return radians * 180.0 / math.pi


def circular_mean(angles):
    """
    Mean direction of a set of angles.

    The angles are averaged as unit vectors, so 359 deg and 1 deg average
    to 0 deg rather than 180 deg.

    Args:
        angles: Sequence or array of angles in radians

    Returns:
        float: Mean direction in [0, 2*pi), or NaN for an empty input
    """
    angles = np.asarray(angles, dtype=float)
    if angles.size == 0:
        return math.nan

    mean_cos = float(np.mean(np.cos(angles)))
    mean_sin = float(np.mean(np.sin(angles)))

    return wrap_angle(math.atan2(mean_sin, mean_cos))
