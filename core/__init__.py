"""
Core rate of turn algorithms and utilities.

This module provides platform-independent implementations of:
- Sliding-window rate of turn estimation
- Circular statistics and least-squares fitting
- NMEA heading sentence processing
"""

__version__ = "1.0.0"
__author__ = "ROT Estimator Team"

from .rot import RateOfTurnEstimator, Sample, SlidingWindow
from .sensors import NMEAParser, HeadingProcessor
from .math import normalize_angle, circular_mean, least_squares_slope

__all__ = [
    "RateOfTurnEstimator",
    "Sample",
    "SlidingWindow",
    "NMEAParser",
    "HeadingProcessor",
    "normalize_angle",
    "circular_mean",
    "least_squares_slope"
]
