"""
Sliding-window rate of turn estimation.
"""

from .window import Sample, SlidingWindow
from .estimator import RateOfTurnEstimator, EstimatorState, RegressionInput

__all__ = ["Sample", "SlidingWindow", "RateOfTurnEstimator", "EstimatorState", "RegressionInput"]
