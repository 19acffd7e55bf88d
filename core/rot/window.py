"""
Sliding window of timestamped heading samples.
"""

import numpy as np
from collections import deque
from dataclasses import dataclass
from typing import Deque, Tuple


@dataclass(frozen=True)
class Sample:
    """
    One heading reading.

    timestamp: Milliseconds since epoch
    angle: Heading or course in radians
    """

    timestamp: int
    angle: float


class SlidingWindow:
    """
    FIFO buffer of samples with an explicit eviction step.

    The window never drops samples on its own; the owner decides when the
    oldest sample goes by calling evict_oldest().
    """

    def __init__(self, capacity: int):
        self._capacity = capacity
        self._samples: Deque[Sample] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, sample: Sample) -> None:
        """Append a sample at the tail."""
        self._samples.append(sample)

    def evict_oldest(self) -> Sample:
        """Remove and return the sample at the head."""
        return self._samples.popleft()

    def is_over_capacity(self) -> bool:
        return len(self._samples) > self._capacity

    def to_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Split the window into parallel arrays.

        Returns:
            (timestamps, angles) in insertion order
        """
        timestamps = np.array([s.timestamp for s in self._samples], dtype=np.int64)
        angles = np.array([s.angle for s in self._samples], dtype=float)
        return timestamps, angles

    def length(self) -> int:
        return len(self._samples)

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)
