"""
Conversion of parsed heading data to Signal K values and samples.
"""

from typing import Dict, Optional

from .nmea import HeadingFix
from ..math.constants import (PATH_HEADING_TRUE, PATH_HEADING_MAGNETIC,
                              PATH_COG_TRUE, PATH_COG_MAGNETIC)
from ..rot.window import Sample


class HeadingProcessor:
    """
    Maps heading fixes to Signal K paths (radians).
    """

    def __init__(self):
        self.fix_count = 0
        self.value_counts: Dict[str, int] = {}

    @staticmethod
    def _extract(fix: HeadingFix) -> Dict[str, float]:
        candidates = {
            PATH_HEADING_TRUE: fix.heading_true_radians,
            PATH_HEADING_MAGNETIC: fix.heading_magnetic_radians,
            PATH_COG_TRUE: fix.cog_true_radians,
            PATH_COG_MAGNETIC: fix.cog_magnetic_radians,
        }
        return {path: value for path, value in candidates.items() if value is not None}

    def to_values(self, fix: HeadingFix) -> Dict[str, float]:
        """
        Extract every heading/course value of a fix.

        Args:
            fix: Parsed NMEA heading data

        Returns:
            Mapping of Signal K path to angle in radians [0, 2*pi)
        """
        values = self._extract(fix)

        self.fix_count += 1
        for path in values:
            self.value_counts[path] = self.value_counts.get(path, 0) + 1

        return values

    def to_sample(self, fix: HeadingFix, path: str) -> Optional[Sample]:
        """
        Build an estimator sample for one path.

        Returns:
            Sample, or None if the fix has no value for the path
        """
        angle = self._extract(fix).get(path)
        if angle is None:
            return None
        return Sample(timestamp=fix.timestamp_ms, angle=angle)

    def get_statistics(self) -> dict:
        """Get processor statistics."""
        return {
            'fix_count': self.fix_count,
            'value_counts': dict(self.value_counts)
        }
