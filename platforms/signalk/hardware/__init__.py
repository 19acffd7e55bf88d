"""
Hardware interfaces for the rate of turn system.
"""

from .nmea_reader import NMEAReader

__all__ = ["NMEAReader"]
