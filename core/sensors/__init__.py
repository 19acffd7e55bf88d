"""
Heading data processing modules.
"""

from .nmea import NMEAParser, HeadingFix
from .heading import HeadingProcessor

__all__ = ["NMEAParser", "HeadingFix", "HeadingProcessor"]
