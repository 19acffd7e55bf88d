"""
Signal K style host integration for the rate of turn estimator.
"""

from .bus import StreamBundle, PluginHost, PathValue
from .plugin import RateOfTurnPlugin
from .config import Config

__all__ = ["StreamBundle", "PluginHost", "PathValue", "RateOfTurnPlugin", "Config"]
