"""
Plugin that computes navigation.rateOfTurn from a heading or course path.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from core.math.constants import (DEFAULT_WINDOW_SIZE, INPUT_PATHS,
                                 PATH_HEADING_TRUE, PATH_RATE_OF_TURN)
from core.rot import RateOfTurnEstimator, Sample
from .bus import PathValue, PluginHost, timestamp_to_ms


def validate_settings(settings: Optional[Dict[str, Any]]) -> Tuple[str, int]:
    """
    Check plugin settings and fill in defaults.

    Returns:
        (input_path, size)

    Raises:
        ValueError: unknown input path or non-integer size
    """
    settings = settings or {}

    input_path = settings.get("inputPath", PATH_HEADING_TRUE)
    if input_path not in INPUT_PATHS:
        raise ValueError(f"Unsupported input path: {input_path}")

    size = settings.get("size", DEFAULT_WINDOW_SIZE)
    if isinstance(size, bool) or not isinstance(size, (int, float)) or int(size) != size:
        raise ValueError(f"Regression size must be an integer, got {size!r}")

    return input_path, int(size)


class RateOfTurnPlugin:
    """
    Subscribes an estimator to the configured path and publishes its output.
    """

    id = "sk-rot-calculation"
    name = "ROT-calculation"
    description = "Plugin that computes the self.navigation.rateOfTurn path value"

    def __init__(self, app: PluginHost):
        self.app = app
        self.unsubscribes: List[Callable[[], None]] = []
        self.estimators: List[RateOfTurnEstimator] = []
        self.input_path: Optional[str] = None

    def schema(self) -> dict:
        """JSON schema of the plugin settings."""
        return {
            "type": "object",
            "title": "ROT calculation plugin parameters",
            "description": "ROT calculation parameters",
            "properties": {
                "inputPath": {
                    "type": "string",
                    "title": "Reference source path",
                    "default": PATH_HEADING_TRUE,
                    "enum": list(INPUT_PATHS)
                },
                "size": {
                    "type": "number",
                    "title": "Size of the regression array",
                    "default": DEFAULT_WINDOW_SIZE
                }
            }
        }

    @property
    def running(self) -> bool:
        return bool(self.unsubscribes)

    def start(self, settings: Optional[Dict[str, Any]] = None) -> bool:
        """
        Start computing rate of turn.

        Args:
            settings: {"inputPath": ..., "size": ...}

        Returns:
            True if the plugin started
        """
        self.app.debug("Plugin started")

        try:
            input_path, size = validate_settings(settings)
            estimator = RateOfTurnEstimator(capacity=size, sink=self.send_rate_of_turn)
        except ValueError as e:
            self.app.set_plugin_error(self.id, str(e))
            return False

        def on_value(update: PathValue):
            if update.value is None:
                return
            sample = Sample(timestamp=timestamp_to_ms(update.timestamp),
                            angle=float(update.value))
            estimator.add_sample(sample)

        disposer = self.app.streambundle.get_self_bus(input_path).on_value(on_value)

        self.input_path = input_path
        self.estimators.append(estimator)
        self.unsubscribes.append(disposer)

        self.app.set_plugin_status(self.id, f"Computing rate of turn from {input_path} ({size} samples)")
        return True

    def send_rate_of_turn(self, value: float) -> None:
        """Publish one estimate on navigation.rateOfTurn."""
        self.app.handle_message(self.id, {
            "updates": [{
                "values": [{
                    "path": PATH_RATE_OF_TURN,
                    "value": value
                }]
            }]
        })

    def stop(self) -> None:
        """Unsubscribe from all paths and tear down the estimators."""
        self.app.debug("Stopping plugin and unsubscribing from all paths...")

        for disposer in self.unsubscribes:
            if callable(disposer):
                disposer()
        self.unsubscribes.clear()

        for estimator in self.estimators:
            estimator.close()
        self.estimators.clear()

    def get_statistics(self) -> dict:
        """Get plugin statistics."""
        return {
            'running': self.running,
            'input_path': self.input_path,
            'estimators': [e.get_statistics() for e in self.estimators]
        }
