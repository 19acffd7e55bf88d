"""
In-process Signal K style data bus and plugin host.
"""

import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


def iso_timestamp(timestamp_ms: Optional[int] = None) -> str:
    """Format milliseconds since epoch as an ISO 8601 UTC string."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    seconds, millis = divmod(int(timestamp_ms), 1000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}Z"


# fromisoformat before 3.11 only takes 3 or 6 fractional digits
_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d\d:\d\d$|$)")


def _pad_fraction(match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def timestamp_to_ms(timestamp: Any) -> int:
    """
    Convert a delta timestamp to milliseconds since epoch.

    Accepts ISO 8601 strings, datetime objects and numbers (already in ms).
    """
    if isinstance(timestamp, datetime):
        moment = timestamp
    elif isinstance(timestamp, str):
        text = timestamp.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        moment = datetime.fromisoformat(_FRACTION.sub(_pad_fraction, text, count=1))
    elif isinstance(timestamp, (int, float)):
        return int(timestamp)
    else:
        raise TypeError(f"Unsupported timestamp type: {type(timestamp).__name__}")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(round(moment.timestamp() * 1000))


@dataclass
class PathValue:
    """One value update on a path."""

    path: str
    value: Any
    timestamp: str
    source: Optional[str] = None


class Stream:
    """Values published on one path."""

    def __init__(self, path: str):
        self.path = path
        self._subscribers: List[Callable[[PathValue], None]] = []

    def on_value(self, callback: Callable[[PathValue], None]) -> Callable[[], None]:
        """
        Subscribe to the stream.

        Returns:
            Disposer that removes the subscription when called
        """
        self._subscribers.append(callback)

        def dispose():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return dispose

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def emit(self, update: PathValue) -> None:
        for callback in list(self._subscribers):
            try:
                callback(update)
            except Exception:
                logger.exception("Subscriber on %s failed", self.path)


class StreamBundle:
    """Per-path streams for the own vessel."""

    def __init__(self):
        self._streams: Dict[str, Stream] = {}

    def get_self_bus(self, path: str) -> Stream:
        if path not in self._streams:
            self._streams[path] = Stream(path)
        return self._streams[path]

    def push(self, path: str, value: Any, timestamp: Any = None,
             source: Optional[str] = None) -> PathValue:
        """
        Publish a value on a path.

        Args:
            path: Signal K path
            value: New value
            timestamp: ISO string or milliseconds since epoch (defaults to now)
            source: Optional source label

        Returns:
            The update delivered to subscribers
        """
        if timestamp is None or isinstance(timestamp, (int, float)):
            timestamp = iso_timestamp(timestamp)
        update = PathValue(path=path, value=value, timestamp=timestamp, source=source)
        self.get_self_bus(path).emit(update)
        return update


class PluginHost:
    """
    Minimal host for plugins: data bus, message handling and status.
    """

    def __init__(self, streambundle: Optional[StreamBundle] = None):
        self.streambundle = streambundle or StreamBundle()
        self.values: Dict[str, Any] = {}
        self.message_count = 0
        self.plugin_status: Dict[str, str] = {}
        self.plugin_errors: Dict[str, str] = {}

    def handle_message(self, plugin_id: str, delta: dict) -> None:
        """
        Apply a delta message published by a plugin.

        Format: {"updates": [{"values": [{"path": ..., "value": ...}]}]}
        """
        self.message_count += 1

        for update in delta["updates"]:
            timestamp = update.get("timestamp")
            for entry in update["values"]:
                path = entry["path"]
                self.values[path] = entry["value"]
                self.streambundle.push(path, entry["value"], timestamp, source=plugin_id)

    def get_self_path(self, path: str, default=None):
        """Latest value published on a path."""
        return self.values.get(path, default)

    def set_plugin_status(self, plugin_id: str, message: str) -> None:
        self.plugin_status[plugin_id] = message
        self.plugin_errors.pop(plugin_id, None)
        logger.info("%s: %s", plugin_id, message)

    def set_plugin_error(self, plugin_id: str, message: str) -> None:
        self.plugin_errors[plugin_id] = message
        logger.error("%s: %s", plugin_id, message)

    def debug(self, message: str, *args) -> None:
        logger.debug(message, *args)
