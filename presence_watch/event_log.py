"""
Append-only presence event log.

Responsibility:
    Write one human-readable line per presence event to a text file.
    The file is opened, appended to, and closed on every record so a
    crash never leaves buffered events behind.

Non-goals:
    - No rotation or retention.
    - No retries: a failed write is reported and the event is dropped.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from presence_watch.errors import EventLogError
from presence_watch.presence import PresenceEvent

logger = logging.getLogger(__name__)

# Wall-clock stamp, e.g. "Oct 19 14:03:05"
_TIME_FORMAT = "%b %d %H:%M:%S"


class EventLog:
    """Presence event sink backed by an append-only text file.

    Usage:
        sink = EventLog("log.txt", timeout_seconds=30)
        sink.record(PresenceEvent.PRESENCE_REGAINED, time.monotonic())
    """

    def __init__(
        self,
        path: Union[str, Path],
        timeout_seconds: Optional[float] = None,
        wall_clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Args:
            path: Log file path. Parent directories are created on first write.
            timeout_seconds: Absence timeout, quoted in absence lines.
            wall_clock: Source of the human-readable timestamp.
        """
        self._path = Path(path)
        self._timeout = timeout_seconds
        self._wall_clock = wall_clock

    def format_line(self, event: PresenceEvent) -> str:
        stamp = self._wall_clock().strftime(_TIME_FORMAT)
        if event is PresenceEvent.PRESENCE_REGAINED:
            return f"Face detected in doorway; Time: {stamp}\n"
        if self._timeout is not None:
            return f"Face absent for {self._timeout:g}s; Time: {stamp}\n"
        return f"Face absent; Time: {stamp}\n"

    def record(self, event: PresenceEvent, at: float) -> None:
        """Append one event to the log.

        Args:
            event: The event to write.
            at: Monotonic timestamp of the frame that produced it.

        Raises:
            EventLogError: If the file cannot be opened or written.
        """
        line = self.format_line(event)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            raise EventLogError(
                f"Could not write to event log {self._path}: {e}"
            ) from e

        logger.debug("Event %s at t=%.3f written to %s", event.value, at, self._path)
