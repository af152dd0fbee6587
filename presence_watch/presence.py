"""
Presence tracking across frames.

Responsibility:
    Turn the per-frame "was any face seen" signal into a debounced event
    stream. A single missed frame is not an absence; an absence is only
    confirmed once no face has been seen for ``timeout_seconds``, and it
    is reported once per episode. A face returning after a confirmed
    absence is reported as presence regained.

Constraints:
    - ``now`` must come from a monotonic clock.
    - State is replaced in one assignment per call, so ``last_seen`` and
      ``absence_confirmed`` never change independently.
    - Not thread-safe. Callers that observe from several threads must
      serialize calls to ``observe``.

Non-goals:
    - No event for the first sighting, or for sightings after a gap
      shorter than the timeout.
    - No persistence across restarts.
"""

import enum
from dataclasses import dataclass, replace
from typing import Optional


class PresenceEvent(enum.Enum):
    """Transitions reported by PresenceTracker.observe()."""

    ABSENCE_CONFIRMED = "absence_confirmed"
    PRESENCE_REGAINED = "presence_regained"


@dataclass(frozen=True)
class PresenceState:
    """Minimal facts needed to derive presence behavior.

    Attributes:
        last_seen: Monotonic timestamp of the last frame with a face,
                   or None if no face has been seen yet.
        absence_confirmed: True once the current absence has been reported.
    """

    last_seen: Optional[float] = None
    absence_confirmed: bool = False


class PresenceTracker:
    """Debounced presence state machine.

    Usage:
        tracker = PresenceTracker(timeout_seconds=30.0)
        event = tracker.observe(faces_seen, time.monotonic())
    """

    def __init__(self, timeout_seconds: float = 30.0) -> None:
        if timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {timeout_seconds}."
            )
        self._timeout = float(timeout_seconds)
        self._state = PresenceState()

    def observe(self, faces_seen: bool, now: float) -> Optional[PresenceEvent]:
        """Feed one frame's presence signal.

        Args:
            faces_seen: True if any face was detected in the frame.
            now: Monotonic timestamp of the frame, in seconds.

        Returns:
            PresenceEvent.PRESENCE_REGAINED when a face appears after a
            confirmed absence, PresenceEvent.ABSENCE_CONFIRMED the first
            time the timeout elapses without a face, otherwise None.
        """
        state = self._state

        if faces_seen:
            self._state = PresenceState(last_seen=now, absence_confirmed=False)
            if state.absence_confirmed:
                return PresenceEvent.PRESENCE_REGAINED
            return None

        if state.last_seen is None or state.absence_confirmed:
            return None

        if now - state.last_seen >= self._timeout:
            self._state = replace(state, absence_confirmed=True)
            return PresenceEvent.ABSENCE_CONFIRMED

        return None

    def seconds_since_last_seen(self, now: float) -> Optional[float]:
        """Elapsed time since the last sighting, or None if never seen."""
        if self._state.last_seen is None:
            return None
        return now - self._state.last_seen

    @property
    def state(self) -> PresenceState:
        """Current state snapshot (immutable)."""
        return self._state

    @property
    def absence_confirmed(self) -> bool:
        return self._state.absence_confirmed

    @property
    def timeout_seconds(self) -> float:
        return self._timeout
