"""
FramePipeline: one detection/correlation/presence iteration per frame.

Public contract:
    FramePipeline.process(frame) -> (DetectionSet, Optional[PresenceEvent])

Flow per frame:
    1. Run the frontal, profile, and eye detectors.
    2. Keep only the eyes inside a face (correlator).
    3. Feed "any face seen" and the clock into the PresenceTracker.
    4. Forward any resulting event to the event sink.

Failure behavior:
    - DetectorError propagates before the tracker is touched, so a
      failed frame never changes presence state.
    - Sink failures (OSError) are logged and the event is dropped.

Non-goals:
    - No frame acquisition, rendering, or window handling.
    - No threading; frames are processed one at a time.
"""

import logging
import time
from typing import Callable, Optional, Protocol, Sequence, Tuple

import numpy as np

from presence_watch.config import AppConfig, DetectionParams, resolve_path
from presence_watch.correlator import correlate
from presence_watch.detection import DetectionSet
from presence_watch.detector import CascadeDetector
from presence_watch.event_log import EventLog
from presence_watch.geometry import Rectangle
from presence_watch.model_loader import EYE, FRONTAL_FACE, PROFILE_FACE, CascadeBank
from presence_watch.presence import PresenceEvent, PresenceTracker

logger = logging.getLogger(__name__)


class FeatureDetector(Protocol):
    def detect(self, frame: np.ndarray, params: DetectionParams) -> Sequence[Rectangle]:
        ...


class EventSink(Protocol):
    def record(self, event: PresenceEvent, at: float) -> None:
        ...


class FramePipeline:
    """Wires detectors, correlator, presence tracker, and event sink.

    Usage:
        pipeline = FramePipeline(
            frontal=frontal_detector,
            profile=profile_detector,
            eyes=eye_detector,
            face_params=config.face_params,
            eye_params=config.eye_params,
            tracker=PresenceTracker(config.presence.timeout_seconds),
            sink=EventLog(config.presence.log_path),
        )
        detections, event = pipeline.process(frame)
    """

    def __init__(
        self,
        frontal: FeatureDetector,
        profile: FeatureDetector,
        eyes: FeatureDetector,
        face_params: DetectionParams,
        eye_params: DetectionParams,
        tracker: PresenceTracker,
        sink: Optional[EventSink] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._frontal = frontal
        self._profile = profile
        self._eyes = eyes
        self._face_params = face_params
        self._eye_params = eye_params
        self._tracker = tracker
        self._sink = sink
        self._clock = clock
        self._frames_processed = 0

    def process(self, frame: np.ndarray) -> Tuple[DetectionSet, Optional[PresenceEvent]]:
        """Run one frame through the pipeline.

        Args:
            frame: BGR image from the frame source.

        Returns:
            The frame's DetectionSet and the presence event it produced,
            or None if presence did not change.

        Raises:
            DetectorError: If any detector fails on this frame.
        """
        detections = self.detect(frame)

        now = self._clock()
        event = self._tracker.observe(detections.faces_seen, now)
        self._frames_processed += 1

        logger.debug("Found %s", detections.summary())

        if event is not None:
            self._report(event, now)

        return detections, event

    def detect(self, frame: np.ndarray) -> DetectionSet:
        """Run the detectors and correlator without touching presence state."""
        frontal_faces = tuple(self._frontal.detect(frame, self._face_params))
        profile_faces = tuple(self._profile.detect(frame, self._face_params))
        eyes = tuple(self._eyes.detect(frame, self._eye_params))

        return DetectionSet(
            frontal_faces=frontal_faces,
            profile_faces=profile_faces,
            eyes=eyes,
            valid_eyes=tuple(correlate(eyes, frontal_faces, profile_faces)),
        )

    def _report(self, event: PresenceEvent, now: float) -> None:
        """Log an event and hand it to the sink. Sink errors are not fatal."""
        if event is PresenceEvent.ABSENCE_CONFIRMED:
            logger.warning(
                "Face not detected for %gs", self._tracker.timeout_seconds
            )
        else:
            logger.info("Face reappeared after absence, logging")

        if self._sink is None:
            return

        try:
            self._sink.record(event, now)
        except OSError as e:
            logger.error("Could not write presence event, dropping it: %s", e)
        else:
            logger.info("Presence event %s recorded.", event.value)

    @property
    def tracker(self) -> PresenceTracker:
        return self._tracker

    @property
    def frames_processed(self) -> int:
        return self._frames_processed


def build_pipeline(
    config: AppConfig,
    bank: CascadeBank,
    clock: Callable[[], float] = time.monotonic,
) -> FramePipeline:
    """Build a FramePipeline from configuration and loaded cascades.

    Args:
        config: Validated application configuration.
        bank: Loaded cascades; must outlive the returned pipeline.
        clock: Monotonic clock used for presence timing.
    """
    return FramePipeline(
        frontal=CascadeDetector(bank[FRONTAL_FACE], name=FRONTAL_FACE),
        profile=CascadeDetector(bank[PROFILE_FACE], name=PROFILE_FACE),
        eyes=CascadeDetector(bank[EYE], name=EYE),
        face_params=config.face_params,
        eye_params=config.eye_params,
        tracker=PresenceTracker(config.presence.timeout_seconds),
        sink=EventLog(
            resolve_path(config.presence.log_path),
            timeout_seconds=config.presence.timeout_seconds,
        ),
        clock=clock,
    )
