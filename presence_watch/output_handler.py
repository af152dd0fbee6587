"""
Output handling for the presence detection pipeline.

Responsibility:
    Route each frame's detections to the configured sinks: display
    window, annotated video file, or JSON export. Several modes can be
    active at once.

Non-goals:
    - No detection or presence logic.
    - No input acquisition.
    - The presence event log is handled by event_log, not here.
"""

import logging
from typing import Optional, Set

import cv2
import numpy as np

from presence_watch.config import AppConfig, parse_modes, resolve_path
from presence_watch.detection import DetectionSet
from presence_watch.presence import PresenceEvent
from presence_watch.serializer import JsonLinesWriter
from presence_watch.visualizer import draw_detections, show_frame

logger = logging.getLogger(__name__)

_ESC = 27


class OutputHandler:
    """Routes detection results to configured output sinks.

    Modes:
        - 'display': Show annotated frames in an OpenCV window.
        - 'save_video': Write annotated frames to a video file.
        - 'save_json': Stream one JSON line per frame to detections.jsonl.
        - 'none': Headless; nothing is rendered or saved.

    Usage:
        handler = OutputHandler(config)
        handler.process_frame(frame_id, frame, detections, event)
        ...
        handler.finalize()
    """

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._video_writer: Optional[cv2.VideoWriter] = None
        self._modes: Set[str] = parse_modes(config.output.mode) - {"none"}
        self._json_writer: Optional[JsonLinesWriter] = None
        self._save_path = resolve_path(config.output.save_path)

        if self._modes & {"save_video", "save_json"}:
            self._save_path.mkdir(parents=True, exist_ok=True)

        logger.info("OutputHandler initialized: modes=%s, save_path=%s",
                    self._modes or {"none"}, self._save_path)

    def process_frame(
        self,
        frame_id: int,
        frame: np.ndarray,
        detections: DetectionSet,
        event: Optional[PresenceEvent] = None,
    ) -> bool:
        """Process a single frame's results through the output sinks.

        Returns:
            True to continue processing, False to signal the caller
            should stop (user pressed 'q' or ESC in display mode).
        """
        should_continue = True

        if "display" in self._modes:
            if not self._handle_display(frame, detections):
                should_continue = False

        if "save_video" in self._modes:
            self._handle_save_video(frame, detections)

        if "save_json" in self._modes:
            self._handle_save_json(frame_id, detections, event)

        return should_continue

    def _handle_display(self, frame: np.ndarray, detections: DetectionSet) -> bool:
        """Show annotated frame in a window. Returns False on quit key."""
        key = show_frame(frame, detections, self._config.visualization)

        if key == ord("q") or key == _ESC:
            logger.info("Quit signal received (key press).")
            return False

        return True

    def _handle_save_video(self, frame: np.ndarray, detections: DetectionSet) -> None:
        """Write annotated frame to the video writer."""
        annotated = draw_detections(frame, detections, self._config.visualization)

        if self._video_writer is None:
            output_file = str(self._save_path / "output.avi")
            h, w = annotated.shape[:2]
            fourcc = cv2.VideoWriter_fourcc(*"XVID")
            self._video_writer = cv2.VideoWriter(output_file, fourcc, 20.0, (w, h))
            logger.info("Video writer opened: %s (%dx%d)", output_file, w, h)

        self._video_writer.write(annotated)

    def _handle_save_json(
        self,
        frame_id: int,
        detections: DetectionSet,
        event: Optional[PresenceEvent],
    ) -> None:
        """Append this frame's record to the JSON Lines file."""
        if self._json_writer is None:
            self._json_writer = JsonLinesWriter(
                str(self._save_path / "detections.jsonl")
            )
        self._json_writer.write(frame_id, detections, event)

    def finalize(self) -> None:
        """Close output files and release resources.

        Must be called after all frames have been processed.
        """
        if self._json_writer is not None:
            self._json_writer.close()
            self._json_writer = None

        if self._video_writer is not None:
            self._video_writer.release()
            self._video_writer = None
            logger.info("Video writer released.")

        if "display" in self._modes:
            cv2.destroyAllWindows()

        logger.info("OutputHandler finalized.")
