"""
Input handling for the presence detection pipeline.

Responsibility:
    Abstract away frame acquisition from webcams and video files.
    Provides a uniform iterator interface yielding (frame_id, frame) tuples.

Non-goals:
    - No detection, drawing, or output writing.
    - No infinite retry on dead streams.
    - No multi-camera support.

Robustness:
    - Validates the source at initialization time.
    - Logs and skips empty or unreadable frames.
    - Releases the capture handle on cleanup.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# Video extensions recognized by this handler
_VIDEO_EXTENSIONS = {".mp4", ".avi", ".mov", ".mkv", ".wmv", ".flv"}

# Consecutive failed webcam reads tolerated before giving up
_MAX_CONSECUTIVE_FAILURES = 30


class InputHandler:
    """Frame iterator for a webcam or a video file.

    The source type is auto-detected at initialization:
        - Integer or digit string  → webcam device index
        - File with video extension → video file

    Usage:
        handler = InputHandler(source="0")
        for frame_id, frame in handler:
            # process frame
        handler.release()
    """

    def __init__(
        self,
        source: Union[str, int],
        resize_width: Optional[int] = None,
    ) -> None:
        """Open the source.

        Args:
            source: Webcam device index (or digit string like "0") or
                    video file path.
            resize_width: Optional width to downscale frames. Aspect ratio
                          is preserved. None means no resizing.

        Raises:
            FileNotFoundError: If a file source does not exist.
            ValueError: If the file is not a recognized video format.
            RuntimeError: If the capture cannot be opened.
        """
        self._resize_width = resize_width
        self._cap: Optional[cv2.VideoCapture] = None

        source_str = str(source).strip()

        if source_str.isdigit():
            self._mode = "webcam"
            self._open_video_capture(int(source_str))
        elif os.path.isfile(source_str):
            ext = Path(source_str).suffix.lower()
            if ext not in _VIDEO_EXTENSIONS:
                raise ValueError(
                    f"Unrecognized file extension: '{ext}' for source '{source_str}'. "
                    f"Supported videos: {_VIDEO_EXTENSIONS}."
                )
            self._mode = "video"
            self._open_video_capture(source_str)
        else:
            raise FileNotFoundError(
                f"Input source not found: '{source_str}'. "
                f"Provide a valid video file path or device index."
            )

        logger.info("InputHandler initialized: mode=%s, source=%s", self._mode, source_str)

    def _open_video_capture(self, source: Union[str, int]) -> None:
        """Open a VideoCapture and validate it.

        Raises:
            RuntimeError: If the source cannot be opened.
        """
        self._cap = cv2.VideoCapture(source)
        if not self._cap.isOpened():
            source_desc = (
                f"webcam device {source}" if isinstance(source, int)
                else f"video file '{source}'"
            )
            self.release()
            raise RuntimeError(
                f"Failed to open {source_desc}. "
                f"Ensure the source exists and is accessible."
            )

    def __iter__(self) -> Iterator[Tuple[int, np.ndarray]]:
        """Yield (frame_id, frame) until the stream ends.

        frame_id is a 0-based index of reads, so skipped reads leave gaps.
        """
        frame_id = 0
        consecutive_failures = 0

        while self._cap is not None:
            ret, frame = self._cap.read()

            if not ret or frame is None:
                if self._mode == "video":
                    logger.info("End of video reached at frame %d.", frame_id)
                    break
                consecutive_failures += 1
                if consecutive_failures >= _MAX_CONSECUTIVE_FAILURES:
                    logger.error(
                        "Webcam produced %d consecutive failed reads. "
                        "Stopping to avoid infinite loop.",
                        _MAX_CONSECUTIVE_FAILURES,
                    )
                    break
                logger.warning("Cannot read frame %d from webcam, skipping.", frame_id)
                frame_id += 1
                continue

            consecutive_failures = 0

            if frame.size == 0:
                logger.debug("Skipping empty frame %d.", frame_id)
                frame_id += 1
                continue

            yield frame_id, self._maybe_resize(frame)
            frame_id += 1

    def _maybe_resize(self, frame: np.ndarray) -> np.ndarray:
        """Resize frame if resize_width is configured, preserving aspect ratio."""
        if self._resize_width is None:
            return frame

        h, w = frame.shape[:2]
        if w <= self._resize_width:
            return frame

        scale = self._resize_width / w
        new_h = int(h * scale)
        return cv2.resize(frame, (self._resize_width, new_h), interpolation=cv2.INTER_AREA)

    def release(self) -> None:
        """Release the capture handle."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.debug("VideoCapture released.")
