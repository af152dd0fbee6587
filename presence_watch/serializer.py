"""
Serialization for the presence detection pipeline.

Responsibility:
    Export per-frame detection results and presence events as JSON Lines
    for offline analysis. One line is written per frame as it arrives,
    so a stream that runs for hours never accumulates frames in memory.

Non-goals:
    - No rendering, display, or detection logic.
    - No reading back or aggregation; each line stands alone.
"""

import json
import logging
from pathlib import Path
from typing import IO, Optional

from presence_watch.detection import DetectionSet
from presence_watch.presence import PresenceEvent

logger = logging.getLogger(__name__)


def frame_record(
    frame_id: int,
    detections: DetectionSet,
    event: Optional[PresenceEvent],
) -> dict:
    """Build the JSON object written for one frame.

    Schema:
        {
            "frame_id": 0,
            "detections": {"frontal_faces": [...], "profile_faces": [...],
                           "eyes": [...], "valid_eyes": [...]},
            "event": null | "absence_confirmed" | "presence_regained"
        }
    """
    return {
        "frame_id": frame_id,
        "detections": detections.to_dict(),
        "event": event.value if event is not None else None,
    }


class JsonLinesWriter:
    """Appends one JSON object per frame to a .jsonl file.

    The file is opened on the first write and flushed after every line.

    Usage:
        writer = JsonLinesWriter("output/detections.jsonl")
        writer.write(frame_id, detections, event)
        ...
        writer.close()
    """

    def __init__(self, output_path: str) -> None:
        self._path = Path(output_path)
        self._file: Optional[IO[str]] = None
        self._frames = 0
        self._events = 0

    def write(
        self,
        frame_id: int,
        detections: DetectionSet,
        event: Optional[PresenceEvent] = None,
    ) -> None:
        """Write one frame's record.

        Raises:
            OSError: If the output path is not writable.
        """
        if self._file is None:
            _ensure_parent_dir(self._path)
            self._file = open(self._path, "w", encoding="utf-8")
            logger.info("JSON Lines output opened: %s", self._path)

        self._file.write(json.dumps(frame_record(frame_id, detections, event)))
        self._file.write("\n")
        self._file.flush()

        self._frames += 1
        if event is not None:
            self._events += 1

    def close(self) -> None:
        """Close the file. Safe to call more than once."""
        if self._file is None:
            return
        self._file.close()
        self._file = None
        logger.info(
            "JSON Lines output saved: %s (%d frames, %d events)",
            self._path, self._frames, self._events,
        )

    @property
    def frames_written(self) -> int:
        return self._frames

    @property
    def events_written(self) -> int:
        return self._events


def _ensure_parent_dir(path: Path) -> None:
    """Create parent directories if they don't exist."""
    path.parent.mkdir(parents=True, exist_ok=True)
