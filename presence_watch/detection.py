"""
Per-frame detection result.

This module defines DetectionSet, the object returned by
FramePipeline.process() for rendering and export. It is a frozen
container; each frame gets a fresh one.

Non-goals:
    - No rendering logic.
    - No file I/O.
"""

from dataclasses import dataclass
from typing import Tuple

from presence_watch.geometry import Rectangle


@dataclass(frozen=True)
class DetectionSet:
    """All boxes found in one frame.

    Attributes:
        frontal_faces: Frontal face boxes.
        profile_faces: Profile face boxes.
        eyes: Every eye box the detector returned.
        valid_eyes: The subset of ``eyes`` lying inside some face box
                    of this same frame.
    """

    frontal_faces: Tuple[Rectangle, ...] = ()
    profile_faces: Tuple[Rectangle, ...] = ()
    eyes: Tuple[Rectangle, ...] = ()
    valid_eyes: Tuple[Rectangle, ...] = ()

    @property
    def faces_seen(self) -> bool:
        """True if any frontal or profile face was detected."""
        return bool(self.frontal_faces) or bool(self.profile_faces)

    @property
    def faces(self) -> Tuple[Rectangle, ...]:
        """Frontal faces followed by profile faces."""
        return self.frontal_faces + self.profile_faces

    def summary(self) -> str:
        return (
            f"{len(self.frontal_faces)} front face(s), "
            f"{len(self.profile_faces)} side face(s), "
            f"{len(self.eyes)} eye(s) ({len(self.valid_eyes)} valid)"
        )

    def to_dict(self) -> dict:
        """Return a plain dict suitable for JSON serialization."""
        return {
            "frontal_faces": [r.to_dict() for r in self.frontal_faces],
            "profile_faces": [r.to_dict() for r in self.profile_faces],
            "eyes": [r.to_dict() for r in self.eyes],
            "valid_eyes": [r.to_dict() for r in self.valid_eyes],
        }
