"""
Visualization for the presence detection pipeline.

Responsibility:
    Draw face boxes and the eyes that fall inside them onto a frame.
    This is a pure rendering module. It produces an annotated copy
    of the frame and performs no I/O.

Non-goals:
    - No file writing or window management beyond show_frame().
    - No detection logic.
    - Rejected eyes (outside every face) are never drawn.
"""

from typing import Iterable, Tuple

import cv2
import numpy as np

from presence_watch.config import VisualizationConfig
from presence_watch.detection import DetectionSet
from presence_watch.geometry import Rectangle

_WINDOW_NAME = "Face Detection"


def _draw_boxes(
    image: np.ndarray,
    boxes: Iterable[Rectangle],
    color: Tuple[int, int, int],
    thickness: int,
) -> None:
    for box in boxes:
        cv2.rectangle(
            image,
            (box.min_x, box.min_y),
            (box.max_x, box.max_y),
            color=color,
            thickness=thickness,
        )


def draw_detections(
    frame: np.ndarray,
    detections: DetectionSet,
    config: VisualizationConfig,
) -> np.ndarray:
    """Draw faces and valid eyes onto a frame.

    Args:
        frame: Input BGR image (not modified; a copy is returned).
        detections: The frame's DetectionSet.
        config: Visualization parameters (colors, thickness).

    Returns:
        A new BGR numpy array with detections drawn.
    """
    annotated = frame.copy()

    _draw_boxes(annotated, detections.faces, config.face_color, config.thickness)
    _draw_boxes(annotated, detections.valid_eyes, config.eye_color, config.thickness)

    return annotated


def show_frame(
    frame: np.ndarray,
    detections: DetectionSet,
    config: VisualizationConfig,
) -> int:
    """Show annotated frame in a window and return key press.

    Returns:
        The key code (int) pressed during waitKey, or 255 if no key.
    """
    annotated = draw_detections(frame, detections, config)
    cv2.imshow(_WINDOW_NAME, annotated)
    return cv2.waitKey(1) & 0xFF
