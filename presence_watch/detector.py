"""
CascadeDetector: multi-scale Haar cascade detection for one feature class.

Public contract:
    CascadeDetector.detect(frame: np.ndarray, params: DetectionParams)
        -> list[Rectangle]

Constraints:
    - Input must be a BGR or grayscale numpy array.
    - Boxes come back in whatever order OpenCV produces them; there is
      no uniqueness or stability guarantee across frames.
    - Thread-safety is not guaranteed (single-threaded design).

Non-goals:
    - No file reading, camera access, or I/O of any kind.
    - No correlation between feature classes (see correlator).
    - No tracking or temporal state.
"""

import logging
from typing import List

import cv2
import numpy as np

from presence_watch.config import DetectionParams
from presence_watch.errors import DetectorError
from presence_watch.geometry import Rectangle
from presence_watch.preprocessor import preprocess

logger = logging.getLogger(__name__)


class CascadeDetector:
    """Runs one Haar cascade over a frame.

    Usage:
        bank = load_cascades(config.cascades)
        faces = CascadeDetector(bank[FRONTAL_FACE], name="frontal_face")
        boxes = faces.detect(frame, config.face_params)
    """

    def __init__(self, classifier: cv2.CascadeClassifier, name: str = "cascade") -> None:
        self._classifier = classifier
        self._name = name

    def detect(self, frame: np.ndarray, params: DetectionParams) -> List[Rectangle]:
        """Detect every instance of this feature class in a frame.

        Args:
            frame: BGR image (H, W, 3) or grayscale image (H, W), uint8.
            params: Multi-scale search parameters.

        Returns:
            A list of Rectangle objects, possibly empty.

        Raises:
            DetectorError: If the frame is malformed or OpenCV fails.
        """
        self._validate_frame(frame)

        try:
            gray = preprocess(frame)
            boxes = self._classifier.detectMultiScale(
                gray,
                scaleFactor=params.scale_factor,
                minNeighbors=params.min_neighbors,
                flags=params.flags,
                minSize=tuple(params.min_size),
                maxSize=tuple(params.max_size),
            )
        except (cv2.error, ValueError) as e:
            raise DetectorError(f"{self._name} detection failed: {e}") from e

        return [Rectangle.from_xywh(x, y, w, h) for (x, y, w, h) in boxes]

    @staticmethod
    def _validate_frame(frame: np.ndarray) -> None:
        """Validate that the input frame meets the API contract.

        Raises:
            DetectorError: If frame is not a non-empty gray or BGR ndarray.
        """
        if not isinstance(frame, np.ndarray):
            raise DetectorError(
                f"Expected frame to be a numpy ndarray, "
                f"got {type(frame).__name__}. "
                f"Use VideoCapture.read() to obtain frames."
            )

        if frame.size == 0:
            raise DetectorError(
                "Frame is empty (zero size). "
                "Ensure the input source is providing valid frames."
            )

        if frame.ndim not in (2, 3):
            raise DetectorError(
                f"Expected a 2- or 3-dimensional frame, "
                f"got {frame.ndim} dimensions with shape {frame.shape}."
            )

        if frame.ndim == 3 and frame.shape[2] != 3:
            raise DetectorError(
                f"Expected 3 channels (BGR), got {frame.shape[2]} channels. "
                f"Input must be a BGR image as returned by OpenCV."
            )
