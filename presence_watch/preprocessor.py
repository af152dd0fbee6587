"""
Preprocessing for the cascade detectors.

Responsibility:
    Convert a raw frame (numpy array) into the single-channel 8-bit
    image Haar cascades operate on.

Non-goals:
    - No frame acquisition or I/O.
    - No detection or coordinate mapping.

Hard-coded:
    - Color input is assumed BGR (as returned by OpenCV).
"""

import numpy as np
import cv2


def preprocess(frame: np.ndarray) -> np.ndarray:
    """Convert a frame into a grayscale image.

    Args:
        frame: Input image, either BGR (H, W, 3) or already grayscale (H, W).

    Returns:
        A 2D uint8 numpy array of shape (H, W). Grayscale input is
        returned unchanged.

    Raises:
        ValueError: If the frame is empty or has unexpected dimensions.
    """
    if frame is None or frame.size == 0:
        raise ValueError(
            "Cannot preprocess an empty frame. "
            "Ensure the input source is providing valid frames."
        )

    if frame.ndim == 2:
        return frame

    if frame.ndim != 3 or frame.shape[2] != 3:
        raise ValueError(
            f"Expected a grayscale (H, W) or BGR (H, W, 3) frame, "
            f"got shape {frame.shape}."
        )

    return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
