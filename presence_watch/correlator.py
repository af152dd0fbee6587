"""
Eye-to-face correlation.

Responsibility:
    Filter one frame's eye detections down to the eyes that fall inside
    a detected face. Frontal faces are searched first; profile faces are
    only consulted for eyes no frontal face contains.

Non-goals:
    - No pairing of eyes with a specific face.
    - No limit on how many eyes a face may hold.
"""

from typing import List, Sequence

from presence_watch.geometry import Rectangle, contains


def correlate(
    eyes: Sequence[Rectangle],
    frontal_faces: Sequence[Rectangle],
    profile_faces: Sequence[Rectangle],
) -> List[Rectangle]:
    """Return the eyes contained in at least one face.

    Args:
        eyes: Eye boxes from this frame, in detector order.
        frontal_faces: Frontal face boxes from the same frame.
        profile_faces: Profile face boxes from the same frame.

    Returns:
        The accepted eyes, in the order they appear in ``eyes``.
        Empty if there are no eyes or no faces.
    """
    valid_eyes: List[Rectangle] = []

    for eye in eyes:
        if any(contains(face, eye) for face in frontal_faces):
            valid_eyes.append(eye)
        elif any(contains(face, eye) for face in profile_faces):
            valid_eyes.append(eye)

    return valid_eyes
