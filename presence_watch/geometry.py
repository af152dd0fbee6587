"""
Bounding-box geometry.

This module defines the Rectangle value type shared by every stage of
the pipeline and the containment predicate used to match eyes to faces.

Non-goals:
    - No overlap / IoU metrics.
    - No coordinate scaling or clamping.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rectangle:
    """An axis-aligned box in absolute pixel coordinates.

    Attributes:
        min_x: Left edge.
        min_y: Top edge.
        max_x: Right edge.
        max_y: Bottom edge.

    Zero-area rectangles are valid.
    """

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(
                f"Malformed rectangle: min ({self.min_x}, {self.min_y}) "
                f"exceeds max ({self.max_x}, {self.max_y})."
            )

    @classmethod
    def from_xywh(cls, x: int, y: int, w: int, h: int) -> "Rectangle":
        """Build a Rectangle from an OpenCV (x, y, width, height) box."""
        x, y, w, h = int(x), int(y), int(w), int(h)
        return cls(min_x=x, min_y=y, max_x=x + w, max_y=y + h)

    def to_dict(self) -> dict:
        """Return a plain dict suitable for JSON serialization."""
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }

    @property
    def width(self) -> int:
        """Box width in pixels."""
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        """Box height in pixels."""
        return self.max_y - self.min_y

    @property
    def area(self) -> int:
        """Box area in pixels."""
        return self.width * self.height


def contains(outer: Rectangle, inner: Rectangle) -> bool:
    """Return True if ``inner`` lies entirely inside ``outer``.

    Shared edges count as contained.
    """
    return (
        outer.min_x <= inner.min_x
        and outer.min_y <= inner.min_y
        and outer.max_x >= inner.max_x
        and outer.max_y >= inner.max_y
    )
