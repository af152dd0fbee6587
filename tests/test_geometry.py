"""
Tests for the geometry module.
"""

import pytest

from presence_watch.geometry import Rectangle, contains


def test_contains_is_reflexive():
    """A rectangle contains itself."""
    for rect in [
        Rectangle(0, 0, 10, 10),
        Rectangle(5, 7, 5, 7),  # zero area
        Rectangle(-3, -3, 40, 2),
    ]:
        assert contains(rect, rect)


def test_contains_strictly_larger():
    """A strictly larger box contains the smaller one, not the reverse."""
    outer = Rectangle(0, 0, 100, 100)
    inner = Rectangle(10, 10, 20, 20)

    assert contains(outer, inner)
    assert not contains(inner, outer)


def test_contains_touching_edges():
    """Shared edges still count as contained."""
    outer = Rectangle(0, 0, 50, 50)

    assert contains(outer, Rectangle(0, 0, 10, 10))
    assert contains(outer, Rectangle(40, 40, 50, 50))
    assert contains(outer, Rectangle(0, 20, 50, 30))


def test_contains_partial_overlap():
    """Overlapping but protruding boxes are not contained."""
    outer = Rectangle(0, 0, 50, 50)

    assert not contains(outer, Rectangle(45, 10, 55, 20))
    assert not contains(outer, Rectangle(-1, 10, 10, 20))
    assert not contains(outer, Rectangle(10, 45, 20, 51))


def test_contains_degenerate_inner():
    """Zero-area boxes follow the same rule."""
    outer = Rectangle(0, 0, 10, 10)

    assert contains(outer, Rectangle(10, 10, 10, 10))
    assert not contains(outer, Rectangle(11, 5, 11, 5))


def test_from_xywh():
    """OpenCV (x, y, w, h) boxes map to min/max corners."""
    rect = Rectangle.from_xywh(10, 20, 30, 40)

    assert rect == Rectangle(10, 20, 40, 60)
    assert rect.width == 30
    assert rect.height == 40
    assert rect.area == 1200


def test_malformed_rectangle_rejected():
    """min greater than max on either axis is rejected."""
    with pytest.raises(ValueError, match="Malformed"):
        Rectangle(10, 0, 5, 10)

    with pytest.raises(ValueError, match="Malformed"):
        Rectangle(0, 10, 10, 5)


def test_to_dict():
    assert Rectangle(1, 2, 3, 4).to_dict() == {
        "min_x": 1, "min_y": 2, "max_x": 3, "max_y": 4,
    }
