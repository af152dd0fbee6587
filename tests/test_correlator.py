"""
Tests for the correlator module.
"""

from presence_watch.correlator import correlate
from presence_watch.geometry import Rectangle, contains


def test_correlate_empty_inputs():
    """No eyes or no faces yields nothing."""
    eye = Rectangle(10, 10, 20, 20)

    assert correlate([], [], []) == []
    assert correlate([eye], [], []) == []
    assert correlate([], [Rectangle(0, 0, 100, 100)], []) == []


def test_correlate_frontal_match():
    """An eye inside a frontal face is accepted."""
    eye = Rectangle(10, 10, 20, 20)
    face = Rectangle(0, 0, 100, 100)

    assert correlate([eye], [face], []) == [eye]


def test_correlate_profile_fallback():
    """An eye outside every frontal face is still accepted by a profile face."""
    eye = Rectangle(210, 10, 220, 20)
    frontal = Rectangle(0, 0, 100, 100)
    profile = Rectangle(200, 0, 300, 100)

    assert correlate([eye], [frontal], [profile]) == [eye]


def test_correlate_eye_in_both_face_kinds():
    """Being inside both a frontal and a profile face accepts the eye once."""
    eye = Rectangle(10, 10, 20, 20)
    frontal = Rectangle(0, 0, 100, 100)
    profile = Rectangle(0, 0, 50, 50)

    assert correlate([eye], [frontal], [profile]) == [eye]


def test_correlate_drops_stray_eyes():
    """Eyes outside every face are dropped; order of the rest is preserved."""
    face = Rectangle(0, 0, 100, 100)
    eyes = [
        Rectangle(10, 10, 20, 20),
        Rectangle(150, 150, 160, 160),
        Rectangle(60, 10, 70, 20),
        Rectangle(95, 95, 105, 105),
    ]

    assert correlate(eyes, [face], []) == [eyes[0], eyes[2]]


def test_correlate_many_eyes_in_one_face():
    """There is no limit on eyes per face."""
    face = Rectangle(0, 0, 100, 100)
    eyes = [Rectangle(i * 10, 10, i * 10 + 5, 15) for i in range(5)]

    assert correlate(eyes, [face], []) == eyes


def test_correlate_subset_law():
    """Every accepted eye comes from the input and lies inside some face."""
    frontal = [Rectangle(0, 0, 60, 60), Rectangle(300, 300, 400, 400)]
    profile = [Rectangle(100, 0, 200, 80)]
    eyes = [
        Rectangle(x, y, x + 12, y + 8)
        for x in range(0, 420, 30)
        for y in range(0, 420, 45)
    ]

    valid = correlate(eyes, frontal, profile)

    assert valid
    assert len(valid) < len(eyes)
    for eye in valid:
        assert eye in eyes
        assert any(contains(face, eye) for face in frontal + profile)
    for eye in eyes:
        if eye not in valid:
            assert not any(contains(face, eye) for face in frontal + profile)
