"""
Tests for the input and output handlers that need no camera or window.
"""

import json

import numpy as np
import pytest

from presence_watch.config import AppConfig, OutputConfig
from presence_watch.detection import DetectionSet
from presence_watch.geometry import Rectangle
from presence_watch.input_handler import InputHandler
from presence_watch.output_handler import OutputHandler
from presence_watch.presence import PresenceEvent


def test_input_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        InputHandler(source=str(tmp_path / "nope.mp4"))


def test_input_unsupported_extension(tmp_path):
    path = tmp_path / "frame.png"
    path.write_bytes(b"")

    with pytest.raises(ValueError, match="extension"):
        InputHandler(source=str(path))


def test_input_unreadable_video(tmp_path):
    path = tmp_path / "broken.mp4"
    path.write_bytes(b"not a video")

    with pytest.raises(RuntimeError, match="Failed to open"):
        InputHandler(source=str(path))


def test_output_headless_mode(tmp_path):
    """'none' renders nothing and never asks to stop."""
    config = AppConfig(output=OutputConfig(mode="none", save_path=str(tmp_path / "out")))
    handler = OutputHandler(config)

    frame = np.zeros((10, 10, 3), dtype=np.uint8)
    assert handler.process_frame(0, frame, DetectionSet()) is True
    handler.finalize()

    assert not (tmp_path / "out").exists()


def test_output_save_json(tmp_path):
    config = AppConfig(output=OutputConfig(mode="save_json", save_path=str(tmp_path)))
    handler = OutputHandler(config)
    frame = np.zeros((10, 10, 3), dtype=np.uint8)
    face = Rectangle(0, 0, 5, 5)

    handler.process_frame(0, frame, DetectionSet(frontal_faces=(face,)))
    handler.process_frame(1, frame, DetectionSet(), PresenceEvent.ABSENCE_CONFIRMED)
    handler.finalize()

    lines = (tmp_path / "detections.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert json.loads(lines[1])["event"] == "absence_confirmed"


def test_output_save_json_keeps_no_frames_in_memory(tmp_path):
    """A long run streams to disk; the handler holds no per-frame state."""
    config = AppConfig(output=OutputConfig(mode="save_json", save_path=str(tmp_path)))
    handler = OutputHandler(config)
    frame = np.zeros((10, 10, 3), dtype=np.uint8)
    face = Rectangle(0, 0, 5, 5)

    handler.process_frame(0, frame, DetectionSet(frontal_faces=(face,)))
    baseline = dict(vars(handler))
    for frame_id in range(1, 2000):
        handler.process_frame(frame_id, frame, DetectionSet(frontal_faces=(face,)))

    for name, value in vars(handler).items():
        assert value is baseline[name], name
        if isinstance(value, (list, dict, set, tuple)):
            assert len(value) == len(baseline[name]), name

    path = tmp_path / "detections.jsonl"
    assert len(path.read_text(encoding="utf-8").splitlines()) == 2000
    handler.finalize()
    assert len(path.read_text(encoding="utf-8").splitlines()) == 2000
