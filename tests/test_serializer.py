"""
Tests for the JSON Lines serializer.
"""

import json

from presence_watch.detection import DetectionSet
from presence_watch.geometry import Rectangle
from presence_watch.presence import PresenceEvent
from presence_watch.serializer import JsonLinesWriter, frame_record


def test_frame_record_schema():
    face = Rectangle(0, 0, 100, 100)
    eye = Rectangle(10, 10, 20, 20)
    detections = DetectionSet(frontal_faces=(face,), eyes=(eye,), valid_eyes=(eye,))

    record = frame_record(1, detections, None)

    assert record["frame_id"] == 1
    assert record["event"] is None
    assert record["detections"]["valid_eyes"] == [eye.to_dict()]
    assert record["detections"]["profile_faces"] == []


def test_writer_one_line_per_frame(tmp_path):
    output = tmp_path / "nested" / "detections.jsonl"
    writer = JsonLinesWriter(str(output))

    writer.write(1, DetectionSet(frontal_faces=(Rectangle(0, 0, 5, 5),)))
    writer.write(3, DetectionSet(), PresenceEvent.ABSENCE_CONFIRMED)
    writer.close()

    lines = output.read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["frame_id"] for r in records] == [1, 3]
    assert records[0]["event"] is None
    assert records[1]["event"] == "absence_confirmed"
    assert writer.frames_written == 2
    assert writer.events_written == 1


def test_writer_lines_readable_before_close(tmp_path):
    """Each frame is on disk as soon as it is written."""
    output = tmp_path / "detections.jsonl"
    writer = JsonLinesWriter(str(output))

    writer.write(0, DetectionSet())

    assert len(output.read_text(encoding="utf-8").splitlines()) == 1
    writer.close()


def test_writer_close_without_writes(tmp_path):
    output = tmp_path / "detections.jsonl"
    writer = JsonLinesWriter(str(output))

    writer.close()
    writer.close()

    assert not output.exists()
