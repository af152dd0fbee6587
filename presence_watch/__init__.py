"""
presence_watch: debounced face presence detection over a live video stream.

Public API:
    - FramePipeline / build_pipeline: per-frame detection, eye
      correlation, and presence tracking.
    - PresenceTracker / PresenceEvent: the presence state machine.
    - correlate / contains / Rectangle: geometry and eye filtering.
    - DetectionSet: one frame's boxes.
    - load_cascades / CascadeDetector / EventLog: OpenCV and file adapters.

Usage:
    from presence_watch import build_pipeline, load_cascades, load_config

    config = load_config()
    with load_cascades(config.cascades) as bank:
        pipeline = build_pipeline(config, bank)
        detections, event = pipeline.process(frame)
"""

from presence_watch.config import AppConfig, DetectionParams, load_config
from presence_watch.correlator import correlate
from presence_watch.detection import DetectionSet
from presence_watch.detector import CascadeDetector
from presence_watch.errors import ConfigError, DetectorError, EventLogError
from presence_watch.event_log import EventLog
from presence_watch.geometry import Rectangle, contains
from presence_watch.model_loader import CascadeBank, load_cascades
from presence_watch.pipeline import FramePipeline, build_pipeline
from presence_watch.presence import PresenceEvent, PresenceState, PresenceTracker

__all__ = [
    "AppConfig",
    "CascadeBank",
    "CascadeDetector",
    "ConfigError",
    "DetectionParams",
    "DetectionSet",
    "DetectorError",
    "EventLog",
    "EventLogError",
    "FramePipeline",
    "PresenceEvent",
    "PresenceState",
    "PresenceTracker",
    "Rectangle",
    "build_pipeline",
    "contains",
    "correlate",
    "load_cascades",
    "load_config",
]
