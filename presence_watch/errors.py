"""
Exception types for the presence detection pipeline.

Failure classes:
    - ConfigError: classifiers or configuration failed at startup. Fatal.
    - DetectorError: a single frame could not be analyzed. The caller
      may skip the frame and continue.
    - EventLogError: the event log could not be written. Never fatal;
      the event is dropped, not retried.
"""


class ConfigError(RuntimeError):
    """Raised when classifier resources cannot be initialized."""


class DetectorError(RuntimeError):
    """Raised when detection fails for a single frame."""


class EventLogError(OSError):
    """Raised when a presence event cannot be appended to the log."""
