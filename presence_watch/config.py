"""
Configuration management for the presence detection system.

Provides a layered configuration system with the following precedence
(highest to lowest):

    CLI arguments > Environment variables > YAML config file > Defaults

Design constraints:
    - The system MUST run with zero configuration (safe defaults only).
    - Missing or invalid values fail early and loudly.
    - No detection logic, I/O, or model loading belongs here.

Non-goals:
    - No dynamic reloading.
    - No remote configuration.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------

def resolve_path(path: str) -> Path:
    """Resolve a possibly relative path against the current working directory."""
    resolved = Path(path).expanduser()
    if not resolved.is_absolute():
        resolved = Path.cwd() / resolved
    return resolved


# ---------------------------------------------------------------------------
# Configuration dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CascadeConfig:
    """Haar cascade file locations.

    Attributes:
        directory: Directory holding the cascade XML files. None means
                   the files bundled with OpenCV (cv2.data.haarcascades).
        frontal_face: File name of the frontal face cascade.
        profile_face: File name of the profile face cascade.
        eye: File name of the eye cascade.
    """

    directory: Optional[str] = None
    frontal_face: str = "haarcascade_frontalface_default.xml"
    profile_face: str = "haarcascade_profileface.xml"
    eye: str = "haarcascade_eye.xml"


@dataclass(frozen=True)
class DetectionParams:
    """Multi-scale detection parameters for one feature class.

    Attributes:
        scale_factor: Image pyramid step. Must be > 1.0.
        min_neighbors: Neighbor hits required to keep a candidate.
        flags: Legacy cascade flags, passed through to OpenCV.
        min_size: Smallest box (width, height) to report.
        max_size: Largest box (width, height) to report. (0, 0) means no limit.
    """

    scale_factor: float = 1.2
    min_neighbors: int = 4
    flags: int = 0
    min_size: Tuple[int, int] = (150, 150)
    max_size: Tuple[int, int] = (0, 0)


def _default_eye_params() -> DetectionParams:
    return DetectionParams(
        scale_factor=1.2,
        min_neighbors=7,
        flags=0,
        min_size=(25, 15),
        max_size=(90, 70),
    )


@dataclass(frozen=True)
class PresenceConfig:
    """Presence tracking configuration.

    Attributes:
        timeout_seconds: Time without any face before an absence is confirmed.
        log_path: Append-only event log file (relative to the working directory).
    """

    timeout_seconds: float = 30.0
    log_path: str = "log.txt"


@dataclass(frozen=True)
class InputConfig:
    """Input source configuration.

    Attributes:
        source: Webcam device index (as string or int) or video file path.
        resize_width: Optional width to downscale input frames before detection.
                      None means no resizing.
    """

    source: str = "0"
    resize_width: Optional[int] = None


@dataclass(frozen=True)
class OutputConfig:
    """Output behavior configuration.

    Attributes:
        mode: Output mode(s). Comma-separated values from
              'display', 'save_video', 'save_json', or 'none'.
        save_path: Directory where output artifacts are written.
    """

    mode: str = "display"
    save_path: str = "output/"


@dataclass(frozen=True)
class VisualizationConfig:
    """Visualization rendering parameters.

    Attributes:
        face_color: BGR color for face boxes.
        eye_color: BGR color for valid eye boxes.
        thickness: Line thickness in pixels.
    """

    face_color: Tuple[int, int, int] = (0, 255, 0)
    eye_color: Tuple[int, int, int] = (0, 0, 255)
    thickness: int = 3


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration.

    Aggregates all sub-configurations into a single, frozen object.
    """

    cascades: CascadeConfig = field(default_factory=CascadeConfig)
    face_params: DetectionParams = field(default_factory=DetectionParams)
    eye_params: DetectionParams = field(default_factory=_default_eye_params)
    presence: PresenceConfig = field(default_factory=PresenceConfig)
    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

_VALID_OUTPUT_MODES = {"display", "save_video", "save_json", "none"}


def parse_modes(mode: str) -> set:
    """Split a comma-separated output mode string into a set."""
    return {m.strip() for m in mode.split(",") if m.strip()}


def _validate_params(name: str, params: DetectionParams) -> None:
    if params.scale_factor <= 1.0:
        raise ValueError(
            f"{name}.scale_factor must be greater than 1.0, "
            f"got {params.scale_factor}."
        )

    if params.min_neighbors < 0:
        raise ValueError(
            f"{name}.min_neighbors must be >= 0, got {params.min_neighbors}."
        )

    for attr in ("min_size", "max_size"):
        size = getattr(params, attr)
        if len(size) != 2 or any(d < 0 for d in size):
            raise ValueError(
                f"{name}.{attr} must be a non-negative (width, height) pair, "
                f"got {size}."
            )

    bounded = params.max_size != (0, 0)
    if bounded and (
        params.max_size[0] < params.min_size[0]
        or params.max_size[1] < params.min_size[1]
    ):
        raise ValueError(
            f"{name}.max_size {params.max_size} is smaller than "
            f"min_size {params.min_size}."
        )


def validate_config(config: AppConfig) -> None:
    """Validate configuration values. Raises ValueError on invalid state."""

    _validate_params("face_params", config.face_params)
    _validate_params("eye_params", config.eye_params)

    if config.presence.timeout_seconds <= 0:
        raise ValueError(
            f"presence.timeout_seconds must be positive, "
            f"got {config.presence.timeout_seconds}."
        )

    modes = parse_modes(config.output.mode)
    invalid_modes = modes - _VALID_OUTPUT_MODES
    if invalid_modes:
        raise ValueError(
            f"Invalid output.mode(s): {invalid_modes}. "
            f"Valid modes: {_VALID_OUTPUT_MODES}. "
            f"Use comma-separated values for multiple outputs."
        )

    if "none" in modes and len(modes) > 1:
        raise ValueError("output.mode 'none' cannot be combined with other modes.")

    if config.input.resize_width is not None and config.input.resize_width <= 0:
        raise ValueError(
            f"input.resize_width must be positive or None, "
            f"got {config.input.resize_width}."
        )

    if config.visualization.thickness <= 0:
        raise ValueError(
            f"visualization.thickness must be positive, "
            f"got {config.visualization.thickness}."
        )


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------

def _parse_tuple(value, expected_len: int, cast_type):
    """Convert a list from YAML into a tuple of the expected type and length.

    Raises:
        ValueError: If value is not a list of exactly expected_len items.
    """
    if not isinstance(value, (list, tuple)):
        raise ValueError(
            f"Expected a list of {expected_len} values, got {value!r}"
        )
    if len(value) != expected_len:
        raise ValueError(
            f"Expected {expected_len} values, got {len(value)}: {value}"
        )
    return tuple(cast_type(v) for v in value)


def _build_cascade_config(raw: dict) -> CascadeConfig:
    kwargs = {}
    if "directory" in raw:
        val = raw["directory"]
        kwargs["directory"] = str(val) if val is not None else None
    for key in ("frontal_face", "profile_face", "eye"):
        if key in raw:
            kwargs[key] = str(raw[key])
    return CascadeConfig(**kwargs)


def _build_detection_params(raw: dict, defaults: DetectionParams) -> DetectionParams:
    """Build DetectionParams from a raw YAML dict on top of ``defaults``."""
    kwargs = {}
    if "scale_factor" in raw:
        kwargs["scale_factor"] = float(raw["scale_factor"])
    if "min_neighbors" in raw:
        kwargs["min_neighbors"] = int(raw["min_neighbors"])
    if "flags" in raw:
        kwargs["flags"] = int(raw["flags"])
    if "min_size" in raw:
        kwargs["min_size"] = _parse_tuple(raw["min_size"], 2, int)
    if "max_size" in raw:
        kwargs["max_size"] = _parse_tuple(raw["max_size"], 2, int)
    return replace(defaults, **kwargs)


def _build_presence_config(raw: dict) -> PresenceConfig:
    kwargs = {}
    if "timeout_seconds" in raw:
        kwargs["timeout_seconds"] = float(raw["timeout_seconds"])
    if "log_path" in raw:
        kwargs["log_path"] = str(raw["log_path"])
    return PresenceConfig(**kwargs)


def _build_input_config(raw: dict) -> InputConfig:
    kwargs = {}
    if "source" in raw:
        kwargs["source"] = str(raw["source"])
    if "resize_width" in raw:
        val = raw["resize_width"]
        kwargs["resize_width"] = int(val) if val is not None else None
    return InputConfig(**kwargs)


def _build_output_config(raw: dict) -> OutputConfig:
    kwargs = {}
    if "mode" in raw:
        kwargs["mode"] = str(raw["mode"]).lower()
    if "save_path" in raw:
        kwargs["save_path"] = str(raw["save_path"])
    return OutputConfig(**kwargs)


def _build_visualization_config(raw: dict) -> VisualizationConfig:
    kwargs = {}
    if "face_color" in raw:
        kwargs["face_color"] = _parse_tuple(raw["face_color"], 3, int)
    if "eye_color" in raw:
        kwargs["eye_color"] = _parse_tuple(raw["eye_color"], 3, int)
    if "thickness" in raw:
        kwargs["thickness"] = int(raw["thickness"])
    return VisualizationConfig(**kwargs)


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------

_ENV_PREFIX = "PRESENCE_WATCH_"


def _apply_env_overrides(raw: dict) -> dict:
    """Apply environment variable overrides to the raw config dict.

    Environment variables follow the pattern:
        PRESENCE_WATCH_PRESENCE_TIMEOUT_SECONDS=10
        PRESENCE_WATCH_INPUT_SOURCE=doorway.mp4
    """
    env_map = {
        f"{_ENV_PREFIX}CASCADES_DIRECTORY": ("cascades", "directory"),
        f"{_ENV_PREFIX}PRESENCE_TIMEOUT_SECONDS": ("presence", "timeout_seconds"),
        f"{_ENV_PREFIX}PRESENCE_LOG_PATH": ("presence", "log_path"),
        f"{_ENV_PREFIX}INPUT_SOURCE": ("input", "source"),
        f"{_ENV_PREFIX}INPUT_RESIZE_WIDTH": ("input", "resize_width"),
        f"{_ENV_PREFIX}OUTPUT_MODE": ("output", "mode"),
        f"{_ENV_PREFIX}OUTPUT_SAVE_PATH": ("output", "save_path"),
    }

    for env_var, (section, key) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            raw.setdefault(section, {})[key] = value
            logger.debug("Config override from env: %s=%s", env_var, value)

    return raw


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------

def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load and validate application configuration.

    Precedence (highest → lowest):
        Environment variables > YAML file > Hard-coded defaults

    Args:
        config_path: Path to a YAML configuration file. If None,
                     the system runs entirely on defaults.

    Returns:
        A validated, frozen AppConfig instance.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        ValueError: If any configuration value is invalid.
        yaml.YAMLError: If the YAML file is malformed.
    """
    raw: dict = {}

    # --- Layer 1: YAML file ---
    if config_path is not None:
        resolved = resolve_path(config_path)

        if not resolved.is_file():
            raise FileNotFoundError(
                f"Configuration file not found: {resolved}. "
                f"Provide a valid path or omit to use defaults."
            )

        logger.info("Loading config from: %s", resolved)
        with open(resolved, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    # --- Layer 2: Environment variable overrides ---
    raw = _apply_env_overrides(raw)

    # --- Build typed configs ---
    config = AppConfig(
        cascades=_build_cascade_config(raw.get("cascades") or {}),
        face_params=_build_detection_params(
            raw.get("face_params") or {}, DetectionParams()
        ),
        eye_params=_build_detection_params(
            raw.get("eye_params") or {}, _default_eye_params()
        ),
        presence=_build_presence_config(raw.get("presence") or {}),
        input=_build_input_config(raw.get("input") or {}),
        output=_build_output_config(raw.get("output") or {}),
        visualization=_build_visualization_config(raw.get("visualization") or {}),
    )

    # --- Validate ---
    validate_config(config)

    logger.debug("Configuration loaded: %s", config)
    return config
