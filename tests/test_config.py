"""
Tests for the configuration module.
"""

import pytest

from presence_watch.config import (
    AppConfig,
    DetectionParams,
    OutputConfig,
    PresenceConfig,
    load_config,
    resolve_path,
    validate_config,
)


def test_load_defaults():
    """Test loading configuration without any file."""
    config = load_config(None)
    assert isinstance(config, AppConfig)
    assert config.presence.timeout_seconds == 30.0
    assert config.face_params == DetectionParams(1.2, 4, 0, (150, 150), (0, 0))
    assert config.eye_params == DetectionParams(1.2, 7, 0, (25, 15), (90, 70))
    assert config.cascades.directory is None


def test_validation_failure():
    """Test fail-fast validation."""
    bad_config = AppConfig(face_params=DetectionParams(scale_factor=1.0))
    with pytest.raises(ValueError, match="scale_factor"):
        validate_config(bad_config)

    bad_config = AppConfig(eye_params=DetectionParams(min_neighbors=-1))
    with pytest.raises(ValueError, match="min_neighbors"):
        validate_config(bad_config)

    bad_config = AppConfig(
        eye_params=DetectionParams(min_size=(50, 50), max_size=(40, 40))
    )
    with pytest.raises(ValueError, match="max_size"):
        validate_config(bad_config)

    bad_config = AppConfig(presence=PresenceConfig(timeout_seconds=0))
    with pytest.raises(ValueError, match="timeout_seconds"):
        validate_config(bad_config)

    bad_config = AppConfig(output=OutputConfig(mode="display,save_csv"))
    with pytest.raises(ValueError, match="output.mode"):
        validate_config(bad_config)

    bad_config = AppConfig(output=OutputConfig(mode="none,display"))
    with pytest.raises(ValueError, match="none"):
        validate_config(bad_config)


def test_yaml_layer(tmp_path):
    """YAML values override defaults; unspecified keys keep their defaults."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "presence:\n"
        "  timeout_seconds: 12\n"
        "eye_params:\n"
        "  min_neighbors: 3\n"
        "  max_size: [120, 80]\n"
        "output:\n"
        "  mode: none\n",
        encoding="utf-8",
    )

    config = load_config(str(path))

    assert config.presence.timeout_seconds == 12.0
    assert config.eye_params.min_neighbors == 3
    assert config.eye_params.max_size == (120, 80)
    assert config.eye_params.min_size == (25, 15)
    assert config.face_params.min_neighbors == 4
    assert config.output.mode == "none"


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_env_override(monkeypatch):
    """Test environment variable overrides."""
    monkeypatch.setenv("PRESENCE_WATCH_PRESENCE_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("PRESENCE_WATCH_OUTPUT_MODE", "save_json")
    monkeypatch.setenv("PRESENCE_WATCH_INPUT_RESIZE_WIDTH", "640")

    config = load_config(None)

    assert config.presence.timeout_seconds == 5.0
    assert config.output.mode == "save_json"
    assert config.input.resize_width == 640


def test_env_beats_yaml(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("presence:\n  log_path: from_yaml.txt\n", encoding="utf-8")
    monkeypatch.setenv("PRESENCE_WATCH_PRESENCE_LOG_PATH", "from_env.txt")

    config = load_config(str(path))

    assert config.presence.log_path == "from_env.txt"


def test_relative_paths_follow_working_directory(tmp_path, monkeypatch):
    """A relative config path is found in the directory the user runs from."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "my.yaml").write_text(
        "presence:\n  timeout_seconds: 7\n", encoding="utf-8"
    )

    config = load_config("my.yaml")

    assert config.presence.timeout_seconds == 7.0
    assert resolve_path(config.presence.log_path) == tmp_path / "log.txt"
    assert resolve_path("output/") == tmp_path / "output"


def test_absolute_path_unchanged(tmp_path):
    assert resolve_path(str(tmp_path / "log.txt")) == tmp_path / "log.txt"


def test_size_must_be_a_list(tmp_path):
    """A scalar size is a ValueError that names the problem, not a TypeError."""
    path = tmp_path / "config.yaml"
    path.write_text("eye_params:\n  min_size: 150\n", encoding="utf-8")

    with pytest.raises(ValueError, match="list"):
        load_config(str(path))


def test_size_wrong_length(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("face_params:\n  max_size: [1, 2, 3]\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Expected 2 values"):
        load_config(str(path))
