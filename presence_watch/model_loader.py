"""
Cascade loading for the presence detection system.

Responsibility:
    Load the frontal face, profile face, and eye Haar cascades from disk
    and hand them out as a single CascadeBank that owns their lifetime.

Non-goals:
    - No detection or frame-level logic.
    - No automatic model downloading.
    - No fallback to alternative cascades.

Failure behavior:
    - A missing or unloadable cascade raises ConfigError naming the
      exact path. Cascades loaded before the failure are released
      before the error propagates.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import cv2

from presence_watch.config import CascadeConfig, resolve_path
from presence_watch.errors import ConfigError

logger = logging.getLogger(__name__)

# Feature classes in load order
FRONTAL_FACE = "frontal_face"
PROFILE_FACE = "profile_face"
EYE = "eye"
_FEATURES = (FRONTAL_FACE, PROFILE_FACE, EYE)


def cascade_directory(config: CascadeConfig) -> Path:
    """Return the directory cascade files are read from."""
    if config.directory is None:
        return Path(cv2.data.haarcascades)
    return resolve_path(config.directory)


class CascadeBank:
    """Owns the loaded classifiers for every feature class.

    Usage:
        with load_cascades(config.cascades) as bank:
            frontal = bank[FRONTAL_FACE]
            ...

    close() is idempotent; after it, lookups raise ConfigError.
    """

    def __init__(self, classifiers: Dict[str, cv2.CascadeClassifier]) -> None:
        self._classifiers: Optional[Dict[str, cv2.CascadeClassifier]] = dict(classifiers)

    def __getitem__(self, feature: str) -> cv2.CascadeClassifier:
        if self._classifiers is None:
            raise ConfigError("CascadeBank has been closed.")
        return self._classifiers[feature]

    def __len__(self) -> int:
        return 0 if self._classifiers is None else len(self._classifiers)

    def add(self, feature: str, classifier: cv2.CascadeClassifier) -> None:
        if self._classifiers is None:
            raise ConfigError("CascadeBank has been closed.")
        self._classifiers[feature] = classifier

    @property
    def closed(self) -> bool:
        return self._classifiers is None

    def close(self) -> None:
        """Release every held classifier."""
        if self._classifiers is None:
            return
        count = len(self._classifiers)
        self._classifiers.clear()
        self._classifiers = None
        logger.debug("Released %d cascade classifier(s).", count)

    def __enter__(self) -> "CascadeBank":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _load_one(path: Path, feature: str) -> cv2.CascadeClassifier:
    """Load a single cascade file, raising ConfigError on failure."""
    if not path.is_file():
        raise ConfigError(
            f"Cascade file for '{feature}' not found.\n"
            f"  Expected: {path}\n"
            f"  Provide the file or update 'cascades.{feature}' / "
            f"'cascades.directory' in your config."
        )

    classifier = cv2.CascadeClassifier()
    try:
        loaded = classifier.load(str(path))
    except cv2.error as e:
        raise ConfigError(f"Error loading {feature} cascade: {path}\n  OpenCV error: {e}") from e

    if not loaded or classifier.empty():
        raise ConfigError(f"Error loading {feature} cascade: {path}")

    return classifier


def load_cascades(config: CascadeConfig) -> CascadeBank:
    """Load all three cascades.

    Args:
        config: CascadeConfig with the directory and file names.

    Returns:
        A CascadeBank holding every classifier.

    Raises:
        ConfigError: If any cascade cannot be loaded.
    """
    directory = cascade_directory(config)
    bank = CascadeBank({})

    try:
        for feature in _FEATURES:
            path = directory / getattr(config, feature)
            logger.info("Loading %s cascade: %s", feature, path)
            bank.add(feature, _load_one(path, feature))
    except ConfigError:
        logger.error("Cascade loading failed; releasing %d loaded cascade(s).", len(bank))
        bank.close()
        raise

    logger.info("Loaded %d cascades from %s", len(bank), directory)
    return bank
