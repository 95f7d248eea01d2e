"""
Settings loader — reads an optional YAML file into ``VerifierSettings``.

It reads YAML, validates against the Pydantic schema, and returns a
typed settings object.  No file means defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from verify_release.core.config.settings import VerifierSettings
from verify_release.core.errors import ConfigError

logger = logging.getLogger(__name__)

# Key the settings may be nested under
SETTINGS_KEY = "verify_release"


def load_settings(path: Path | None = None) -> VerifierSettings:
    """Load and validate verifier settings.

    Args:
        path: Explicit path to a YAML settings file. If None, defaults are used.

    Returns:
        Validated VerifierSettings model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        return VerifierSettings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return VerifierSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "verify_release" key or be flat
    settings_data = data.get(SETTINGS_KEY, data)
    if not isinstance(settings_data, dict):
        raise ConfigError(f"Expected '{SETTINGS_KEY}' to be a mapping in {path}")

    try:
        settings = VerifierSettings.model_validate(settings_data)
    except Exception as e:
        raise ConfigError(f"Invalid settings: {e}") from e

    logger.debug(
        "Settings loaded: poll every %.0fs, timeouts %s",
        settings.poll_interval_s,
        settings.timeouts_s,
    )
    return settings
