"""
Configuration loader — reads formulakit.yml into a BuildConfig.

The file stands in for what a package manager passes to a formula:
prefixes, build flags, runtimes and the download cache. It is
optional; without one every field takes its default.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from formulakit.core.models.build import BuildConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "formulakit.yml"


class ConfigError(Exception):
    """Raised when the build configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for formulakit.yml starting from ``start_dir``, walking up.

    Returns:
        Path to the file, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_build_config(path: Path | None = None, *, required: bool = False) -> BuildConfig:
    """Load and validate the build configuration.

    Args:
        path: Explicit path. If None, searches upward from cwd.
        required: Raise instead of returning defaults when no file exists.

    Raises:
        ConfigError: If the file is missing (when required or explicit),
            unreadable, not a mapping, or fails validation.
    """
    explicit = path is not None
    if path is None:
        path = find_config_file()

    if path is None:
        if required:
            raise ConfigError(f"No {CONFIG_FILE} found. Specify one with --config.")
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return BuildConfig()

    if not path.is_file():
        if explicit or required:
            raise ConfigError(f"Config file not found: {path}")
        return BuildConfig()

    logger.debug("Loading build config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = BuildConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid build configuration: {e}") from e

    # Unknown flags only surface when parsed
    try:
        config.build_options()
    except ValueError as e:
        raise ConfigError(f"Invalid build options in {path}: {e}") from e

    logger.info("Loaded build config %s (options: %s)", path, config.options or "defaults")
    return config
