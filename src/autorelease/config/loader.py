"""Configuration file discovery and loading.

Configuration lives either in a dedicated ``autorelease.toml`` or in the
``[tool.autorelease]`` table of ``pyproject.toml``. Both are searched for
from the project directory upwards; when neither exists the defaults are
used.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from autorelease.config.models import ReleaseConfig
from autorelease.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("autorelease.toml", "pyproject.toml")


def find_config_file(start: Path | None = None) -> Path:
    """Find the nearest configuration file, walking up from ``start``.

    Args:
        start: Directory to start searching from (defaults to cwd)

    Returns:
        Path to ``autorelease.toml`` or ``pyproject.toml``

    Raises:
        ConfigNotFoundError: If no candidate file exists up to the root
    """
    current = (start or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate

    raise ConfigNotFoundError(f"No {' or '.join(CONFIG_FILENAMES)} found in {current} or parents")


def load_toml(path: Path) -> dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def extract_config(data: dict[str, Any], source: Path) -> dict[str, Any]:
    """Return the autorelease settings from a parsed config file."""
    if source.name == "pyproject.toml":
        return data.get("tool", {}).get("autorelease", {})
    return data


def load_config(path: Path | None = None) -> ReleaseConfig:
    """Load and validate configuration for the project at ``path``.

    Raises:
        ConfigError: If the configuration file cannot be parsed
        ConfigValidationError: If the configuration values are invalid
    """
    try:
        source = find_config_file(path)
    except ConfigNotFoundError:
        logger.debug("No configuration file found, using defaults")
        return ReleaseConfig()

    raw = extract_config(load_toml(source), source)
    logger.debug("Loaded configuration from %s", source)

    try:
        return ReleaseConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {source}:\n{e}") from e
