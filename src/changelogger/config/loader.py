"""
Configuration loader for changelogger.

Configuration is optional. Values are layered, later layers winning:

1. built-in defaults (:data:`DEFAULT_CONFIG`);
2. the user file ``~/.changelogger/config.json``;
3. the project file ``.changelogger.json`` in the repository root.

If a configuration file exists but is malformed or holds values of the
wrong type, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where logging is not configured. Messages propagate once the CLI
# configures the root logger.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


USER_CONFIG_FILENAME = "config.json"
PROJECT_CONFIG_FILENAME = ".changelogger.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "changelog_file": "CHANGELOG.md",
    "prompt_for_version": True,
}


class ConfigError(Exception):
    """Raised when configuration is invalid or no repository is configured."""

    pass


def _get_config_directory() -> Path:
    """Get the user-level configuration directory: ``~/.changelogger/``."""
    return Path.home() / ".changelogger"


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")

    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        logger.warning("Ignoring unknown configuration keys in %s: %s", config_path, ", ".join(unknown))
    return {key: value for key, value in data.items() if key in DEFAULT_CONFIG}


def _validate(config: Dict[str, Any]) -> None:
    changelog_file = config.get("changelog_file")
    if not isinstance(changelog_file, str) or not changelog_file.strip():
        raise ConfigError("'changelog_file' must be a non-empty string")
    if not isinstance(config.get("prompt_for_version"), bool):
        raise ConfigError("'prompt_for_version' must be a boolean")


def load_config(repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load the effective configuration.

    Args:
        repo_root: Repository root holding an optional ``.changelogger.json``.
                   When ``None`` only the defaults and the user file apply.

    Returns:
        A dictionary with the keys:
        - changelog_file (str): Name of the changelog file in the project folder
        - prompt_for_version (bool): Whether to ask for a version interactively

    Raises:
        ConfigError: If a configuration file is malformed or invalid.
    """
    config = dict(DEFAULT_CONFIG)

    candidates = [_get_config_directory() / USER_CONFIG_FILENAME]
    if repo_root is not None:
        candidates.append(repo_root / PROJECT_CONFIG_FILENAME)

    for config_path in candidates:
        if not config_path.is_file():
            continue
        config.update(_read_config_file(config_path))
        logger.debug("Loaded configuration from: %s", config_path)

    _validate(config)
    logger.debug("Configuration data: %s", config)
    return config
