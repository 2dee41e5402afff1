"""
Configuration loader — reads pyvm.yml into a Settings model.

The file is optional: without one, pyvm runs from the working
directory with built-in defaults. ``PYVM_*`` environment variables
override whatever the file says.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from pyvm.core.models.settings import Settings

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "pyvm.yml"

# env var → Settings field
_ENV_OVERRIDES = {
    "PYVM_APP_ROOT": "app_root",
    "PYVM_ALIAS_PATH": "alias_path",
    "PYVM_ARCH": "arch",
}


class ConfigError(Exception):
    """Raised when pyvm.yml is unreadable or invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for pyvm.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to pyvm.yml, or None if not found.
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


def load_settings(path: Path | None = None, *, search: bool = True) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit path to pyvm.yml. If None and ``search`` is set,
            searches upward from the working directory.
        search: Whether to look for a config file when ``path`` is None.

    Returns:
        Validated Settings. ``app_root`` defaults to the config file's
        directory, or the working directory when there is no file.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    data: dict = {}

    if path is None and search:
        path = find_config_file()

    if path is not None:
        data = _read_yaml(path)
        data.setdefault("app_root", str(path.parent.resolve()))

    for env_var, field in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            data[field] = value

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid pyvm configuration: {e}") from e

    logger.debug(
        "Settings: app_root=%s versions_dir=%s arch=%s",
        settings.app_root, settings.versions_dir, settings.arch,
    )
    return settings


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Either flat, or everything under a top-level "pyvm:" key
    return dict(data.get("pyvm", data))
