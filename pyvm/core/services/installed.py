"""
Installed versions — what is on disk under the versions directory.

Backs ``pyvm installed``, ``pyvm use`` and ``pyvm uninstall``. A
directory counts as an installed version when its name parses as a
version; leftovers such as ``3.12.1temp`` from an interrupted install
are ignored.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from packaging.version import InvalidVersion, Version

from pyvm.core.errors import LayoutError, NotInstalled
from pyvm.core.models.settings import Settings
from pyvm.core.services.activation import ActivationManager

logger = logging.getLogger(__name__)


@dataclass
class InstalledVersion:
    version: str
    path: Path
    active: bool = False

    def to_dict(self) -> dict:
        return {"version": self.version, "path": str(self.path), "active": self.active}


def list_installed(settings: Settings, activation: ActivationManager | None = None) -> list[InstalledVersion]:
    """Installed versions, newest first."""
    root = settings.versions_dir
    if not root.is_dir():
        return []

    active = activation.current() if activation else None
    active_path = active.resolve() if active is not None else None

    found = []
    for child in root.iterdir():
        if not child.is_dir():
            continue
        try:
            Version(child.name)
        except InvalidVersion:
            continue
        found.append(InstalledVersion(
            version=child.name,
            path=child,
            active=active_path is not None and child.resolve() == active_path,
        ))

    found.sort(key=lambda iv: Version(iv.version), reverse=True)
    return found


def installed_path(settings: Settings, version: str) -> Path:
    """Directory for ``version``.

    Raises:
        NotInstalled: It is not there.
    """
    path = settings.versions_dir / version
    if not path.is_dir():
        raise NotInstalled(version)
    return path


def uninstall(settings: Settings, activation: ActivationManager, version: str) -> Path:
    """Delete an installed version, dropping the alias if it pointed there.

    Returns:
        The removed directory.
    """
    path = installed_path(settings, version)

    current = activation.current()
    if current is not None and current.resolve() == path.resolve():
        logger.info("Python %s is active; removing alias %s", version, activation.alias)
        activation.deactivate()

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise LayoutError(f"Cannot remove {path}: {e}") from e

    logger.info("Removed Python %s from %s", version, path)
    return path
