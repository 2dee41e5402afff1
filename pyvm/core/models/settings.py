"""
Settings model — everything pyvm needs to know about this machine.

Loaded from ``pyvm.yml`` (optional) plus ``PYVM_*`` environment
overrides by ``pyvm.core.config.loader``.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from pyvm.core.context import get_app_root

NUGET_INDEX = "https://api.nuget.org/v3-flatcontainer"
PYTHON_FTP = "https://www.python.org/ftp/python"
PIP_BOOTSTRAP = "https://bootstrap.pypa.io"

DEFAULT_ALIAS_PATH = "%LOCALAPPDATA%\\Python"


def detect_arch() -> Literal["amd64", "win32"]:
    """Map the host machine to a Windows artifact flavour."""
    machine = platform.machine().lower()
    if machine in ("x86", "i386", "i486", "i586", "i686"):
        return "win32"
    return "amd64"


def _default_app_root() -> Path:
    return get_app_root() or Path.cwd()


def _default_elevate() -> bool:
    return platform.system() == "Windows"


class Settings(BaseModel):
    """Resolved application configuration."""

    app_root: Path = Field(default_factory=_default_app_root)
    root_container: Path | None = None
    alias_path: str = DEFAULT_ALIAS_PATH
    arch: Literal["amd64", "win32"] = Field(default_factory=detect_arch)

    cache_ttl_hours: float = 24.0
    http_timeout: float = 10.0
    elevate: bool = Field(default_factory=_default_elevate)
    interpreter: str = "python.exe"

    nuget_index: str = NUGET_INDEX
    python_ftp: str = PYTHON_FTP
    pip_bootstrap: str = PIP_BOOTSTRAP

    @property
    def versions_dir(self) -> Path:
        """Container holding one directory per installed version."""
        if self.root_container is not None:
            # absolute paths win over app_root when joined
            return self.app_root / self.root_container
        return self.app_root / "Python"

    @property
    def alias(self) -> Path:
        return Path(os.path.expandvars(self.alias_path))

    @property
    def cache_file(self) -> Path:
        return self.app_root / ".cache" / "catalog.json"
