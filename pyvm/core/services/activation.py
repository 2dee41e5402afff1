"""
Activation — point the alias path at an installed version.

Only one version is active at a time: the alias is a directory
symlink and re-activating simply overwrites it. Previously active
trees stay installed, just unreferenced.

Two ways to write the link:
    elevated — Windows: an elevated PowerShell runs ``New-Item -Force``
    direct   — everywhere else: temp symlink + ``os.replace`` (atomic)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pyvm.adapters.registry import AdapterRegistry
from pyvm.core.errors import ActivationError, NotInstalled
from pyvm.core.models.command import CommandSpec
from pyvm.core.models.settings import Settings

logger = logging.getLogger(__name__)


class ActivationManager:
    """Manage the single alias symlink."""

    def __init__(self, settings: Settings, adapters: AdapterRegistry):
        self._settings = settings
        self._adapters = adapters

    @property
    def alias(self) -> Path:
        return self._settings.alias

    def activate(self, version_label: str, source: Path) -> Path:
        """Make the alias resolve to ``source``.

        Raises:
            NotInstalled: ``source`` is missing or not a directory.
            ActivationError: The link could not be written.
        """
        if not source.exists() or not source.is_dir():
            raise NotInstalled(version_label)

        source = source.resolve()
        logger.info("Linking %s -> %s", self.alias, source)

        if self._settings.elevate:
            self._link_elevated(source)
        else:
            self._link_direct(source)
        return self.alias

    def current(self) -> Path | None:
        """Where the alias points, or None if there is no alias."""
        if not self.alias.is_symlink():
            return None
        return Path(os.readlink(self.alias))

    def current_version(self) -> str | None:
        """Version name of the active tree (its directory name)."""
        target = self.current()
        return target.name if target is not None else None

    def deactivate(self) -> bool:
        """Remove the alias. Returns whether one existed."""
        if not self.alias.is_symlink():
            return False
        try:
            self.alias.unlink()
        except OSError as e:
            raise ActivationError(f"Cannot remove {self.alias}: {e}") from e
        return True

    def _link_elevated(self, source: Path) -> None:
        receipt = self._adapters.runner.run(elevated_symlink(self.alias, source))
        if receipt.failed:
            raise ActivationError(f"Couldn't create the symlink: {receipt.error}")

    def _link_direct(self, source: Path) -> None:
        alias = self.alias
        tmp = alias.with_name(f".{alias.name}.pyvm-tmp")
        try:
            alias.parent.mkdir(parents=True, exist_ok=True)
            if tmp.is_symlink() or tmp.exists():
                tmp.unlink()
            os.symlink(source, tmp, target_is_directory=True)
            os.replace(tmp, alias)
        except OSError as e:
            if tmp.is_symlink():
                tmp.unlink()
            raise ActivationError(f"Couldn't create the symlink: {e}") from e


def _ps_quote(value: str) -> str:
    """Quote for a single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"


def elevated_symlink(alias: Path, target: Path) -> CommandSpec:
    """Create (or overwrite) a directory symlink from an elevated PowerShell.

    Symlink creation needs admin rights on Windows unless developer mode
    is on, so the inner ``New-Item`` runs via ``Start-Process -Verb RunAs``.
    """
    inner = (
        "New-Item -Force -ItemType SymbolicLink "
        f"-Path {_ps_quote(str(alias))} -Target {_ps_quote(str(target))}"
    )
    return CommandSpec(
        program="powershell.exe",
        args=[
            "-NoProfile",
            "-Command",
            f'Start-Process -WindowStyle hidden -Verb RunAs -Wait powershell.exe -Args "{inner}"',
        ],
    )
