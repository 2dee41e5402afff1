"""
Install pipeline — the top-level coordinator for ``pyvm install``.

Stages run strictly in order:

    refresh_catalog → resolve → prepare → download → transform
    → cleanup → activate

There is no rollback. A failing stage raises a PyvmError and the
session is abandoned as-is; reinstalling the same version starts by
deleting whatever the failed attempt left in the target directory.
"""

from __future__ import annotations

import contextlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator

from pyvm.adapters.registry import AdapterRegistry
from pyvm.core.errors import CleanupError, DownloadError, InstallationIncomplete, LayoutError
from pyvm.core.models.session import InstallSession, InstallStage
from pyvm.core.models.settings import Settings
from pyvm.core.models.version import VersionDescriptor
from pyvm.core.services.activation import ActivationManager
from pyvm.core.services.catalog.cache import CatalogCache
from pyvm.core.services.install.base import InstallStrategy
from pyvm.core.services.install.layout import remove_path
from pyvm.core.services.install.legacy import LegacyInstallStrategy
from pyvm.core.services.install.modern import ModernInstallStrategy
from pyvm.core.services.install.resolver import VersionResolver

logger = logging.getLogger(__name__)

#: ``on_progress(session, status)`` with status in started / done / failed
ProgressCallback = Callable[[InstallSession, str], None]


class InstallPipeline:
    """Resolve, download, transform and activate one Python version.

    Args:
        settings: Resolved configuration.
        adapters: Download / archive / process collaborators.
        cache: Catalog cache, refreshed when stale.
        activation: Alias manager; built from settings if omitted.
        on_progress: Optional callback ``(session, status)`` fired
            when each stage starts, finishes or fails.
    """

    def __init__(
        self,
        settings: Settings,
        adapters: AdapterRegistry,
        cache: CatalogCache,
        activation: ActivationManager | None = None,
        on_progress: ProgressCallback | None = None,
    ):
        self.settings = settings
        self.adapters = adapters
        self.cache = cache
        self.activation = activation or ActivationManager(settings, adapters)
        self._on_progress = on_progress

    def select_strategy(self, descriptor: VersionDescriptor) -> InstallStrategy:
        """Major version 2 uses the MSI; everything else the NuGet zip."""
        if descriptor.major == 2:
            return LegacyInstallStrategy(self.settings, self.adapters)
        return ModernInstallStrategy(self.settings, self.adapters)

    def plan_paths(self, session: InstallSession) -> None:
        """Fill in the session's working paths from its descriptor."""
        assert session.descriptor is not None
        descriptor = session.descriptor

        unpacked = self.settings.versions_dir / descriptor.version_number
        session.unpacked_path = unpacked
        session.offline_path = self.settings.app_root / descriptor.installer_filename
        session.final_path = unpacked
        if descriptor.major != 2:
            session.temp_path = unpacked.with_name(unpacked.name + "temp")

    def install(
        self,
        token: str,
        *,
        activate: bool = True,
        now: datetime | None = None,
    ) -> Path:
        """Install ``token`` (a version or ``latest``).

        Returns:
            Absolute path of the installed tree.

        Raises:
            PyvmError: From whichever stage failed.
        """
        session = InstallSession(token=token)

        with self._stage(session, InstallStage.REFRESH_CATALOG):
            catalog = self.cache.ensure_fresh(now)

        with self._stage(session, InstallStage.RESOLVE):
            session.descriptor = VersionResolver(catalog).resolve(token)
            logger.info("Installing Python %s", session.version_number)

        with self._stage(session, InstallStage.PREPARE):
            self.plan_paths(session)
            self._discard_previous(session)

        with self._stage(session, InstallStage.DOWNLOAD):
            self._download(session)

        with self._stage(session, InstallStage.TRANSFORM):
            strategy = self.select_strategy(session.descriptor)
            logger.debug("Using %s strategy", strategy.name)
            installed = strategy.install(session)
            if not installed:
                raise InstallationIncomplete(session.version_number)

        with self._stage(session, InstallStage.CLEANUP):
            assert session.offline_path is not None
            try:
                session.offline_path.unlink()
            except OSError as e:
                raise CleanupError(f"Cannot remove {session.offline_path}: {e}") from e

        if activate:
            with self._stage(session, InstallStage.ACTIVATE):
                self.activation.activate(session.version_number, installed)

        session.advance(InstallStage.DONE)
        logger.info("Python %s installed at %s", session.version_number, installed)
        return installed

    def _discard_previous(self, session: InstallSession) -> None:
        """Reinstall starts from nothing: drop any earlier tree for this version."""
        for path in (session.unpacked_path, session.temp_path):
            if path is None or not (path.exists() or path.is_symlink()):
                continue
            logger.info("Removing previous install at %s", path)
            try:
                remove_path(path)
            except OSError as e:
                raise LayoutError(f"Cannot remove {path}: {e}") from e

    def _download(self, session: InstallSession) -> None:
        assert session.descriptor is not None and session.offline_path is not None
        descriptor = session.descriptor
        logger.info('Downloading "%s"', descriptor.installer_filename)
        receipt = self.adapters.downloader.download(descriptor.download_url, session.offline_path)
        if receipt.failed:
            raise DownloadError(receipt.error or f"Cannot download {descriptor.download_url}")

    @contextlib.contextmanager
    def _stage(self, session: InstallSession, stage: InstallStage) -> Iterator[None]:
        session.advance(stage)
        self._notify(session, "started")
        try:
            yield
        except Exception as e:
            session.fail(str(e))
            self._notify(session, "failed")
            raise
        self._notify(session, "done")

    def _notify(self, session: InstallSession, status: str) -> None:
        if self._on_progress:
            self._on_progress(session, status)
