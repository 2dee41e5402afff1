"""
Adapter registry — one adapter per role, handed to the install services.

The services never construct adapters themselves. They ask the
registry for the downloader, archiver or process runner, which lets
tests (and ``--mock`` runs) swap every collaborator at once.
"""

from __future__ import annotations

import logging
from typing import Any

from pyvm.adapters.base import Adapter, Archiver, Downloader, ProcessRunner
from pyvm.core.models.settings import Settings

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Registry of adapters keyed by role.

    Features:
        - Register/unregister adapters by role
        - Mock mode: swap all adapters for mocks that always succeed
        - Query adapter availability
    """

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._mocks: dict[str, Adapter] = {}
        self._mock_mode = False
        self.set_mock_mode(mock_mode)

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def set_mock_mode(self, enabled: bool) -> None:
        """Enable or disable mock mode.

        Mocks are created lazily the first time mock mode is enabled
        and kept afterwards, so their call logs survive toggling.
        """
        self._mock_mode = enabled
        if enabled and not self._mocks:
            from pyvm.adapters.mock import MockArchiver, MockDownloader, MockProcessRunner

            for mock in (MockDownloader(), MockArchiver(), MockProcessRunner()):
                self._mocks[mock.role] = mock

    def register(self, adapter: Adapter) -> None:
        """Register an adapter under its role, replacing any previous one."""
        role = adapter.role
        if role in self._adapters:
            logger.debug("Replacing %s adapter: %s", role, self._adapters[role].name)
        self._adapters[role] = adapter
        logger.debug("Registered adapter: %s (%s)", adapter.name, role)

    def unregister(self, role: str) -> None:
        """Remove the adapter for a role."""
        self._adapters.pop(role, None)

    def get(self, role: str) -> Adapter | None:
        """Look up the adapter for a role (mocks in mock mode)."""
        if self._mock_mode:
            return self._mocks.get(role)
        return self._adapters.get(role)

    def list_adapters(self) -> list[str]:
        """List all registered roles."""
        return list(self._adapters.keys())

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """Get availability status of every active adapter."""
        status = {}
        roles = self._mocks if self._mock_mode else self._adapters
        for role in roles:
            adapter = self.get(role)
            if adapter is None:
                continue
            try:
                available = adapter.is_available()
            except Exception:
                available = False
            status[role] = {
                "name": adapter.name,
                "available": available,
                "type": adapter.__class__.__name__,
            }
        return status

    # ── Typed accessors ─────────────────────────────────────────

    @property
    def downloader(self) -> Downloader:
        return self._require("download", Downloader)

    @property
    def archiver(self) -> Archiver:
        return self._require("archive", Archiver)

    @property
    def runner(self) -> ProcessRunner:
        return self._require("process", ProcessRunner)

    def _require(self, role: str, kind: type) -> Any:
        adapter = self.get(role)
        if adapter is None:
            raise LookupError(f"No adapter registered for '{role}'")
        if not isinstance(adapter, kind):
            raise TypeError(f"Adapter {adapter!r} is not a {kind.__name__}")
        return adapter


def default_registry(settings: Settings, *, mock_mode: bool = False) -> AdapterRegistry:
    """Registry wired with the real urllib / zipfile / subprocess adapters."""
    from pyvm.adapters.archive.zip import ZipArchiver
    from pyvm.adapters.http.download import UrllibDownloader
    from pyvm.adapters.shell.process import SubprocessRunner

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(UrllibDownloader(timeout=settings.http_timeout))
    registry.register(ZipArchiver())
    registry.register(SubprocessRunner())
    return registry
