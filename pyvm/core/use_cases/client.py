"""
Client use case — wire settings, adapters and services for one process.

The Client owns everything that lives for the process lifetime: the
settings, the adapter registry, the catalog cache and the activation
manager. CLI commands build one and call into it.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from pyvm.adapters.registry import AdapterRegistry, default_registry
from pyvm.core.config.loader import load_settings
from pyvm.core.context import set_app_root
from pyvm.core.models.settings import Settings
from pyvm.core.services.activation import ActivationManager
from pyvm.core.services.catalog.cache import CatalogCache
from pyvm.core.services.catalog.source import CatalogSource
from pyvm.core.services.install.pipeline import InstallPipeline, ProgressCallback


@dataclass
class Client:
    """Process-scoped pyvm session."""

    settings: Settings
    adapters: AdapterRegistry
    cache: CatalogCache = field(init=False)
    activation: ActivationManager = field(init=False)

    def __post_init__(self) -> None:
        source = CatalogSource(self.settings, self.adapters.downloader)
        self.cache = CatalogCache(
            source,
            self.settings.cache_file,
            ttl=timedelta(hours=self.settings.cache_ttl_hours),
        )
        self.activation = ActivationManager(self.settings, self.adapters)

    def pipeline(self, on_progress: ProgressCallback | None = None) -> InstallPipeline:
        return InstallPipeline(
            self.settings,
            self.adapters,
            self.cache,
            activation=self.activation,
            on_progress=on_progress,
        )

    def info(self) -> dict:
        """Machine, paths, adapters and cache freshness (``pyvm info``)."""
        catalog = self.cache.catalog
        return {
            "client": f"{platform.system() or 'Unknown'} client ({self.settings.arch})",
            "app_root": str(self.settings.app_root),
            "versions_dir": str(self.settings.versions_dir),
            "alias": str(self.settings.alias),
            "active": str(self.activation.current() or ""),
            "elevate": self.settings.elevate,
            "adapters": self.adapters.adapter_status(),
            "catalog": {
                "cached": catalog is not None,
                "versions": len(catalog.all) if catalog else 0,
                "fetched_at": catalog.fetched_at.isoformat() if catalog else None,
                "expires_at": catalog.expires_at.isoformat() if catalog else None,
                "stale": self.cache.is_stale(),
            },
        }


def build_client(config_path: Path | None = None, *, mock: bool = False) -> Client:
    """Load settings and wire a Client.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    settings = load_settings(config_path)
    set_app_root(settings.app_root)
    return Client(settings=settings, adapters=default_registry(settings, mock_mode=mock))
