"""
Catalog cache — the process-wide view of known versions.

Wraps a CatalogSource with two levels of caching: the catalog held in
memory for the life of the process, and the JSON file on disk that
carries it between runs. Either is refetched once past ``expires_at``.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from pyvm.core.models.version import VersionCatalog
from pyvm.core.persistence.catalog_file import delete_catalog, load_catalog, save_catalog
from pyvm.core.services.catalog.source import CatalogSource

logger = logging.getLogger(__name__)


class CatalogCache:
    """Hold the catalog and refresh it when stale.

    Args:
        source: Where fresh catalogs come from.
        path: Cache file location, or None for memory-only.
        ttl: How long a fetched catalog stays valid.
    """

    def __init__(self, source: CatalogSource, path: Path | None, ttl: timedelta):
        self._source = source
        self._path = path
        self._ttl = ttl
        self._catalog: VersionCatalog | None = None
        self._loaded_from_disk = False

    @property
    def catalog(self) -> VersionCatalog | None:
        """The catalog currently held, without triggering a fetch."""
        if self._catalog is None and not self._loaded_from_disk and self._path is not None:
            self._loaded_from_disk = True
            self._catalog = load_catalog(self._path)
        return self._catalog

    @property
    def path(self) -> Path | None:
        return self._path

    def is_stale(self, now: datetime | None = None) -> bool:
        """True when there is no catalog or it has expired."""
        catalog = self.catalog
        return catalog is None or catalog.is_stale(now)

    def ensure_fresh(self, now: datetime | None = None) -> VersionCatalog:
        """Return a usable catalog, fetching one only if needed."""
        if self.is_stale(now):
            return self.refresh(now)
        assert self._catalog is not None
        return self._catalog

    def refresh(self, now: datetime | None = None) -> VersionCatalog:
        """Fetch a new catalog unconditionally and persist it.

        A cache file that cannot be written is logged and ignored; the
        fresh catalog is still used for this process.
        """
        now = now or datetime.now(UTC)
        logger.info("Refreshing version catalog")
        catalog = self._source.fetch(now=now, ttl=self._ttl)
        self._catalog = catalog
        self._loaded_from_disk = True

        if self._path is not None:
            try:
                save_catalog(catalog, self._path)
            except OSError as e:
                logger.warning("Cannot write catalog cache %s: %s", self._path, e)
        return catalog

    def clear(self) -> bool:
        """Forget the in-memory catalog and delete the cache file."""
        self._catalog = None
        self._loaded_from_disk = False
        if self._path is None:
            return False
        return delete_catalog(self._path)
