"""
Catalog source — builds the version catalog from the NuGet feed.

python.org publishes every Windows release as a NuGet package:

    python / pythonx86      — 3.x, a zip whose real tree sits under ``tools/``
    python2 / python2x86    — 2.x versions (installed from the python.org MSI)

The flat-container index of each package lists its versions. Every
version becomes a VersionDescriptor with its artifact and get-pip.py
URLs already worked out, so nothing downstream needs to know where
files come from.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from packaging.version import InvalidVersion, Version

from pyvm.adapters.base import Downloader
from pyvm.core.errors import CatalogError
from pyvm.core.models.settings import Settings
from pyvm.core.models.version import PipBootstrap, VersionCatalog, VersionDescriptor

logger = logging.getLogger(__name__)

# the generic get-pip.py refuses to run on these; bootstrap.pypa.io keeps a copy per version
_PINNED_GET_PIP_BELOW = (3, 10)

_PACKAGES = {
    "amd64": {"modern": "python", "legacy": "python2"},
    "win32": {"modern": "pythonx86", "legacy": "python2x86"},
}


class CatalogSource:
    """Fetch the list of installable versions for one architecture."""

    def __init__(self, settings: Settings, downloader: Downloader):
        self._settings = settings
        self._downloader = downloader

    @property
    def packages(self) -> dict[str, str]:
        return _PACKAGES[self._settings.arch]

    def index_url(self, package: str) -> str:
        return f"{self._settings.nuget_index}/{package}/index.json"

    def fetch(self, now: datetime | None = None, ttl: timedelta | None = None) -> VersionCatalog:
        """Build a fresh catalog.

        The 3.x feed is required; the 2.x feed is best-effort since
        it has not changed in years.

        Raises:
            CatalogError: If the 3.x index cannot be fetched or is malformed.
        """
        now = now or datetime.now(UTC)
        if ttl is None:
            ttl = timedelta(hours=self._settings.cache_ttl_hours)

        descriptors: dict[str, VersionDescriptor] = {}

        for raw, version in self._list_versions(self.packages["modern"], required=True):
            if version.major >= 3:
                descriptors[raw] = self.modern_descriptor(raw)

        for raw, version in self._list_versions(self.packages["legacy"], required=False):
            if version.major == 2:
                descriptors[raw] = self.legacy_descriptor(raw)

        ordered = sorted(descriptors, key=Version, reverse=True)
        catalog = VersionCatalog(
            all=ordered,
            stable=[v for v in ordered if not Version(v).is_prerelease],
            unstable=[v for v in ordered if Version(v).is_prerelease],
            descriptors=descriptors,
            fetched_at=now,
            expires_at=now + ttl,
        )
        logger.info(
            "Catalog fetched: %d versions (%d stable, %d unstable)",
            len(catalog.all), len(catalog.stable), len(catalog.unstable),
        )
        return catalog

    # ── Descriptors ─────────────────────────────────────────────

    def modern_descriptor(self, version: str) -> VersionDescriptor:
        package = self.packages["modern"]
        filename = f"{package}.{version}.nupkg"
        return VersionDescriptor(
            version_number=version,
            download_url=f"{self._settings.nuget_index}/{package}/{version}/{filename}",
            installer_filename=filename,
            pip=self.pip_bootstrap(version),
        )

    def legacy_descriptor(self, version: str) -> VersionDescriptor:
        suffix = ".amd64.msi" if self._settings.arch == "amd64" else ".msi"
        filename = f"python-{version}{suffix}"
        return VersionDescriptor(
            version_number=version,
            download_url=f"{self._settings.python_ftp}/{version}/{filename}",
            installer_filename=filename,
            pip=self.pip_bootstrap(version),
        )

    def pip_bootstrap(self, version: str) -> PipBootstrap:
        v = Version(version)
        if (v.major, v.minor) < _PINNED_GET_PIP_BELOW:
            url = f"{self._settings.pip_bootstrap}/pip/{v.major}.{v.minor}/get-pip.py"
        else:
            url = f"{self._settings.pip_bootstrap}/get-pip.py"
        return PipBootstrap(filename="get-pip.py", download_url=url)

    # ── Feed ────────────────────────────────────────────────────

    def _list_versions(self, package: str, *, required: bool) -> list[tuple[str, Version]]:
        """Identifiers from a package index, paired with their parsed form."""
        url = self.index_url(package)
        receipt = self._downloader.fetch_json(url)

        if receipt.failed:
            if required:
                raise CatalogError(f"Cannot fetch version list: {receipt.error}")
            logger.warning("Skipping %s versions: %s", package, receipt.error)
            return []

        data = receipt.metadata.get("json")
        raw = data.get("versions") if isinstance(data, dict) else None
        if not isinstance(raw, list):
            if required:
                raise CatalogError(f"Unexpected index format at {url}")
            logger.warning("Unexpected index format at %s", url)
            return []

        versions = []
        for item in raw:
            try:
                versions.append((str(item).lower(), Version(str(item))))
            except InvalidVersion:
                logger.debug("Ignoring unparseable version %r from %s", item, package)
        return versions

