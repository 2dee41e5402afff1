"""
Version resolver — map a user-supplied token to one descriptor.

Pure lookup over an already-fetched catalog. No I/O.
"""

from __future__ import annotations

import logging

from pyvm.core.errors import EmptyCatalog, UnknownVersion
from pyvm.core.models.version import VersionCatalog, VersionDescriptor

logger = logging.getLogger(__name__)

LATEST = "latest"


class VersionResolver:
    """Resolve ``latest`` or an exact version identifier."""

    def __init__(self, catalog: VersionCatalog):
        self._catalog = catalog

    def resolve(self, token: str) -> VersionDescriptor:
        """Return the descriptor ``token`` names.

        ``latest`` (any case) is the newest stable version. Any other
        token must appear verbatim in the catalog; the descriptor is
        then looked up by its lowercased form.

        Raises:
            EmptyCatalog: ``latest`` requested with no stable versions.
            UnknownVersion: No such version.
        """
        normalized = token.strip().lower()

        if normalized == LATEST:
            if not self._catalog.stable:
                raise EmptyCatalog("No stable python version is available.")
            identifier = self._catalog.stable[0]
            logger.debug("Resolved %r to %s", token, identifier)
            return self._lookup(identifier, token)

        if token.strip() not in self._catalog.all:
            raise UnknownVersion(token)

        return self._lookup(normalized, token)

    def _lookup(self, key: str, token: str) -> VersionDescriptor:
        descriptor = self._catalog.get(key)
        if descriptor is None:
            raise UnknownVersion(token)
        return descriptor
