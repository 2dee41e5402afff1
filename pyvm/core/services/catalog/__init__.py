"""
Version catalog service — package re-exports.

    from pyvm.core.services.catalog import CatalogCache, CatalogSource
"""

from pyvm.core.services.catalog.cache import CatalogCache  # noqa: F401
from pyvm.core.services.catalog.source import CatalogSource  # noqa: F401
