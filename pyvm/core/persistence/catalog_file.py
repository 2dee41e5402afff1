"""
Catalog file persistence — atomic read/write of the version catalog.

The catalog is stored as JSON in ``<app_root>/.cache/catalog.json``.
Writes are atomic (write to temp file, then rename) so an interrupted
refresh never leaves a half-written cache behind.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from pyvm.core.models.version import VersionCatalog

logger = logging.getLogger(__name__)


def load_catalog(path: Path) -> VersionCatalog | None:
    """Load a cached catalog.

    Returns:
        The catalog, or None if the file is missing or unreadable. A
        corrupt cache is treated as no cache; the caller refetches.
    """
    if not path.is_file():
        logger.debug("No catalog cache at %s", path)
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        catalog = VersionCatalog.model_validate(data)
    except json.JSONDecodeError as e:
        logger.warning("Corrupt catalog cache %s: %s — ignoring", path, e)
        return None
    except Exception as e:
        logger.warning("Cannot load catalog cache %s: %s — ignoring", path, e)
        return None

    logger.debug(
        "Loaded catalog from %s (%d versions, expires %s)",
        path, len(catalog.all), catalog.expires_at.isoformat(),
    )
    return catalog


def save_catalog(catalog: VersionCatalog, path: Path) -> None:
    """Save the catalog to ``path`` (atomic write)."""
    path.parent.mkdir(parents=True, exist_ok=True)

    data = catalog.model_dump(mode="json")
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    _fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=".catalog_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with open(_fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
        logger.debug("Catalog saved to %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def delete_catalog(path: Path) -> bool:
    """Remove the cache file. Returns whether there was one."""
    if not path.is_file():
        return False
    path.unlink()
    logger.info("Removed catalog cache %s", path)
    return True
