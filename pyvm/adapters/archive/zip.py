"""
Zip archive adapter — extraction and selective compression.

Both the NuGet ``.nupkg`` packages and the zipped standard library are
plain zip files, so ``zipfile`` covers every archive pyvm touches.
"""

from __future__ import annotations

import logging
import time
import zipfile
from pathlib import Path
from typing import Iterable

from pyvm.adapters.base import Archiver
from pyvm.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class ZipArchiver(Archiver):
    """Extract and build zip files with ``zipfile``."""

    @property
    def name(self) -> str:
        return "zipfile"

    def is_available(self) -> bool:
        return True

    def extract(self, archive: Path, dest: Path) -> Receipt:
        start = time.monotonic()
        try:
            dest.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(archive, "r") as zf:
                members = zf.namelist()
                zf.extractall(dest)
        except (OSError, zipfile.BadZipFile) as e:
            return Receipt.failure(
                adapter=self.name,
                operation="extract",
                error=f"Extract of {archive.name} failed: {e}",
                metadata={"archive": str(archive), "dest": str(dest)},
            )

        return Receipt.success(
            adapter=self.name,
            operation="extract",
            output=f"Extracted {len(members)} entries to {dest}",
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"archive": str(archive), "dest": str(dest), "count": len(members)},
        )

    def compress_directory(
        self,
        src: Path,
        dest_zip: Path,
        exclude: Iterable[str] = (),
    ) -> Receipt:
        start = time.monotonic()
        excluded = set(exclude)
        count = 0

        try:
            with zipfile.ZipFile(dest_zip, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for child in sorted(src.iterdir()):
                    if child.name in excluded:
                        continue
                    if child.is_file():
                        zf.write(child, child.name)
                        count += 1
                        continue
                    for path in sorted(child.rglob("*")):
                        if path.is_file():
                            zf.write(path, path.relative_to(src).as_posix())
                            count += 1
        except (OSError, zipfile.BadZipFile) as e:
            dest_zip.unlink(missing_ok=True)
            return Receipt.failure(
                adapter=self.name,
                operation="compress",
                error=f"Compressing {src} failed: {e}",
                metadata={"src": str(src), "dest": str(dest_zip)},
            )

        logger.debug("Compressed %d files from %s into %s", count, src, dest_zip)
        return Receipt.success(
            adapter=self.name,
            operation="compress",
            output=f"Compressed {count} files into {dest_zip.name}",
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"src": str(src), "dest": str(dest_zip), "count": count},
        )
