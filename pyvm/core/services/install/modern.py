"""
Modern strategy — Python 3.x from the NuGet package.

The ``.nupkg`` is a zip with the distribution nested under ``tools/``.
After promoting that directory the tree is reshaped into the
embeddable layout: the standard library goes into ``pythonXY.zip``,
a ``pythonXY._pth`` file points at it and at ``Lib\\site-packages``,
and the DLLs sit next to ``python.exe``.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from pyvm.core.errors import DownloadError, ExtractionError, LayoutError
from pyvm.core.models.session import InstallSession
from pyvm.core.services.install import commands
from pyvm.core.services.install.base import InstallStrategy
from pyvm.core.services.install.layout import (
    SITE_PACKAGES,
    flatten_dir,
    promote,
    prune_except,
    write_pth,
)

logger = logging.getLogger(__name__)

# Directory inside the nupkg that holds the actual distribution
PACKAGE_ROOT = "tools"


class ModernInstallStrategy(InstallStrategy):
    name = "modern"

    def install(self, session: InstallSession) -> Path | None:
        assert session.descriptor is not None
        assert session.offline_path is not None
        assert session.temp_path is not None and session.final_path is not None

        descriptor = session.descriptor
        temp = session.temp_path
        final = session.final_path
        basename = descriptor.basename

        logger.info("Sorting files and fixing bugs")
        self._unpack(session.offline_path, temp, final)
        self._bundle_stdlib(final, basename)
        write_pth(final, basename)
        flatten_dir(final, "DLLs")

        script = final / "Tools" / descriptor.pip.filename
        if not script.is_file():
            logger.info('Downloading "%s" from "%s"', descriptor.pip.filename, descriptor.pip.download_url)
            receipt = self.adapters.downloader.download(descriptor.pip.download_url, script)
            if receipt.failed:
                raise DownloadError(f"Cannot download {descriptor.pip.filename}: {receipt.error}")

        python = final / self.settings.interpreter
        logger.info('Installing "pip" with %s', python)
        self.bootstrap_pip(commands.modern_bootstrap(descriptor.version_number, python, script))

        return final.resolve()

    def _unpack(self, archive: Path, temp: Path, final: Path) -> None:
        """Extract to ``temp`` and promote ``temp/tools`` to ``final``."""
        receipt = self.adapters.archiver.extract(archive, temp)
        if receipt.failed:
            raise ExtractionError(receipt.error or f"Cannot extract {archive}")

        nested = temp / PACKAGE_ROOT
        if not nested.is_dir():
            raise ExtractionError(f"{archive.name} has no '{PACKAGE_ROOT}' directory")

        promote(nested, final)
        try:
            shutil.rmtree(temp)
        except OSError as e:
            raise LayoutError(f"Cannot remove {temp}: {e}") from e

    def _bundle_stdlib(self, final: Path, basename: str) -> None:
        """Zip ``Lib`` (minus site-packages) into ``<basename>.zip`` and drop the loose copy."""
        lib = final / "Lib"
        bundle = final / f"{basename}.zip"

        receipt = self.adapters.archiver.compress_directory(lib, bundle, exclude=[SITE_PACKAGES])
        if receipt.failed:
            raise LayoutError(receipt.error or f"Cannot compress {lib}")

        removed = prune_except(lib, SITE_PACKAGES)
        logger.debug("Bundled %d Lib entries into %s", len(removed), bundle.name)
