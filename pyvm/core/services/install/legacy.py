"""
Legacy strategy — Python 2.x from the python.org MSI.

The MSI is unpacked with an administrative install (no registry
entries, no Start menu), the DLLs are moved next to the interpreter,
and pip comes from the bundled ensurepip.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pyvm.core.errors import ExtractionError
from pyvm.core.models.session import InstallSession
from pyvm.core.services.install import commands
from pyvm.core.services.install.base import InstallStrategy
from pyvm.core.services.install.layout import flatten_dir

logger = logging.getLogger(__name__)


class LegacyInstallStrategy(InstallStrategy):
    name = "legacy"

    def install(self, session: InstallSession) -> Path | None:
        assert session.offline_path is not None and session.unpacked_path is not None
        offline = session.offline_path.resolve()
        unpacked = session.unpacked_path.resolve()

        logger.info("Unpacking installer data into %s", unpacked)
        receipt = self.adapters.runner.run(commands.msi_extract(offline, unpacked))
        if receipt.failed:
            raise ExtractionError(f"Couldn't unpack the requested data: {receipt.error}")

        logger.info("Sorting files")
        flatten_dir(unpacked, "DLLs")

        logger.info('Installing "pip"')
        self.bootstrap_pip(commands.legacy_bootstrap(unpacked / self.settings.interpreter))

        return unpacked
