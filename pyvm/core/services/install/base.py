"""
Install strategy contract.

A strategy turns a downloaded artifact into an installed tree with
pip bootstrapped. The pipeline picks one by major version.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pyvm.adapters.registry import AdapterRegistry
from pyvm.core.errors import BootstrapError
from pyvm.core.models.command import CommandSpec
from pyvm.core.models.session import InstallSession
from pyvm.core.models.settings import Settings


class InstallStrategy(ABC):
    """Transform ``session.offline_path`` into an installed tree."""

    name = ""

    def __init__(self, settings: Settings, adapters: AdapterRegistry):
        self.settings = settings
        self.adapters = adapters

    @abstractmethod
    def install(self, session: InstallSession) -> Path | None:
        """Run the transformation.

        Returns:
            Absolute path of the installed tree.

        Raises:
            PyvmError: On any failed step.
        """

    def bootstrap_pip(self, commands: list[CommandSpec]) -> None:
        """Run the pip bootstrap commands in order; stop at the first failure."""
        receipt = self.adapters.runner.run_all(commands)
        if receipt.failed:
            command = receipt.metadata.get("command", "pip bootstrap")
            raise BootstrapError(f"Installing pip failed ({command}): {receipt.error}")
