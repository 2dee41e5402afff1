"""
Adapter base — the contracts between the install services and the outside world.

The install pipeline never touches the network, archives or processes
directly. It goes through one adapter per role:

    download  — fetch a URL to a file (or parse it as JSON)
    archive   — extract a zip, compress a directory
    process   — run a command synchronously

Adapters NEVER raise; every failure comes back as a failed Receipt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Iterable

from pyvm.core.models.command import CommandSpec
from pyvm.core.models.receipt import Receipt


class Adapter(ABC):
    """Common surface of every adapter."""

    role: ClassVar[str] = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'urllib', 'zipfile', 'subprocess')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool can be used. Fast, never raises."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} role={self.role!r}>"


class Downloader(Adapter):
    role = "download"

    @abstractmethod
    def download(self, url: str, dest: Path) -> Receipt:
        """Fetch ``url`` into ``dest``, replacing any existing file."""

    @abstractmethod
    def fetch_json(self, url: str) -> Receipt:
        """Fetch ``url`` and parse it; the body lands in ``metadata["json"]``."""


class Archiver(Adapter):
    role = "archive"

    @abstractmethod
    def extract(self, archive: Path, dest: Path) -> Receipt:
        """Extract ``archive`` into ``dest`` (created if missing)."""

    @abstractmethod
    def compress_directory(
        self,
        src: Path,
        dest_zip: Path,
        exclude: Iterable[str] = (),
    ) -> Receipt:
        """Zip the contents of ``src`` into ``dest_zip``.

        Entry names are relative to ``src``. Top-level children of
        ``src`` whose name is in ``exclude`` are left out entirely.
        """


class ProcessRunner(Adapter):
    role = "process"

    @abstractmethod
    def run(self, command: CommandSpec) -> Receipt:
        """Run ``command`` to completion in the current working directory."""

    def run_all(self, commands: Iterable[CommandSpec]) -> Receipt:
        """Run commands in order, stopping at the first failure.

        Returns the failing receipt, or the last successful one.
        """
        receipt = Receipt.skip(adapter=self.name, operation="run", reason="no commands")
        for command in commands:
            receipt = self.run(command)
            if receipt.failed:
                return receipt
        return receipt
