"""Adapters — bindings for the network, archives and processes.

Public re-exports for convenient access.
"""

from pyvm.adapters.base import Adapter, Archiver, Downloader, ProcessRunner
from pyvm.adapters.mock import MockArchiver, MockDownloader, MockProcessRunner
from pyvm.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "Archiver",
    "Downloader",
    "MockArchiver",
    "MockDownloader",
    "MockProcessRunner",
    "ProcessRunner",
    "default_registry",
]
