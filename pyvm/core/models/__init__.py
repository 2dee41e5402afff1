"""
Domain models — Pydantic types for pyvm.

All models are re-exported here for convenient access:

    from pyvm.core.models import VersionDescriptor, VersionCatalog, Receipt
"""

from pyvm.core.models.command import CommandSpec
from pyvm.core.models.receipt import Receipt
from pyvm.core.models.session import InstallSession, InstallStage
from pyvm.core.models.settings import Settings
from pyvm.core.models.version import PipBootstrap, VersionCatalog, VersionDescriptor

__all__ = [
    # command.py
    "CommandSpec",
    # session.py
    "InstallSession",
    "InstallStage",
    # version.py
    "PipBootstrap",
    # receipt.py
    "Receipt",
    # settings.py
    "Settings",
    "VersionCatalog",
    "VersionDescriptor",
]
