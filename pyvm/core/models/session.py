"""
InstallSession — transient state for one install invocation.

Created at the start of ``InstallPipeline.install`` and dropped when it
returns or raises. Never persisted.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from pyvm.core.models.version import VersionDescriptor


class InstallStage(str, Enum):
    """Pipeline stages, in execution order."""

    PENDING = "pending"
    REFRESH_CATALOG = "refresh_catalog"
    RESOLVE = "resolve"
    PREPARE = "prepare"
    DOWNLOAD = "download"
    TRANSFORM = "transform"
    CLEANUP = "cleanup"
    ACTIVATE = "activate"
    DONE = "done"


class InstallSession(BaseModel):
    """Working paths and progress for a single install."""

    token: str
    descriptor: VersionDescriptor | None = None

    offline_path: Path | None = None     # downloaded artifact
    unpacked_path: Path | None = None    # <root_container>/<version>
    temp_path: Path | None = None        # modern strategy only
    final_path: Path | None = None

    stage: InstallStage = InstallStage.PENDING
    last_error: str | None = None

    @property
    def version_number(self) -> str:
        return self.descriptor.version_number if self.descriptor else self.token

    def advance(self, stage: InstallStage) -> None:
        self.stage = stage

    @property
    def failed(self) -> bool:
        return self.last_error is not None

    def fail(self, error: str) -> None:
        """Record the error; ``stage`` keeps pointing at the stage that failed."""
        self.last_error = error
