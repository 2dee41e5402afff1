"""
Version models — descriptors and the catalog they live in.

A VersionDescriptor is the immutable record of one installable Python
release. The VersionCatalog is the resolvable set of descriptors plus
its freshness window.
"""

from __future__ import annotations

from datetime import UTC, datetime

from packaging.version import Version
from pydantic import BaseModel, ConfigDict, Field, model_validator


class PipBootstrap(BaseModel):
    """Where to get the pip bootstrap script for a release."""

    model_config = ConfigDict(frozen=True)

    filename: str = "get-pip.py"
    download_url: str


class VersionDescriptor(BaseModel):
    """One installable runtime release and its artifacts."""

    model_config = ConfigDict(frozen=True)

    version_number: str
    download_url: str
    installer_filename: str
    pip: PipBootstrap

    @property
    def version_info(self) -> Version:
        return Version(self.version_number)

    @property
    def major(self) -> int:
        return self.version_info.major

    @property
    def minor(self) -> int:
        return self.version_info.minor

    @property
    def is_prerelease(self) -> bool:
        return self.version_info.is_prerelease

    @property
    def basename(self) -> str:
        """Stem used for the zipped stdlib and the ._pth file, e.g. ``python311``."""
        return f"python{self.major}{self.minor}"


class VersionCatalog(BaseModel):
    """Known versions, partitioned into stable and unstable.

    ``stable`` is ordered most-recent-first, so ``stable[0]`` is what
    "latest" means.
    """

    all: list[str] = Field(default_factory=list)
    stable: list[str] = Field(default_factory=list)
    unstable: list[str] = Field(default_factory=list)
    descriptors: dict[str, VersionDescriptor] = Field(default_factory=dict)

    fetched_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    expires_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def _check_descriptors(self) -> VersionCatalog:
        missing = [v for v in self.all if v not in self.descriptors]
        if missing:
            raise ValueError(f"No descriptor for: {', '.join(missing)}")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.all

    def is_stale(self, now: datetime | None = None) -> bool:
        """True once ``now`` is past ``expires_at``."""
        return (now or datetime.now(UTC)) > self.expires_at

    def get(self, identifier: str) -> VersionDescriptor | None:
        return self.descriptors.get(identifier)
