"""
Error taxonomy — every failure pyvm can report.

Services raise these; adapters never do (they return failed Receipts,
which services translate). The CLI entrypoint is the only place that
catches them, prints the message and exits non-zero.
"""

from __future__ import annotations


class PyvmError(Exception):
    """Base class for all pyvm failures.

    Attributes:
        step: Short name of the step that failed (``download``,
            ``bootstrap``, ...). Used in the user-facing message.
    """

    step = "pyvm"

    def __init__(self, message: str, *, step: str | None = None):
        super().__init__(message)
        if step is not None:
            self.step = step

    def __str__(self) -> str:
        return f"[{self.step}] {super().__str__()}"


class CatalogError(PyvmError):
    """The version catalog could not be fetched or parsed."""

    step = "catalog"


class EmptyCatalog(CatalogError):
    """``latest`` was requested but no stable version is known."""

    step = "resolve"


class UnknownVersion(PyvmError):
    """The requested token does not name a known version."""

    step = "resolve"

    def __init__(self, token: str):
        super().__init__(f'"{token}" is not a valid python version.')
        self.token = token


class DownloadError(PyvmError):
    step = "download"


class ExtractionError(PyvmError):
    step = "extract"


class LayoutError(PyvmError):
    """Moving, deleting or writing files inside an install tree failed."""

    step = "layout"


class BootstrapError(PyvmError):
    step = "bootstrap"


class InstallationIncomplete(PyvmError):
    step = "install"

    def __init__(self, version: str):
        super().__init__(f"Python {version} not installed correctly, try again...")


class CleanupError(PyvmError):
    step = "cleanup"


class NotInstalled(PyvmError):
    step = "activate"

    def __init__(self, version: str):
        super().__init__(f'Python "{version}" is not installed. Try installing it first...')
        self.version = version


class ActivationError(PyvmError):
    step = "activate"
