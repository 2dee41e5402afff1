"""
Application context — where pyvm keeps its files on this machine.

The app root is set ONCE at startup by the CLI entry point
(``use_cases.client.build_client``) once settings are loaded;
the test suite resets it between cases.

Module-level singleton, not a class. ``get_app_root()`` returns None
when unset, and Settings then falls back to the working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


_app_root: Optional[Path] = None


def set_app_root(root: Path) -> None:
    """Register the application root for the current process."""
    global _app_root
    _app_root = root


def get_app_root() -> Optional[Path]:
    """Return the current application root, or None if not yet set."""
    return _app_root
