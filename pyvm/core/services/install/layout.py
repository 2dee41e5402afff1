"""
Install tree layout — filesystem moves shared by both strategies.

Every OSError is re-raised as LayoutError naming the path involved,
so a half-arranged tree always fails with a readable message.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from pyvm.core.errors import LayoutError

logger = logging.getLogger(__name__)

SITE_PACKAGES = "site-packages"

# Path configuration for the embeddable layout (https://stackoverflow.com/a/68891090)
_PTH_TEMPLATE = (
    "{basename}.zip\n"
    ".\n"
    "\n"
    "# Uncomment to run site.main() automatically\n"
    "#import site\n"
    "\n"
    "Lib\\site-packages"
)


def pth_content(basename: str) -> str:
    """Contents of ``<basename>._pth``: zipped stdlib, cwd, site-packages."""
    return _PTH_TEMPLATE.format(basename=basename)


def write_pth(root: Path, basename: str) -> Path:
    path = root / f"{basename}._pth"
    try:
        # newline="" keeps the content byte-exact on Windows
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(pth_content(basename))
    except OSError as e:
        raise LayoutError(f"Cannot write {path}: {e}") from e
    return path


def flatten_dir(root: Path, name: str = "DLLs") -> int:
    """Move every entry of ``root/name`` into ``root``, then remove it.

    Native extension modules are loaded from next to the interpreter,
    not from a subdirectory.

    Returns:
        Number of entries moved.
    """
    subdir = root / name
    try:
        entries = list(subdir.iterdir())
        for entry in entries:
            target = root / entry.name
            if target.exists():
                remove_path(target)
            entry.rename(target)
        shutil.rmtree(subdir)
    except OSError as e:
        raise LayoutError(f"Cannot flatten {subdir}: {e}") from e

    logger.debug("Moved %d entries out of %s", len(entries), subdir)
    return len(entries)


def promote(nested: Path, final: Path) -> None:
    """Make ``nested`` become ``final`` (rename, falling back to a move)."""
    try:
        if final.exists():
            shutil.rmtree(final)
        final.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(nested), str(final))
    except OSError as e:
        raise LayoutError(f"Cannot move {nested} to {final}: {e}") from e


def prune_except(directory: Path, keep: str = SITE_PACKAGES) -> list[str]:
    """Delete every child of ``directory`` except ``keep``.

    Returns:
        Names of the removed children.
    """
    removed = []
    try:
        for child in sorted(directory.iterdir()):
            if child.name == keep:
                continue
            remove_path(child)
            removed.append(child.name)
    except OSError as e:
        raise LayoutError(f"Cannot clean {directory}: {e}") from e
    return removed


def remove_path(path: Path) -> None:
    """Delete a file, symlink or directory tree."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
