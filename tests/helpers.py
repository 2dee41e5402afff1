"""
Shared test data — feed contents and artifact builders.
"""

import io
import zipfile
from datetime import UTC, datetime
from pathlib import Path

NUGET = "https://api.nuget.org/v3-flatcontainer"

MODERN_INDEX = {"versions": ["3.10.11", "3.11.4", "3.12.0", "3.13.0-rc1", "3.6.0"]}
LEGACY_INDEX = {"versions": ["2.7.17", "2.7.18"]}

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def make_nupkg(
    extra: dict[str, str] | None = None,
    *,
    root: str = "tools",
) -> bytes:
    """A minimal python NuGet package: the distribution nested under ``tools/``."""
    files = {
        f"{root}/python.exe": "MZ",
        f"{root}/Lib/os.py": "# os",
        f"{root}/Lib/json/__init__.py": "# json",
        f"{root}/Lib/site-packages/README.txt": "site",
        f"{root}/DLLs/_ssl.pyd": "pyd",
        f"{root}/DLLs/sqlite3.dll": "dll",
        "python.nuspec": "<package/>",
    }
    files.update(extra or {})

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


def fake_msi_extract(command) -> None:
    """Stand-in for ``msiexec /a``: lay out a 2.x tree at TARGETDIR."""
    target = next(a for a in command.args if a.startswith("TARGETDIR="))
    root = Path(target.split("=", 1)[1])
    (root / "DLLs").mkdir(parents=True, exist_ok=True)
    (root / "DLLs" / "_socket.pyd").write_text("pyd")
    (root / "Lib").mkdir(exist_ok=True)
    (root / "python.exe").write_text("MZ")
