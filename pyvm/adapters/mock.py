"""
Mock adapters — test doubles for every adapter role.

They record every call and succeed by default. Each can be told to
fail (or to run a side effect) for specific inputs, so the install
strategies can be exercised without network access or Windows tools.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable

from pyvm.adapters.base import Archiver, Downloader, ProcessRunner
from pyvm.core.models.command import CommandSpec
from pyvm.core.models.receipt import Receipt


class MockDownloader(Downloader):
    """Writes canned bytes instead of fetching URLs."""

    def __init__(self, available: bool = True, default_content: bytes = b"[mock] artifact"):
        self._available = available
        self._default_content = default_content
        self._content: dict[str, bytes] = {}
        self._json: dict[str, Any] = {}
        self._failures: dict[str, str] = {}
        self._call_log: list[tuple[str, Path | None]] = []

    @property
    def name(self) -> str:
        return "mock-download"

    @property
    def call_log(self) -> list[tuple[str, Path | None]]:
        """``(url, dest)`` for every call; ``dest`` is None for fetch_json."""
        return self._call_log

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_content(self, url: str, content: bytes) -> None:
        self._content[url] = content

    def set_json(self, url: str, data: Any) -> None:
        self._json[url] = data

    def set_failure(self, url: str, error: str = "Mock download failure") -> None:
        self._failures[url] = error

    def download(self, url: str, dest: Path) -> Receipt:
        self._call_log.append((url, dest))
        if url in self._failures:
            return Receipt.failure(adapter=self.name, operation="download", error=self._failures[url])

        content = self._content.get(url, self._default_content)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(content)
        return Receipt.success(
            adapter=self.name,
            operation="download",
            output=f"[mock] downloaded {url}",
            metadata={"url": url, "dest": str(dest), "size_bytes": len(content)},
        )

    def fetch_json(self, url: str) -> Receipt:
        self._call_log.append((url, None))
        if url in self._failures:
            return Receipt.failure(adapter=self.name, operation="fetch_json", error=self._failures[url])
        if url not in self._json:
            return Receipt.failure(
                adapter=self.name, operation="fetch_json", error=f"[mock] 404 for {url}",
            )
        return Receipt.success(
            adapter=self.name, operation="fetch_json", metadata={"url": url, "json": self._json[url]},
        )

    def reset(self) -> None:
        """Clear call log and canned responses."""
        self._call_log.clear()
        self._content.clear()
        self._json.clear()
        self._failures.clear()


class MockArchiver(Archiver):
    """Materialises configured file trees instead of reading real zips."""

    def __init__(self, available: bool = True):
        self._available = available
        self._trees: dict[str, dict[str, bytes | str]] = {}
        self._failures: dict[str, str] = {}
        self._call_log: list[tuple[str, Path, Path]] = []

    @property
    def name(self) -> str:
        return "mock-archive"

    @property
    def call_log(self) -> list[tuple[str, Path, Path]]:
        """``(operation, source, dest)`` for every call."""
        return self._call_log

    def is_available(self) -> bool:
        return self._available

    def set_tree(self, archive_name: str, files: dict[str, bytes | str]) -> None:
        """Files (relative path → content) that ``extract`` will create."""
        self._trees[archive_name] = files

    def set_failure(self, operation: str, error: str = "Mock archive failure") -> None:
        """Make ``extract`` or ``compress`` fail."""
        self._failures[operation] = error

    def extract(self, archive: Path, dest: Path) -> Receipt:
        self._call_log.append(("extract", archive, dest))
        if "extract" in self._failures:
            return Receipt.failure(adapter=self.name, operation="extract", error=self._failures["extract"])

        files = self._trees.get(archive.name, {})
        dest.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = dest / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return Receipt.success(
            adapter=self.name, operation="extract", metadata={"count": len(files)},
        )

    def compress_directory(
        self,
        src: Path,
        dest_zip: Path,
        exclude: Iterable[str] = (),
    ) -> Receipt:
        self._call_log.append(("compress", src, dest_zip))
        if "compress" in self._failures:
            return Receipt.failure(adapter=self.name, operation="compress", error=self._failures["compress"])

        excluded = set(exclude)
        names = sorted(p.name for p in src.iterdir() if p.name not in excluded)
        dest_zip.write_text("\n".join(names), encoding="utf-8")
        return Receipt.success(
            adapter=self.name, operation="compress", metadata={"entries": names},
        )

    def reset(self) -> None:
        self._call_log.clear()
        self._trees.clear()
        self._failures.clear()


class MockProcessRunner(ProcessRunner):
    """Records commands instead of running them.

    ``set_failure`` and ``set_handler`` match one argv token: the
    program or an argument, either whole or by its last path component
    (``"get-pip.py"`` matches ``C:\\py\\Tools\\get-pip.py``). Matching never
    looks inside a path, so a temp dir named after a command is harmless.
    """

    def __init__(self, available: bool = True, default_output: str = "[mock] executed"):
        self._available = available
        self._default_output = default_output
        self._failures: dict[str, str] = {}
        self._handlers: dict[str, Callable[[CommandSpec], None]] = {}
        self._call_log: list[CommandSpec] = []

    @property
    def name(self) -> str:
        return "mock-process"

    @property
    def call_log(self) -> list[CommandSpec]:
        """Every command this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, match: str, error: str = "Mock failure") -> None:
        """Fail any command with an argv token matching ``match``."""
        self._failures[match] = error

    def set_handler(self, match: str, handler: Callable[[CommandSpec], None]) -> None:
        """Call ``handler(command)`` for matching commands before succeeding."""
        self._handlers[match] = handler

    def run(self, command: CommandSpec) -> Receipt:
        self._call_log.append(command)
        line = command.display()
        tokens = _match_tokens(command)

        for match, error in self._failures.items():
            if match in tokens:
                return Receipt.failure(
                    adapter=self.name, operation="run", error=error, metadata={"command": line},
                )

        for match, handler in self._handlers.items():
            if match in tokens:
                handler(command)

        return Receipt.success(
            adapter=self.name,
            operation="run",
            output=self._default_output,
            metadata={"command": line, "mock": True},
        )

    def reset(self) -> None:
        """Clear call log, failures and handlers."""
        self._call_log.clear()
        self._failures.clear()
        self._handlers.clear()


def _match_tokens(command: CommandSpec) -> set[str]:
    """Every argv token plus the last path component of each."""
    tokens = set(command.argv)
    tokens.update(t.replace("\\", "/").rsplit("/", 1)[-1] for t in command.argv)
    return tokens
