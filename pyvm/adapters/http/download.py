"""
HTTP download adapter — urllib-based fetches with progress logging.

Downloads stream to disk in 8 KiB chunks. The socket timeout bounds
connect and idle time only; a large artifact can take as long as it
needs as long as bytes keep arriving.
"""

from __future__ import annotations

import json
import logging
import time
import urllib.request
from pathlib import Path

from pyvm import __version__
from pyvm.adapters.base import Downloader
from pyvm.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

_CHUNK = 8192


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


class UrllibDownloader(Downloader):
    """Fetch URLs with ``urllib.request``.

    Args:
        timeout: Socket timeout in seconds (connect + per-read).
    """

    def __init__(self, timeout: float = 10.0):
        self._timeout = timeout
        self._headers = {"User-Agent": f"pyvm/{__version__}"}

    @property
    def name(self) -> str:
        return "urllib"

    def is_available(self) -> bool:
        return True

    def download(self, url: str, dest: Path) -> Receipt:
        start = time.monotonic()
        dest.parent.mkdir(parents=True, exist_ok=True)
        downloaded = 0

        try:
            req = urllib.request.Request(url, headers=self._headers)
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                total = int(resp.headers.get("Content-Length", 0) or 0)
                last_progress = -1
                with open(dest, "wb") as f:
                    while True:
                        chunk = resp.read(_CHUNK)
                        if not chunk:
                            break
                        f.write(chunk)
                        downloaded += len(chunk)

                        # Progress tracking (log every 10%)
                        if total > 0:
                            pct = int(downloaded * 100 / total)
                            if pct >= last_progress + 10:
                                last_progress = pct
                                logger.info(
                                    "Download progress: %d%% (%s / %s)",
                                    pct, _fmt_size(downloaded), _fmt_size(total),
                                )
        except Exception as e:
            dest.unlink(missing_ok=True)
            return Receipt.failure(
                adapter=self.name,
                operation="download",
                error=f"Download of {url} failed: {e}",
                metadata={"url": url, "dest": str(dest)},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Downloaded %s to %s in %dms", _fmt_size(downloaded), dest, elapsed_ms)
        return Receipt.success(
            adapter=self.name,
            operation="download",
            output=f"Downloaded {_fmt_size(downloaded)} to {dest}",
            duration_ms=elapsed_ms,
            metadata={"url": url, "dest": str(dest), "size_bytes": downloaded},
        )

    def fetch_json(self, url: str) -> Receipt:
        try:
            req = urllib.request.Request(
                url, headers={**self._headers, "Accept": "application/json"},
            )
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                data = json.loads(resp.read())
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                operation="fetch_json",
                error=f"Failed to fetch {url}: {e}",
                metadata={"url": url},
            )

        return Receipt.success(
            adapter=self.name,
            operation="fetch_json",
            metadata={"url": url, "json": data},
        )
