"""
Receipt — what an adapter hands back instead of raising.

Downloads, extractions, compressions and process runs all return one.
The install services read ``failed`` / ``error`` and turn a failure
into the matching PyvmError; adapters themselves never decide what a
failure means for an install.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

ReceiptStatus = Literal["ok", "skipped", "failed"]


class Receipt(BaseModel):
    """Outcome of one adapter call (``download``, ``extract``, ``run``...)."""

    adapter: str
    operation: str
    status: ReceiptStatus = "ok"

    finished_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    # per-operation details: url/dest, command line, return code, counts
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, operation: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls._make(adapter, operation, "ok", output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, operation: str, error: str, **kwargs: Any) -> Receipt:
        return cls._make(adapter, operation, "failed", error=error, **kwargs)

    @classmethod
    def skip(cls, adapter: str, operation: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Nothing to do; ``reason`` goes in ``output``."""
        return cls._make(adapter, operation, "skipped", output=reason, **kwargs)

    @classmethod
    def _make(cls, adapter: str, operation: str, status: ReceiptStatus, **fields: Any) -> Receipt:
        return cls(adapter=adapter, operation=operation, status=status, **fields)
