"""
Subprocess runner — the SINGLE PLACE where ``subprocess.run`` is called.

Commands arrive as CommandSpecs and are executed without a shell.
Output is captured; the tail of stdout/stderr is kept on the receipt.
"""

from __future__ import annotations

import logging
import subprocess
import time

from pyvm.adapters.base import ProcessRunner
from pyvm.core.models.command import CommandSpec
from pyvm.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

# Keep receipts small; pip output can run to thousands of lines
_OUTPUT_TAIL = 2000


class SubprocessRunner(ProcessRunner):
    """Run commands with ``subprocess.run`` and capture their output.

    Args:
        timeout: Optional per-command limit in seconds. None (default)
            waits indefinitely, since msiexec and pip have no bound.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "subprocess"

    def is_available(self) -> bool:
        return True

    def run(self, command: CommandSpec) -> Receipt:
        logger.debug("Executing: %s", command.display())
        start = time.monotonic()

        try:
            result = subprocess.run(
                command.invocation,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                operation="run",
                error=f"Command timed out after {self._timeout}s",
                metadata={"command": command.display()},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                operation="run",
                error=f"Cannot execute {command.program}: {e}",
                metadata={"command": command.display()},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "")[-_OUTPUT_TAIL:].strip()
        stderr = (result.stderr or "")[-_OUTPUT_TAIL:].strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                operation="run",
                output=stdout,
                duration_ms=elapsed_ms,
                metadata={
                    "command": command.display(),
                    "return_code": result.returncode,
                    "stderr": stderr,
                },
            )

        return Receipt.failure(
            adapter=self.name,
            operation="run",
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={
                "command": command.display(),
                "return_code": result.returncode,
                "stdout": stdout,
            },
        )
