"""
CommandSpec — a program plus its argument list.

Commands are never built as shell strings. The process runner hands
``argv`` straight to ``subprocess.run`` so paths with spaces or quotes
need no escaping.

The one exception is a program that parses its own command line with
rules ``subprocess.list2cmdline`` does not follow (msiexec wants
``PROPERTY="value with spaces"``). Such a command also carries the exact
``command_line`` to hand to Windows; ``args`` still holds the plain
tokens for logging and matching.
"""

from __future__ import annotations

import subprocess

from pydantic import BaseModel, ConfigDict, Field


class CommandSpec(BaseModel):
    """A single process invocation."""

    model_config = ConfigDict(frozen=True)

    program: str
    args: list[str] = Field(default_factory=list)
    command_line: str | None = None

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    @property
    def invocation(self) -> str | list[str]:
        """What ``subprocess.run`` receives."""
        return self.command_line if self.command_line is not None else self.argv

    def display(self) -> str:
        """Render the command for logs and error messages."""
        if self.command_line is not None:
            return self.command_line
        return subprocess.list2cmdline(self.argv)
