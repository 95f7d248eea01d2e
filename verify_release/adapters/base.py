"""
Adapter base — the process-runner contract between installers and tools.

Installers never spawn processes themselves; they hand a command list
to a ``ProcessRunner`` and get a ``CommandResult`` back.  Tests swap in
a fake runner that records commands and replays canned results.
"""

from __future__ import annotations

import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def rendered(self) -> str:
        """The command as a copy-pasteable shell line."""
        return shlex.join(self.command)


class ProcessRunner(ABC):
    """Run an external command and capture its output.

    Implementations MUST NOT raise for a failing command: a non-zero
    exit, a timeout, or a missing executable all come back as a
    ``CommandResult`` with a non-zero ``returncode``.  Deciding whether
    a failure is fatal belongs to the caller.
    """

    @abstractmethod
    def run(
        self,
        cmd: list[str],
        *,
        cwd: Path | str | None = None,
        env_overrides: dict[str, str] | None = None,
        timeout: int = 600,
    ) -> CommandResult:
        """Execute ``cmd`` and return its result."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
