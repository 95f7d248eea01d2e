"""
Subprocess runner — the single place ``subprocess.run`` is called.

Every package-manager, build-tool, and engine command in a verification
goes through here, so logging, environment merging, and timeout
handling are centralised.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path

from verify_release.adapters.base import CommandResult, ProcessRunner

logger = logging.getLogger(__name__)

# Conventional shell exit codes for "timed out" and "command not found"
EXIT_TIMEOUT = 124
EXIT_NOT_FOUND = 127


class SubprocessRunner(ProcessRunner):
    """Run commands with ``subprocess.run``, capturing text output."""

    def run(
        self,
        cmd: list[str],
        *,
        cwd: Path | str | None = None,
        env_overrides: dict[str, str] | None = None,
        timeout: int = 600,
    ) -> CommandResult:
        # ── Environment ──
        env = None
        if env_overrides:
            env = os.environ.copy()
            env.update(env_overrides)

        logger.debug("Executing: %s (cwd=%s)", " ".join(cmd), cwd)

        # ── Execute ──
        start = time.monotonic()
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                env=env,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                command=list(cmd),
                returncode=EXIT_TIMEOUT,
                stderr=f"Command timed out after {timeout}s",
                elapsed_ms=int((time.monotonic() - start) * 1000),
            )
        except FileNotFoundError as e:
            return CommandResult(
                command=list(cmd),
                returncode=EXIT_NOT_FOUND,
                stderr=f"Command not found: {e.filename or cmd[0]}",
                elapsed_ms=int((time.monotonic() - start) * 1000),
            )
        except OSError as e:
            logger.debug("Subprocess error for %s: %s", cmd, e)
            return CommandResult(
                command=list(cmd),
                returncode=EXIT_NOT_FOUND,
                stderr=f"Command execution error: {e}",
                elapsed_ms=int((time.monotonic() - start) * 1000),
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, cmd[0])
        return CommandResult(
            command=list(cmd),
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            elapsed_ms=elapsed_ms,
        )
