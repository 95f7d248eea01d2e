"""
Installer base — shared step discipline for every ecosystem.

Each installer is a short sequence of steps, and every step is one of:

    tolerated  — stale-package removal, cache cleanup.  Failure is
                 logged at DEBUG and recorded, never raised.
    wait       — availability polling through ``AvailabilityPoller``.
    fatal      — environment setup and the install itself.  Failure
                 raises ``InstallError`` with the captured output.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any, ClassVar

from verify_release.adapters.base import CommandResult, ProcessRunner
from verify_release.core.config.settings import VerifierSettings
from verify_release.core.errors import InstallError
from verify_release.core.models.receipt import InstallReceipt, StepRecord
from verify_release.core.models.request import Ecosystem, VerificationRequest
from verify_release.core.reliability.poller import AvailabilityPoller, PollState

logger = logging.getLogger(__name__)


class Installer(ABC):
    """Install one package version into a staged sample program.

    To add an ecosystem:
        1. Subclass Installer and set ``ecosystem``
        2. Implement ``package_ref`` and ``_install``
        3. Add a case to ``select_installer``
    """

    ecosystem: ClassVar[Ecosystem]

    def __init__(
        self,
        runner: ProcessRunner,
        settings: VerifierSettings | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        self.runner = runner
        self.settings = settings or VerifierSettings()
        self._clock = clock
        self._sleep = sleep
        self._steps: list[StepRecord] = []
        self._metadata: dict[str, Any] = {}

    @abstractmethod
    def package_ref(self, request: VerificationRequest) -> str:
        """The package identifier this ecosystem uses."""

    @abstractmethod
    def _install(self, work_dir: Path, request: VerificationRequest) -> None:
        """Run the ecosystem's steps; raise ``InstallError`` on fatal failure."""

    def install(self, work_dir: Path, request: VerificationRequest) -> InstallReceipt:
        """Install ``request.package_version`` into ``work_dir``."""
        self._steps = []
        self._metadata = {}
        start = time.monotonic()
        package_ref = self.package_ref(request)
        self._install(work_dir, request)
        return InstallReceipt.success(
            ecosystem=self.ecosystem.value,
            package_ref=package_ref,
            output=f"Installed {package_ref} {request.package_version}",
            steps=list(self._steps),
            metadata=dict(self._metadata),
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    # ── Step helpers ────────────────────────────────────────────

    def _run(self, cmd: list[str], cwd: Path) -> CommandResult:
        return self.runner.run(cmd, cwd=cwd, timeout=self.settings.command_timeout_s)

    def _run_tolerated(self, step: str, cmd: list[str], cwd: Path) -> CommandResult:
        """Run a best-effort command; failures are logged and recorded only."""
        result = self._run(cmd, cwd)
        if result.ok:
            self._steps.append(StepRecord(name=step, command=result.rendered))
        else:
            logger.debug(
                "Ignoring failed %s (exit %d): %s\n%s\n%s",
                step, result.returncode, result.rendered,
                result.stderr.strip(), result.stdout.strip(),
            )
            self._steps.append(StepRecord(
                name=step,
                command=result.rendered,
                ok=False,
                tolerated=True,
                detail=result.stderr.strip()[-500:],
            ))
        return result

    def _run_fatal(self, step: str, cmd: list[str], cwd: Path, message: str) -> CommandResult:
        """Run a required command; raise ``InstallError`` if it fails."""
        result = self._run(cmd, cwd)
        if not result.ok:
            self._steps.append(StepRecord(
                name=step,
                command=result.rendered,
                ok=False,
                detail=result.stderr.strip()[-500:],
            ))
            raise InstallError(message, stdout=result.stdout, stderr=result.stderr)
        self._steps.append(StepRecord(name=step, command=result.rendered))
        return result

    def _wait_until_available(
        self,
        check: Callable[[], bool],
        package: str,
        version: str,
    ) -> AvailabilityPoller:
        timeout_s = self.settings.timeout_for(self.ecosystem)
        logger.debug(
            "Waiting up to %.0fs for %s@%s (poll every %.0fs)",
            timeout_s, package, version, self.settings.poll_interval_s,
        )
        poller = AvailabilityPoller(
            package=package,
            version=version,
            timeout_s=timeout_s,
            interval_s=self.settings.poll_interval_s,
            clock=self._clock,
            sleep=self._sleep,
        )
        try:
            poller.wait(check)
        finally:
            self._metadata["availability"] = poller.to_dict()
            self._steps.append(StepRecord(
                name="wait",
                ok=poller.state is PollState.AVAILABLE,
                detail=f"{poller.attempts} check(s), {poller.elapsed_s:.0f}s",
            ))
        return poller

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} ecosystem={self.ecosystem.value!r}>"
