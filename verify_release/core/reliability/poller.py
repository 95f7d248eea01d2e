"""
Availability poller — wait for a published version to reach its registry.

States:
    WAITING   → Sleeping between checks.
    CHECKING  → Asking the registry whether the version is visible.
    AVAILABLE → Check returned True. Terminal.
    TIMED_OUT → Budget exhausted. Terminal.

Transitions:
    WAITING  → CHECKING:   first attempt, or poll interval elapsed
    CHECKING → AVAILABLE:  check returns True
    CHECKING → WAITING:    check returns False and budget remains
    CHECKING → TIMED_OUT:  check returns False and elapsed >= budget

A check that raises (e.g. ``VersionMismatchError``) propagates
immediately: only a plain False is treated as "not there yet".
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from verify_release.core.errors import AvailabilityTimeoutError

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 5.0


class PollState(StrEnum):
    """Availability poller states."""

    WAITING = "waiting"
    CHECKING = "checking"
    AVAILABLE = "available"
    TIMED_OUT = "timed_out"


@dataclass
class AvailabilityPoller:
    """Bounded fixed-interval poll for one package version.

    Args:
        package: Package identifier, used in logs and the timeout error.
        version: Requested version.
        timeout_s: Budget measured from the first check.
        interval_s: Sleep between checks.
        clock: Monotonic time source (injectable for tests).
        sleep: Sleep function (injectable for tests).
    """

    package: str
    version: str
    timeout_s: float
    interval_s: float = POLL_INTERVAL_S
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], Any] = time.sleep

    # ── Internal state ───────────────────────────────────────────
    state: PollState = PollState.WAITING
    attempts: int = 0
    elapsed_s: float = 0.0
    history: list[PollState] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.state in (PollState.AVAILABLE, PollState.TIMED_OUT)

    def wait(self, check: Callable[[], bool]) -> int:
        """Poll ``check`` until it returns True.

        Returns:
            Number of checks performed.

        Raises:
            AvailabilityTimeoutError: Budget exceeded without success.
        """
        start = self.clock()
        while True:
            self._transition(PollState.CHECKING)
            self.attempts += 1
            available = check()
            self.elapsed_s = self.clock() - start

            if available:
                self._transition(PollState.AVAILABLE)
                logger.debug(
                    "%s@%s available after %d check(s), %.0fs",
                    self.package, self.version, self.attempts, self.elapsed_s,
                )
                return self.attempts

            if self.elapsed_s >= self.timeout_s:
                self._transition(PollState.TIMED_OUT)
                raise AvailabilityTimeoutError(self.package, self.version, self.elapsed_s)

            self._transition(PollState.WAITING)
            logger.debug(
                "Waiting for %s@%s to become available (%.0fs/%.0fs)",
                self.package, self.version, self.elapsed_s, self.timeout_s,
            )
            self.sleep(self.interval_s)

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package,
            "version": self.version,
            "state": self.state.value,
            "attempts": self.attempts,
            "elapsed_s": round(self.elapsed_s, 1),
            "timeout_s": self.timeout_s,
            "interval_s": self.interval_s,
        }

    def _transition(self, new_state: PollState) -> None:
        self.state = new_state
        self.history.append(new_state)


def wait_until_available(
    check: Callable[[], bool],
    *,
    package: str,
    version: str,
    timeout_s: float,
    interval_s: float = POLL_INTERVAL_S,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Any] = time.sleep,
) -> AvailabilityPoller:
    """Run a poller to completion and return it (for its stats)."""
    poller = AvailabilityPoller(
        package=package,
        version=version,
        timeout_s=timeout_s,
        interval_s=interval_s,
        clock=clock,
        sleep=sleep,
    )
    poller.wait(check)
    return poller
