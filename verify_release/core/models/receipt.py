"""
Install receipts — what an ecosystem installer did.

Fatal failures are raised as exceptions; a receipt only ever records
an installer that completed (``ok``) or an ecosystem that has no
installer at all (``skipped``).  Each external command the installer
ran is kept as a ``StepRecord`` so the CLI can show the trail.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class StepRecord(BaseModel):
    """One installer step and how it ended."""

    name: str                       # e.g. "remove", "wait", "install"
    command: str = ""               # rendered command line, if any
    ok: bool = True
    tolerated: bool = False         # failed, but the installer carried on
    detail: str = ""


class InstallReceipt(BaseModel):
    """Result of running an ecosystem installer."""

    ecosystem: str
    status: Literal["ok", "skipped"] = "ok"
    package_ref: str = ""

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    steps: list[StepRecord] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)  # e.g. "availability" poll stats

    @property
    def ok(self) -> bool:
        """Whether a package was installed."""
        return self.status == "ok"

    @property
    def skipped(self) -> bool:
        """Whether the ecosystem has no installer."""
        return self.status == "skipped"

    @property
    def tolerated_failures(self) -> list[StepRecord]:
        return [s for s in self.steps if s.tolerated]

    @classmethod
    def success(
        cls,
        ecosystem: str,
        package_ref: str,
        output: str = "",
        **kwargs: Any,
    ) -> InstallReceipt:
        """Create a success receipt."""
        return cls(
            ecosystem=ecosystem,
            status="ok",
            package_ref=package_ref,
            output=output,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        ecosystem: str,
        reason: str = "",
        **kwargs: Any,
    ) -> InstallReceipt:
        """Create a skip receipt."""
        return cls(
            ecosystem=ecosystem,
            status="skipped",
            output=reason,
            **kwargs,
        )
