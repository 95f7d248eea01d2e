"""
Verifier settings — timing budgets, feed URLs, and engine isolation.

Defaults reproduce the behaviour of the release pipeline; a YAML file
can override any of them (e.g. a shorter ``poll_interval_s`` for a
private feed).
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from verify_release.core.models.request import Ecosystem

DEFAULT_POLL_INTERVAL_S = 5.0

# npm and PyPI propagate within minutes; the NuGet CDN can take an hour.
DEFAULT_TIMEOUTS_S: dict[str, float] = {
    Ecosystem.NODEJS.value: 15 * 60,
    Ecosystem.PYTHON.value: 15 * 60,
    Ecosystem.DOTNET.value: 60 * 60,
}


class VerifierSettings(BaseModel):
    """Tunables for a verification run."""

    poll_interval_s: float = Field(default=DEFAULT_POLL_INTERVAL_S, gt=0)
    timeouts_s: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_TIMEOUTS_S))

    nuget_feed_url: str = "https://api.nuget.org/v3-flatcontainer"
    http_timeout_s: float = Field(default=10.0, gt=0)

    command_timeout_s: int = Field(default=600, gt=0)
    python_executable: str = "python3"
    requirements_file: str = "requirements.txt"

    stack_name: str = "verify-release"
    # Isolation only: the local backend is thrown away with the temp dir.
    passphrase: str = "correct-horse-battery-staple"

    def timeout_for(self, ecosystem: Ecosystem) -> float:
        """Availability budget for an ecosystem (falls back to the default)."""
        value = self.timeouts_s.get(ecosystem.value)
        if value is None:
            value = DEFAULT_TIMEOUTS_S.get(ecosystem.value, 15 * 60)
        return value
