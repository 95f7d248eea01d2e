"""
Error taxonomy for a verification run.

Precondition errors are raised before anything touches the filesystem.
Everything else is raised from inside a staged workspace, after which
the workspace is still removed.  Tolerated failures (stale package
removal, cache cleanup) are logged and never raised.
"""

from __future__ import annotations


class VerifyReleaseError(Exception):
    """Base class for every error the CLI reports as a failure."""


class PreconditionError(VerifyReleaseError):
    """Invalid input detected before any installer runs."""


class ConfigError(VerifyReleaseError):
    """Raised when the settings file is invalid or missing."""


class AvailabilityTimeoutError(VerifyReleaseError):
    """A package version never showed up in its registry within the budget."""

    def __init__(self, package: str, version: str, waited_s: float):
        self.package = package
        self.version = version
        self.waited_s = waited_s
        super().__init__(
            f"Timed out after {waited_s:.0f}s waiting for {package}@{version} "
            "to become available"
        )


class VersionMismatchError(VerifyReleaseError):
    """The registry answered with a different version than the one requested."""

    def __init__(self, package: str, requested: str, reported: str):
        self.package = package
        self.requested = requested
        self.reported = reported
        super().__init__(
            f"Registry reported version {reported!r} for {package}, "
            f"expected {requested!r}"
        )


class CommandError(VerifyReleaseError):
    """A fatal external command failed; carries its captured output."""

    def __init__(self, message: str, stdout: str = "", stderr: str = ""):
        self.message = message
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)

    def __str__(self) -> str:
        detail = "\n".join(part for part in (self.stderr.strip(), self.stdout.strip()) if part)
        if not detail:
            return self.message
        return f"{self.message}: \n{detail}"


class InstallError(CommandError):
    """Installing the new package version failed."""


class PreviewError(CommandError):
    """The preview engine failed to create the stack or compute the plan."""
