"""
Pulumi preview engine — stack creation and ``pulumi preview`` via the CLI.

The engine is a black box to the rest of the verifier: create an
isolated stack against a working directory, run a preview, return the
output.  Isolation comes from the environment: a file backend rooted
in the verification's temp dir, a throwaway passphrase, and ambient
plugins disabled so a locally built provider cannot shadow the
released one.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Protocol

from verify_release.adapters.base import ProcessRunner
from verify_release.core.config.settings import VerifierSettings
from verify_release.core.errors import PreviewError
from verify_release.core.models.preview import PreviewResult

logger = logging.getLogger(__name__)


class Stack(Protocol):
    """A created stack that can compute a preview."""

    def preview(self) -> PreviewResult:
        ...


class PreviewEngine(Protocol):
    """Factory for isolated stacks."""

    def create_isolated_stack(self, work_dir: Path, env: dict[str, str]) -> Stack:
        ...


def build_backend_url(temp_dir: Path | str, platform: str = sys.platform) -> str:
    """``file://`` backend URL for a local state directory."""
    path = str(temp_dir)
    if platform == "win32":
        path = path.replace("\\", "//")
    return f"file://{path}"


def isolation_env(temp_dir: Path | str, settings: VerifierSettings) -> dict[str, str]:
    """Environment variables that pin the engine to a private local backend."""
    return {
        "PULUMI_CONFIG_PASSPHRASE": settings.passphrase,
        "PULUMI_BACKEND_URL": build_backend_url(temp_dir),
        "PULUMI_IGNORE_AMBIENT_PLUGINS": "true",
    }


class PulumiCliStack:
    """A stack created in ``work_dir``; previews run with the same env."""

    def __init__(
        self,
        runner: ProcessRunner,
        work_dir: Path,
        env: dict[str, str],
        name: str,
        timeout: int,
    ):
        self.runner = runner
        self.work_dir = work_dir
        self.env = env
        self.name = name
        self.timeout = timeout

    def preview(self) -> PreviewResult:
        result = self.runner.run(
            [
                "pulumi", "preview",
                "--stack", self.name,
                "--non-interactive",
                "--color", "never",
            ],
            cwd=self.work_dir,
            env_overrides=self.env,
            timeout=self.timeout,
        )
        if not result.ok:
            raise PreviewError(
                f"pulumi preview failed (exit {result.returncode})",
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return PreviewResult(stdout=result.stdout, stderr=result.stderr)

    def __repr__(self) -> str:
        return f"<PulumiCliStack name={self.name!r} work_dir={str(self.work_dir)!r}>"


class PulumiCliEngine:
    """Drive the ``pulumi`` CLI through a process runner."""

    def __init__(self, runner: ProcessRunner, settings: VerifierSettings):
        self.runner = runner
        self.settings = settings

    def create_isolated_stack(self, work_dir: Path, env: dict[str, str]) -> PulumiCliStack:
        name = self.settings.stack_name
        logger.debug("Creating stack %r in %s", name, work_dir)
        result = self.runner.run(
            [
                "pulumi", "stack", "init", name,
                "--secrets-provider", "passphrase",
                "--non-interactive",
            ],
            cwd=work_dir,
            env_overrides=env,
            timeout=self.settings.command_timeout_s,
        )
        if not result.ok:
            raise PreviewError(
                f"Failed to create stack {name!r} in {work_dir}",
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return PulumiCliStack(
            self.runner,
            work_dir,
            env,
            name=name,
            timeout=self.settings.command_timeout_s,
        )
