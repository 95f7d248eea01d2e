"""
Verify use case — stage, install, preview, clean up.

This is the top-level orchestrator for one verification:

    1. Stage     copy the sample program into a unique temp dir
    2. Configure create an isolated stack (local backend in the temp dir)
    3. Install   dispatch to the ecosystem installer
    4. Preview   run the engine's dry run against the updated copy
    5. Cleanup   always remove the temp dir

Nothing is retried here; retries live in the availability poller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from verify_release.adapters.base import ProcessRunner
from verify_release.adapters.engine.pulumi import PreviewEngine, PulumiCliEngine, isolation_env
from verify_release.adapters.shell.command import SubprocessRunner
from verify_release.core.config.settings import VerifierSettings
from verify_release.core.models.preview import VerificationResult
from verify_release.core.models.request import VerificationRequest
from verify_release.core.services.installers import install_package_version
from verify_release.core.services.staging import staged_workspace

logger = logging.getLogger(__name__)


def verify_release(
    request: VerificationRequest,
    *,
    settings: VerifierSettings | None = None,
    runner: ProcessRunner | None = None,
    engine: PreviewEngine | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Any] = time.sleep,
) -> VerificationResult:
    """Run one verification end to end.

    Args:
        request: Validated request (see ``validation.build_request``).
        settings: Timing budgets and engine isolation (default: built-in).
        runner: Process runner for installers and the default engine.
        engine: Preview engine (default: the ``pulumi`` CLI).
        clock: Monotonic clock used by availability polling.
        sleep: Sleep used by availability polling.

    Returns:
        VerificationResult with the install receipt and preview output.

    Raises:
        VerifyReleaseError: any fatal step; the temp dir is still removed.
    """
    settings = settings or VerifierSettings()
    runner = runner or SubprocessRunner()
    engine = engine or PulumiCliEngine(runner, settings)

    start = time.monotonic()
    with staged_workspace(request.source_directory) as staged:
        env = isolation_env(staged.temp_dir, settings)
        stack = engine.create_isolated_stack(staged.work_dir, env)

        receipt = install_package_version(
            staged.work_dir,
            request,
            runner,
            settings,
            clock=clock,
            sleep=sleep,
        )

        logger.debug("Running preview")
        preview = stack.preview()
        logger.debug(preview.stdout)
        logger.debug(preview.stderr)

    return VerificationResult(
        request=request,
        receipt=receipt,
        preview=preview,
        staged_directory=staged.temp_dir,
        duration_ms=int((time.monotonic() - start) * 1000),
    )
