"""
go installer — require the exact module version, then tidy.

There is no availability wait: ``go mod tidy`` fetches through the
module proxy synchronously.  The requirement is written with
``go mod edit`` instead of ``go get`` so a proxy that has the module
but has not indexed the version listing yet does not fail the run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from verify_release.core.models.request import Ecosystem, VerificationRequest
from verify_release.core.services.installers.base import Installer
from verify_release.core.services.versioning import go_module_version, normalize_go_module_path

logger = logging.getLogger(__name__)


class GoInstaller(Installer):
    """Edit go.mod to require the released module, then ``go mod tidy``."""

    ecosystem = Ecosystem.GO

    def package_ref(self, request: VerificationRequest) -> str:
        return normalize_go_module_path(
            request.go_module_template,
            request.publisher,
            request.provider,
            request.provider_version,
        )

    def _install(self, work_dir: Path, request: VerificationRequest) -> None:
        module_ref = f"{self.package_ref(request)}@{go_module_version(request.package_version)}"

        logger.debug("Requiring go module: %s", module_ref)
        self._run_fatal(
            "install",
            ["go", "mod", "edit", f"-require={module_ref}"],
            work_dir,
            f"Failed to install {module_ref}",
        )

        logger.debug("Tidying go modules")
        self._run_fatal(
            "tidy",
            ["go", "mod", "tidy"],
            work_dir,
            "Failed to tidy go modules",
        )
