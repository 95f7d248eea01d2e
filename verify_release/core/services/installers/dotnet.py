"""
dotnet installer — ``Publisher.Provider`` from the NuGet feed.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from pathlib import Path

from verify_release.adapters.registry.http import head_status, nuget_package_url
from verify_release.core.models.receipt import StepRecord
from verify_release.core.models.request import Ecosystem, VerificationRequest
from verify_release.core.services.installers.base import Installer
from verify_release.core.services.versioning import nuget_exact_version

logger = logging.getLogger(__name__)

# MSBuild's restore output; stale assets here pin the old package version
BUILD_ASSETS_DIR = "obj"


class DotnetInstaller(Installer):
    """Remove the reference, wait for the feed, add the exact version, clear ``obj``."""

    ecosystem = Ecosystem.DOTNET

    def __init__(self, *args, probe: Callable[[str, float], int | None] = head_status, **kwargs):
        super().__init__(*args, **kwargs)
        self._probe = probe

    def package_ref(self, request: VerificationRequest) -> str:
        return request.nuget_package

    def _install(self, work_dir: Path, request: VerificationRequest) -> None:
        package_ref = self.package_ref(request)
        version = request.package_version

        logger.debug("Removing any existing dotnet package: %s", package_ref)
        self._run_tolerated("remove", ["dotnet", "remove", "package", package_ref], work_dir)

        self._wait_until_available(
            lambda: self.is_published(package_ref, version),
            package_ref,
            version,
        )

        exact = nuget_exact_version(version)
        logger.debug("Installing dotnet package: %s %s", package_ref, exact)
        self._run_fatal(
            "install",
            ["dotnet", "add", "package", package_ref, "--version", exact],
            work_dir,
            f"Failed to install {package_ref} --version {exact}",
        )

        self.clear_build_assets(work_dir)

    def is_published(self, package_ref: str, version: str) -> bool:
        url = nuget_package_url(self.settings.nuget_feed_url, package_ref, version)
        status = self._probe(url, self.settings.http_timeout_s)
        logger.debug("HEAD %s → %s", url, status)
        return status == 200

    def clear_build_assets(self, work_dir: Path) -> None:
        """Delete ``obj/`` so the preview restores against the new reference."""
        assets = work_dir / BUILD_ASSETS_DIR
        if not assets.exists():
            return
        try:
            shutil.rmtree(assets)
            self._steps.append(StepRecord(name="clear-cache", command=f"rm -rf {assets}"))
        except OSError as e:
            logger.debug("Failed to remove %s: %s", assets, e)
            self._steps.append(StepRecord(
                name="clear-cache",
                command=f"rm -rf {assets}",
                ok=False,
                tolerated=True,
                detail=str(e),
            ))
