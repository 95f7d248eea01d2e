"""
npm installer — ``@publisher/provider`` from the npm registry.
"""

from __future__ import annotations

import logging
from pathlib import Path

from verify_release.core.errors import VersionMismatchError
from verify_release.core.models.request import Ecosystem, VerificationRequest
from verify_release.core.services.installers.base import Installer

logger = logging.getLogger(__name__)


class NpmInstaller(Installer):
    """Remove any existing reference, wait for the registry, install the exact version."""

    ecosystem = Ecosystem.NODEJS

    def package_ref(self, request: VerificationRequest) -> str:
        return request.npm_package

    def _install(self, work_dir: Path, request: VerificationRequest) -> None:
        package_ref = self.package_ref(request)
        version = request.package_version

        logger.debug("Removing any existing npm package: %s", package_ref)
        self._run_tolerated("remove", ["npm", "remove", package_ref], work_dir)

        self._wait_until_available(
            lambda: self.is_published(work_dir, package_ref, version),
            package_ref,
            version,
        )

        package_version_ref = f"{package_ref}@{version}"
        logger.debug("Installing npm package: %s", package_version_ref)
        self._run_fatal(
            "install",
            ["npm", "install", package_version_ref],
            work_dir,
            f"Failed to install {package_version_ref}",
        )

    def is_published(self, work_dir: Path, package_ref: str, version: str) -> bool:
        """Ask the registry for the exact version.

        ``npm view`` prints nothing for a version that is not published
        yet.  A non-empty answer that does not mention the requested
        version is a registry inconsistency, not propagation lag.
        """
        result = self._run(["npm", "view", f"{package_ref}@{version}", "version"], work_dir)
        if not result.ok:
            logger.debug("npm view %s@%s failed: %s", package_ref, version, result.stderr.strip())
            return False
        reported = result.stdout.strip()
        if not reported:
            return False
        if version not in reported:
            raise VersionMismatchError(package_ref, version, reported)
        return True
