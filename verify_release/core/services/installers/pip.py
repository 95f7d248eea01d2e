"""
pip installer — ``publisher-provider`` from PyPI into a fresh virtualenv.

The sample program gets its own ``venv`` inside the staged copy, so
nothing leaks into (or out of) the interpreter running the verifier.
"""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path

from packaging.version import InvalidVersion, Version

from verify_release.core.errors import InstallError
from verify_release.core.models.request import Ecosystem, VerificationRequest
from verify_release.core.services.installers.base import Installer

logger = logging.getLogger(__name__)

VENV_DIR = "venv"

# "Available versions: 4.16.2, 4.16.1, 4.16.0a1"
_AVAILABLE_VERSIONS_RE = re.compile(r"^Available versions:\s*(.*)$", re.MULTILINE)


def venv_pip(work_dir: Path, platform: str = sys.platform) -> Path:
    """Path of pip inside the sample's virtualenv."""
    if platform == "win32":
        return work_dir / VENV_DIR / "Scripts" / "pip.exe"
    return work_dir / VENV_DIR / "bin" / "pip"


def parse_available_versions(output: str) -> list[str]:
    """Extract the version list printed by ``pip index versions``."""
    match = _AVAILABLE_VERSIONS_RE.search(output)
    if not match:
        return []
    return [v.strip() for v in match.group(1).split(",") if v.strip()]


def version_listed(version: str, listed: list[str]) -> bool:
    """Whether ``version`` is in ``listed`` after PEP 440 normalization.

    The index prints normalized versions, so a SemVer pre-release such
    as ``4.17.0-alpha.1`` shows up as ``4.17.0a1``.
    """
    try:
        wanted = Version(version)
    except InvalidVersion:
        return False
    for candidate in listed:
        try:
            if Version(candidate) == wanted:
                return True
        except InvalidVersion:
            continue
    return False


class PipInstaller(Installer):
    """Create a venv, uninstall, wait for the index, install, then requirements."""

    ecosystem = Ecosystem.PYTHON

    def package_ref(self, request: VerificationRequest) -> str:
        return request.pip_package

    def _install(self, work_dir: Path, request: VerificationRequest) -> None:
        package_ref = self.package_ref(request)
        version = request.package_version

        venv_cmd = [self.settings.python_executable, "-m", "venv", VENV_DIR]
        logger.debug("Creating virtualenv: %s", " ".join(venv_cmd))
        self._run_fatal("venv", venv_cmd, work_dir, "Failed to create virtualenv")

        pip = str(venv_pip(work_dir))

        logger.debug("Removing any existing pip package: %s", package_ref)
        self._run_tolerated("remove", [pip, "uninstall", "-y", package_ref], work_dir)

        self._wait_until_available(
            lambda: self.is_published(work_dir, pip, package_ref, version),
            package_ref,
            version,
        )

        package_version_ref = f"{package_ref}=={version}"
        logger.debug("Installing pip package: %s", package_version_ref)
        self._run_fatal(
            "install",
            [pip, "install", package_version_ref],
            work_dir,
            f"Failed to install {package_version_ref}",
        )

        requirements = self.settings.requirements_file
        if not (work_dir / requirements).is_file():
            logger.debug("No %s in %s, skipping", requirements, work_dir)
            return
        logger.debug("Installing %s", requirements)
        self._run_fatal(
            "requirements",
            [pip, "install", "-r", requirements],
            work_dir,
            f"Failed to install {requirements}",
        )

    def is_published(self, work_dir: Path, pip: str, package_ref: str, version: str) -> bool:
        """Whether ``version`` (pre-releases included) is listed on the index."""
        result = self._run([pip, "index", "versions", package_ref, "--pre"], work_dir)
        if not result.ok:
            # pip exits non-zero when the project has no releases yet
            logger.debug("pip index versions %s failed: %s", package_ref, result.stderr.strip())
            return False
        versions = parse_available_versions(result.stdout)
        if not versions:
            raise InstallError(
                f"Could not read the version list for {package_ref}",
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return version_listed(version, versions)
