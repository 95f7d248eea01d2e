"""
Input validation — build a ``VerificationRequest`` from raw inputs.

All checks run before anything is staged or installed.  The order is
fixed: ecosystem tag, source directory, provider version.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from verify_release.core.errors import PreconditionError
from verify_release.core.models.request import Ecosystem, VerificationRequest
from verify_release.core.services.versioning import is_semver

logger = logging.getLogger(__name__)


def ensure_directory_accessible(directory: str | Path) -> Path:
    """Return ``directory`` as a Path, or raise naming the OS error."""
    path = Path(directory)
    try:
        if not path.exists():
            raise FileNotFoundError(
                2, f"ENOENT: no such file or directory, access '{directory}'"
            )
        if not path.is_dir():
            raise NotADirectoryError(20, f"ENOTDIR: not a directory, access '{directory}'")
        if not os.access(path, os.R_OK | os.X_OK):
            raise PermissionError(13, f"EACCES: permission denied, access '{directory}'")
    except OSError as e:
        raise PreconditionError(f"Can't access directory {directory}: Error: {e.strerror}") from e
    return path


def validate_provider_version(version: str) -> str:
    if not is_semver(version):
        raise PreconditionError(f"Invalid provider version: {version}")
    return version


def build_request(
    *,
    language: str,
    directory: str,
    provider: str,
    provider_version: str,
    publisher: str,
    package_version: str = "",
    go_module_template: str = "",
) -> VerificationRequest:
    """Validate raw inputs and assemble an immutable request.

    Raises:
        PreconditionError: on the first invalid input.
    """
    ecosystem = Ecosystem.parse(language)
    source = ensure_directory_accessible(directory)
    validate_provider_version(provider_version)

    if ecosystem is Ecosystem.GO and not go_module_template:
        raise PreconditionError("Missing Go module template (goModuleTemplate)")

    request = VerificationRequest(
        ecosystem=ecosystem,
        source_directory=source,
        provider=provider,
        publisher=publisher,
        provider_version=provider_version,
        package_version=package_version,
        go_module_template=go_module_template,
    )
    logger.debug(
        "Request: %s %s provider=%s version=%s package_version=%s",
        request.ecosystem, request.source_directory, request.provider,
        request.provider_version, request.package_version,
    )
    return request
