"""
Ecosystem installers — one per supported package manager.

The ecosystem set is closed, so selection is a ``match`` over
``Ecosystem`` rather than a registry that plugins can extend.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from verify_release.adapters.base import ProcessRunner
from verify_release.core.config.settings import VerifierSettings
from verify_release.core.models.receipt import InstallReceipt
from verify_release.core.models.request import Ecosystem, VerificationRequest
from verify_release.core.services.installers.base import Installer
from verify_release.core.services.installers.dotnet import DotnetInstaller
from verify_release.core.services.installers.go import GoInstaller
from verify_release.core.services.installers.npm import NpmInstaller
from verify_release.core.services.installers.pip import PipInstaller

logger = logging.getLogger(__name__)

__all__ = [
    "DotnetInstaller",
    "GoInstaller",
    "Installer",
    "NpmInstaller",
    "PipInstaller",
    "has_installer",
    "install_package_version",
    "select_installer",
]


def select_installer(
    ecosystem: Ecosystem,
    runner: ProcessRunner,
    settings: VerifierSettings | None = None,
    **kwargs: Any,
) -> Installer | None:
    """Installer for ``ecosystem``, or None if it has none (java, yaml)."""
    match ecosystem:
        case Ecosystem.NODEJS:
            return NpmInstaller(runner, settings, **kwargs)
        case Ecosystem.PYTHON:
            return PipInstaller(runner, settings, **kwargs)
        case Ecosystem.DOTNET:
            return DotnetInstaller(runner, settings, **kwargs)
        case Ecosystem.GO:
            return GoInstaller(runner, settings, **kwargs)
        case Ecosystem.JAVA | Ecosystem.YAML:
            return None


def has_installer(ecosystem: Ecosystem) -> bool:
    return ecosystem not in (Ecosystem.JAVA, Ecosystem.YAML)


def install_package_version(
    work_dir: Path,
    request: VerificationRequest,
    runner: ProcessRunner,
    settings: VerifierSettings | None = None,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Any] = time.sleep,
) -> InstallReceipt:
    """Dispatch to the matching installer.

    Ecosystems without an installer return a ``skipped`` receipt: the
    preview still runs, against whatever version the sample declares.
    """
    installer = select_installer(request.ecosystem, runner, settings, clock=clock, sleep=sleep)
    if installer is None:
        reason = (
            f"No installer for {request.ecosystem}; "
            "previewing with the version the sample program declares"
        )
        logger.warning(reason)
        return InstallReceipt.skip(ecosystem=request.ecosystem.value, reason=reason)

    logger.debug("Installing with %r", installer)
    return installer.install(work_dir, request)
