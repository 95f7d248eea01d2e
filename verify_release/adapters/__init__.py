"""Adapters — process, registry, and preview-engine bindings.

Public re-exports for convenient access.
"""

from verify_release.adapters.base import CommandResult, ProcessRunner
from verify_release.adapters.shell.command import SubprocessRunner

__all__ = [
    "CommandResult",
    "ProcessRunner",
    "SubprocessRunner",
]
