"""
Workspace staging — a throwaway copy of the sample program.

The source directory is never touched: installers mutate the copy's
manifest, the engine writes its state next to it, and the whole tree
is removed when the ``with`` block exits, however it exits.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TEMP_PREFIX = "pulumi-verify-release-"


@dataclass(frozen=True)
class StagedWorkspace:
    """A unique temp dir holding a copy of the source directory."""

    temp_dir: Path
    work_dir: Path


@contextmanager
def staged_workspace(source: Path, prefix: str = TEMP_PREFIX) -> Iterator[StagedWorkspace]:
    """Copy ``source`` into a fresh temp dir; remove it on exit."""
    logger.debug("Creating temporary directory")
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        work_dir = temp_dir / source.resolve().name
        logger.debug("Copying %s to %s", source, temp_dir)
        shutil.copytree(source, work_dir, symlinks=True)
        logger.debug("Temp working directory: %s", work_dir)
        yield StagedWorkspace(temp_dir=temp_dir, work_dir=work_dir)
    finally:
        logger.debug("Cleaning up temporary directory")
        shutil.rmtree(temp_dir, ignore_errors=True)
