"""Preview output and the overall verification result."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from verify_release.core.models.receipt import InstallReceipt
from verify_release.core.models.request import VerificationRequest


class PreviewResult(BaseModel):
    """Captured output of a preview run."""

    stdout: str = ""
    stderr: str = ""


class VerificationResult(BaseModel):
    """Everything one verification produced."""

    request: VerificationRequest
    receipt: InstallReceipt
    preview: PreviewResult
    staged_directory: Path
    duration_ms: int = 0

    def to_dict(self) -> dict:
        return {
            "request": self.request.to_dict(),
            "install": {
                "status": self.receipt.status,
                "package_ref": self.receipt.package_ref,
                "output": self.receipt.output,
                "duration_ms": self.receipt.duration_ms,
                "steps": [s.model_dump() for s in self.receipt.steps],
                "metadata": self.receipt.metadata,
            },
            "preview": {
                "stdout": self.preview.stdout,
                "stderr": self.preview.stderr,
            },
            "staged_directory": str(self.staged_directory),
            "duration_ms": self.duration_ms,
        }
