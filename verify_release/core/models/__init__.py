"""
Domain models — Pydantic types for a verification run.

All models are re-exported here for convenient access:

    from verify_release.core.models import Ecosystem, VerificationRequest, InstallReceipt
"""

from verify_release.core.models.preview import PreviewResult, VerificationResult
from verify_release.core.models.receipt import InstallReceipt, StepRecord
from verify_release.core.models.request import Ecosystem, VerificationRequest

__all__ = [
    # request.py
    "Ecosystem",
    "VerificationRequest",
    # receipt.py
    "InstallReceipt",
    "StepRecord",
    # preview.py
    "PreviewResult",
    "VerificationResult",
]
