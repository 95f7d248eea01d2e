"""
Verification request — the caller-supplied description of one run.

Built once from CLI/action inputs, validated, then passed read-only
through staging, installation, and preview.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator

from verify_release.core.errors import PreconditionError


class Ecosystem(StrEnum):
    """Target ecosystems accepted as input.

    ``java`` and ``yaml`` are valid tags but have no installer.
    """

    NODEJS = "nodejs"
    PYTHON = "python"
    DOTNET = "dotnet"
    GO = "go"
    JAVA = "java"
    YAML = "yaml"

    @classmethod
    def parse(cls, tag: str) -> Ecosystem:
        """Resolve an input tag, raising ``PreconditionError`` if unknown."""
        try:
            return cls(tag)
        except ValueError:
            raise PreconditionError(f"Unsupported language: {tag}") from None


class VerificationRequest(BaseModel):
    """Immutable inputs for a single verification."""

    model_config = ConfigDict(frozen=True)

    ecosystem: Ecosystem
    source_directory: Path
    provider: str
    publisher: str
    provider_version: str
    package_version: str = ""
    go_module_template: str = ""

    @model_validator(mode="before")
    @classmethod
    def _default_package_version(cls, data):
        if isinstance(data, dict) and not data.get("package_version"):
            data = {**data, "package_version": data.get("provider_version", "")}
        return data

    # ── Ecosystem-specific package identifiers ──────────────────

    @property
    def npm_package(self) -> str:
        return f"@{self.publisher}/{self.provider}"

    @property
    def pip_package(self) -> str:
        return f"{self.publisher}-{self.provider}"

    @property
    def nuget_package(self) -> str:
        return f"{self.publisher}.{self.provider}"

    def to_dict(self) -> dict:
        return {
            "ecosystem": self.ecosystem.value,
            "source_directory": str(self.source_directory),
            "provider": self.provider,
            "publisher": self.publisher,
            "provider_version": self.provider_version,
            "package_version": self.package_version,
        }
