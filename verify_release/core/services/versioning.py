"""
Version normalization — turn a released version into what each
package manager expects.
"""

from __future__ import annotations

import re

from verify_release.core.errors import PreconditionError

# SemVer 2.0: MAJOR.MINOR.PATCH with optional pre-release and build metadata
SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(-(0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)(\.(0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*))*)?"
    r"(\+[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?$"
)


def is_semver(text: str) -> bool:
    return bool(SEMVER_RE.match(text))


def major_version(version: str) -> int:
    """Leading numeric component of a version ("5.0.0" → 5, "v2.1.0" → 2)."""
    head = version.strip().removeprefix("v").split(".", 1)[0]
    if not head.isdigit():
        raise PreconditionError(f"Invalid provider version: {version}")
    return int(head)


def go_module_version_suffix(provider_version: str) -> str:
    """Go's major-version path element: "" below v2, "/vN" from v2 on."""
    major = major_version(provider_version)
    return f"/v{major}" if major >= 2 else ""


def normalize_go_module_path(
    template: str,
    publisher: str,
    provider: str,
    provider_version: str,
) -> str:
    """Fill ``{publisher}``, ``{provider}``, ``{moduleVersionSuffix}`` into a module template.

    >>> normalize_go_module_path(
    ...     "github.com/{publisher}/pulumi-{provider}/sdk{moduleVersionSuffix}",
    ...     "pulumi", "random", "4.16.2")
    'github.com/pulumi/pulumi-random/sdk/v4'
    """
    suffix = go_module_version_suffix(provider_version)
    return (
        template
        .replace("{publisher}", publisher)
        .replace("{provider}", provider)
        .replace("{moduleVersionSuffix}", suffix)
    )


def go_module_version(version: str) -> str:
    """Go module versions carry a leading ``v``."""
    return version if version.startswith("v") else f"v{version}"


def nuget_exact_version(version: str) -> str:
    """NuGet exact-match range syntax, so ``dotnet add`` cannot float upward."""
    return f"[{version}]"
