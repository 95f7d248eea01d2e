"""Preview engines — the declarative-infrastructure dry run."""

from verify_release.adapters.engine.pulumi import (
    PreviewEngine,
    PulumiCliEngine,
    PulumiCliStack,
    Stack,
    build_backend_url,
    isolation_env,
)

__all__ = [
    "PreviewEngine",
    "PulumiCliEngine",
    "PulumiCliStack",
    "Stack",
    "build_backend_url",
    "isolation_env",
]
