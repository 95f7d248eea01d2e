"""
verify-release — CLI entrypoint.

Usage:
    verify-release --help
    verify-release verify --language nodejs --directory ./random-nodejs \\
        --provider random --provider-version 4.16.2 --publisher pulumi
    verify-release ecosystems

Every ``verify`` option can also come from the matching GitHub Actions
input variable (``INPUT_LANGUAGE``, ``INPUT_DIRECTORY``, ...).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

import click

from verify_release import __version__
from verify_release.core.observability.logging_config import (
    escape_workflow_data,
    in_github_actions,
    resolve_level,
    setup_logging,
)

logger = logging.getLogger(__name__)


def _fail(message: str) -> None:
    """Report the run's single failure message and exit 1."""
    if in_github_actions():
        # Workflow command: GitHub reads these from stdout
        click.echo(f"::error::{escape_workflow_data(message)}")
    else:
        click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="verify-release")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (full step trace).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    envvar="VR_CONFIG",
    default=None,
    help="Path to a settings YAML file (timeouts, poll interval, feed URL).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Verify a released provider SDK installs and previews end to end."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet)
    setup_logging(
        level=level,
        log_file=os.environ.get("VR_LOG_FILE"),
        log_file_level=os.environ.get("VR_LOG_FILE_LEVEL"),
        actions=in_github_actions(),
    )


@cli.command()
@click.option("--language", envvar="INPUT_LANGUAGE", default="",
              help="Ecosystem: nodejs, python, dotnet, go, java, yaml.")
@click.option("--directory", envvar="INPUT_DIRECTORY", default="",
              help="Sample program to copy and preview.")
@click.option("--provider", envvar="INPUT_PROVIDER", default="",
              help="Provider name, e.g. 'random'.")
@click.option("--provider-version", envvar="INPUT_PROVIDERVERSION", default="",
              help="Released provider version (SemVer).")
@click.option("--package-version", envvar="INPUT_PACKAGEVERSION", default="",
              help="SDK package version, if it differs from the provider version.")
@click.option("--publisher", envvar="INPUT_PUBLISHER", default="",
              help="Package publisher, e.g. 'pulumi'.")
@click.option("--go-module-template", envvar="INPUT_GOMODULETEMPLATE", default="",
              help="Go module path template with {publisher}, {provider}, {moduleVersionSuffix}.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def verify(
    ctx: click.Context,
    language: str,
    directory: str,
    provider: str,
    provider_version: str,
    package_version: str,
    publisher: str,
    go_module_template: str,
    as_json: bool,
) -> None:
    """Install the released package into a copy of a sample and run a preview.

    Examples:

        verify-release verify --language python --directory examples/random-python \\
            --provider random --provider-version 4.16.2 --publisher pulumi
    """
    from verify_release.core.config.loader import load_settings
    from verify_release.core.errors import VerifyReleaseError
    from verify_release.core.use_cases.verify import verify_release
    from verify_release.core.validation import build_request

    try:
        request = build_request(
            language=language,
            directory=directory,
            provider=provider,
            provider_version=provider_version,
            publisher=publisher,
            package_version=package_version,
            go_module_template=go_module_template,
        )
        settings = load_settings(ctx.obj.get("config_path"))
        result = verify_release(request, settings=settings)
    except VerifyReleaseError as e:
        _fail(str(e))
        return
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        _fail(f"An unknown error occurred: {e}")
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if ctx.obj.get("quiet"):
        return

    receipt = result.receipt
    click.secho(
        f"\n🔍 {request.ecosystem} — {request.provider} {request.provider_version}",
        fg="cyan",
        bold=True,
    )
    if receipt.skipped:
        click.secho(f"   ⊘ {receipt.output}", fg="yellow")
    else:
        click.secho(f"   ✓ {receipt.output}", fg="green")
        for step in receipt.steps:
            if step.tolerated:
                click.echo(f"     · {step.name} failed (ignored)")
            elif ctx.obj.get("verbose"):
                click.echo(f"     · {step.name}: {step.command or step.detail}")
    click.secho(f"   ✓ Preview completed ({result.duration_ms}ms)", fg="green")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def ecosystems(as_json: bool) -> None:
    """List accepted ecosystem tags and whether each has an installer."""
    from verify_release.core.models.request import Ecosystem
    from verify_release.core.services.installers import has_installer

    rows = [{"ecosystem": e.value, "installer": has_installer(e)} for e in Ecosystem]

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    for row in rows:
        if row["installer"]:
            click.secho(f"   ✓ {row['ecosystem']}", fg="green")
        else:
            click.secho(f"   ⊘ {row['ecosystem']} ", fg="yellow", nl=False)
            click.echo("(accepted, no installer)")


if __name__ == "__main__":
    cli()
