"""
Tests for adapters — subprocess runner, registry probe, preview engine.
"""

import subprocess
import urllib.error
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from verify_release.adapters.base import CommandResult
from verify_release.adapters.engine.pulumi import (
    PulumiCliEngine,
    build_backend_url,
    isolation_env,
)
from verify_release.adapters.registry.http import (
    head_status,
    nuget_normalized_version,
    nuget_package_url,
)
from verify_release.adapters.shell.command import (
    EXIT_NOT_FOUND,
    EXIT_TIMEOUT,
    SubprocessRunner,
)
from verify_release.core.config.settings import VerifierSettings
from verify_release.core.errors import PreviewError

# ── CommandResult ────────────────────────────────────────────────────


class TestCommandResult:
    def test_ok(self):
        assert CommandResult(command=["true"], returncode=0).ok
        assert not CommandResult(command=["false"], returncode=1).ok

    def test_rendered_quotes_arguments(self):
        result = CommandResult(
            command=["dotnet", "add", "package", "pulumi.random", "--version", "[4.16.2]"],
            returncode=0,
        )
        assert result.rendered == "dotnet add package pulumi.random --version '[4.16.2]'"


# ── SubprocessRunner ─────────────────────────────────────────────────


_RUN = "verify_release.adapters.shell.command.subprocess.run"


class TestSubprocessRunner:
    def test_captures_output(self, tmp_path: Path):
        completed = MagicMock(returncode=0, stdout="4.16.2\n", stderr="")
        with patch(_RUN, return_value=completed) as mock_run:
            result = SubprocessRunner().run(["npm", "--version"], cwd=tmp_path, timeout=30)

        assert result.ok
        assert result.stdout == "4.16.2\n"
        assert result.command == ["npm", "--version"]
        kwargs = mock_run.call_args.kwargs
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["timeout"] == 30
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True
        assert kwargs["env"] is None

    def test_nonzero_exit_is_returned(self):
        completed = MagicMock(returncode=2, stdout="", stderr="boom")
        with patch(_RUN, return_value=completed):
            result = SubprocessRunner().run(["go", "mod", "tidy"])
        assert result.returncode == 2
        assert result.stderr == "boom"

    def test_env_overrides_merged_over_environ(self, monkeypatch):
        monkeypatch.setenv("VR_TEST_INHERITED", "yes")
        completed = MagicMock(returncode=0, stdout="", stderr="")
        with patch(_RUN, return_value=completed) as mock_run:
            SubprocessRunner().run(
                ["pulumi", "preview"],
                env_overrides={"PULUMI_CONFIG_PASSPHRASE": "secret"},
            )
        env = mock_run.call_args.kwargs["env"]
        assert env["VR_TEST_INHERITED"] == "yes"
        assert env["PULUMI_CONFIG_PASSPHRASE"] == "secret"

    def test_timeout(self):
        with patch(_RUN, side_effect=subprocess.TimeoutExpired(cmd="npm", timeout=5)):
            result = SubprocessRunner().run(["npm", "install"], timeout=5)
        assert result.returncode == EXIT_TIMEOUT
        assert "timed out after 5s" in result.stderr

    def test_missing_executable(self):
        err = FileNotFoundError(2, "No such file or directory", "dotnet")
        with patch(_RUN, side_effect=err):
            result = SubprocessRunner().run(["dotnet", "--info"])
        assert result.returncode == EXIT_NOT_FOUND
        assert result.stderr == "Command not found: dotnet"

    def test_os_error(self):
        with patch(_RUN, side_effect=PermissionError("denied")):
            result = SubprocessRunner().run(["./script"])
        assert result.returncode == EXIT_NOT_FOUND
        assert "denied" in result.stderr


# ── Registry probe ───────────────────────────────────────────────────


_URLOPEN = "verify_release.adapters.registry.http.urllib.request.urlopen"


class TestHeadStatus:
    def test_ok(self):
        with patch(_URLOPEN) as mock_open:
            mock_open.return_value.__enter__.return_value.getcode.return_value = 200
            assert head_status("https://example.com/pkg.nupkg", timeout=3) == 200

        req = mock_open.call_args.args[0]
        assert req.get_method() == "HEAD"
        assert req.get_header("User-agent").startswith("verify-release/")
        assert mock_open.call_args.kwargs["timeout"] == 3

    def test_http_error_returns_code(self):
        err = urllib.error.HTTPError("https://example.com", 404, "Not Found", None, None)
        with patch(_URLOPEN, side_effect=err):
            assert head_status("https://example.com") == 404

    @pytest.mark.parametrize("exc", [
        urllib.error.URLError("Name or service not known"),
        TimeoutError("timed out"),
        ConnectionRefusedError("refused"),
    ])
    def test_network_failure_returns_none(self, exc):
        with patch(_URLOPEN, side_effect=exc):
            assert head_status("https://example.com") is None


class TestNugetPackageUrl:
    def test_lowercases_id_and_version(self):
        url = nuget_package_url(
            "https://api.nuget.org/v3-flatcontainer", "Pulumi.Random", "4.17.0-Alpha.1",
        )
        assert url == (
            "https://api.nuget.org/v3-flatcontainer/pulumi.random/4.17.0-alpha.1/"
            "pulumi.random.4.17.0-alpha.1.nupkg"
        )

    def test_trailing_slash(self):
        url = nuget_package_url("https://feed.example/", "a.b", "1.0.0")
        assert url == "https://feed.example/a.b/1.0.0/a.b.1.0.0.nupkg"

    def test_build_metadata_dropped(self):
        url = nuget_package_url(
            "https://api.nuget.org/v3-flatcontainer", "Pulumi.Random", "4.17.0+abc",
        )
        assert "+abc" not in url
        assert url.endswith("/pulumi.random/4.17.0/pulumi.random.4.17.0.nupkg")

    @pytest.mark.parametrize("version,expected", [
        ("4.16.2", "4.16.2"),
        ("4.17.0-Alpha.1", "4.17.0-alpha.1"),
        ("4.17.0-alpha.1+sha.5114f85", "4.17.0-alpha.1"),
    ])
    def test_normalized_version(self, version, expected):
        assert nuget_normalized_version(version) == expected


# ── Preview engine ───────────────────────────────────────────────────


class TestBackendUrl:
    def test_posix(self):
        url = build_backend_url("/tmp/pulumi-verify-release-abc", platform="linux")
        assert url == "file:///tmp/pulumi-verify-release-abc"

    def test_windows_separators(self):
        url = build_backend_url(r"C:\Users\runner\Temp\pulumi-verify-release-abc", platform="win32")
        assert url == "file://C://Users//runner//Temp//pulumi-verify-release-abc"


class TestIsolationEnv:
    def test_variables(self, tmp_path: Path):
        env = isolation_env(tmp_path, VerifierSettings(passphrase="p4ss"))
        assert env == {
            "PULUMI_CONFIG_PASSPHRASE": "p4ss",
            "PULUMI_BACKEND_URL": build_backend_url(tmp_path),
            "PULUMI_IGNORE_AMBIENT_PLUGINS": "true",
        }


class TestPulumiCliEngine:
    def test_create_then_preview(self, runner, settings, work_dir):
        runner.on("pulumi preview", (0, "+ random:index:RandomPet pet create", ""))
        env = {"PULUMI_BACKEND_URL": "file:///tmp/x"}
        stack = PulumiCliEngine(runner, settings).create_isolated_stack(work_dir, env)
        preview = stack.preview()

        assert runner.calls[0]["cmd"] == [
            "pulumi", "stack", "init", "verify-release",
            "--secrets-provider", "passphrase", "--non-interactive",
        ]
        assert runner.calls[1]["cmd"][:4] == ["pulumi", "preview", "--stack", "verify-release"]
        assert all(call["cwd"] == work_dir for call in runner.calls)
        assert all(call["env"] == env for call in runner.calls)
        assert "RandomPet" in preview.stdout

    def test_custom_stack_name(self, runner, work_dir):
        settings = VerifierSettings(stack_name="ci")
        PulumiCliEngine(runner, settings).create_isolated_stack(work_dir, {})
        assert runner.calls[0]["cmd"][3] == "ci"

    def test_stack_init_failure(self, runner, settings, work_dir):
        runner.on("pulumi stack init", (255, "", "error: no Pulumi.yaml project file found"))
        with pytest.raises(PreviewError) as exc:
            PulumiCliEngine(runner, settings).create_isolated_stack(work_dir, {})
        assert "Failed to create stack 'verify-release'" in str(exc.value)
        assert "no Pulumi.yaml" in str(exc.value)

    def test_preview_failure(self, runner, settings, work_dir):
        runner.on("pulumi preview", (255, "Previewing update", "error: program failed"))
        stack = PulumiCliEngine(runner, settings).create_isolated_stack(work_dir, {})
        with pytest.raises(PreviewError) as exc:
            stack.preview()
        assert "pulumi preview failed (exit 255)" in str(exc.value)
        assert exc.value.stderr == "error: program failed"
