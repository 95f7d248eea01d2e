"""
Shared test fixtures and configuration.

No test spawns a package manager or touches the network: installers
and the engine get a ``FakeRunner``, polling gets a ``FakeClock``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from verify_release.adapters.base import CommandResult, ProcessRunner
from verify_release.core.config.settings import VerifierSettings


class FakeRunner(ProcessRunner):
    """Records every command and replays canned results.

    Rules match on a substring of the rendered command.  Each rule
    holds a queue of results; the last one repeats once the queue is
    drained.  Unmatched commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self._rules: list[tuple[str, list[CommandResult]]] = []

    def on(self, pattern: str, *results: tuple[int, str, str] | int) -> FakeRunner:
        queue = []
        for r in results or (0,):
            if isinstance(r, int):
                r = (r, "", "")
            rc, out, err = r
            queue.append(CommandResult(command=[], returncode=rc, stdout=out, stderr=err))
        self._rules.append((pattern, queue))
        return self

    def run(self, cmd, *, cwd=None, env_overrides=None, timeout=600) -> CommandResult:
        self.calls.append({
            "cmd": list(cmd),
            "cwd": cwd,
            "env": dict(env_overrides or {}),
            "timeout": timeout,
        })
        line = " ".join(str(c) for c in cmd)
        for pattern, queue in self._rules:
            if pattern in line:
                canned = queue.pop(0) if len(queue) > 1 else queue[0]
                return CommandResult(
                    command=list(cmd),
                    returncode=canned.returncode,
                    stdout=canned.stdout,
                    stderr=canned.stderr,
                )
        return CommandResult(command=list(cmd), returncode=0)

    @property
    def commands(self) -> list[str]:
        return [" ".join(str(c) for c in call["cmd"]) for call in self.calls]

    def count(self, pattern: str) -> int:
        return sum(1 for c in self.commands if pattern in c)


class FakeClock:
    """Monotonic clock that only moves when ``sleep`` is called."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture(autouse=True)
def _clean_action_env(monkeypatch):
    """Keep the host's GitHub Actions environment out of the tests."""
    for name in (
        "GITHUB_ACTIONS", "RUNNER_DEBUG", "VR_CONFIG", "VR_LOG_LEVEL",
        "VR_LOG_FILE", "VR_LOG_FILE_LEVEL",
        "INPUT_LANGUAGE", "INPUT_DIRECTORY", "INPUT_PROVIDER",
        "INPUT_PROVIDERVERSION", "INPUT_PACKAGEVERSION", "INPUT_PUBLISHER",
        "INPUT_GOMODULETEMPLATE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _remove_installed_handlers():
    """Drop the root handlers ``setup_logging`` installs (the CLI group calls it)."""
    raise_exceptions = logging.raiseExceptions
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        if type(h) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    logging.raiseExceptions = raise_exceptions


@pytest.fixture
def programs_dir() -> Path:
    """Sample programs, one per ecosystem."""
    return Path(__file__).parent / "programs"


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> VerifierSettings:
    return VerifierSettings()


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """An empty staged working directory."""
    wd = tmp_path / "work"
    wd.mkdir()
    return wd
