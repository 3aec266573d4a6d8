"""Pytest configuration and fixtures for wolfi-devkit tests."""

from pathlib import Path

import pytest

from tests.harness.fake_runner import FakeRunner
from tests.harness.probe_server import ProbeServer
from wolfi_devkit.config import Settings, WorkflowContext

# Identity variables that would otherwise leak in from a developer's shell
AMBIENT_VARS = (
    "GITHUB_USER",
    "GCLOUD_USER",
    "DOCKER_RUN_OPTS",
    "TERRAFORM",
    "WOLFI_DEVKIT_GITHUB_USER",
    "WOLFI_DEVKIT_GCLOUD_USER",
    "WOLFI_DEVKIT_DOCKER_RUN_OPTS",
    "WOLFI_DEVKIT_TERRAFORM",
    "WOLFI_DEVKIT_PULL_POLICY",
    "WOLFI_DEVKIT_KEEP_SCRATCH",
    "WOLFI_DEVKIT_AUTO_BOOTSTRAP",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from the invoking shell's configuration."""
    for name in AMBIENT_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sandbox_root(tmp_path: Path) -> Path:
    """Root directory for sandboxes created during a test."""
    return tmp_path / "sandboxes"


@pytest.fixture
def make_settings(sandbox_root: Path):
    """Factory for settings with test defaults and per-test overrides."""

    def _make(**overrides) -> Settings:
        values = {
            "github_username": "octocat",
            "gcloud_username": "octo",
            "sandbox_root": sandbox_root,
            "auto_bootstrap": False,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def ctx(make_settings) -> WorkflowContext:
    """Workflow context for user 'octocat'."""
    return WorkflowContext.from_settings(make_settings())


@pytest.fixture
def runner() -> FakeRunner:
    """Recording runner where every tool is installed and every command succeeds."""
    return FakeRunner()


@pytest.fixture
def probe_server() -> ProbeServer:
    """Probe server that answers 404 for everything unless configured."""
    return ProbeServer()


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Directory standing in for the user's current directory."""
    path = tmp_path / "work"
    path.mkdir()
    return path

