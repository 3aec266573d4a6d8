"""Tests for the environment bootstrap."""

import os
from pathlib import Path

import pytest

from tests.harness.fake_runner import FakeRunner
from wolfi_devkit.bootstrap import installer
from wolfi_devkit.bootstrap.installer import (
    bootstrap_environment,
    ensure_group_membership,
    ensure_user_bin_on_path,
    install_missing_tools,
)
from wolfi_devkit.bootstrap.platform import (
    UnsupportedPlatformError,
    detect_os_family,
    parse_os_release,
)
from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.models import OsFamily
from wolfi_devkit.runner import CommandError

UBUNTU_RELEASE = """NAME="Ubuntu"
VERSION_ID="24.04"
ID=ubuntu
ID_LIKE=debian
PRETTY_NAME="Ubuntu 24.04 LTS"
"""

WOLFI_RELEASE = """ID=wolfi
NAME="Wolfi"
PRETTY_NAME="Wolfi"
"""


def write_release(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "os-release"
    path.write_text(content)
    return path


@pytest.fixture
def as_user(monkeypatch):
    """Run as an unprivileged user so installs go through sudo."""
    monkeypatch.setattr(installer.os, "geteuid", lambda: 1000)


class TestOsRelease:
    """Tests for os-release parsing and OS family detection."""

    def test_parse_unquotes_values(self):
        """Test that quoted values are unquoted and comments skipped."""
        fields = parse_os_release('# comment\nNAME="Ubuntu"\nID=ubuntu\n\nBROKEN\n')
        assert fields == {"NAME": "Ubuntu", "ID": "ubuntu"}

    def test_detect_ubuntu(self, tmp_path):
        assert detect_os_family(write_release(tmp_path, UBUNTU_RELEASE)) is OsFamily.DEBIAN

    def test_detect_wolfi(self, tmp_path):
        assert detect_os_family(write_release(tmp_path, WOLFI_RELEASE)) is OsFamily.WOLFI

    def test_detect_via_id_like(self, tmp_path):
        """Test that derivatives are recognized through ID_LIKE."""
        path = write_release(tmp_path, 'ID=linuxmint\nID_LIKE="ubuntu debian"\n')
        assert detect_os_family(path) is OsFamily.DEBIAN

    def test_unsupported_os(self, tmp_path):
        path = write_release(tmp_path, 'ID=fedora\nPRETTY_NAME="Fedora Linux 40"\n')
        with pytest.raises(UnsupportedPlatformError, match="Fedora Linux 40"):
            detect_os_family(path)

    def test_missing_release_file(self, tmp_path):
        with pytest.raises(UnsupportedPlatformError):
            detect_os_family(tmp_path / "missing")


class TestUserBinPath:
    """Tests for PATH handling."""

    def test_prepends_user_bin(self, make_settings, monkeypatch, tmp_path):
        monkeypatch.setenv("PATH", "/usr/bin:/bin")
        ctx = WorkflowContext.from_settings(make_settings(user_bin_dir=tmp_path / "go" / "bin"))

        assert ensure_user_bin_on_path(ctx) is True
        assert os.environ["PATH"] == f"{tmp_path / 'go' / 'bin'}:/usr/bin:/bin"

    def test_already_on_path(self, make_settings, monkeypatch, tmp_path):
        user_bin = tmp_path / "go" / "bin"
        monkeypatch.setenv("PATH", f"/usr/bin:{user_bin}")
        ctx = WorkflowContext.from_settings(make_settings(user_bin_dir=user_bin))

        assert ensure_user_bin_on_path(ctx) is False
        assert os.environ["PATH"] == f"/usr/bin:{user_bin}"


class TestInstallMissingTools:
    """Tests for installing missing tools."""

    @pytest.mark.asyncio
    async def test_nothing_missing(self, runner):
        """Test that nothing runs when every tool is present."""
        assert await install_missing_tools(OsFamily.DEBIAN, runner) == []
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_debian_packages_and_go_modules(self, as_user):
        """Test apt-get for packaged tools and go install for melange/yam."""
        runner = FakeRunner(missing=["make", "melange", "yam", "go"])

        installed = await install_missing_tools(OsFamily.DEBIAN, runner)

        assert installed == ["make", "melange", "yam"]
        assert runner.commands == [
            ["sudo", "apt-get", "update"],
            ["sudo", "apt-get", "install", "-y", "make", "golang-go"],
            ["go", "install", "chainguard.dev/melange@latest"],
            ["go", "install", "github.com/chainguard-dev/yam@latest"],
        ]

    @pytest.mark.asyncio
    async def test_wolfi_uses_apk(self, as_user):
        """Test that the same logical tools map to Wolfi package names."""
        runner = FakeRunner(missing=["docker", "melange"])

        await install_missing_tools(OsFamily.WOLFI, runner)

        assert runner.commands == [["sudo", "apk", "add", "docker", "melange"]]

    @pytest.mark.asyncio
    async def test_root_skips_sudo(self, monkeypatch):
        monkeypatch.setattr(installer.os, "geteuid", lambda: 0)
        runner = FakeRunner(missing=["gh"])

        await install_missing_tools(OsFamily.WOLFI, runner)

        assert runner.commands == [["apk", "add", "gh"]]

    @pytest.mark.asyncio
    async def test_install_failure_propagates(self, as_user):
        """Test that a failed install raises and is not retried."""
        runner = FakeRunner(missing=["gh"])
        runner.respond(["sudo", "apk", "add"], returncode=1, stderr="unable to select packages")

        with pytest.raises(CommandError):
            await install_missing_tools(OsFamily.WOLFI, runner)
        assert len(runner.find("sudo", "apk", "add")) == 1


class TestGroupMembership:
    """Tests for docker group membership."""

    @pytest.mark.asyncio
    async def test_member_already(self, ctx, runner, as_user, monkeypatch):
        monkeypatch.setattr(installer, "_group_members", lambda group: ["octocat"])
        monkeypatch.setattr(installer, "_current_user", lambda: "octocat")

        assert await ensure_group_membership(ctx, runner) is False
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_adds_user_and_starts_group_session(self, ctx, runner, as_user, monkeypatch):
        monkeypatch.setattr(installer, "_group_members", lambda group: [])
        monkeypatch.setattr(installer, "_current_user", lambda: "octocat")
        monkeypatch.setattr(installer, "_primary_group", lambda user: "octocat")

        assert await ensure_group_membership(ctx, runner) is True
        assert runner.commands == [
            ["sudo", "usermod", "-aG", "docker", "octocat"],
            ["newgrp", "docker"],
        ]

    @pytest.mark.asyncio
    async def test_primary_group_counts_as_member(self, ctx, runner, as_user, monkeypatch):
        """Test a user whose primary group is docker is not added again."""
        monkeypatch.setattr(installer, "_group_members", lambda group: [])
        monkeypatch.setattr(installer, "_current_user", lambda: "octocat")
        monkeypatch.setattr(installer, "_primary_group", lambda user: "docker")

        assert await ensure_group_membership(ctx, runner) is False
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_missing_group_is_skipped(self, ctx, runner, as_user, monkeypatch):
        monkeypatch.setattr(installer, "_group_members", lambda group: None)

        assert await ensure_group_membership(ctx, runner) is False
        assert runner.calls == []


class TestBootstrapEnvironment:
    """Tests for the full bootstrap."""

    @pytest.mark.asyncio
    async def test_full_bootstrap(self, make_settings, tmp_path, as_user, monkeypatch):
        monkeypatch.setenv("PATH", "/usr/bin")
        monkeypatch.setattr(installer, "_group_members", lambda group: ["octocat"])
        monkeypatch.setattr(installer, "_current_user", lambda: "octocat")
        ctx = WorkflowContext.from_settings(
            make_settings(
                os_release_path=write_release(tmp_path, WOLFI_RELEASE),
                user_bin_dir=tmp_path / "bin",
            )
        )
        runner = FakeRunner(missing=["yam"])

        result = await bootstrap_environment(ctx, runner)

        assert result.os_family is OsFamily.WOLFI
        assert result.installed == ["yam"]
        assert result.path_updated is True
        assert result.group_added is False
        assert runner.commands == [["sudo", "apk", "add", "yam"]]

    @pytest.mark.asyncio
    async def test_unsupported_platform_runs_nothing(self, make_settings, tmp_path):
        ctx = WorkflowContext.from_settings(
            make_settings(os_release_path=write_release(tmp_path, "ID=arch\n"))
        )
        runner = FakeRunner(missing=["yam"])

        with pytest.raises(UnsupportedPlatformError):
            await bootstrap_environment(ctx, runner)
        assert runner.calls == []
