"""Tests for settings and the workflow context."""

from pathlib import Path

import pytest

from wolfi_devkit.config import Settings, WorkflowContext
from wolfi_devkit.errors import MissingInputError


class TestSettings:
    """Tests for environment-driven settings."""

    def test_reads_conventional_shell_names(self, monkeypatch):
        """Test that GITHUB_USER and friends are picked up without the prefix."""
        monkeypatch.setenv("GITHUB_USER", "octocat")
        monkeypatch.setenv("GCLOUD_USER", "octo")
        monkeypatch.setenv("TERRAFORM", "/opt/bin/terraform")

        settings = Settings()

        assert settings.github_username == "octocat"
        assert settings.gcloud_username == "octo"
        assert settings.terraform_path == "/opt/bin/terraform"

    def test_prefixed_name_takes_precedence(self, monkeypatch):
        """Test that WOLFI_DEVKIT_GITHUB_USER wins over GITHUB_USER."""
        monkeypatch.setenv("GITHUB_USER", "shell-user")
        monkeypatch.setenv("WOLFI_DEVKIT_GITHUB_USER", "devkit-user")

        assert Settings().github_username == "devkit-user"

    def test_defaults(self):
        """Test defaults for pull policy, scratch handling and upstream repos."""
        settings = Settings()

        assert settings.github_username is None
        assert settings.pull_policy == "always"
        assert settings.keep_scratch is False
        assert settings.aports_sections == ("main", "community")
        assert settings.packages_repo == "wolfi-dev/os"

    def test_pull_policy_from_env(self, monkeypatch):
        """Test that the pull policy can be set from the environment."""
        monkeypatch.setenv("WOLFI_DEVKIT_PULL_POLICY", "if-stale")
        assert Settings().pull_policy == "if-stale"


class TestWorkflowContext:
    """Tests for WorkflowContext."""

    def test_docker_run_options_are_shell_split(self, monkeypatch, tmp_path: Path):
        """Test that DOCKER_RUN_OPTS is split with shell quoting rules."""
        monkeypatch.setenv("DOCKER_RUN_OPTS", '--privileged -e "GREETING=hello world"')

        ctx = WorkflowContext.from_settings(Settings(sandbox_root=tmp_path))

        assert ctx.docker_run_options == ("--privileged", "-e", "GREETING=hello world")
        assert ctx.sandbox_root == tmp_path

    def test_empty_usernames_are_unset(self):
        """Test that empty strings are treated the same as unset."""
        ctx = WorkflowContext.from_settings(Settings(github_username="", gcloud_username=""))

        assert ctx.github_username is None
        assert ctx.gcloud_username is None

    def test_require_github_username(self, ctx):
        """Test that a set username is returned."""
        assert ctx.require_github_username() == "octocat"

    def test_require_github_username_missing(self, make_settings):
        """Test that an unset username raises MissingInputError."""
        ctx = WorkflowContext.from_settings(make_settings(github_username=None))
        with pytest.raises(MissingInputError, match="GITHUB_USER"):
            ctx.require_github_username()

    def test_require_gcloud_username_missing(self, make_settings):
        """Test that an unset Google Cloud username raises MissingInputError."""
        ctx = WorkflowContext.from_settings(make_settings(gcloud_username=None))
        with pytest.raises(MissingInputError, match="GCLOUD_USER"):
            ctx.require_gcloud_username()

    def test_repo_url(self, ctx):
        """Test HTTPS clone URLs on the configured host."""
        assert ctx.repo_url("wolfi-dev/os") == "https://github.com/wolfi-dev/os.git"
