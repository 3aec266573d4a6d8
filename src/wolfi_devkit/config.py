"""Configuration for wolfi-devkit."""

import shlex
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from wolfi_devkit.errors import MissingInputError


class Settings(BaseSettings):
    """Configuration from environment variables."""

    model_config = SettingsConfigDict(env_prefix="WOLFI_DEVKIT_", populate_by_name=True)

    # Identity and docker options, also read from the conventional shell names
    github_username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("WOLFI_DEVKIT_GITHUB_USER", "GITHUB_USER"),
    )
    gcloud_username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("WOLFI_DEVKIT_GCLOUD_USER", "GCLOUD_USER"),
    )
    docker_run_options: str = Field(
        default="",
        validation_alias=AliasChoices("WOLFI_DEVKIT_DOCKER_RUN_OPTS", "DOCKER_RUN_OPTS"),
    )
    terraform_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("WOLFI_DEVKIT_TERRAFORM", "TERRAFORM"),
    )

    sandbox_root: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))

    # Upstream locations
    git_host: str = "github.com"
    packages_repo: str = "wolfi-dev/os"
    images_repo: str = "chainguard-images/images"
    aports_base_url: str = "https://git.alpinelinux.org/aports/plain"
    aports_sections: tuple[str, ...] = ("main", "community")
    published_recipes_url: str = "https://raw.githubusercontent.com/wolfi-dev/os/main"

    # Containers and make targets
    base_image: str = "cgr.dev/chainguard/wolfi-base:latest"
    sdk_image: str = "ghcr.io/wolfi-dev/sdk:latest"
    sdk_make_target: str = "dev-container"
    local_make_target: str = "local-wolfi"
    image_make_target_prefix: str = "image/"
    image_scaffold_target: str = "init-image"
    image_registry: str = "gcr.io/chainguard-dev"

    # Image freshness
    pull_policy: Literal["always", "if-stale", "never"] = "always"
    pull_max_age_hours: float = 24.0

    # Keep the converter's scratch directory for debugging
    keep_scratch: bool = False

    # None means wait for the command however long it takes
    command_timeout_seconds: float | None = None
    probe_timeout_seconds: float = 10.0

    log_level: str = "WARNING"

    # Bootstrap
    auto_bootstrap: bool = True
    os_release_path: Path = Path("/etc/os-release")
    user_bin_dir: Path = Field(default_factory=lambda: Path.home() / "go" / "bin")
    docker_group: str = "docker"


settings = Settings()


@dataclass(frozen=True)
class WorkflowContext:
    """Resolved inputs for one workflow invocation.

    Operations take this instead of reading the caller's environment, so the
    same operation can be driven from the CLI, the MCP server or a test.
    """

    settings: Settings
    github_username: str | None = None
    gcloud_username: str | None = None
    docker_run_options: tuple[str, ...] = ()
    sandbox_root: Path = Path(tempfile.gettempdir())
    terraform_path: str | None = None

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "WorkflowContext":
        """Build a context from settings (the module-level settings by default)."""
        source = source or settings
        return cls(
            settings=source,
            github_username=source.github_username or None,
            gcloud_username=source.gcloud_username or None,
            docker_run_options=tuple(shlex.split(source.docker_run_options)),
            sandbox_root=source.sandbox_root,
            terraform_path=source.terraform_path or None,
        )

    def require_github_username(self) -> str:
        """Return the GitHub username, raising MissingInputError if unset."""
        if not self.github_username:
            raise MissingInputError(
                "GITHUB_USER is not set. Export your GitHub username first."
            )
        return self.github_username

    def require_gcloud_username(self) -> str:
        """Return the Google Cloud username, raising MissingInputError if unset."""
        if not self.gcloud_username:
            raise MissingInputError(
                "GCLOUD_USER is not set. Export your Google Cloud username first."
            )
        return self.gcloud_username

    def repo_url(self, slug: str) -> str:
        """HTTPS clone URL for an ``org/repo`` slug on the configured host."""
        return f"https://{self.settings.git_host}/{slug}.git"
