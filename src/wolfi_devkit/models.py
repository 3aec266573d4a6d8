"""Pydantic models for wolfi-devkit."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class OsFamily(str, Enum):
    """Host operating system families the bootstrap knows how to install on."""

    DEBIAN = "debian"
    WOLFI = "wolfi"


class ProbeOutcome(str, Enum):
    """Result of an HTTP existence probe."""

    FOUND = "found"
    NOT_FOUND = "not-found"
    PROBE_FAILED = "probe-failed"


class BootstrapResult(BaseModel):
    """Result of preparing the host environment."""

    os_family: OsFamily
    installed: list[str] = Field(
        default_factory=list, description="Tools that were missing and got installed"
    )
    path_updated: bool = Field(
        default=False, description="True if the user bin dir was added to PATH"
    )
    group_added: bool = Field(
        default=False, description="True if the user was added to the docker group"
    )


class FetchResult(BaseModel):
    """Result of cloning the workflow repositories into a sandbox."""

    sandbox: Path
    workdir: Path = Field(description="The host-level directory inside the sandbox")
    repos: dict[str, Path] = Field(
        default_factory=dict, description="Repository slug (org/repo) to clone path"
    )


class BranchResult(BaseModel):
    """Result of preparing a working branch on the user's fork."""

    branch: str
    fork: str = Field(description="Fork slug, e.g. 'octocat/os'")
    repo_path: Path
    created: bool = Field(description="True if the branch did not exist on the fork")


class RecipeLocation(BaseModel):
    """Where an upstream Alpine recipe was found."""

    package: str
    section: str = Field(description="aports section, e.g. 'main' or 'community'")
    url: str


class RecipeLookupResult(BaseModel):
    """Result of searching aports for a package recipe."""

    found: bool
    package: str
    location: RecipeLocation | None = None
    probes: dict[str, ProbeOutcome] = Field(
        default_factory=dict, description="Probe outcome per aports section"
    )
    message: str | None = None


class ConversionResult(BaseModel):
    """Result of converting an Alpine package to a melange recipe."""

    success: bool
    package: str
    recipe_path: Path | None = None
    source: RecipeLocation | None = None
    branch: str | None = None
    package_version: str | None = Field(
        default=None, description="package.version from the generated recipe"
    )
    next_steps: list[str] = Field(default_factory=list)
    message: str | None = None


class SandboxResult(BaseModel):
    """Result of creating a sandbox directory."""

    success: bool
    path: Path | None = None
    message: str | None = None
