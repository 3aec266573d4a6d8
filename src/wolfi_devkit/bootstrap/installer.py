"""Install the workflow's tool dependencies and prepare the host."""

import getpass
import grp
import logging
import os
import pwd
from dataclasses import dataclass
from typing import Literal

from wolfi_devkit.bootstrap.platform import detect_os_family
from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.models import BootstrapResult, OsFamily
from wolfi_devkit.runner import CommandRunner

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallStep:
    """How to install a tool on one OS family."""

    kind: Literal["package", "go"]
    name: str


@dataclass(frozen=True)
class ToolRequirement:
    """A command the workflow needs, with per-family install steps."""

    command: str
    debian: InstallStep
    wolfi: InstallStep

    def step_for(self, family: OsFamily) -> InstallStep:
        return self.debian if family is OsFamily.DEBIAN else self.wolfi


def _pkg(name: str) -> InstallStep:
    return InstallStep("package", name)


REQUIRED_TOOLS: tuple[ToolRequirement, ...] = (
    ToolRequirement("docker", debian=_pkg("docker.io"), wolfi=_pkg("docker")),
    ToolRequirement("git", debian=_pkg("git"), wolfi=_pkg("git")),
    ToolRequirement("gh", debian=_pkg("gh"), wolfi=_pkg("gh")),
    ToolRequirement("make", debian=_pkg("make"), wolfi=_pkg("make")),
    ToolRequirement("wget", debian=_pkg("wget"), wolfi=_pkg("wget")),
    # Not packaged for Debian; go install drops them into the user bin dir
    ToolRequirement(
        "melange",
        debian=InstallStep("go", "chainguard.dev/melange"),
        wolfi=_pkg("melange"),
    ),
    ToolRequirement(
        "yam",
        debian=InstallStep("go", "github.com/chainguard-dev/yam"),
        wolfi=_pkg("yam"),
    ),
)

GO_PACKAGE = {OsFamily.DEBIAN: "golang-go", OsFamily.WOLFI: "go"}


def _privileged(argv: list[str]) -> list[str]:
    """Prefix sudo unless already running as root."""
    if os.geteuid() == 0:
        return argv
    return ["sudo", *argv]


def _package_install_command(family: OsFamily, packages: list[str]) -> list[str]:
    if family is OsFamily.DEBIAN:
        return _privileged(["apt-get", "install", "-y", *packages])
    return _privileged(["apk", "add", *packages])


def ensure_user_bin_on_path(ctx: WorkflowContext) -> bool:
    """Prepend the user-local bin dir to this process's PATH if missing."""
    user_bin = str(ctx.settings.user_bin_dir.expanduser())
    entries = os.environ.get("PATH", "").split(os.pathsep)
    if user_bin in entries:
        return False
    os.environ["PATH"] = os.pathsep.join([user_bin, *[e for e in entries if e]])
    log.info("added %s to PATH", user_bin)
    return True


async def install_missing_tools(
    family: OsFamily,
    runner: CommandRunner,
    tools: tuple[ToolRequirement, ...] = REQUIRED_TOOLS,
) -> list[str]:
    """Install every tool that is not on PATH. Returns the installed commands.

    Install failures raise CommandError; nothing is retried.
    """
    missing = [tool for tool in tools if runner.which(tool.command) is None]
    if not missing:
        return []

    log.info("missing tools: %s", ", ".join(t.command for t in missing))
    packages = [t.step_for(family).name for t in missing if t.step_for(family).kind == "package"]
    go_modules = [t.step_for(family).name for t in missing if t.step_for(family).kind == "go"]

    if go_modules and runner.which("go") is None:
        packages.append(GO_PACKAGE[family])

    if family is OsFamily.DEBIAN and packages:
        await runner.run(_privileged(["apt-get", "update"]))
    if packages:
        await runner.run(_package_install_command(family, packages))
    for module in go_modules:
        await runner.run(["go", "install", f"{module}@latest"])

    return [t.command for t in missing]


def _current_user() -> str:
    return getpass.getuser()


def _group_members(group: str) -> list[str] | None:
    """Members of a group, or None if the group does not exist."""
    try:
        return list(grp.getgrnam(group).gr_mem)
    except KeyError:
        return None


def _primary_group(user: str) -> str | None:
    """Name of the user's primary group, if it can be resolved."""
    try:
        return grp.getgrgid(pwd.getpwnam(user).pw_gid).gr_name
    except KeyError:
        return None


async def ensure_group_membership(ctx: WorkflowContext, runner: CommandRunner) -> bool:
    """Add the user to the container runtime group and open a session with it.

    Returns True if the user was added.
    """
    if os.geteuid() == 0:
        return False

    group = ctx.settings.docker_group
    members = _group_members(group)
    if members is None:
        log.warning("group %s does not exist; skipping membership check", group)
        return False

    user = _current_user()
    if user in members or _primary_group(user) == group:
        return False

    log.warning("adding %s to the %s group", user, group)
    await runner.run(_privileged(["usermod", "-aG", group, user]))
    # newgrp starts a shell with the new group; returns when the user exits it
    await runner.run(["newgrp", group], check=False)
    return True


async def bootstrap_environment(
    ctx: WorkflowContext,
    runner: CommandRunner | None = None,
) -> BootstrapResult:
    """Prepare the host: detect the OS, install missing tools, fix group membership."""
    runner = runner or CommandRunner()

    family = detect_os_family(ctx.settings.os_release_path)
    log.debug("detected OS family %s", family.value)

    path_updated = ensure_user_bin_on_path(ctx)
    installed = await install_missing_tools(family, runner)
    group_added = await ensure_group_membership(ctx, runner)

    return BootstrapResult(
        os_family=family,
        installed=installed,
        path_updated=path_updated,
        group_added=group_added,
    )
