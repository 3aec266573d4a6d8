"""Launch interactive build environments in containers."""

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.containers.images import ensure_image
from wolfi_devkit.git.fetch import fetch_sources
from wolfi_devkit.runner import CommandRunner

log = logging.getLogger(__name__)

SIGNING_KEY = "local-melange.rsa"
PACKAGES_DIR = "packages"
CONTAINER_WORKDIR = "/work"


def has_make_target(directory: Path, target: str) -> bool:
    """Check whether ``directory/Makefile`` defines a rule for ``target``."""
    makefile = directory / "Makefile"
    if not makefile.is_file():
        return False
    # target may be any name in a space-separated list of rule targets
    pattern = re.compile(
        rf"^(?:[^\s:#=][^:#=\n]*?[ \t]+)?{re.escape(target)}(?:[ \t]+[^:#=\n]*)?[ \t]*:(?!=)",
        re.MULTILINE,
    )
    return pattern.search(makefile.read_text(errors="replace")) is not None


async def resolve_project(
    directory: Path,
    target: str,
    ctx: WorkflowContext,
    runner: CommandRunner,
) -> Path:
    """Return the packages project to work in.

    ``directory`` is used when its Makefile has ``target``; otherwise the
    sources are fetched into a new sandbox and the packages repo is used.
    """
    if has_make_target(directory, target):
        return directory

    log.info("no %s target in %s; fetching sources", target, directory)
    fetched = await fetch_sources(ctx, runner)
    return fetched.repos[ctx.settings.packages_repo]


async def launch_shell(
    directory: Path,
    extra_args: Sequence[str],
    ctx: WorkflowContext,
    runner: CommandRunner | None = None,
) -> int:
    """Open an interactive Wolfi container with the project mounted at /work.

    ``extra_args`` are passed verbatim after the image name. The container's
    exit code is returned as-is.
    """
    runner = runner or CommandRunner()
    settings = ctx.settings

    await ensure_image(settings.base_image, ctx, runner)
    project = await resolve_project(directory, settings.sdk_make_target, ctx, runner)

    cmd = [
        "docker", "run", "--rm", "-it",
        *ctx.docker_run_options,
        "-v", f"{project}:{CONTAINER_WORKDIR}",
        "-w", CONTAINER_WORKDIR,
        settings.base_image,
        *extra_args,
    ]
    result = await runner.run(cmd, cwd=project, check=False)
    return result.returncode


async def launch_sdk(
    directory: Path,
    ctx: WorkflowContext,
    runner: CommandRunner | None = None,
) -> int:
    """Enter the Wolfi SDK development container through the project's Makefile."""
    runner = runner or CommandRunner()
    settings = ctx.settings

    await ensure_image(settings.sdk_image, ctx, runner)
    project = await resolve_project(directory, settings.sdk_make_target, ctx, runner)

    result = await runner.run(["make", settings.sdk_make_target], cwd=project, check=False)
    return result.returncode


async def ensure_signing_key(project: Path, runner: CommandRunner) -> bool:
    """Generate the local melange signing key if missing. Returns True if generated."""
    if (project / SIGNING_KEY).exists():
        log.info("signing key %s already exists", project / SIGNING_KEY)
        return False
    await runner.run(["melange", "keygen", SIGNING_KEY], cwd=project)
    return True


async def launch_local(
    directory: Path,
    ctx: WorkflowContext,
    runner: CommandRunner | None = None,
) -> int:
    """Enter a container that installs locally built packages.

    Ensures the packages output directory and signing key exist before
    invoking the local make target.
    """
    runner = runner or CommandRunner()
    settings = ctx.settings

    await ensure_image(settings.sdk_image, ctx, runner)
    project = await resolve_project(directory, settings.local_make_target, ctx, runner)

    (project / PACKAGES_DIR).mkdir(parents=True, exist_ok=True)
    await ensure_signing_key(project, runner)

    result = await runner.run(["make", settings.local_make_target], cwd=project, check=False)
    return result.returncode
