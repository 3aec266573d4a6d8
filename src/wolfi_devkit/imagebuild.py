"""Build and scaffold images through the images repository's Makefile."""

import logging
from pathlib import Path

from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.errors import MissingInputError
from wolfi_devkit.runner import CommandRunner

log = logging.getLogger(__name__)


def image_build_env(ctx: WorkflowContext) -> dict[str, str]:
    """Environment for image builds: the target repository and terraform binary."""
    user = ctx.require_gcloud_username()
    env = {"TF_VAR_target_repository": f"{ctx.settings.image_registry}/{user}"}
    if ctx.terraform_path:
        env["TERRAFORM"] = ctx.terraform_path
    return env


async def build_image(
    name: str,
    directory: Path,
    ctx: WorkflowContext,
    runner: CommandRunner | None = None,
) -> int:
    """Run the images Makefile target for ``name``. Returns make's exit code."""
    name = (name or "").strip()
    if not name:
        raise MissingInputError("An image name is required.")
    env = image_build_env(ctx)

    runner = runner or CommandRunner()
    target = f"{ctx.settings.image_make_target_prefix}{name}"
    log.info("building %s into %s", name, env["TF_VAR_target_repository"])
    result = await runner.run(["make", target], cwd=directory, env=env, check=False)
    return result.returncode


async def scaffold_image(
    name: str,
    entrypoint: str,
    directory: Path,
    ctx: WorkflowContext,
    runner: CommandRunner | None = None,
) -> int:
    """Generate the skeleton for a new image. Returns make's exit code."""
    name = (name or "").strip()
    entrypoint = (entrypoint or "").strip()
    if not name:
        raise MissingInputError("An image name is required.")
    if not entrypoint:
        raise MissingInputError("An entrypoint is required.")

    runner = runner or CommandRunner()
    cmd = [
        "make",
        ctx.settings.image_scaffold_target,
        f"IMAGE_NAME={name}",
        f"ENTRYPOINT={entrypoint}",
    ]
    result = await runner.run(cmd, cwd=directory, check=False)
    return result.returncode
