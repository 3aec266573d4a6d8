"""Convert an Alpine aports package into a melange recipe on a new branch."""

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import httpx
import yaml

from wolfi_devkit.alpine.probe import (
    PackageExistsError,
    RecipeProbeError,
    locate_alpine_recipe,
    new_http_client,
    probe_url,
    published_recipe_url,
)
from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.errors import MissingInputError, WolfiDevkitError
from wolfi_devkit.git.branch import prepare_branch
from wolfi_devkit.models import ConversionResult, ProbeOutcome
from wolfi_devkit.runner import CommandRunner

log = logging.getLogger(__name__)


def recipe_filename(package: str) -> str:
    return f"{package}.yaml"


def next_steps(package: str, recipe: Path) -> list[str]:
    """Follow-up instructions printed after a conversion."""
    return [
        f"Edit {recipe} and review the converted pipeline",
        "Enter the build environment: wolfi-devkit sdk",
        f"Build the package: make package/{package}",
        f"Install and test it: wolfi-devkit local, then apk add {package}",
    ]


@contextmanager
def scratch_directory(package: str, keep: bool) -> Iterator[Path]:
    """Temporary output directory for melange, removed on exit unless ``keep``."""
    prefix = f"melange-convert-{package}-"
    if keep:
        path = Path(tempfile.mkdtemp(prefix=prefix))
        log.warning("keeping scratch directory %s", path)
        yield path
        return
    with tempfile.TemporaryDirectory(prefix=prefix) as tmp:
        yield Path(tmp)


async def check_not_published(
    package: str,
    directory: Path,
    ctx: WorkflowContext,
    client: httpx.AsyncClient,
) -> None:
    """Refuse to overwrite a local recipe that is already published downstream.

    Raises:
        PackageExistsError: the local recipe exists and is published
        RecipeProbeError: the local recipe exists and the probe was inconclusive
    """
    local = directory / recipe_filename(package)
    if not local.exists():
        return

    url = published_recipe_url(ctx, package)
    outcome = await probe_url(url, client)
    if outcome is ProbeOutcome.FOUND:
        raise PackageExistsError(f"{local} already exists and is published at {url}")
    if outcome is ProbeOutcome.PROBE_FAILED:
        raise RecipeProbeError(
            f"{local} already exists and {url} could not be checked; not overwriting it"
        )
    log.info("%s exists locally but is not published; it will be replaced", local)


def read_package_version(recipe: Path) -> str | None:
    """package.version from a melange recipe, if present."""
    try:
        data = yaml.safe_load(recipe.read_text())
    except yaml.YAMLError as e:
        log.warning("could not parse %s: %s", recipe, e)
        return None
    if not isinstance(data, dict) or not isinstance(data.get("package"), dict):
        return None
    version = data["package"].get("version")
    return str(version) if version is not None else None


async def convert_alpine_package(
    package: str,
    directory: Path,
    ctx: WorkflowContext,
    runner: CommandRunner | None = None,
    client: httpx.AsyncClient | None = None,
) -> ConversionResult:
    """Convert an aports package to a melange recipe on a fresh branch.

    The recipe is located in aports first; nothing is changed if it cannot
    be found or if ``directory`` already holds a recipe that is published
    downstream. The same check is repeated against the branch checkout,
    whose recipe is the one that gets replaced. Otherwise a branch named
    after the package is prepared on the user's fork, melange converts the
    APKBUILD into a scratch directory, and the result is moved into the
    branch checkout and formatted with yam.

    Args:
        package: aports package name, also used as the branch name
        directory: Directory checked for an existing local recipe
        ctx: Workflow context
        runner: Command runner
        client: HTTP client used for probes

    Returns:
        ConversionResult with the recipe path and follow-up steps
    """
    package = (package or "").strip()
    if not package:
        raise MissingInputError("A package name is required.")
    ctx.require_github_username()

    runner = runner or CommandRunner()
    runner.require("melange")
    runner.require("yam")

    if client is None:
        async with new_http_client(ctx) as own_client:
            return await _convert(package, directory, ctx, runner, own_client)
    return await _convert(package, directory, ctx, runner, client)


async def _convert(
    package: str,
    directory: Path,
    ctx: WorkflowContext,
    runner: CommandRunner,
    client: httpx.AsyncClient,
) -> ConversionResult:
    location = await locate_alpine_recipe(package, ctx, client)
    await check_not_published(package, directory, ctx, client)
    log.info("found %s in aports %s", package, location.section)

    branch = await prepare_branch(package, ctx, runner)
    checkout = branch.repo_path
    checkout.mkdir(parents=True, exist_ok=True)
    recipe = checkout / recipe_filename(package)
    # The checkout's copy is the file that gets replaced
    await check_not_published(package, checkout, ctx, client)

    base_uri_format = f"{ctx.settings.aports_base_url}/{location.section}/%s/APKBUILD"
    with scratch_directory(package, ctx.settings.keep_scratch) as scratch:
        await runner.run(
            [
                "melange", "convert", "apkbuild",
                "--base-uri-format", base_uri_format,
                "--out-dir", str(scratch),
                package,
            ],
            cwd=checkout,
        )
        converted = scratch / recipe_filename(package)
        if not converted.exists():
            raise WolfiDevkitError(f"melange convert did not produce {converted.name}")
        shutil.move(str(converted), str(recipe))

    await runner.run(["yam", recipe.name], cwd=checkout)

    return ConversionResult(
        success=True,
        package=package,
        recipe_path=recipe,
        source=location,
        branch=branch.branch,
        package_version=read_package_version(recipe),
        next_steps=next_steps(package, recipe),
    )
