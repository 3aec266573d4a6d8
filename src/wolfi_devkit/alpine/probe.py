"""HTTP existence probes for upstream and downstream recipes."""

import logging

import httpx

from wolfi_devkit import __version__
from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.errors import WolfiDevkitError
from wolfi_devkit.models import ProbeOutcome, RecipeLocation, RecipeLookupResult

log = logging.getLogger(__name__)

USER_AGENT = f"wolfi-devkit/{__version__}"

# Statuses that mean "definitely not there"; anything else non-2xx is inconclusive
ABSENT_STATUSES = {404, 410}


class RecipeNotFoundError(WolfiDevkitError):
    """The package has no recipe in any searched aports section."""

    pass


class RecipeProbeError(WolfiDevkitError):
    """A probe could not determine whether a recipe exists."""

    pass


class PackageExistsError(WolfiDevkitError):
    """The recipe already exists locally and is published downstream."""

    pass


def new_http_client(ctx: WorkflowContext) -> httpx.AsyncClient:
    """HTTP client for probes."""
    return httpx.AsyncClient(
        timeout=ctx.settings.probe_timeout_seconds,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


async def probe_url(url: str, client: httpx.AsyncClient) -> ProbeOutcome:
    """Check whether ``url`` exists without downloading it.

    Returns:
        FOUND for 2xx, NOT_FOUND for 404/410, PROBE_FAILED for network
        errors and any other status
    """
    try:
        response = await client.head(url)
    except httpx.HTTPError as e:
        log.warning("probe of %s failed: %s", url, e)
        return ProbeOutcome.PROBE_FAILED

    if response.is_success:
        return ProbeOutcome.FOUND
    if response.status_code in ABSENT_STATUSES:
        return ProbeOutcome.NOT_FOUND

    log.warning("probe of %s returned unexpected status %d", url, response.status_code)
    return ProbeOutcome.PROBE_FAILED


def apkbuild_url(ctx: WorkflowContext, section: str, package: str) -> str:
    """URL of a package's APKBUILD in an aports section."""
    return f"{ctx.settings.aports_base_url}/{section}/{package}/APKBUILD"


def published_recipe_url(ctx: WorkflowContext, package: str) -> str:
    """URL of a package's recipe in the published packages repository."""
    return f"{ctx.settings.published_recipes_url}/{package}.yaml"


async def lookup_alpine_recipe(
    package: str,
    ctx: WorkflowContext,
    client: httpx.AsyncClient,
) -> RecipeLookupResult:
    """Probe each aports section in order, stopping at the first match."""
    probes: dict[str, ProbeOutcome] = {}
    for section in ctx.settings.aports_sections:
        url = apkbuild_url(ctx, section, package)
        outcome = await probe_url(url, client)
        probes[section] = outcome
        if outcome is ProbeOutcome.FOUND:
            return RecipeLookupResult(
                found=True,
                package=package,
                location=RecipeLocation(package=package, section=section, url=url),
                probes=probes,
            )

    sections = ", ".join(ctx.settings.aports_sections)
    if ProbeOutcome.PROBE_FAILED in probes.values():
        message = f"Could not check aports ({sections}) for {package}; see warnings above"
    else:
        message = f"{package} not found in aports ({sections})"
    return RecipeLookupResult(found=False, package=package, probes=probes, message=message)


async def locate_alpine_recipe(
    package: str,
    ctx: WorkflowContext,
    client: httpx.AsyncClient,
) -> RecipeLocation:
    """Find the aports recipe for ``package``.

    Raises:
        RecipeNotFoundError: every section reported the recipe absent
        RecipeProbeError: no section found it and at least one probe failed
    """
    result = await lookup_alpine_recipe(package, ctx, client)
    if result.location is not None:
        return result.location
    if ProbeOutcome.PROBE_FAILED in result.probes.values():
        raise RecipeProbeError(result.message)
    raise RecipeNotFoundError(result.message)
