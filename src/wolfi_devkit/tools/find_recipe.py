"""Tool for finding an Alpine package recipe in aports."""

from typing import Annotated

from pydantic import Field

from wolfi_devkit.alpine.probe import lookup_alpine_recipe, new_http_client
from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.models import RecipeLookupResult


async def find_alpine_recipe(
    package: Annotated[
        str, Field(description="Alpine package name as it appears in aports (e.g., 'jq')")
    ],
) -> RecipeLookupResult:
    """Find the APKBUILD for an Alpine package in the aports repository.

    Checks the aports sections in order (main, then community) and reports
    which one holds the recipe. A probe that fails (network error, unexpected
    status) is reported separately from a recipe that does not exist.
    """
    package = package.strip()
    if not package:
        return RecipeLookupResult(found=False, package=package, message="No package specified.")

    ctx = WorkflowContext.from_settings()
    async with new_http_client(ctx) as client:
        return await lookup_alpine_recipe(package, ctx, client)
