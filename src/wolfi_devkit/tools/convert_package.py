"""Tool for converting an Alpine package into a melange recipe."""

from pathlib import Path
from typing import Annotated

from pydantic import Field

from wolfi_devkit.alpine.convert import convert_alpine_package
from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.errors import WolfiDevkitError
from wolfi_devkit.models import ConversionResult
from wolfi_devkit.runner import CommandRunner


async def convert_alpine_package_to_melange(
    package: Annotated[
        str, Field(description="Alpine package name to convert (also used as the branch name)")
    ],
    directory: Annotated[
        str,
        Field(description="Directory to check for an existing <package>.yaml recipe"),
    ] = ".",
) -> ConversionResult:
    """Convert an Alpine aports package into a Wolfi melange recipe.

    Prepares a branch named after the package on the user's fork of the
    packages repository (GITHUB_USER must be set), runs melange convert,
    formats the result with yam and returns the recipe path with next steps.

    Refuses to run if the package is not in aports, or if a local recipe
    already exists and is already published.
    """
    ctx = WorkflowContext.from_settings()
    # Child output must stay off stdout, which carries the MCP protocol
    runner = CommandRunner(interactive=False)
    try:
        return await convert_alpine_package(
            package, Path(directory).expanduser(), ctx, runner=runner
        )
    except WolfiDevkitError as e:
        return ConversionResult(success=False, package=package, message=str(e))
