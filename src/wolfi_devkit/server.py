"""MCP server exposing the non-interactive Wolfi workflow steps."""

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from wolfi_devkit.tools.convert_package import convert_alpine_package_to_melange
from wolfi_devkit.tools.find_recipe import find_alpine_recipe
from wolfi_devkit.tools.sandbox import create_sandbox_directory

READ_ONLY_ANNOTATIONS = ToolAnnotations(
    readOnlyHint=True,
    openWorldHint=True,  # Probes aports over HTTP
)

# Creates directories, branches and files; never deletes anything
WRITE_ANNOTATIONS = ToolAnnotations(
    readOnlyHint=False,
    destructiveHint=False,
    openWorldHint=True,
)

mcp = FastMCP(
    name="wolfi-devkit",
    instructions="""This MCP server helps port Alpine packages to Wolfi.

RECOMMENDED TOOL WORKFLOW:
1. find_alpine_recipe - Check that the package exists in aports (main or community)
2. convert_alpine_package_to_melange - Create a branch on the user's fork and generate <package>.yaml

Prerequisites:
- GITHUB_USER must be set to the GitHub account that owns a fork of wolfi-dev/os
- gh must be authenticated (run 'gh auth login')
- melange and yam must be installed (run 'wolfi-devkit bootstrap')

NOTES:
- A probe_failed outcome from find_alpine_recipe means the check itself failed
  (network error or unexpected status); it does NOT mean the package is absent.
- convert_alpine_package_to_melange refuses to overwrite a local recipe that is
  already published in wolfi-dev/os.
- After conversion, show the user the returned next_steps. Building and testing
  the package happens in the interactive SDK container ('wolfi-devkit sdk').
""",
)

mcp.tool(annotations=READ_ONLY_ANNOTATIONS)(find_alpine_recipe)
mcp.tool(annotations=WRITE_ANNOTATIONS)(create_sandbox_directory)
mcp.tool(annotations=WRITE_ANNOTATIONS)(convert_alpine_package_to_melange)


def main() -> None:
    """Run the MCP server."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
