"""MCP tools for the Wolfi developer workflow."""

from wolfi_devkit.tools.convert_package import convert_alpine_package_to_melange
from wolfi_devkit.tools.find_recipe import find_alpine_recipe
from wolfi_devkit.tools.sandbox import create_sandbox_directory

__all__ = [
    "convert_alpine_package_to_melange",
    "create_sandbox_directory",
    "find_alpine_recipe",
]
