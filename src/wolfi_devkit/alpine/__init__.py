"""Alpine aports to melange conversion."""

from wolfi_devkit.alpine.convert import convert_alpine_package, read_package_version
from wolfi_devkit.alpine.probe import (
    PackageExistsError,
    RecipeNotFoundError,
    RecipeProbeError,
    locate_alpine_recipe,
    lookup_alpine_recipe,
    new_http_client,
    probe_url,
)

__all__ = [
    "PackageExistsError",
    "RecipeNotFoundError",
    "RecipeProbeError",
    "convert_alpine_package",
    "locate_alpine_recipe",
    "lookup_alpine_recipe",
    "new_http_client",
    "probe_url",
    "read_package_version",
]
