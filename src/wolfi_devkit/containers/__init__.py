"""Container images and interactive build environments."""

from wolfi_devkit.containers.images import ensure_image, parse_docker_timestamp
from wolfi_devkit.containers.launch import (
    has_make_target,
    launch_local,
    launch_sdk,
    launch_shell,
    resolve_project,
)

__all__ = [
    "ensure_image",
    "has_make_target",
    "launch_local",
    "launch_sdk",
    "launch_shell",
    "parse_docker_timestamp",
    "resolve_project",
]
