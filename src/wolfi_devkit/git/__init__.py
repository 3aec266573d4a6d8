"""Git and GitHub workflow steps."""

from wolfi_devkit.git.branch import prepare_branch, remote_branch_exists
from wolfi_devkit.git.fetch import fetch_sources

__all__ = [
    "fetch_sources",
    "prepare_branch",
    "remote_branch_exists",
]
