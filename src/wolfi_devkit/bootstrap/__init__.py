"""Host environment bootstrap."""

from wolfi_devkit.bootstrap.installer import (
    REQUIRED_TOOLS,
    bootstrap_environment,
    ensure_user_bin_on_path,
    install_missing_tools,
)
from wolfi_devkit.bootstrap.platform import UnsupportedPlatformError, detect_os_family

__all__ = [
    "REQUIRED_TOOLS",
    "UnsupportedPlatformError",
    "bootstrap_environment",
    "detect_os_family",
    "ensure_user_bin_on_path",
    "install_missing_tools",
]
