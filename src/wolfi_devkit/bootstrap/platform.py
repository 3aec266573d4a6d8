"""Host OS detection from os-release."""

import shlex
from pathlib import Path

from wolfi_devkit.errors import WolfiDevkitError
from wolfi_devkit.models import OsFamily

# os-release IDs mapped to the installer family that handles them
FAMILY_IDS: dict[str, OsFamily] = {
    "debian": OsFamily.DEBIAN,
    "ubuntu": OsFamily.DEBIAN,
    "wolfi": OsFamily.WOLFI,
    "chainguard": OsFamily.WOLFI,
}


class UnsupportedPlatformError(WolfiDevkitError):
    """The host OS is not one the bootstrap can install tools on."""

    pass


def parse_os_release(content: str) -> dict[str, str]:
    """Parse os-release KEY=value lines, unquoting values."""
    fields: dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value]
        fields[key] = parts[0] if parts else ""
    return fields


def detect_os_family(os_release_path: Path) -> OsFamily:
    """Determine the installer family from ID, falling back to ID_LIKE."""
    try:
        fields = parse_os_release(os_release_path.read_text())
    except FileNotFoundError:
        raise UnsupportedPlatformError(
            f"{os_release_path} not found; only Debian-based and Wolfi hosts are supported"
        )

    candidates = [fields.get("ID", "")]
    candidates.extend(fields.get("ID_LIKE", "").split())
    for candidate in candidates:
        family = FAMILY_IDS.get(candidate.lower())
        if family is not None:
            return family

    name = fields.get("PRETTY_NAME") or fields.get("ID") or "unknown"
    raise UnsupportedPlatformError(
        f"Unsupported OS '{name}'; only Debian-based and Wolfi hosts are supported"
    )
