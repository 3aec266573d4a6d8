"""Filesystem helpers for assertions."""

from pathlib import Path


def list_sandboxes(root: Path) -> list[Path]:
    """Sandbox directories that exist under root."""
    if not root.exists():
        return []
    return sorted(p for p in root.iterdir() if p.is_dir())
