"""Sandbox directories: uniquely named scratch workspaces under a temp root."""

import logging
import random
import string
import time
from pathlib import Path

from wolfi_devkit.config import WorkflowContext

log = logging.getLogger(__name__)

SANDBOX_PREFIX = "wolfi"
SUFFIX_ALPHABET = string.ascii_letters + string.digits
SUFFIX_LENGTH = 8
MAX_ATTEMPTS = 100


def sandbox_name(now: float | None = None) -> str:
    """Generate a sandbox directory name: prefix, seconds timestamp, random suffix."""
    if now is None:
        now = time.time()
    stamp = time.strftime("%Y%m%d%H%M%S", time.localtime(now))
    suffix = "".join(random.choices(SUFFIX_ALPHABET, k=SUFFIX_LENGTH))
    return f"{SANDBOX_PREFIX}-{stamp}-{suffix}"


def create_sandbox(ctx: WorkflowContext) -> Path:
    """Create a new, empty sandbox directory and return its absolute path.

    The directory is created exclusively, so a name that already exists is
    never reused. Sandboxes are not cleaned up automatically.
    """
    root = ctx.sandbox_root.expanduser().resolve()
    root.mkdir(parents=True, exist_ok=True)

    for _ in range(MAX_ATTEMPTS):
        path = root / sandbox_name()
        try:
            path.mkdir()
        except FileExistsError:
            continue
        log.info("created sandbox %s", path)
        return path

    raise FileExistsError(f"Could not create a unique sandbox under {root}")
