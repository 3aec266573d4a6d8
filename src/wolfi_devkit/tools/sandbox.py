"""Tool for creating sandbox directories."""

from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.models import SandboxResult
from wolfi_devkit.sandbox import create_sandbox


async def create_sandbox_directory() -> SandboxResult:
    """Create a new, uniquely named scratch directory and return its path.

    Sandboxes are never reused or removed automatically.
    """
    ctx = WorkflowContext.from_settings()
    try:
        path = create_sandbox(ctx)
    except OSError as e:
        return SandboxResult(success=False, message=f"Failed to create sandbox: {e}")
    return SandboxResult(success=True, path=path)
