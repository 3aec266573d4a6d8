"""External command execution."""

from wolfi_devkit.runner.client import (
    CommandError,
    CommandResult,
    CommandRunner,
    ToolNotFoundError,
)

__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "ToolNotFoundError",
]
