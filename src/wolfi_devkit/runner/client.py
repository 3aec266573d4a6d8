"""Wrapper for running external commands."""

import asyncio
import logging
import os
import shlex
import shutil
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from wolfi_devkit.config import settings
from wolfi_devkit.errors import WolfiDevkitError

log = logging.getLogger(__name__)


class CommandError(WolfiDevkitError):
    """An external command exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        message = f"{shlex.join(self.command)} exited with status {returncode}"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)


class ToolNotFoundError(WolfiDevkitError):
    """A required executable is not on PATH."""

    pass


@dataclass
class CommandResult:
    """Outcome of one external command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs external commands one at a time and waits for each to finish."""

    def __init__(self, timeout: float | None = None, interactive: bool = True) -> None:
        self.timeout = timeout if timeout is not None else settings.command_timeout_seconds
        # Non-interactive runners keep our stdin/stdout free (e.g. for the MCP stdio transport)
        self.interactive = interactive

    def which(self, tool: str) -> str | None:
        """Resolve a tool on PATH."""
        return shutil.which(tool)

    def require(self, tool: str) -> str:
        """Resolve a tool on PATH, raising if it is not installed."""
        path = self.which(tool)
        if path is None:
            raise ToolNotFoundError(
                f"{tool} is not installed. Run 'wolfi-devkit bootstrap' to install it."
            )
        return path

    async def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = False,
        check: bool = True,
    ) -> CommandResult:
        """Run a command to completion.

        Args:
            args: Command and arguments
            cwd: Working directory for the command
            env: Extra environment variables, layered over the current environment
            capture: Capture stdout/stderr instead of inheriting the terminal
            check: Raise CommandError when the command exits non-zero

        Returns:
            CommandResult with the exit code (and output when captured)
        """
        argv = [str(a) for a in args]
        log.debug("running %s (cwd=%s)", shlex.join(argv), cwd or ".")
        result = await self._exec(argv, cwd=cwd, env=env, capture=capture)
        log.debug("%s exited with %d", argv[0], result.returncode)

        if check and result.returncode != 0:
            raise CommandError(argv, result.returncode, result.stderr.strip())
        return result

    async def _exec(
        self,
        argv: list[str],
        *,
        cwd: Path | None,
        env: Mapping[str, str] | None,
        capture: bool,
    ) -> CommandResult:
        merged_env = {**os.environ, **env} if env else None
        if capture:
            stdin, out, err = None, asyncio.subprocess.PIPE, asyncio.subprocess.PIPE
        elif self.interactive:
            stdin, out, err = None, None, None
        else:
            stdin, out, err = asyncio.subprocess.DEVNULL, sys.stderr, None

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=str(cwd) if cwd is not None else None,
                env=merged_env,
                stdin=stdin,
                stdout=out,
                stderr=err,
            )
        except FileNotFoundError:
            raise ToolNotFoundError(
                f"{argv[0]} is not installed. Run 'wolfi-devkit bootstrap' to install it."
            )

        # Interactive sessions (inherited stdio) are never timed out
        timeout = self.timeout if capture else None
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            return CommandResult(argv, -1, "", f"Command timed out after {timeout}s")

        return CommandResult(
            args=argv,
            returncode=proc.returncode or 0,
            stdout=stdout.decode(errors="replace") if stdout else "",
            stderr=stderr.decode(errors="replace") if stderr else "",
        )
