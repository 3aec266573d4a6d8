"""Command-line entry point for wolfi-devkit."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

from wolfi_devkit import __version__
from wolfi_devkit.alpine.convert import convert_alpine_package
from wolfi_devkit.bootstrap import bootstrap_environment
from wolfi_devkit.config import WorkflowContext, settings
from wolfi_devkit.containers import launch_local, launch_sdk, launch_shell
from wolfi_devkit.errors import MissingInputError, WolfiDevkitError
from wolfi_devkit.git import fetch_sources, prepare_branch
from wolfi_devkit.imagebuild import build_image, scaffold_image
from wolfi_devkit.runner import CommandError, CommandRunner
from wolfi_devkit.sandbox import create_sandbox

Handler = Callable[[argparse.Namespace, WorkflowContext, CommandRunner], Awaitable[int]]
Preflight = Callable[[argparse.Namespace, WorkflowContext], None]

# Commands that only touch the local filesystem skip the bootstrap
NO_BOOTSTRAP = {"bootstrap", "sandbox"}


async def cmd_bootstrap(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    result = await bootstrap_environment(ctx, runner)
    installed = ", ".join(result.installed) or "nothing"
    print(f"Host: {result.os_family.value}; installed: {installed}")
    return 0


async def cmd_sandbox(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    print(create_sandbox(ctx))
    return 0


async def cmd_fetch(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    result = await fetch_sources(ctx, runner)
    print(result.workdir)
    return 0


async def cmd_branch(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    result = await prepare_branch(args.branch, ctx, runner)
    state = "created" if result.created else "checked out"
    print(f"Branch {result.branch} {state} on {result.fork}")
    print(result.repo_path)
    return 0


async def cmd_convert(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    result = await convert_alpine_package(args.package, args.directory, ctx, runner)
    recipe = result.recipe_path
    print(recipe.read_text(), end="")
    print()
    print(f"Converted {result.package} from aports {result.source.section} into {recipe}")
    print("Next steps:")
    for i, step in enumerate(result.next_steps, start=1):
        print(f"  {i}. {step}")
    return 0


async def cmd_shell(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    return await launch_shell(args.directory, args.extra, ctx, runner)


async def cmd_sdk(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    return await launch_sdk(args.directory, ctx, runner)


async def cmd_local(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    return await launch_local(args.directory, ctx, runner)


async def cmd_image_build(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    return await build_image(args.name, args.directory, ctx, runner)


async def cmd_image_new(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    return await scaffold_image(args.name, args.entrypoint, args.directory, ctx, runner)


def _require_arg(value: str, message: str) -> None:
    if not (value or "").strip():
        raise MissingInputError(message)


def check_branch(args: argparse.Namespace, ctx: WorkflowContext) -> None:
    _require_arg(args.branch, "A branch name is required.")
    ctx.require_github_username()


def check_convert(args: argparse.Namespace, ctx: WorkflowContext) -> None:
    _require_arg(args.package, "A package name is required.")
    ctx.require_github_username()


def check_image_build(args: argparse.Namespace, ctx: WorkflowContext) -> None:
    _require_arg(args.name, "An image name is required.")
    ctx.require_gcloud_username()


def check_image_new(args: argparse.Namespace, ctx: WorkflowContext) -> None:
    _require_arg(args.name, "An image name is required.")
    _require_arg(args.entrypoint, "An entrypoint is required.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wolfi-devkit",
        description="Developer workflow helpers for Wolfi packages and images",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)"
    )
    parser.add_argument(
        "-C",
        "--directory",
        type=Path,
        default=Path.cwd(),
        help="Directory to work in (default: current directory)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("bootstrap", help="Install missing tools and join the docker group")
    p.set_defaults(func=cmd_bootstrap)

    p = subparsers.add_parser("sandbox", help="Create a new sandbox directory and print its path")
    p.set_defaults(func=cmd_sandbox)

    p = subparsers.add_parser("fetch", help="Shallow-clone the packages and images repos into a sandbox")
    p.set_defaults(func=cmd_fetch)

    p = subparsers.add_parser("branch", help="Prepare a branch on your fork of the packages repo")
    p.add_argument("branch", help="Branch name")
    p.set_defaults(func=cmd_branch, preflight=check_branch)

    p = subparsers.add_parser(
        "convert", aliases=["alpine"], help="Convert an Alpine package to a melange recipe"
    )
    p.add_argument("package", help="aports package name")
    p.set_defaults(func=cmd_convert, preflight=check_convert)

    p = subparsers.add_parser("shell", help="Open an interactive Wolfi container")
    p.add_argument("extra", nargs=argparse.REMAINDER, help="Arguments passed to the container")
    p.set_defaults(func=cmd_shell)

    p = subparsers.add_parser("sdk", help="Enter the Wolfi SDK development container")
    p.set_defaults(func=cmd_sdk)

    p = subparsers.add_parser("local", help="Enter a container with locally built packages")
    p.set_defaults(func=cmd_local)

    image = subparsers.add_parser("image", help="Build or scaffold images")
    image_sub = image.add_subparsers(dest="image_command", required=True)
    p = image_sub.add_parser("build", help="Build an image")
    p.add_argument("name")
    p.set_defaults(func=cmd_image_build, preflight=check_image_build)
    p = image_sub.add_parser("new", help="Scaffold a new image")
    p.add_argument("name")
    p.add_argument("entrypoint")
    p.set_defaults(func=cmd_image_new, preflight=check_image_new)

    return parser


def configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


async def _dispatch(args: argparse.Namespace, ctx: WorkflowContext, runner: CommandRunner) -> int:
    # Missing inputs are reported before the bootstrap touches the host
    preflight: Preflight | None = getattr(args, "preflight", None)
    if preflight is not None:
        preflight(args, ctx)
    if ctx.settings.auto_bootstrap and args.command not in NO_BOOTSTRAP:
        await bootstrap_environment(ctx, runner)
    handler: Handler = args.func
    return await handler(args, ctx, runner)


def run(
    argv: list[str] | None = None,
    ctx: WorkflowContext | None = None,
    runner: CommandRunner | None = None,
) -> int:
    """Parse arguments, run the command and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    ctx = ctx or WorkflowContext.from_settings()
    runner = runner or CommandRunner()

    try:
        return asyncio.run(_dispatch(args, ctx, runner))
    except CommandError as e:
        print(f"wolfi-devkit: error: {e}", file=sys.stderr)
        return e.returncode if e.returncode > 0 else 1
    except WolfiDevkitError as e:
        print(f"wolfi-devkit: error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


def main() -> None:
    """Main CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
