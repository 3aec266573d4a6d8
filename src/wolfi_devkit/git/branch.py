"""Prepare a working branch on the user's fork of the packages repository."""

import logging

from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.errors import MissingInputError
from wolfi_devkit.models import BranchResult
from wolfi_devkit.runner import CommandError, CommandRunner
from wolfi_devkit.sandbox import create_sandbox

log = logging.getLogger(__name__)

# git ls-remote --exit-code returns 2 when no ref matched
LS_REMOTE_NO_MATCH = 2


async def remote_branch_exists(remote: str, branch: str, runner: CommandRunner) -> bool:
    """Check whether the repository at ``remote`` has a head named ``branch``."""
    args = ["git", "ls-remote", "--exit-code", "--heads", remote, branch]
    result = await runner.run(args, capture=True, check=False)
    if result.returncode == 0:
        return True
    if result.returncode == LS_REMOTE_NO_MATCH:
        return False
    raise CommandError(args, result.returncode, result.stderr.strip())


async def prepare_branch(
    branch: str,
    ctx: WorkflowContext,
    runner: CommandRunner | None = None,
) -> BranchResult:
    """Sync the fork, clone it into a sandbox and check out ``branch``.

    The fork's default branch is synced with upstream first. If the fork
    already has ``branch`` and upstream has it too, that branch is synced
    as well. The branch is then switched to, or created when the fork does
    not have it, and pushed with upstream tracking. The clone is configured
    to rebase on pull.

    Raises:
        MissingInputError: branch is empty or the GitHub username is unset.
            Both are checked before anything is run.
    """
    branch = (branch or "").strip()
    if not branch:
        raise MissingInputError("A branch name is required.")
    user = ctx.require_github_username()

    runner = runner or CommandRunner()
    settings = ctx.settings
    upstream = settings.packages_repo
    repo_name = upstream.rsplit("/", 1)[-1]
    fork = f"{user}/{repo_name}"

    await runner.run(["gh", "repo", "sync", fork, "--source", upstream])

    exists = await remote_branch_exists(ctx.repo_url(fork), branch, runner)
    if exists and await remote_branch_exists(ctx.repo_url(upstream), branch, runner):
        await runner.run(["gh", "repo", "sync", fork, "--source", upstream, "--branch", branch])

    sandbox = create_sandbox(ctx)
    repo_path = sandbox / repo_name
    await runner.run(["git", "clone", ctx.repo_url(fork), str(repo_path)])

    if exists:
        await runner.run(["git", "switch", branch], cwd=repo_path)
    else:
        log.info("branch %s not on %s; creating it", branch, fork)
        await runner.run(["git", "switch", "-c", branch], cwd=repo_path)

    push_url = f"git@{settings.git_host}:{fork}.git"
    await runner.run(["git", "remote", "set-url", "origin", push_url], cwd=repo_path)
    await runner.run(["git", "push", "--set-upstream", "origin", branch], cwd=repo_path)
    await runner.run(["git", "config", "pull.rebase", "true"], cwd=repo_path)

    return BranchResult(branch=branch, fork=fork, repo_path=repo_path, created=not exists)
