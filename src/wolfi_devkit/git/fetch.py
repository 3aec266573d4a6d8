"""Shallow-clone the workflow repositories into a sandbox."""

import logging

from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.models import FetchResult
from wolfi_devkit.runner import CommandRunner
from wolfi_devkit.sandbox import create_sandbox

log = logging.getLogger(__name__)


async def fetch_sources(
    ctx: WorkflowContext,
    runner: CommandRunner | None = None,
) -> FetchResult:
    """Clone the packages and images repositories into a new sandbox.

    Repositories land at ``<sandbox>/<host>/<org>/<repo>``. A failed clone
    raises CommandError; the sandbox and any earlier clone are left in place.

    Returns:
        FetchResult whose workdir is the host-level directory in the sandbox
    """
    runner = runner or CommandRunner()
    sandbox = create_sandbox(ctx)
    workdir = sandbox / ctx.settings.git_host

    repos = {}
    for slug in (ctx.settings.packages_repo, ctx.settings.images_repo):
        dest = workdir / slug
        dest.parent.mkdir(parents=True, exist_ok=True)
        await runner.run(["git", "clone", "--depth", "1", ctx.repo_url(slug), str(dest)])
        repos[slug] = dest

    log.info("fetched %d repositories into %s", len(repos), workdir)
    return FetchResult(sandbox=sandbox, workdir=workdir, repos=repos)
