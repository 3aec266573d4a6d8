"""Container image freshness: decide when to pull and pull."""

import logging
import re
from datetime import datetime, timedelta, timezone

from wolfi_devkit.config import WorkflowContext
from wolfi_devkit.runner import CommandRunner

log = logging.getLogger(__name__)

# Docker's zero time, reported for images that were never tagged locally
_ZERO_TIME_PREFIX = "0001-01-01"
_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_docker_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp from docker inspect.

    Docker reports nanosecond precision, which datetime cannot hold, so the
    fraction is truncated to microseconds.

    Examples:
        "2024-05-01T10:20:30.123456789Z" -> 2024-05-01 10:20:30.123456+00:00
        "0001-01-01T00:00:00Z" -> None
    """
    value = value.strip()
    if not value or value.startswith(_ZERO_TIME_PREFIX):
        return None
    value = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


async def local_image_age(image: str, runner: CommandRunner) -> timedelta | None:
    """Age of the local copy of ``image`` since it was last tagged, or None if absent."""
    result = await runner.run(
        ["docker", "image", "inspect", "--format", "{{.Metadata.LastTagTime}}", image],
        capture=True,
        check=False,
    )
    if not result.ok:
        return None
    tagged = parse_docker_timestamp(result.stdout)
    if tagged is None:
        return None
    return datetime.now(timezone.utc) - tagged


async def ensure_image(
    image: str,
    ctx: WorkflowContext,
    runner: CommandRunner,
) -> bool:
    """Make sure ``image`` is available locally according to the pull policy.

    Policies:
        always: pull on every call (the default)
        if-stale: pull when missing or older than pull_max_age_hours
        never: never pull; docker run pulls a missing image itself

    Returns:
        True if a pull was performed
    """
    policy = ctx.settings.pull_policy

    if policy == "never":
        log.info("pull policy 'never'; not pulling %s", image)
        return False

    if policy == "if-stale":
        age = await local_image_age(image, runner)
        max_age = timedelta(hours=ctx.settings.pull_max_age_hours)
        if age is not None and age < max_age:
            log.info("%s is fresh (%s old); not pulling", image, age)
            return False

    await runner.run(["docker", "pull", image])
    return True
