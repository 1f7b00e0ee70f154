# =============================================================================
# GitHub Actions Versions MCP Server - Utilities
# =============================================================================
"""
Helpers shared by the release operations.

Includes repository identifier parsing, release simplification and an
order-preserving concurrent map.
"""

import asyncio
from typing import Awaitable, Callable, Iterable, Optional, TypeVar

from .client import GitHubClient
from .models import GitHubRelease, SimplifiedRelease

T = TypeVar("T")
R = TypeVar("R")


def parse_repository(owner: str, repository: Optional[str] = None) -> tuple[str, str]:
    """
    Resolve tool arguments to an (owner, repo) pair.

    When ``repository`` is omitted, ``owner`` must be in the combined
    "owner/repo" form. When it is given, both values are used as-is.

    Args:
        owner: Repository owner, or "owner/repo".
        repository: Repository name.

    Returns:
        Tuple of (owner, repo).

    Raises:
        ValueError: If the combined form is not exactly two non-empty parts.
    """
    if repository is None:
        parts = owner.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError("Repository must be in format 'owner/repo'")
        return (parts[0], parts[1])

    return (owner, repository)


async def simplify_release(
    client: GitHubClient,
    owner: str,
    repo: str,
    release: GitHubRelease,
    resolve_sha: bool = False,
) -> SimplifiedRelease:
    """
    Reduce a GitHub release to the fields returned to tool callers.

    The SHA is whatever the tag ref points at. For annotated tags that is
    the tag object's SHA (``object.type == "tag"``), not the commit's; it is
    not dereferenced further.

    Args:
        client: GitHub client used to resolve the tag SHA.
        owner: Repository owner.
        repo: Repository name.
        release: Raw release from GitHub.
        resolve_sha: Look up the commit SHA the release tag points at.

    Returns:
        SimplifiedRelease; ``sha`` is empty unless resolve_sha is set.

    Raises:
        GitHubApiError: If the tag reference cannot be fetched.
    """
    sha = ""
    if resolve_sha:
        ref = await client.get_tag_ref(owner, repo, release.tag_name)
        sha = ref.object.sha

    return SimplifiedRelease(
        tag_name=release.tag_name,
        name=release.name or release.tag_name,
        published_at=release.published_at,
        html_url=release.html_url,
        target_commitish=release.target_commitish,
        prerelease=release.prerelease,
        draft=release.draft,
        sha=sha,
    )


async def gather_ordered(
    func: Callable[[T], Awaitable[R]], items: Iterable[T]
) -> list[R]:
    """
    Run ``func`` over ``items`` concurrently.

    Results are returned in input order regardless of completion order.
    The first failure propagates.
    """
    return list(await asyncio.gather(*(func(item) for item in items)))
