# =============================================================================
# GitHub Actions Versions MCP Server - Release Operations
# =============================================================================
"""
Release lookups exposed as MCP tools.
"""

import logging
from typing import Optional

from .client import GitHubClient
from .models import SimplifiedRelease
from .utils import gather_ordered, parse_repository, simplify_release

logger = logging.getLogger(__name__)


async def list_releases(
    client: GitHubClient,
    owner: str,
    repository: Optional[str] = None,
) -> list[SimplifiedRelease]:
    """
    List all releases of a GitHub Action.

    Args:
        client: GitHub client.
        owner: Repository owner, or "owner/repo".
        repository: Repository name.

    Returns:
        Simplified releases in GitHub's order (newest first), without SHAs.
    """
    repo_owner, repo_name = parse_repository(owner, repository)
    releases = await client.list_releases(repo_owner, repo_name)
    logger.info(f"Fetched {len(releases)} releases for {repo_owner}/{repo_name}")

    return await gather_ordered(
        lambda release: simplify_release(
            client, repo_owner, repo_name, release, resolve_sha=False
        ),
        releases,
    )


async def get_latest_release(
    client: GitHubClient,
    owner: str,
    repository: Optional[str] = None,
) -> SimplifiedRelease:
    """
    Get the latest release of a GitHub Action with its commit SHA.

    Args:
        client: GitHub client.
        owner: Repository owner, or "owner/repo".
        repository: Repository name.

    Returns:
        Simplified latest release with ``sha`` resolved from its tag.
    """
    repo_owner, repo_name = parse_repository(owner, repository)
    release = await client.get_latest_release(repo_owner, repo_name)
    logger.info(
        f"Latest release for {repo_owner}/{repo_name} is {release.tag_name}"
    )
    return await simplify_release(
        client, repo_owner, repo_name, release, resolve_sha=True
    )
