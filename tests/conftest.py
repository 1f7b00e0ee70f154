# =============================================================================
# GitHub Actions Versions MCP Server - Test Fixtures
# =============================================================================
"""
Shared fixtures for the test suite.

GitHub is replaced with an in-process fake served through
``httpx.MockTransport`` so no test touches the network.
"""

from typing import Any, AsyncGenerator, Optional

import httpx
import pytest
import pytest_asyncio

from actions_versions_mcp.client import GitHubClient

CHECKOUT_SHA = "11bd71901bbe5b1630ceea73d27597364c9af683"


def make_release(
    tag_name: str,
    name: Optional[str] = None,
    prerelease: bool = False,
    draft: bool = False,
) -> dict[str, Any]:
    """
    Build a raw release payload shaped like GitHub's.

    Args:
        tag_name: Release tag.
        name: Release name.
        prerelease: Prerelease flag.
        draft: Draft flag.

    Returns:
        Release dictionary including fields the server should drop.
    """
    return {
        "id": abs(hash(tag_name)) % 100000,
        "node_id": "RE_kwDOAbc",
        "url": f"https://api.github.com/repos/actions/checkout/releases/{tag_name}",
        "html_url": f"https://github.com/actions/checkout/releases/tag/{tag_name}",
        "tag_name": tag_name,
        "target_commitish": "main",
        "name": name,
        "draft": draft,
        "prerelease": prerelease,
        "created_at": "2024-10-23T14:44:47Z",
        "published_at": "2024-10-23T14:46:00Z",
        "author": {"login": "github-actions[bot]", "id": 41898282},
        "assets": [],
        "body": "## What's Changed\n* Fix things",
    }


class FakeGitHub:
    """
    Minimal stand-in for the GitHub REST API.

    Attributes:
        routes: Canned responses keyed by request path.
        requests: Every request received, in order.
    """

    def __init__(self) -> None:
        self.routes: dict[str, httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        path: str,
        status_code: int = 200,
        json: Any = None,
        text: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        """Register a canned response for a path."""
        if text is not None:
            response = httpx.Response(status_code, text=text, headers=headers)
        else:
            response = httpx.Response(status_code, json=json, headers=headers)
        self.routes[path] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        """MockTransport handler."""
        self.requests.append(request)
        response = self.routes.get(request.url.path)
        if response is None:
            return httpx.Response(
                404,
                json={
                    "message": "Not Found",
                    "documentation_url": "https://docs.github.com/rest",
                },
            )
        return response

    @property
    def paths(self) -> list[str]:
        """Paths requested so far."""
        return [r.url.path for r in self.requests]


@pytest.fixture
def fake_github() -> FakeGitHub:
    """
    Create a fake GitHub preloaded with actions/checkout releases.

    Returns:
        FakeGitHub instance.
    """
    fake = FakeGitHub()
    fake.add(
        "/repos/actions/checkout/releases",
        json=[
            make_release("v4.2.2", name="v4.2.2"),
            make_release("v4.2.1", name=""),
            make_release("v5.0.0-beta.1", name="v5 beta", prerelease=True),
            make_release("v4.2.0", name=None),
        ],
    )
    fake.add(
        "/repos/actions/checkout/releases/latest",
        json=make_release("v4.2.2", name="v4.2.2"),
    )
    fake.add(
        "/repos/actions/checkout/git/refs/tags/v4.2.2",
        json={
            "ref": "refs/tags/v4.2.2",
            "node_id": "MDM6UmVmcmVmcy90YWdzL3Y0LjIuMg==",
            "url": "https://api.github.com/repos/actions/checkout/git/refs/tags/v4.2.2",
            "object": {
                "sha": CHECKOUT_SHA,
                "type": "commit",
                "url": f"https://api.github.com/repos/actions/checkout/git/commits/{CHECKOUT_SHA}",
            },
        },
    )
    return fake


@pytest_asyncio.fixture
async def github_client(fake_github: FakeGitHub) -> AsyncGenerator[GitHubClient, None]:
    """
    Create an authenticated GitHub client talking to the fake.

    Args:
        fake_github: Fake GitHub API.

    Yields:
        GitHubClient instance.
    """
    async with GitHubClient(
        token="ghp_test_token",
        transport=httpx.MockTransport(fake_github.handler),
    ) as client:
        yield client
