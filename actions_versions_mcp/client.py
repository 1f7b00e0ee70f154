# =============================================================================
# GitHub Actions Versions MCP Server - API Client
# =============================================================================
"""
Async HTTP client for GitHub REST API.

This module provides a thin client over GitHub's REST API: header and token
injection, response body parsing, and translation of error responses into a
single typed exception tagged with the kind of failure.
"""

import logging
import platform
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from . import __version__
from .config import Settings
from .models import GitHubRelease, Ref

logger = logging.getLogger(__name__)

USER_AGENT_PRODUCT = "mcp-github-actions-versions"

# Used when a rate limited response carries no reset information
DEFAULT_RATE_LIMIT_WINDOW = timedelta(seconds=60)


def build_user_agent() -> str:
    """
    Build the User-Agent header value.

    Returns:
        Product name and version followed by runtime and platform details.
    """
    return (
        f"{USER_AGENT_PRODUCT}/v{__version__} "
        f"Python/{platform.python_version()} "
        f"({platform.system().lower()}; {platform.machine()})"
    )


# =============================================================================
# Errors
# =============================================================================


class GitHubErrorKind(str, Enum):
    """
    Kinds of GitHub API failures.

    Attributes:
        VALIDATION: Request was rejected as invalid (422, 400).
        NOT_FOUND: Resource does not exist or is hidden (404).
        AUTHENTICATION: Token missing or invalid (401).
        PERMISSION: Token lacks access to the resource (403).
        RATE_LIMIT: Primary or secondary rate limit hit (403, 429).
        CONFLICT: Request conflicts with resource state (409).
        API: Any other non-success response or transport failure.
    """

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    RATE_LIMIT = "rate_limit"
    CONFLICT = "conflict"
    API = "api"


class GitHubApiError(Exception):
    """
    Exception raised for any failed GitHub API request.

    Attributes:
        message: Error description.
        kind: Classified failure kind.
        status_code: HTTP status code (0 for transport failures).
        response_data: Parsed response body from GitHub.
        reset_at: When the rate limit resets (rate limit errors only).
    """

    def __init__(
        self,
        message: str,
        kind: GitHubErrorKind = GitHubErrorKind.API,
        status_code: int = 0,
        response_data: Any = None,
        reset_at: Optional[datetime] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error description.
            kind: Classified failure kind.
            status_code: HTTP status code.
            response_data: Parsed response body.
            reset_at: Rate limit reset time.
        """
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.response_data = response_data
        self.reset_at = reset_at

    def __repr__(self) -> str:
        return (
            f"GitHubApiError(kind={self.kind.value!r}, "
            f"status_code={self.status_code}, message={self.message!r})"
        )


def _error_message(body: Any) -> str:
    """Extract GitHub's error message from a parsed body."""
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    if isinstance(body, str) and body.strip():
        return body.strip()
    return ""


def classify_error(
    status_code: int, body: Any, headers: Mapping[str, str]
) -> GitHubErrorKind:
    """
    Classify a non-success response into a failure kind.

    Args:
        status_code: HTTP status code.
        body: Parsed response body.
        headers: Response headers (case-insensitive lookup expected).

    Returns:
        The matching GitHubErrorKind.
    """
    if status_code == 429:
        return GitHubErrorKind.RATE_LIMIT

    if status_code == 403:
        remaining = headers.get("x-ratelimit-remaining")
        if remaining == "0" or "rate limit" in _error_message(body).lower():
            return GitHubErrorKind.RATE_LIMIT
        return GitHubErrorKind.PERMISSION

    if status_code in (400, 422):
        return GitHubErrorKind.VALIDATION
    if status_code == 401:
        return GitHubErrorKind.AUTHENTICATION
    if status_code == 404:
        return GitHubErrorKind.NOT_FOUND
    if status_code == 409:
        return GitHubErrorKind.CONFLICT

    return GitHubErrorKind.API


def parse_rate_limit_reset(
    headers: Mapping[str, str], now: Optional[datetime] = None
) -> datetime:
    """
    Determine when a rate limit resets.

    Prefers ``X-RateLimit-Reset`` (epoch seconds), then ``Retry-After``
    (seconds from now), then a one minute default.

    Args:
        headers: Response headers.
        now: Reference time, defaults to the current UTC time.

    Returns:
        Timezone-aware UTC reset time.
    """
    now = now or datetime.now(timezone.utc)

    reset = headers.get("x-ratelimit-reset")
    if reset and reset.isdigit():
        return datetime.fromtimestamp(int(reset), tz=timezone.utc)

    retry_after = headers.get("retry-after")
    if retry_after and retry_after.isdigit():
        return now + timedelta(seconds=int(retry_after))

    return now + DEFAULT_RATE_LIMIT_WINDOW


def create_github_error(
    status_code: int, body: Any, headers: Mapping[str, str]
) -> GitHubApiError:
    """
    Build the typed error for a non-success response.

    Args:
        status_code: HTTP status code.
        body: Parsed response body.
        headers: Response headers.

    Returns:
        GitHubApiError tagged with its kind.
    """
    kind = classify_error(status_code, body, headers)
    message = _error_message(body) or f"GitHub API returned status {status_code}"

    reset_at = None
    if kind is GitHubErrorKind.RATE_LIMIT:
        reset_at = parse_rate_limit_reset(headers)

    return GitHubApiError(
        message=message,
        kind=kind,
        status_code=status_code,
        response_data=body,
        reset_at=reset_at,
    )


# =============================================================================
# GitHub Client
# =============================================================================


class GitHubClient:
    """
    Async client for GitHub REST API.

    Attributes:
        token: GitHub personal access token (empty for anonymous access).
        base_url: GitHub API base URL.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        token: str = "",
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: GitHub personal access token.
            base_url: GitHub API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        headers = {
            "Accept": "application/vnd.github.v3+json",
            "Content-Type": "application/json",
            "User-Agent": build_user_agent(),
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GitHubClient":
        """
        Create a client from server settings.

        Args:
            settings: Loaded server settings.
            transport: Optional httpx transport.

        Returns:
            Configured GitHubClient.
        """
        return cls(
            token=settings.github_personal_access_token,
            base_url=settings.github_api_base_url,
            timeout=settings.github_request_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # HTTP Request Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        """Parse JSON bodies, fall back to text for everything else."""
        if not response.content:
            return None
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response.json()
            except ValueError:
                # Proxies can label HTML error pages as JSON
                return response.text
        return response.text

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        Make one HTTP request to the GitHub API.

        Args:
            path: API path relative to the base URL (e.g., /repos/o/r/releases).
            method: HTTP method.
            body: JSON-serializable request body, omitted when None.
            headers: Extra headers merged over the defaults.

        Returns:
            Parsed JSON body, raw text, or None for an empty body.

        Raises:
            GitHubApiError: For non-success responses and transport failures.
        """
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(
                method=method,
                url=path,
                json=body,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise GitHubApiError(message=f"Request timed out: {str(e)}") from e
        except httpx.RequestError as e:
            raise GitHubApiError(message=f"Request failed: {str(e)}") from e

        response_body = self._parse_body(response)

        if not response.is_success:
            error = create_github_error(
                response.status_code, response_body, response.headers
            )
            logger.warning(
                f"GitHub API {method} {path} failed with {response.status_code} "
                f"({error.kind.value}): {error.message}"
            )
            raise error

        return response_body

    # -------------------------------------------------------------------------
    # Release Methods
    # -------------------------------------------------------------------------

    async def list_releases(self, owner: str, repo: str) -> list[GitHubRelease]:
        """
        List releases of a repository, newest first.

        Only the first page GitHub returns is fetched.

        Args:
            owner: Repository owner.
            repo: Repository name.

        Returns:
            List of GitHubRelease models.
        """
        data = await self.request(f"/repos/{owner}/{repo}/releases")
        return [GitHubRelease.model_validate(r) for r in data]

    async def get_latest_release(self, owner: str, repo: str) -> GitHubRelease:
        """
        Get the latest published, non-prerelease release.

        Args:
            owner: Repository owner.
            repo: Repository name.

        Returns:
            GitHubRelease model.
        """
        data = await self.request(f"/repos/{owner}/{repo}/releases/latest")
        return GitHubRelease.model_validate(data)

    async def get_tag_ref(self, owner: str, repo: str, tag: str) -> Ref:
        """
        Get the git reference for a tag.

        GitHub answers with a list of prefix matches when no ref matches the
        tag exactly; the exact ref is picked from that list if present.

        Args:
            owner: Repository owner.
            repo: Repository name.
            tag: Tag name (without the refs/tags/ prefix).

        Returns:
            Ref model whose object carries the SHA.

        Raises:
            GitHubApiError: If the tag does not exist.
        """
        data = await self.request(
            f"/repos/{owner}/{repo}/git/refs/tags/{quote(tag, safe='/')}"
        )
        if isinstance(data, list):
            wanted = f"refs/tags/{tag}"
            matches = [r for r in data if isinstance(r, dict) and r.get("ref") == wanted]
            if not matches:
                raise GitHubApiError(
                    message=f"Tag {tag} not found in {owner}/{repo}",
                    kind=GitHubErrorKind.NOT_FOUND,
                    status_code=404,
                    response_data=data,
                )
            data = matches[0]
        return Ref.model_validate(data)
