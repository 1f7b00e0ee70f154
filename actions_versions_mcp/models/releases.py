# =============================================================================
# GitHub Actions Versions MCP Server - Release Models
# =============================================================================
"""
Pydantic models for GitHub Releases and Git References API.

These models cover the raw release payload returned by GitHub, the reduced
shape handed back to tool callers, and the tag reference used to resolve a
release's commit SHA.
"""

from typing import Optional

from pydantic import BaseModel, Field


class GitHubRelease(BaseModel):
    """
    Raw GitHub release model.

    Only the fields needed for the simplified shape are declared; the rest
    of GitHub's payload is ignored.

    Attributes:
        tag_name: Name of the tag the release points at.
        name: Display name of the release (may be empty or null).
        published_at: Publication timestamp as returned by GitHub.
        html_url: URL to the release page.
        target_commitish: Branch or commit the tag was created from.
        prerelease: Whether the release is marked as a prerelease.
        draft: Whether the release is an unpublished draft.
    """

    tag_name: str = Field(..., description="Tag name")
    name: Optional[str] = Field(default=None, description="Release name")
    published_at: Optional[str] = Field(default=None, description="Published at")
    html_url: Optional[str] = Field(default=None, description="Release URL")
    target_commitish: Optional[str] = Field(
        default=None, description="Target branch or commit"
    )
    prerelease: bool = Field(default=False, description="Is a prerelease")
    draft: bool = Field(default=False, description="Is a draft")

    class Config:
        """Pydantic configuration."""

        extra = "ignore"


class SimplifiedRelease(BaseModel):
    """
    Reduced release shape returned to tool callers.

    Attributes:
        tag_name: Name of the tag the release points at.
        name: Release name, or the tag name when the release has none.
        published_at: Publication timestamp as returned by GitHub.
        html_url: URL to the release page.
        target_commitish: Branch or commit the tag was created from.
        prerelease: Whether the release is marked as a prerelease.
        draft: Whether the release is an unpublished draft.
        sha: Commit SHA of the tag, or an empty string when not resolved.
    """

    tag_name: str
    name: str
    published_at: Optional[str] = None
    html_url: Optional[str] = None
    target_commitish: Optional[str] = None
    prerelease: bool = False
    draft: bool = False
    sha: str = ""


class RefObject(BaseModel):
    """
    Git reference object (what a ref points to).

    Attributes:
        sha: Object SHA.
        type: Object type (commit, tag, tree, blob).
        url: API URL for the object.
    """

    sha: str = Field(..., description="Object SHA")
    type: Optional[str] = Field(default=None, description="Object type")
    url: Optional[str] = Field(default=None, description="Object API URL")

    class Config:
        """Pydantic configuration."""

        extra = "ignore"


class Ref(BaseModel):
    """
    GitHub reference model.

    Attributes:
        ref: Full reference name (e.g., refs/tags/v4.2.2).
        node_id: GraphQL node ID.
        url: API URL for the reference.
        object: Object the reference points to.
    """

    ref: str = Field(..., description="Full reference name")
    node_id: Optional[str] = Field(default=None, description="GraphQL node ID")
    url: Optional[str] = Field(default=None, description="Reference API URL")
    object: RefObject = Field(..., description="Referenced object")

    class Config:
        """Pydantic configuration."""

        extra = "ignore"
