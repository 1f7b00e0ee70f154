# =============================================================================
# GitHub Actions Versions MCP Server - Models Package
# =============================================================================
"""
Pydantic models for GitHub API data structures and tool arguments.
"""

from .releases import GitHubRelease, Ref, RefObject, SimplifiedRelease
from .tools import GetActionReleaseInput

__all__ = [
    # Releases
    "GitHubRelease",
    "SimplifiedRelease",
    "Ref",
    "RefObject",
    # Tools
    "GetActionReleaseInput",
]
