# =============================================================================
# GitHub Actions Versions MCP Server - Package
# =============================================================================
"""
GitHub Actions versions MCP server package.

Provides MCP tools for looking up GitHub Action releases through GitHub's
REST API:
- Listing every release of an action
- Fetching the latest release together with its commit SHA
"""

__version__ = "0.1.0"
