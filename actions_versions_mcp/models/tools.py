# =============================================================================
# GitHub Actions Versions MCP Server - Tool Input Models
# =============================================================================
"""
Pydantic models describing tool arguments.

The same model produces the JSON schema advertised to MCP clients and
validates incoming arguments.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class GetActionReleaseInput(BaseModel):
    """
    Arguments accepted by both release tools.

    Attributes:
        owner: Repository owner, or the combined "owner/repo" form.
        repository: Repository name when owner is given on its own.
    """

    owner: str = Field(
        ..., description="Repository owner (username or organization)"
    )
    repository: Optional[str] = Field(
        default=None, description="The name of the repository"
    )

    @classmethod
    def input_schema(cls) -> dict[str, Any]:
        """JSON schema used as a tool's inputSchema."""
        schema = cls.model_json_schema()
        schema.pop("title", None)
        return schema
