# =============================================================================
# GitHub Actions Versions MCP Server - Settings
# =============================================================================
"""
Pydantic Settings configuration for the MCP server.

Loads configuration from environment variables (and a ``.env`` file when
present) once at startup. The resulting object is passed explicitly to the
GitHub client rather than read from deep call sites.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Server settings loaded from environment variables.

    Attributes:
        github_personal_access_token: GitHub token; empty means anonymous access.
        github_api_base_url: GitHub API base URL.
        github_request_timeout: Request timeout in seconds.
        transport: MCP transport to serve (stdio or http).
        host: HTTP transport host address.
        port: HTTP transport port number.
        log_level: Logging level.
    """

    github_personal_access_token: str = Field(
        default="",
        description="GitHub personal access token",
    )
    github_api_base_url: str = Field(
        default="https://api.github.com",
        description="GitHub API base URL",
    )
    github_request_timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
    )
    transport: Literal["stdio", "http"] = Field(
        default="stdio",
        description="MCP transport",
        alias="mcp_transport",
    )
    host: str = Field(
        default="0.0.0.0",
        description="HTTP transport host address",
        alias="mcp_host",
    )
    port: int = Field(
        default=8090,
        description="HTTP transport port number",
        alias="mcp_port",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def has_token(self) -> bool:
        """Whether requests will be authenticated."""
        return bool(self.github_personal_access_token)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance loaded from the environment.
    """
    return Settings()
