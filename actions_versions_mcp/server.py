# =============================================================================
# GitHub Actions Versions MCP Server
# =============================================================================
"""
MCP server providing GitHub Action release tools.

This server exposes two MCP tools:
- get_action_versions: list all releases of a GitHub Action
- get_latest_action_version: get the latest release with its commit SHA

It runs over stdio by default. The same tools can also be served over HTTP
through a small FastAPI application.
"""

import argparse
import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Awaitable, Callable, Optional

import mcp.types as types
from fastapi import Body, FastAPI, Request
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from pydantic import BaseModel, ValidationError

from . import __version__
from .client import GitHubApiError, GitHubClient, GitHubErrorKind
from .config import Settings, get_settings
from .models import GetActionReleaseInput
from .operations import get_latest_release, list_releases

# -----------------------------------------------------------------------------
# Logging Configuration
# -----------------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-github-actions-versions"


# -----------------------------------------------------------------------------
# Error Handling
# -----------------------------------------------------------------------------
class ToolError(Exception):
    """Raised when a tool call fails with a message meant for the caller."""


def format_github_error(error: GitHubApiError) -> str:
    """
    Convert a GitHub API error to a human-readable message.

    Args:
        error: The error raised by the GitHub client.

    Returns:
        Message prefixed with the kind of failure.
    """
    if error.kind is GitHubErrorKind.VALIDATION:
        message = f"Validation Error: {error.message}"
        if error.response_data:
            message += f"\nDetails: {json.dumps(error.response_data)}"
        return message
    if error.kind is GitHubErrorKind.NOT_FOUND:
        return f"Not Found: {error.message}"
    if error.kind is GitHubErrorKind.AUTHENTICATION:
        return f"Authentication Failed: {error.message}"
    if error.kind is GitHubErrorKind.PERMISSION:
        return f"Permission Denied: {error.message}"
    if error.kind is GitHubErrorKind.RATE_LIMIT:
        message = f"Rate Limit Exceeded: {error.message}"
        if error.reset_at is not None:
            message += f"\nResets at: {error.reset_at.isoformat()}"
        return message
    if error.kind is GitHubErrorKind.CONFLICT:
        return f"Conflict: {error.message}"
    return f"GitHub API Error: {error.message}"


def format_validation_error(error: ValidationError) -> str:
    """
    List every invalid argument of a failed validation.

    Args:
        error: Pydantic validation error.

    Returns:
        Message with one entry per violated field.
    """
    issues = [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "arguments",
            "message": err["msg"],
        }
        for err in error.errors()
    ]
    return f"Invalid input: {json.dumps(issues)}"


# -----------------------------------------------------------------------------
# Tool Dispatcher
# -----------------------------------------------------------------------------
ToolHandler = Callable[[GetActionReleaseInput], Awaitable[Any]]


class ToolDispatcher:
    """
    Routes tool calls to release operations.

    Holds no per-request state; the GitHub client is shared and read-only.

    Attributes:
        client: GitHub client used by the operations.
    """

    def __init__(self, client: GitHubClient) -> None:
        self.client = client
        self._tools: dict[str, tuple[str, ToolHandler]] = {
            "get_action_versions": (
                "List all the releases, versions of a GitHub Action",
                self._get_action_versions,
            ),
            "get_latest_action_version": (
                "Get the latest release, version of a GitHub Action. Use this "
                "tool to get the latest version of a GitHub Action, and keep "
                "your workflow files up to date. (using tag_name or sha)",
                self._get_latest_action_version,
            ),
        }

    async def _get_action_versions(self, args: GetActionReleaseInput) -> Any:
        releases = await list_releases(self.client, args.owner, args.repository)
        return [r.model_dump() for r in releases]

    async def _get_latest_action_version(self, args: GetActionReleaseInput) -> Any:
        release = await get_latest_release(self.client, args.owner, args.repository)
        return release.model_dump()

    def tool_descriptions(self) -> list[tuple[str, str]]:
        """Names and descriptions of the available tools."""
        return [(name, description) for name, (description, _) in self._tools.items()]

    def list_tools(self) -> list[types.Tool]:
        """
        Describe the available tools.

        Returns:
            Tool metadata with input schemas from GetActionReleaseInput.
        """
        schema = GetActionReleaseInput.input_schema()
        return [
            types.Tool(name=name, description=description, inputSchema=schema)
            for name, description in self.tool_descriptions()
        ]

    async def call_tool(
        self, name: str, arguments: Optional[dict[str, Any]]
    ) -> list[types.TextContent]:
        """
        Validate arguments and run a tool.

        Args:
            name: Tool name.
            arguments: Raw tool arguments.

        Returns:
            A single text block holding the JSON result.

        Raises:
            ValueError: If arguments are missing or the tool is unknown.
            ToolError: If validation or a GitHub request fails.
        """
        if not arguments:
            raise ValueError("Arguments are required")

        tool = self._tools.get(name)
        if tool is None:
            raise ValueError(f"Unknown tool: {name}")
        _, handler = tool

        try:
            args = GetActionReleaseInput.model_validate(arguments)
        except ValidationError as e:
            raise ToolError(format_validation_error(e)) from e

        try:
            result = await handler(args)
        except GitHubApiError as e:
            raise ToolError(format_github_error(e)) from e

        return [types.TextContent(type="text", text=json.dumps(result, indent=2))]


# -----------------------------------------------------------------------------
# MCP Server
# -----------------------------------------------------------------------------
def create_mcp_server(dispatcher: ToolDispatcher) -> Server:
    """
    Build the MCP server around a dispatcher.

    Args:
        dispatcher: Tool dispatcher handling list and call requests.

    Returns:
        Low-level MCP server with tool handlers registered.
    """
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    # Arguments are validated by the dispatcher so every violation is reported
    @server.call_tool(validate_input=False)
    async def handle_call_tool(
        name: str, arguments: Optional[dict[str, Any]]
    ) -> list[types.TextContent]:
        return await dispatcher.call_tool(name, arguments)

    return server


async def run_stdio(settings: Settings) -> None:
    """
    Serve the MCP tools over stdio until the client disconnects.

    Args:
        settings: Server settings.
    """
    async with GitHubClient.from_settings(settings) as client:
        server = create_mcp_server(ToolDispatcher(client))
        async with stdio_server() as (read_stream, write_stream):
            logger.info("GitHub Actions Release MCP Server running on stdio")
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )


# =============================================================================
# FastAPI Application (for HTTP access)
# =============================================================================
class ToolInfo(BaseModel):
    """Tool metadata returned by the HTTP surface."""

    name: str
    description: Optional[str] = None
    inputSchema: dict[str, Any]


def create_http_app(
    settings: Settings, dispatcher: Optional[ToolDispatcher] = None
) -> FastAPI:
    """
    Build the FastAPI application exposing the tools over HTTP.

    Args:
        settings: Server settings.
        dispatcher: Existing dispatcher; one is created from settings if omitted.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("GitHub Actions Versions FastAPI application starting")
        if dispatcher is not None:
            app.state.dispatcher = dispatcher
            yield
        else:
            async with GitHubClient.from_settings(settings) as client:
                app.state.dispatcher = ToolDispatcher(client)
                yield
            logger.info("GitHub client closed")
        logger.info("GitHub Actions Versions FastAPI application shutdown complete")

    app = FastAPI(
        title="GitHub Actions Versions MCP Server",
        description="MCP tools for listing GitHub Action releases",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": SERVER_NAME,
            "version": __version__,
            "api_authenticated": settings.has_token,
        }

    @app.get("/tools")
    async def http_list_tools(request: Request) -> list[ToolInfo]:
        """HTTP endpoint for listing the available tools."""
        schema = GetActionReleaseInput.input_schema()
        return [
            ToolInfo(name=name, description=description, inputSchema=schema)
            for name, description in request.app.state.dispatcher.tool_descriptions()
        ]

    @app.post("/tools/{name}")
    async def http_call_tool(
        name: str,
        request: Request,
        arguments: Optional[dict[str, Any]] = Body(default=None),
    ) -> dict[str, Any]:
        """HTTP endpoint for calling a tool with JSON arguments."""
        try:
            content = await request.app.state.dispatcher.call_tool(name, arguments)
        except (ToolError, ValueError) as e:
            return {"success": False, "error": str(e)}
        return {"success": True, "result": json.loads(content[0].text)}

    return app


# -----------------------------------------------------------------------------
# Main Entry Point
# -----------------------------------------------------------------------------
def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line overrides for the settings."""
    parser = argparse.ArgumentParser(description="Run the GitHub Actions Versions MCP server")
    parser.add_argument("--transport", choices=["stdio", "http"], help="MCP transport")
    parser.add_argument("--host", help="Host to bind to (http transport)")
    parser.add_argument("--port", type=int, help="Port to bind to (http transport)")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    """Run the server."""
    args = parse_args(argv)
    settings = get_settings()

    overrides = {
        key: value
        for key, value in (
            ("transport", args.transport),
            ("host", args.host),
            ("port", args.port),
        )
        if value is not None
    }
    if overrides:
        settings = settings.model_copy(update=overrides)

    # stdout carries the stdio protocol, logs go to stderr
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, stream=sys.stderr)

    if not settings.has_token:
        logger.warning(
            "GITHUB_PERSONAL_ACCESS_TOKEN not set - using unauthenticated requests"
        )

    try:
        if settings.transport == "http":
            import uvicorn

            logger.info(f"Starting HTTP server on {settings.host}:{settings.port}")
            uvicorn.run(
                create_http_app(settings),
                host=settings.host,
                port=settings.port,
                log_level=settings.log_level.lower(),
            )
        else:
            asyncio.run(run_stdio(settings))
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception:
        logger.exception("Fatal error in main()")
        sys.exit(1)


if __name__ == "__main__":
    main()
