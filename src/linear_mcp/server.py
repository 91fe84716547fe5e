"""Linear MCP Server - Expose Linear issue tracking to AI assistants over stdio."""
import asyncio
import logging
import os
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from . import __version__
from . import formatters
from . import handlers
from . import tools
from .client import LinearClient
from .config import Settings, load_settings

logger = logging.getLogger("linear-mcp")

# Map tool names to handler functions
HANDLERS: dict[str, handlers.Handler] = {
    # Issue lifecycle handlers
    "linear_create_issue": handlers.handle_create_issue,
    "linear_get_issue": handlers.handle_get_issue,
    "linear_update_issue": handlers.handle_update_issue,
    "linear_search_issues": handlers.handle_search_issues,
    "linear_list_issues": handlers.handle_list_issues,
    "linear_create_comment": handlers.handle_create_comment,
    # Supporting query handlers
    "linear_list_teams": handlers.handle_list_teams,
    "linear_list_projects": handlers.handle_list_projects,
    "linear_list_issue_statuses": handlers.handle_list_issue_statuses,
    "linear_list_labels": handlers.handle_list_labels,
    # Workspace handlers
    "linear_get_user": handlers.handle_get_user,
    "linear_workspace_metadata": handlers.handle_workspace_metadata,
}


def configure_logging() -> None:
    # stdout carries the MCP stream, so logs go to stderr
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        force=True
    )


async def dispatch(name: str, arguments: Any, context: handlers.ToolContext) -> CallToolResult:
    """Route a tool call to its handler."""
    handler = HANDLERS.get(name)
    if not handler:
        logger.warning(f"Unknown tool requested: {name}")
        return formatters.tool_result(f"Error: Unknown tool: {name}", is_error=True)

    logger.info(f"Tool call: {name} with arguments: {arguments}")
    result = await handler(arguments or {}, context)
    logger.debug(f"Rate governor after {name}: {context.governor.stats()}")
    return result


def create_server(context: handlers.ToolContext) -> Server:
    """Create the MCP server bound to one ToolContext."""
    app = Server("linear-mcp-server", version=__version__)

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        """List available MCP tools for Linear."""
        return tools.get_tools()

    @app.call_tool()
    async def call_tool(name: str, arguments: dict) -> CallToolResult:
        """Handle MCP tool calls by delegating to handlers."""
        return await dispatch(name, arguments, context)

    return app


def build_context(settings: Settings) -> handlers.ToolContext:
    client = LinearClient.create(
        settings.linear_api_key,
        api_url=settings.linear_api_url,
        timeout=settings.linear_request_timeout,
    )
    return handlers.ToolContext.create(
        client,
        rate_limit=settings.linear_rate_limit_per_minute,
        cache_ttl_seconds=settings.linear_cache_ttl_seconds,
    )


async def main():
    """Run the MCP server."""
    configure_logging()
    settings = load_settings()
    logger.info(f"MCP Server starting with LINEAR_API_URL: {settings.linear_api_url}")

    context = build_context(settings)
    app = create_server(context)
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Linear MCP server running via stdio")
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        await context.client.aclose()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
