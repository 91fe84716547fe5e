"""Linear MCP Server - Model Context Protocol integration for Linear.

This package exposes the Linear issue tracker to AI assistants as MCP tools.

Modules:
- server: stdio MCP server implementation
- tools: MCP tool definitions
- handlers: Tool implementation handlers
- formatters: Response formatting utilities
- resolvers: Name-to-ID resolution with a TTL cache
- rate_limiter: Sliding-window rate governor for API calls
"""

__version__ = "1.0.0"
