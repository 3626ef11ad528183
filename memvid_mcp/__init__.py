"""memvid MCP server - exposes the memvid CLI as Model Context Protocol tools."""

__version__ = "1.0.0"
