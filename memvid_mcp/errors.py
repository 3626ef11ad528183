"""
Error types for the memvid MCP server.

Custom exceptions with MCP-friendly error codes.
"""

from __future__ import annotations


class MemvidMcpError(Exception):
    """Base error for memvid MCP operations."""

    code: str = "MEMVID_MCP_ERROR"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class ToolError(MemvidMcpError):
    """Tool call failed; the message is shown to the caller as-is."""

    code = "TOOL_ERROR"


class RootsUnsupportedError(MemvidMcpError):
    """The client did not declare the roots capability."""

    code = "ROOTS_UNSUPPORTED"
