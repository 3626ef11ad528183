#!/usr/bin/env python3
"""
memvid MCP Server - Model Context Protocol interface for the memvid CLI.

Supports stdio transport for desktop MCP clients.
Run with: python -m memvid_mcp.server

Per tool call:
- input validation (pydantic models; path fields checked against the
  denylist and the client's MCP roots)
- file existence pre-checks
- one memvid invocation with the tool's timeout class
- result formatting (truncation, empty-output warning, hints)
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
import logging
import time
from typing import Any

from mcp import types
from mcp.server import Server
from mcp.server.session import ServerSession
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from pydantic import ValidationError

from memvid_mcp import __version__
from memvid_mcp.config import MemvidMcpConfig, load_config
from memvid_mcp.errors import MemvidMcpError, RootsUnsupportedError, ToolError
from memvid_mcp.executor import MemvidExecutor
from memvid_mcp.formatting import ToolOutput, format_tool_result, validate_input_exists, validate_mv2_exists
from memvid_mcp.observability import generate_correlation_id, setup_logging
from memvid_mcp.prompts import SERVER_INSTRUCTIONS
from memvid_mcp.roots import RootRegistry, RootsQuery
from memvid_mcp.tools import ALL_TOOLS, ToolSpec
from memvid_mcp.tools.base import ToolInput

logger = logging.getLogger("memvid-mcp")


class _SessionTrackingServer(Server):
    """Low-level Server that remembers the session it is serving.

    Notification handlers only receive the notification, but answering
    ``notifications/initialized`` and ``roots/list_changed`` means sending
    a roots/list request back over the same session.
    """

    session: ServerSession | None = None

    async def _handle_message(self, message: Any, session: ServerSession, *args: Any, **kwargs: Any) -> None:
        self.session = session
        await super()._handle_message(message, session, *args, **kwargs)


def format_validation_error(tool_name: str, error: ValidationError) -> str:
    lines = [f"Invalid arguments for {tool_name}:"]
    for err in error.errors(include_url=False):
        loc = ".".join(str(part) for part in err["loc"]) or "arguments"
        lines.append(f"- {loc}: {err['msg']}")
    return "\n".join(lines)


class MemvidMcpServer:
    """memvid MCP Server implementation."""

    def __init__(
        self,
        config: MemvidMcpConfig,
        executor: MemvidExecutor | None = None,
        registry: RootRegistry | None = None,
    ):
        self.config = config
        self.server = _SessionTrackingServer(
            config.server.name, version=__version__, instructions=SERVER_INSTRUCTIONS
        )
        self.executor = executor or MemvidExecutor.from_config(config.binary, config.timeouts.default)
        self.registry = registry or RootRegistry()
        self.tools: dict[str, ToolSpec] = {spec.name: spec for spec in ALL_TOOLS}

        self._register_handlers()
        logger.info(f"memvid MCP Server initialized ({len(self.tools)} tools, binary={self.executor.binary})")

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            logger.debug("list_tools called")
            return [spec.to_tool() for spec in self.tools.values()]

        # Input models do the validation so path errors keep their hints
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool invocation with correlation-id logging."""
            cid = generate_correlation_id()
            start_time = time.time()
            status = "ok"
            error_msg = None

            logger.info(f"call_tool: {name}", extra={"correlation_id": cid, "tool": name})

            try:
                return await self.dispatch(name, arguments, self.server.request_context.session)
            except MemvidMcpError as e:
                status = "error"
                error_msg = str(e)
                raise
            except Exception as e:
                status = "error"
                error_msg = str(e)
                logger.exception(f"Tool {name} failed: {e}", extra={"correlation_id": cid, "tool": name})
                raise
            finally:
                latency_ms = (time.time() - start_time) * 1000
                logger.info(
                    f"call_tool done: {name}",
                    extra={
                        "correlation_id": cid,
                        "tool": name,
                        "latency_ms": latency_ms,
                        "status": status,
                        "error": error_msg,
                    },
                )

        async def on_initialized(notification: types.InitializedNotification) -> None:
            logger.info("Server initialized, requesting roots from client")
            if self.server.session is not None:
                await self.ensure_roots(self.server.session)

        async def on_roots_changed(notification: types.RootsListChangedNotification) -> None:
            logger.info("Received roots/list_changed notification")
            if self.server.session is not None:
                await self.registry.on_roots_changed(self._roots_query(self.server.session))

        self.server.notification_handlers[types.InitializedNotification] = on_initialized
        self.server.notification_handlers[types.RootsListChangedNotification] = on_roots_changed

    def _roots_query(self, session: ServerSession) -> RootsQuery:
        """Build the roots/list query for ``session``."""

        async def query() -> Iterable[types.Root]:
            capability = types.ClientCapabilities(roots=types.RootsCapability())
            if not session.check_client_capability(capability):
                raise RootsUnsupportedError("Client did not declare the roots capability")
            # A client that never answers must not stall tool calls forever
            result = await asyncio.wait_for(session.list_roots(), self.config.server.roots_timeout)
            return result.roots

        return query

    async def ensure_roots(self, session: ServerSession) -> None:
        """Initialize roots unless already done for this session."""
        if not self.registry.state.initialized:
            await self.registry.initialize(self._roots_query(session))

    def _precheck(self, spec: ToolSpec, params: ToolInput) -> ToolOutput | None:
        if spec.require_file:
            missing = validate_mv2_exists(params.file)  # type: ignore[attr-defined]
            if missing is not None:
                return missing
        if spec.require_input:
            return validate_input_exists(params.input)  # type: ignore[attr-defined]
        return None

    async def dispatch(
        self,
        name: str,
        arguments: dict[str, Any] | None,
        session: ServerSession | None = None,
    ) -> list[TextContent]:
        """
        Run one tool call end to end.

        Raises:
            ToolError: unknown tool, invalid arguments, failed pre-check or
                failed memvid invocation. The MCP layer turns it into a
                result with isError set.
        """
        spec = self.tools.get(name)
        if spec is None:
            raise ToolError(f"Unknown tool: {name}")

        if session is not None:
            await self.ensure_roots(session)

        try:
            params = spec.params.model_validate(arguments or {}, context={"roots": self.registry})
        except ValidationError as e:
            raise ToolError(format_validation_error(name, e)) from e

        output = self._precheck(spec, params)
        if output is None:
            result = await self.executor.execute(
                spec.build(params),
                timeout=self.config.timeouts.for_class(spec.timeout),
                skip_json=spec.skip_json,
            )
            output = format_tool_result(result, self.config.limits.character_limit)

        if output.is_error:
            raise ToolError(output.text)
        return [TextContent(type="text", text=output.text)]

    async def run(self) -> None:
        """Run the server with stdio transport."""
        logger.info("Starting memvid MCP server (stdio transport)")
        self.executor.verify_path()
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def serve(config: MemvidMcpConfig) -> None:
    """Set up logging and run the server until stdin closes."""
    setup_logging(config.server)
    logger.info(f"Config loaded: binary={config.binary.path}, verbose={config.binary.verbose}")
    logger.info(
        f"Timeouts: default={config.timeouts.default:g}s, heavy={config.timeouts.heavy:g}s, "
        f"rag={config.timeouts.rag:g}s"
    )
    server = MemvidMcpServer(config)
    asyncio.run(server.run())


def main() -> None:
    """Entry point for the memvid MCP server."""
    import argparse

    parser = argparse.ArgumentParser(description="memvid MCP Server")
    parser.add_argument(
        "--config",
        "-c",
        help="Path to memvid-mcp.toml config file",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        "-l",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Override log level",
    )
    args = parser.parse_args()

    config = load_config(args.config)
    if args.log_level:
        config.server.log_level = args.log_level

    serve(config)


if __name__ == "__main__":
    main()
