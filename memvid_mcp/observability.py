"""Logging setup for the memvid MCP server.

Provides:
- Correlation ID generation
- JSON structured logging
- Text logging to stderr (stdout carries the MCP protocol)
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import sys
import uuid

from memvid_mcp.config import ServerConfig

ROOT_LOGGER = "memvid-mcp"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return str(uuid.uuid4())[:8]


class JsonLogFormatter(logging.Formatter):
    """JSON structured log formatter with correlation ID support."""

    EXTRA_FIELDS = ("tool", "latency_ms", "status", "error", "command", "attempt")

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if hasattr(record, "correlation_id"):
            log_data["cid"] = record.correlation_id

        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_data, separators=(",", ":"), default=str)


def setup_logging(config: ServerConfig, logger_name: str = ROOT_LOGGER) -> logging.Logger:
    """Configure the server logger hierarchy.

    Args:
        config: Server configuration (log_level, log_format)
        logger_name: Name of logger to configure

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    logger.handlers.clear()
    logger.propagate = False

    level = getattr(logging, config.log_level.upper(), logging.WARNING)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if config.log_format == "json":
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger.addHandler(handler)
    return logger
