import json
import logging
import sys

from memvid_mcp.config import ServerConfig
from memvid_mcp.observability import JsonLogFormatter, generate_correlation_id, setup_logging


def test_correlation_ids_are_short_and_unique():
    ids = {generate_correlation_id() for _ in range(100)}

    assert len(ids) == 100
    assert all(len(cid) == 8 for cid in ids)


def test_json_formatter_includes_extras():
    record = logging.LogRecord("memvid-mcp", logging.INFO, __file__, 1, "call_tool done: %s", ("memvid_find",), None)
    record.correlation_id = "abc12345"
    record.tool = "memvid_find"
    record.latency_ms = 12.5
    record.status = "ok"

    data = json.loads(JsonLogFormatter().format(record))

    assert data["msg"] == "call_tool done: memvid_find"
    assert data["level"] == "info"
    assert data["cid"] == "abc12345"
    assert data["tool"] == "memvid_find"
    assert data["latency_ms"] == 12.5
    assert data["status"] == "ok"
    assert "command" not in data


def test_setup_logging_writes_to_stderr_only():
    logger = setup_logging(ServerConfig(log_level="debug", log_format="json"), "memvid-mcp-test")

    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert isinstance(handler.formatter, JsonLogFormatter)
    assert handler.stream is sys.stderr
