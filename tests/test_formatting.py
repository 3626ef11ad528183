import json

import pytest

from memvid_mcp.executor import AttemptState, ExecutionResult
from memvid_mcp.formatting import (
    actionable_hint,
    file_exists,
    format_tool_result,
    validate_input_exists,
    validate_mv2_exists,
)


def ok(data):
    return ExecutionResult(success=True, exit_code=0, data=data)


def test_json_payload_pretty_printed():
    output = format_tool_result(ok({"frames": 3, "title": "Café"}))

    assert output.is_error is False
    assert json.loads(output.text) == {"frames": 3, "title": "Café"}
    assert "Café" in output.text
    assert "\n" in output.text


def test_text_payload_returned_verbatim():
    output = format_tool_result(ok("memvid 2.0.1"))

    assert output.is_error is False
    assert output.text == "memvid 2.0.1"


@pytest.mark.parametrize("data", [None, "", "   ", "null"])
def test_empty_output_is_a_warning_error(data):
    output = format_tool_result(ok(data))

    assert output.is_error is True
    assert output.text.startswith("Warning: memvid returned no output")


def test_large_output_truncated():
    output = format_tool_result(ok("x" * 500), character_limit=100)

    assert output.is_error is False
    assert output.text.startswith("x" * 100 + "\n\n[TRUNCATED: Response exceeded 100 characters.")
    assert "x" * 101 not in output.text


def test_command_failure_prefers_stderr_and_adds_hint():
    result = ExecutionResult(success=False, exit_code=1, error="ignored", stderr="file not found: kb.mv2")

    output = format_tool_result(result)

    assert output.is_error is True
    assert output.text.startswith("Error: file not found: kb.mv2")
    assert "Hint: Check that the file path exists" in output.text


def test_spawn_failure_uses_error_message():
    result = ExecutionResult(
        success=False,
        exit_code=-1,
        state=AttemptState.SPAWN_FAILED,
        error=(
            "Failed to spawn memvid: [Errno 2] No such file or directory. "
            'memvid binary not found at "memvid". Set MEMVID_PATH environment variable to the correct path.'
        ),
        spawn_error_code="ENOENT",
    )

    output = format_tool_result(result)

    assert output.is_error is True
    assert output.text.startswith("Error: Failed to spawn memvid")
    assert "MEMVID_PATH" in output.text
    assert "Hint:" not in output.text
    assert "memvid_create" not in output.text


def test_timeout_gets_timeout_hint():
    result = ExecutionResult(
        success=False,
        exit_code=-1,
        state=AttemptState.TIMED_OUT,
        error="Command timed out after 300s: memvid put",
    )

    output = format_tool_result(result)

    assert "Hint: The operation timed out" in output.text


@pytest.mark.parametrize(
    "message, expected",
    [
        ("No such file or directory", "file path exists"),
        ("Access denied", "permissions"),
        ("index is corrupt", "memvid_doctor"),
        ("integrity check failed", "memvid_doctor"),
        ("operation timeout", "timed out"),
        ("something else", ""),
    ],
)
def test_actionable_hint(message, expected):
    assert expected in actionable_hint(message)
    if not expected:
        assert actionable_hint(message) == ""


def test_validate_mv2_exists(mv2_file, tmp_path):
    assert validate_mv2_exists(str(mv2_file)) is None

    missing = validate_mv2_exists(str(tmp_path / "missing.mv2"))
    assert missing is not None
    assert missing.is_error is True
    assert "Memory file not found" in missing.text
    assert "memvid_create" in missing.text


def test_validate_input_exists(tmp_path):
    assert validate_input_exists(str(tmp_path)) is None

    missing = validate_input_exists(str(tmp_path / "nope.md"))
    assert missing is not None
    assert "Input path not found" in missing.text


def test_file_exists_maps_drive_paths_to_wsl_mounts(monkeypatch):
    monkeypatch.setattr("memvid_mcp.formatting.IS_WINDOWS", False)
    seen = []

    def fake_exists(path):
        seen.append(path)
        return path == "/mnt/c/Tools/kb.mv2"

    monkeypatch.setattr("memvid_mcp.formatting.os.path.exists", fake_exists)

    assert file_exists("C:\\Tools\\kb.mv2") is True
    assert seen == ["C:\\Tools\\kb.mv2", "/mnt/c/Tools/kb.mv2"]
