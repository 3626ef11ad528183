"""
Tool result shaping for MCP responses.

Turns an ExecutionResult into the text the caller sees, with:
- response size limit (large outputs overwhelm the model's context)
- empty-output warning
- actionable hints on failure
- pre-flight existence checks for .mv2 files and inputs
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import os
import re
import sys

from memvid_mcp.config import IS_WINDOWS
from memvid_mcp.executor import ExecutionResult

CHARACTER_LIMIT = 50000

IS_MACOS = sys.platform == "darwin"
_WINDOWS_ABSOLUTE = re.compile(r"^[A-Za-z]:[/\\]")


@dataclass
class ToolOutput:
    """Text payload for one tool call and whether it is an error."""

    text: str
    is_error: bool = False


def example_mv2_path() -> str:
    if IS_WINDOWS:
        return "C:\\Tools\\memvid-data\\knowledge.mv2"
    if IS_MACOS:
        return "/Users/you/memvid-data/knowledge.mv2"
    return "/home/you/memvid-data/knowledge.mv2"


def example_input_path() -> str:
    if IS_WINDOWS:
        return "C:\\Tools\\data\\readme.md"
    if IS_MACOS:
        return "/Users/you/data/readme.md"
    return "/home/you/data/readme.md"


def is_windows_absolute_path(path: str) -> bool:
    return bool(_WINDOWS_ABSOLUTE.match(path))


def file_exists(path: str) -> bool:
    """os.path.exists, plus the /mnt/<drive> view of C:\\ paths under WSL."""
    if os.path.exists(path):
        return True
    if not IS_WINDOWS and is_windows_absolute_path(path):
        drive = path[0].lower()
        rest = path[2:].replace("\\", "/")
        return os.path.exists(f"/mnt/{drive}{rest}")
    return False


def validate_mv2_exists(file_path: str) -> ToolOutput | None:
    if file_exists(file_path):
        return None
    return ToolOutput(
        text=(
            f'Error: Memory file not found: "{file_path}". '
            "Make sure the .mv2 file exists at this path. "
            "To create a new memory file, use memvid_create first. "
            f"Example path: {example_mv2_path()}"
        ),
        is_error=True,
    )


def validate_input_exists(input_path: str) -> ToolOutput | None:
    if file_exists(input_path):
        return None
    return ToolOutput(
        text=(
            f'Error: Input path not found: "{input_path}". '
            "The file or directory does not exist. "
            "Verify the path is correct and accessible. "
            f"Example: {example_input_path()}"
        ),
        is_error=True,
    )


def actionable_hint(error_msg: str) -> str:
    lower = error_msg.lower()

    if "not found" in lower or "no such file" in lower:
        return "\n\nHint: Check that the file path exists. Use memvid_create to create a new .mv2 file."
    if "permission" in lower or "access denied" in lower:
        return "\n\nHint: Check file permissions. The file may be locked by another process."
    if "corrupt" in lower or "integrity" in lower:
        return "\n\nHint: Try memvid_doctor to diagnose and repair the file."
    if "timeout" in lower or "timed out" in lower:
        return "\n\nHint: The operation timed out. Try with a smaller dataset or fewer files."
    return ""


def _payload_text(data: object) -> str:
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_tool_result(result: ExecutionResult, character_limit: int = CHARACTER_LIMIT) -> ToolOutput:
    """Map an execution result to caller-visible text."""
    if not result.success:
        error_msg = result.stderr or result.error or "Unknown error"
        # Spawn errors already carry their own MEMVID_PATH remediation
        hint = "" if result.failure_kind == "spawn" else actionable_hint(error_msg)
        return ToolOutput(text=f"Error: {error_msg}{hint}", is_error=True)

    text = _payload_text(result.data)

    if not text or not text.strip() or text == "null":
        return ToolOutput(
            text=(
                "Warning: memvid returned no output. This usually means:\n"
                "1. The input file/path was not found (verify the path exists)\n"
                "2. The .mv2 file is empty or corrupted (try memvid_verify)\n"
                "3. The query returned no results\n\n"
                f"Tip: Use absolute paths for your OS (e.g., {example_mv2_path()})."
            ),
            is_error=True,
        )

    if len(text) > character_limit:
        text = (
            text[:character_limit]
            + f"\n\n[TRUNCATED: Response exceeded {character_limit} characters. "
            "Use more specific queries or filters to reduce result size.]"
        )

    return ToolOutput(text=text)
