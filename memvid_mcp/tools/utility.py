"""Queue processing, single-frame verification, config and version."""

from __future__ import annotations

from pydantic import Field

from memvid_mcp.paths import PathField
from memvid_mcp.tools.base import MV2_FILE, READ_ONLY, WRITE, FrameId, ToolInput, ToolSpec
from memvid_mcp.tools.session import FileInput, NoInput


class FrameInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    frame_id: FrameId


TOOLS = [
    ToolSpec(
        name="memvid_process_queue",
        title="Process Queue",
        description="Process pending operations queue",
        params=FileInput,
        build=lambda p: ["process-queue", p.file],
        hints=WRITE,
    ),
    ToolSpec(
        name="memvid_verify_single_file",
        title="Verify Frame",
        description="Verify integrity of a single frame",
        params=FrameInput,
        build=lambda p: ["verify-single-file", p.file, str(p.frame_id)],
        hints=READ_ONLY,
    ),
    ToolSpec(
        name="memvid_config",
        title="Show Config",
        description="Show current configuration (embedder settings, paths)",
        params=NoInput,
        build=lambda p: ["config"],
        hints=READ_ONLY,
    ),
    ToolSpec(
        name="memvid_version",
        title="Version Info",
        description="Print memvid version information",
        params=NoInput,
        build=lambda p: ["version"],
        hints=READ_ONLY,
        skip_json=True,
    ),
]
