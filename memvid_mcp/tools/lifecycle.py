"""Memory file lifecycle: create, open, stats, verify, doctor."""

from __future__ import annotations

from pydantic import Field

from memvid_mcp.args import build_args
from memvid_mcp.paths import PathField
from memvid_mcp.tools.base import MV2_FILE, ToolInput, ToolSpec


class FileInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)


class VerifyInput(FileInput):
    deep: bool | None = Field(default=None, description="Perform deep verification (slower, more thorough)")


class DoctorInput(FileInput):
    rebuild_time_index: bool | None = Field(default=None, description="Rebuild the time index")
    rebuild_lex_index: bool | None = Field(default=None, description="Rebuild the lexical (full-text) index")
    rebuild_vec_index: bool | None = Field(default=None, description="Rebuild the vector index")
    dry_run: bool | None = Field(default=None, description="Preview changes without applying them")


def _doctor_args(p: DoctorInput) -> list[str]:
    return build_args(
        ["doctor", p.file],
        {
            "rebuild_time_index": p.rebuild_time_index,
            "rebuild_lex_index": p.rebuild_lex_index,
            "rebuild_vec_index": p.rebuild_vec_index,
            "dry_run": p.dry_run,
        },
    )


TOOLS = [
    ToolSpec(
        name="memvid_create",
        title="Create Memory File",
        description="Create a new .mv2 memory file",
        params=FileInput,
        build=lambda p: ["create", p.file],
    ),
    ToolSpec(
        name="memvid_open",
        title="Open Memory File",
        description="Open and display information about a memory file",
        params=FileInput,
        build=lambda p: ["open", p.file],
    ),
    ToolSpec(
        name="memvid_stats",
        title="Memory Statistics",
        description="Show statistics for a memory file",
        params=FileInput,
        build=lambda p: ["stats", p.file],
    ),
    ToolSpec(
        name="memvid_verify",
        title="Verify Memory File",
        description="Verify integrity of a memory file",
        params=VerifyInput,
        build=lambda p: build_args(["verify", p.file], {"deep": p.deep}),
    ),
    ToolSpec(
        name="memvid_doctor",
        title="Repair Memory File",
        description="Diagnose and repair a memory file",
        params=DoctorInput,
        build=_doctor_args,
    ),
]
