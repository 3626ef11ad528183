"""Sessions, bindings, sketches and background processing."""

from __future__ import annotations

from pydantic import Field

from memvid_mcp.args import build_args
from memvid_mcp.paths import PathField
from memvid_mcp.tools.base import DESTRUCTIVE, MV2_FILE, READ_ONLY, WRITE, ToolInput, ToolSpec


class NoInput(ToolInput):
    pass


class FileInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)


class SessionInput(FileInput):
    list: bool | None = Field(default=None, description="List all sessions")
    start: str | None = Field(default=None, description="Start a new session with this name")
    stop: bool | None = Field(default=None, description="Stop the current session")
    replay: str | None = Field(default=None, description="Replay a session by ID")


class BindingInput(FileInput):
    show: bool | None = Field(default=None, description="Show current binding")
    unbind: bool | None = Field(default=None, description="Unbind memory")


class SketchInput(FileInput):
    build: bool | None = Field(default=None, description="Build sketches for all frames")
    stats: bool | None = Field(default=None, description="Show sketch statistics")


TOOLS = [
    ToolSpec(
        name="memvid_session",
        title="Session Management",
        description="Session management: list, start, stop, or replay sessions",
        params=SessionInput,
        build=lambda p: build_args(
            ["session", p.file],
            {"list": p.list, "start": p.start, "stop": p.stop, "replay": p.replay},
        ),
        hints=WRITE,
    ),
    ToolSpec(
        name="memvid_binding",
        title="Memory Binding",
        description="Memory binding operations: show or unbind",
        params=BindingInput,
        build=lambda p: build_args(["binding", p.file], {"show": p.show, "unbind": p.unbind}),
        hints=DESTRUCTIVE,
    ),
    ToolSpec(
        name="memvid_status",
        title="System Status",
        description="Show system status (version, NER model status)",
        params=NoInput,
        build=lambda p: ["status"],
        hints=READ_ONLY,
    ),
    ToolSpec(
        name="memvid_sketch",
        title="Build Sketches",
        description="Sketch operations (SimHash): build or show stats",
        params=SketchInput,
        build=lambda p: build_args(["sketch", p.file], {"build": p.build, "stats": p.stats}),
        hints=WRITE,
    ),
    ToolSpec(
        name="memvid_nudge",
        title="Trigger Processing",
        description="Nudge operations: trigger background processing",
        params=FileInput,
        build=lambda p: ["nudge", p.file],
        hints=WRITE,
    ),
]
