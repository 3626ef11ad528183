"""Content ingestion and frame editing."""

from __future__ import annotations

from pydantic import AnyUrl, Field, TypeAdapter, field_validator

from memvid_mcp.args import build_args
from memvid_mcp.formatting import example_input_path
from memvid_mcp.paths import PathField
from memvid_mcp.tools.base import (
    DESTRUCTIVE,
    MV2_FILE,
    NETWORK,
    READ_ONLY,
    WRITE,
    FrameId,
    PositiveInt,
    Text,
    ToolInput,
    ToolSpec,
)

INPUT_PATH = (
    "Path to the file or directory to ingest. "
    f"Use an absolute path appropriate for your OS (e.g., {example_input_path()})."
)

_url_adapter = TypeAdapter(AnyUrl)


class PutInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    input: PathField = Field(description=INPUT_PATH)
    recursive: bool | None = Field(default=None, description="Include subdirectories recursively")
    parallel: bool | None = Field(default=None, description="Enable parallel processing")
    embed: bool | None = Field(
        default=None, description="Generate embeddings for vector search (requires embedder.toml config)"
    )
    log: PathField | None = Field(default=None, description="Log file path for detailed operation logging")


class PutManyInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    input: PathField = Field(description="Input directory path")
    recursive: bool | None = Field(default=None, description="Include subdirectories recursively")
    parallel: bool | None = Field(default=None, description="Enable parallel processing")
    batch_size: PositiveInt | None = Field(default=None, description="Batch size for commits")


class ViewInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    frame_id: FrameId
    raw: bool | None = Field(default=None, description="Show raw content without formatting")


class ContentInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    frame_id: FrameId
    content: Text = Field(description="New content for the frame")


class DeleteInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    frame_id: FrameId
    force: bool | None = Field(default=None, description="Force deletion without confirmation")


class ApiFetchInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    url: str = Field(description="URL to fetch content from")
    title: str | None = Field(default=None, description="Custom title for the fetched content")

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        # Validate only; the binary gets the URL exactly as given
        _url_adapter.validate_python(value)
        return value


TOOLS = [
    ToolSpec(
        name="memvid_put",
        title="Add Content",
        description=(
            "Add content to a memory file from a file or directory.\n\n"
            "Supports text, markdown, code, PDF and images (OCR). "
            "Use embed=true for vector embeddings (semantic search).\n\n"
            "Returns JSON with files_added, frames_created and, with embed=true, embeddings_generated.\n\n"
            "Use memvid_create first if the .mv2 file does not exist yet. "
            "An empty response usually means the input path does not exist where memvid runs."
        ),
        params=PutInput,
        build=lambda p: build_args(
            ["put", "--input", p.input, p.file],
            {"recursive": p.recursive, "parallel": p.parallel, "embed": p.embed, "log": p.log},
        ),
        hints=WRITE,
        timeout="heavy",
        require_file=True,
        require_input=True,
    ),
    ToolSpec(
        name="memvid_put_many",
        title="Batch Add Content",
        description=(
            "Batch add multiple files from a directory with progress tracking.\n\n"
            "Optimized for large directories with commit batching. "
            "Returns JSON with batch processing statistics."
        ),
        params=PutManyInput,
        build=lambda p: build_args(
            ["put-many", "--input", p.input, p.file],
            {"recursive": p.recursive, "parallel": p.parallel, "batch_size": p.batch_size},
        ),
        hints=WRITE,
        timeout="heavy",
        require_file=True,
        require_input=True,
    ),
    ToolSpec(
        name="memvid_view",
        title="View Frame",
        description=(
            "View content of a specific frame by ID.\n\n"
            "Returns JSON with frame_id, content, uri, created_at and metadata."
        ),
        params=ViewInput,
        build=lambda p: build_args(["view", p.file, str(p.frame_id)], {"raw": p.raw}),
        hints=READ_ONLY,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_update",
        title="Update Frame",
        description=(
            "Update content of a specific frame.\n\n"
            "Replaces the entire content of the frame. For partial corrections, use memvid_correct instead."
        ),
        params=ContentInput,
        build=lambda p: ["update", p.file, str(p.frame_id), "--content", p.content],
        hints=DESTRUCTIVE,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_delete",
        title="Delete Frame",
        description="Delete a specific frame from memory.\n\nThis operation is destructive and cannot be undone.",
        params=DeleteInput,
        build=lambda p: build_args(["delete", p.file, str(p.frame_id)], {"force": p.force}),
        hints={**DESTRUCTIVE, "idempotentHint": True},
        require_file=True,
    ),
    ToolSpec(
        name="memvid_correct",
        title="Correct Frame",
        description=(
            "Correct/amend content of a frame.\n\n"
            "Creates a correction record preserving the original content for audit purposes. "
            "Use this instead of update when you want to maintain history."
        ),
        params=ContentInput,
        build=lambda p: ["correct", p.file, str(p.frame_id), "--content", p.content],
        hints=WRITE,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_api_fetch",
        title="Fetch from URL",
        description=(
            "Fetch content from a URL and add to memory.\n\n"
            "Supports web pages, APIs, and document URLs. Returns JSON with fetch status and created frame ID."
        ),
        params=ApiFetchInput,
        build=lambda p: build_args(["api-fetch", p.file, p.url], {"title": p.title}),
        hints=NETWORK,
        require_file=True,
    ),
]
