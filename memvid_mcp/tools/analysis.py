"""Audit, export and introspection of memory files."""

from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field, NonNegativeInt

from memvid_mcp.args import build_args
from memvid_mcp.paths import PathField
from memvid_mcp.tools.base import MV2_FILE, READ_ONLY, WRITE, PositiveInt, Text, ToolInput, ToolSpec, path_description


class AuditInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    query: Text = Field(description="Query for the audit")
    top_k: PositiveInt | None = Field(default=None, description="Number of sources to include")
    include_snippets: bool | None = Field(default=None, description="Include text snippets from sources")


class DebugSegmentInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    segment_type: Literal["lex", "vec", "time"] = Field(
        description="Segment type: lex (lexical), vec (vector), time (temporal)"
    )


class ExportInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    output: PathField = Field(description=path_description("Output file path"))
    format: Literal["json", "csv", "jsonl"] = Field(default="json", description="Export format")
    frame_ids: list[NonNegativeInt] | None = Field(default=None, description="Export only specific frame IDs")


class TablesInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)


class SchemaInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    infer: bool | None = Field(default=None, description="Infer schemas from data")
    summary: bool | None = Field(default=None, description="Show schema summary")


class ModelsInput(ToolInput):
    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    model_type: Literal["text", "clip", "whisper"] | None = Field(
        default=None, description="Model type filter: text, clip, whisper"
    )


TOOLS = [
    ToolSpec(
        name="memvid_audit",
        title="Audit Report",
        description=(
            "Generate an audit report with sources and citations.\n\n"
            "Creates a detailed report showing which sources support a query. "
            "Useful for fact-checking and citation generation."
        ),
        params=AuditInput,
        build=lambda p: build_args(
            ["audit", p.file, p.query],
            {"top_k": p.top_k, "include_snippets": p.include_snippets},
        ),
        hints=READ_ONLY,
        timeout="rag",
    ),
    ToolSpec(
        name="memvid_debug_segment",
        title="Debug Segment",
        description=(
            "Debug segment information (internal structure).\n\n"
            "Segment types: lex (full-text index), vec (vector index), time (temporal index)."
        ),
        params=DebugSegmentInput,
        build=lambda p: ["debug-segment", p.file, p.segment_type],
        hints=READ_ONLY,
    ),
    ToolSpec(
        name="memvid_export",
        title="Export Data",
        description="Export memory data to JSON, CSV, or JSONL format.",
        params=ExportInput,
        build=lambda p: build_args(
            ["export", "--output", p.output, p.file],
            {"format": p.format, "frame_ids": p.frame_ids},
        ),
        hints=WRITE,
    ),
    ToolSpec(
        name="memvid_tables",
        title="List Tables",
        description="List internal SQLite tables and structures, with column definitions.",
        params=TablesInput,
        build=lambda p: ["tables", p.file],
        hints=READ_ONLY,
    ),
    ToolSpec(
        name="memvid_schema",
        title="Schema Info",
        description="Schema operations: infer schemas from stored data or show a schema summary.",
        params=SchemaInput,
        build=lambda p: build_args(["schema", p.file], {"infer": p.infer, "summary": p.summary}),
        hints=READ_ONLY,
    ),
    ToolSpec(
        name="memvid_models",
        title="List Models",
        description=(
            "List available embedding models configured in embedder.toml.\n\n"
            "Model types: text (text embeddings), clip (images), whisper (audio transcription)."
        ),
        params=ModelsInput,
        build=lambda p: build_args(["models"], {"model_type": p.model_type}),
        hints=READ_ONLY,
    ),
]
