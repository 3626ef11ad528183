"""Search, RAG and temporal queries."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from memvid_mcp.args import build_args
from memvid_mcp.paths import PathField
from memvid_mcp.tools.base import MV2_FILE, READ_ONLY, Limit, PositiveInt, Text, ToolInput, ToolSpec

SearchMode = Literal["hybrid", "lex", "vec"]
AskMode = Literal["hybrid", "lex", "sem"]


class FindInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    query: Text = Field(description="Search query text")
    mode: SearchMode = Field(default="hybrid", description="Search mode: hybrid (default), lex, or vec")
    limit: Limit = 10
    uri: str | None = Field(default=None, description="Filter results by exact URI match")
    scope: str | None = Field(default=None, description="Filter results by URI prefix (scope)")


class QueryInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    query: Text = Field(description="Search query text")
    limit: Limit = 10


class AskInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    question: Text = Field(description="Question to ask")
    top_k: PositiveInt | None = Field(default=None, description="Number of context documents to retrieve")
    context_only: bool | None = Field(
        default=None, description="Return only the retrieved context without synthesis"
    )
    mode: AskMode = Field(default="hybrid", description="Retrieval mode: hybrid (default), lex, or sem")


class TimelineInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    limit: PositiveInt | None = Field(default=None, description="Maximum entries to show")
    reverse: bool | None = Field(default=None, description="Show in reverse order (newest first)")
    # int first so whole-millisecond timestamps are not rendered as "123.0"
    since: int | float | None = Field(default=None, description="Filter from timestamp (Unix milliseconds)")
    until: int | float | None = Field(default=None, description="Filter until timestamp (Unix milliseconds)")


TOOLS = [
    ToolSpec(
        name="memvid_find",
        title="Search Memory",
        description=(
            "Search for content in a memory file.\n\n"
            "Search modes:\n"
            "- hybrid (default): Combines lexical and vector search with RRF ranking\n"
            "- lex: Full-text lexical search only\n"
            "- vec: Vector similarity search only (requires embeddings)\n\n"
            "Returns JSON with results (frame_id, score, content, uri), total and engine."
        ),
        params=FindInput,
        build=lambda p: build_args(
            ["find", p.file, p.query],
            {"mode": p.mode, "limit": p.limit, "uri": p.uri, "scope": p.scope},
        ),
        hints=READ_ONLY,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_vec_search",
        title="Semantic Search",
        description=(
            "Vector similarity search.\n\n"
            "Uses vector embeddings for semantic similarity matching. "
            "Requires embeddings to be generated (use memvid_put with embed=true)."
        ),
        params=QueryInput,
        build=lambda p: build_args(["vec-search", p.file, p.query], {"limit": p.limit}),
        hints=READ_ONLY,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_ask",
        title="Ask Question (RAG)",
        description=(
            "Ask a question and get an answer using RAG.\n\n"
            "Retrieves relevant context from memory and synthesizes an answer. "
            "Requires LLM configuration in llm.toml.\n\n"
            "Modes:\n"
            "- hybrid: Combined lexical + semantic retrieval\n"
            "- lex: Lexical retrieval only\n"
            "- sem: Semantic retrieval only"
        ),
        params=AskInput,
        build=lambda p: build_args(
            ["ask", p.file, p.question],
            {"top_k": p.top_k, "context_only": p.context_only, "mode": p.mode},
        ),
        hints=READ_ONLY,
        timeout="rag",
        require_file=True,
    ),
    ToolSpec(
        name="memvid_timeline",
        title="View Timeline",
        description="View chronological timeline of memory entries, ordered by creation time.",
        params=TimelineInput,
        build=lambda p: build_args(
            ["timeline", p.file],
            {"limit": p.limit, "reverse": p.reverse, "since": p.since, "until": p.until},
        ),
        hints=READ_ONLY,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_when",
        title="Temporal Search",
        description=(
            "Find when something was mentioned.\n\n"
            "Searches for content and returns results with temporal context."
        ),
        params=QueryInput,
        build=lambda p: build_args(["when", p.file, p.query], {"limit": p.limit}),
        hints=READ_ONLY,
        require_file=True,
    ),
]
