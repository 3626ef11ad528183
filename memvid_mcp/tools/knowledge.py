"""Entity enrichment, memory cards, facts and the entity graph."""

from __future__ import annotations

from pydantic import Field, NonNegativeInt

from memvid_mcp.args import build_args
from memvid_mcp.paths import PathField
from memvid_mcp.tools.base import MV2_FILE, READ_ONLY, WRITE, PositiveInt, Text, ToolInput, ToolSpec


class EnrichInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    all: bool | None = Field(default=None, description="Process all pending frames")
    frame_id: NonNegativeInt | None = Field(default=None, description="Specific frame ID to enrich")


class MemoriesInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    list: bool | None = Field(default=None, description="List all memory cards")
    stats: bool | None = Field(default=None, description="Show memory statistics")
    entity: str | None = Field(default=None, description="Filter by entity name")


class StateInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    show: bool | None = Field(default=None, description="Show current state")


class FactsInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    frame_id: NonNegativeInt | None = Field(default=None, description="Extract facts from specific frame")
    list: bool | None = Field(default=None, description="List all extracted facts")


class FollowInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    entity: Text = Field(description="Starting entity name")
    link: str | None = Field(default=None, description="Link type to follow (default: related)")
    hops: PositiveInt | None = Field(default=None, description="Number of relationship hops (default: 2)")


class WhoInput(ToolInput):
    file: PathField = Field(description=MV2_FILE)
    query: Text = Field(description="Entity name or query")


TOOLS = [
    ToolSpec(
        name="memvid_enrich",
        title="NER Enrichment",
        description=(
            "Run Named Entity Recognition (NER) enrichment to extract entities.\n\n"
            "Extracts people, organizations, locations and dates from content. "
            "Requires NER model configuration. Returns JSON with frames_processed and entities_extracted."
        ),
        params=EnrichInput,
        build=lambda p: build_args(["enrich", p.file], {"all": p.all, "frame_id": p.frame_id}),
        hints=WRITE,
        timeout="heavy",
        require_file=True,
    ),
    ToolSpec(
        name="memvid_memories",
        title="Memory Cards",
        description=(
            "Memory card operations: list, stats, or filter by entity.\n\n"
            "Memory cards are structured summaries of stored content."
        ),
        params=MemoriesInput,
        build=lambda p: build_args(
            ["memories", p.file],
            {"list": p.list, "stats": p.stats, "entity": p.entity},
        ),
        hints=READ_ONLY,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_state",
        title="Memory State",
        description="Show current memory state: active session, binding status and processing queue.",
        params=StateInput,
        build=lambda p: build_args(["state", p.file], {"show": p.show}),
        hints=READ_ONLY,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_facts",
        title="Extracted Facts",
        description=(
            "Fact extraction: list facts or extract from a frame.\n\n"
            "Facts are structured assertions extracted from content, returned with source references."
        ),
        params=FactsInput,
        build=lambda p: build_args(["facts", p.file], {"frame_id": p.frame_id, "list": p.list}),
        hints=READ_ONLY,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_follow",
        title="Follow Entity",
        description=(
            "Follow entity relationships in the knowledge graph.\n\n"
            "Traverses the entity graph starting from a given entity and returns "
            "the relationships found (target, relation, hop)."
        ),
        params=FollowInput,
        build=lambda p: build_args(["follow", p.file, p.entity], {"link": p.link, "hops": p.hops}),
        hints=READ_ONLY,
        require_file=True,
    ),
    ToolSpec(
        name="memvid_who",
        title="Entity Lookup",
        description="Entity lookup: find mentions of and information about an entity.",
        params=WhoInput,
        build=lambda p: ["who", p.file, p.query],
        hints=READ_ONLY,
        require_file=True,
    ),
]
