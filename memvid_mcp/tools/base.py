"""
Declarative tool definitions.

A tool is a pydantic input model plus a function that turns a validated
instance into a memvid argv. Path-typed fields use ``PathField`` so path
safety is enforced during validation.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, Literal

from mcp.types import Tool, ToolAnnotations
from pydantic import BaseModel, ConfigDict, Field

from memvid_mcp.formatting import example_mv2_path

TimeoutClass = Literal["default", "heavy", "rag"]

# Tool annotation presets
READ_ONLY: dict[str, bool] = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": False,
}
WRITE: dict[str, bool] = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "idempotentHint": False,
    "openWorldHint": False,
}
DESTRUCTIVE: dict[str, bool] = {
    "readOnlyHint": False,
    "destructiveHint": True,
    "idempotentHint": False,
    "openWorldHint": False,
}
NETWORK: dict[str, bool] = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "idempotentHint": False,
    "openWorldHint": True,
}


def path_description(purpose: str) -> str:
    return f"{purpose}. Use an absolute path appropriate for your OS (e.g., {example_mv2_path()})."


MV2_FILE = path_description("Path to the .mv2 memory file")

FrameId = Annotated[int, Field(ge=0, description="Frame ID (non-negative integer)")]
Limit = Annotated[int, Field(gt=0, description="Maximum number of results to return")]
PositiveInt = Annotated[int, Field(gt=0)]
Text = Annotated[str, Field(min_length=1)]


class ToolInput(BaseModel):
    """Base for tool inputs: unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


ArgvBuilder = Callable[[Any], list[str]]


@dataclass(frozen=True)
class ToolSpec:
    """One MCP tool backed by one memvid sub-command."""

    name: str
    title: str
    description: str
    params: type[ToolInput]
    build: ArgvBuilder
    hints: dict[str, bool] | None = None
    timeout: TimeoutClass = "default"
    skip_json: bool = False
    # Pre-flight checks before the binary runs
    require_file: bool = False
    require_input: bool = False

    def to_tool(self) -> Tool:
        annotations = ToolAnnotations(title=self.title, **(self.hints or {}))
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.params.model_json_schema(),
            annotations=annotations,
        )
