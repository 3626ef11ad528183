"""
memvid tool catalogue.

Each group module exposes ``TOOLS``, a list of ToolSpec. ``ALL_TOOLS`` is the
full catalogue in registration order.
"""

from memvid_mcp.tools import analysis, crypto, knowledge, lifecycle, search, session, utility, write
from memvid_mcp.tools.base import ToolSpec

ALL_TOOLS: list[ToolSpec] = [
    *lifecycle.TOOLS,
    *write.TOOLS,
    *search.TOOLS,
    *analysis.TOOLS,
    *knowledge.TOOLS,
    *session.TOOLS,
    *crypto.TOOLS,
    *utility.TOOLS,
]

__all__ = ["ALL_TOOLS", "ToolSpec"]
