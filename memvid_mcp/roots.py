"""
MCP roots management.

The client may declare the directory trees this server is allowed to touch
(the optional "roots" capability) and may replace them at any time with a
roots/list_changed notification.

State is one immutable ``RootsState`` snapshot, swapped wholesale by a single
writer (the initialized / list_changed handlers). Readers never see a partial
root set and need no lock.

While roots are unknown, unsupported or empty, every path is within roots.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
import logging
import re
from typing import Any
from urllib.parse import unquote

from memvid_mcp.errors import RootsUnsupportedError

logger = logging.getLogger("memvid-mcp.roots")

FILE_SCHEME = "file://"
_DRIVE_URI_PATH = re.compile(r"^/[A-Za-z]:")
_DRIVE_PATH = re.compile(r"^[A-Za-z]:")


@dataclass(frozen=True)
class Root:
    """One permitted filesystem subtree."""

    uri: str
    name: str | None = None

    @classmethod
    def from_any(cls, item: Any) -> Root:
        """Build from a Root, an mcp.types.Root, or a {"uri", "name"} mapping."""
        if isinstance(item, Root):
            return item
        if isinstance(item, dict):
            return cls(uri=str(item["uri"]), name=item.get("name"))
        return cls(uri=str(item.uri), name=getattr(item, "name", None))


@dataclass(frozen=True)
class RootsState:
    """Snapshot of the negotiated roots capability."""

    roots: tuple[Root, ...] = field(default_factory=tuple)
    initialized: bool = False
    supported: bool = False

    @property
    def restricted(self) -> bool:
        """True when containment checks are actually enforced."""
        return self.initialized and self.supported and bool(self.roots)


RootsQuery = Callable[[], Awaitable[Iterable[Any]]]


def uri_to_path(uri: str) -> str:
    """Convert a file:// URI to a slash-separated path. Other strings pass through."""
    if not uri.startswith(FILE_SCHEME):
        return uri

    path = uri[len(FILE_SCHEME):]
    # file://localhost/home/x
    if path.startswith("localhost/"):
        path = path[len("localhost"):]
    path = unquote(path)

    if _DRIVE_URI_PATH.match(path):
        path = path[1:]

    return path.replace("\\", "/")


def normalize_path(path: str) -> str:
    """Unify separators, drop a trailing slash, lower-case drive-letter paths."""
    normalized = path.replace("\\", "/")

    if normalized.endswith("/") and len(normalized) > 1:
        normalized = normalized.rstrip("/") or "/"

    if _DRIVE_PATH.match(normalized):
        normalized = normalized.lower()

    return normalized


def _contains(root_path: str, candidate: str) -> bool:
    if candidate == root_path:
        return True
    prefix = root_path if root_path.endswith("/") else root_path + "/"
    return candidate.startswith(prefix)


class RootRegistry:
    """Single source of truth for the roots negotiated with the client."""

    def __init__(self) -> None:
        self._state = RootsState()

    @property
    def state(self) -> RootsState:
        return self._state

    @property
    def roots(self) -> tuple[Root, ...]:
        return self._state.roots

    def has_roots(self) -> bool:
        return self._state.supported and bool(self._state.roots)

    async def initialize(self, query: RootsQuery) -> None:
        """Ask the client for its roots once the session is initialized.

        A client without the capability is a normal outcome: the registry
        records ``supported=False`` and stops restricting paths.
        """
        try:
            roots = tuple(Root.from_any(r) for r in await query())
        except RootsUnsupportedError:
            self._state = RootsState(initialized=True, supported=False)
            logger.info("Client does not support roots capability - operating without root restrictions")
            return
        except Exception as e:
            self._state = RootsState(initialized=True, supported=False)
            logger.info(f"Roots request failed ({e!r}) - operating without root restrictions")
            return

        self._state = RootsState(roots=roots, initialized=True, supported=True)
        logger.info(f"Roots initialized: {len(roots)} root(s) {[r.uri for r in roots]}")

    async def on_roots_changed(self, query: RootsQuery) -> None:
        """Refresh after a roots/list_changed notification.

        Keeps the previous roots when the refresh fails.
        """
        if not self._state.supported:
            return

        try:
            roots = tuple(Root.from_any(r) for r in await query())
        except Exception as e:
            logger.warning(f"Failed to refresh roots after change notification: {e!r}")
            return

        self._state = RootsState(roots=roots, initialized=True, supported=True)
        logger.info(f"Roots updated: {len(roots)} root(s) {[r.uri for r in roots]}")

    def is_within_roots(self, path: str) -> bool:
        """True if ``path`` equals or descends from a declared root."""
        state = self._state
        if not state.restricted:
            return True

        candidate = normalize_path(path)
        for root in state.roots:
            if _contains(normalize_path(uri_to_path(root.uri)), candidate):
                return True

        logger.warning(f"Path outside roots: {path} (roots: {[r.uri for r in state.roots]})")
        return False
