"""
Path validation for tool inputs.

Security features:
- Traversal rejection (any ".." after separator unification, no resolution)
- System path denylist (POSIX and Windows, regardless of host OS, since the
  memvid binary may run on a different platform, e.g. memvid.exe under WSL)
- Containment in the client's declared MCP roots

Every path-typed tool field is declared as ``PathField`` so the checks run
during input validation, before any argv is built.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, Field, ValidationInfo
from pydantic_core import PydanticCustomError

from memvid_mcp.roots import RootRegistry

BLOCKED_PATHS_UNIX = ["/etc/", "/proc/", "/sys/", "/var/log/", "/root/", "/.ssh/"]
# Matched after backslashes become forward slashes.
BLOCKED_PATHS_WINDOWS = ["/windows/", "/system32/"]
BLOCKED_PATHS = BLOCKED_PATHS_UNIX + BLOCKED_PATHS_WINDOWS

TRAVERSAL_MARKER = ".."


class PathVerdict(str, Enum):
    SAFE = "safe"
    TRAVERSAL = "traversal"
    RESTRICTED = "restricted"
    OUTSIDE_ROOTS = "outside_roots"


_MESSAGES: dict[PathVerdict, tuple[str, str, str]] = {
    # verdict: (pydantic error type, message, remediation hint)
    PathVerdict.TRAVERSAL: (
        "path_traversal",
        "Path looks like a path-traversal attempt ('..' is not allowed)",
        "Pass an absolute path without '..' segments.",
    ),
    PathVerdict.RESTRICTED: (
        "path_restricted",
        "Path targets a restricted system location",
        "Keep memory files and inputs in a user directory, not system, log or credential folders.",
    ),
    PathVerdict.OUTSIDE_ROOTS: (
        "path_outside_roots",
        "Path is outside the directories this client allows (MCP roots)",
        "Use a path inside one of the client's configured roots, or add its folder to the client's roots.",
    ),
}


def has_traversal(path: str) -> bool:
    return TRAVERSAL_MARKER in path.replace("\\", "/")


def is_restricted(path: str) -> bool:
    lower_path = path.replace("\\", "/").lower()
    return any(blocked in lower_path for blocked in BLOCKED_PATHS)


def check_path(path: str, registry: RootRegistry | None = None) -> PathVerdict:
    """Classify ``path``. Checks run in order: traversal, denylist, roots."""
    if has_traversal(path):
        return PathVerdict.TRAVERSAL
    if is_restricted(path):
        return PathVerdict.RESTRICTED
    if registry is not None and not registry.is_within_roots(path):
        return PathVerdict.OUTSIDE_ROOTS
    return PathVerdict.SAFE


def is_path_safe(path: str, registry: RootRegistry | None = None) -> bool:
    return check_path(path, registry) is PathVerdict.SAFE


def _validate_path_field(value: str, info: ValidationInfo) -> str:
    registry = (info.context or {}).get("roots")
    verdict = check_path(value, registry)
    if verdict is PathVerdict.SAFE:
        return value

    error_type, message, hint = _MESSAGES[verdict]
    raise PydanticCustomError(
        error_type,
        "{message}: {path}. {hint}",
        {"message": message, "path": value, "hint": hint},
    )


PathField = Annotated[str, Field(min_length=1), AfterValidator(_validate_path_field)]
