from collections.abc import Iterable
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from mcp import types
import pytest

from memvid_mcp.executor import ExecutionResult
from memvid_mcp.roots import Root, RootRegistry

ENV_VARS = (
    "MEMVID_PATH",
    "MEMVID_VERBOSE",
    "MEMVID_LOG_LEVEL",
    "MEMVID_LOG_FORMAT",
    "MEMVID_MCP_CONFIG",
)


@pytest.fixture(autouse=True)
def hermetic_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Autouse: each test runs in its own tmp cwd with no memvid env overrides.
    """
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def _roots_query(*uris: str):
    """Async roots query returning ``uris`` as mcp Root objects."""

    async def query() -> Iterable[Any]:
        return [types.Root(uri=uri) for uri in uris]

    return query


@pytest.fixture
def registry_for():
    """Build an initialized RootRegistry from file URIs."""

    async def _build(*uris: str) -> RootRegistry:
        registry = RootRegistry()
        await registry.initialize(_roots_query(*uris))
        return registry

    return _build


@pytest.fixture
def mv2_file(tmp_path: Path) -> Path:
    path = tmp_path / "data" / "knowledge.mv2"
    path.parent.mkdir()
    path.write_bytes(b"MV2\x00")
    return path


@pytest.fixture
def fake_executor() -> MagicMock:
    executor = MagicMock()
    executor.binary = "memvid"
    executor.execute = AsyncMock(return_value=ExecutionResult(success=True, exit_code=0, data={"ok": True}))
    return executor


def _make_session(roots: list[str] | None = None, *, supports_roots: bool = True, list_roots: Any = None) -> MagicMock:
    """Stand-in for mcp ServerSession as seen by the roots query."""
    session = MagicMock()
    session.check_client_capability = MagicMock(return_value=supports_roots)
    if list_roots is None:
        result = SimpleNamespace(roots=[Root(uri=uri) for uri in roots or []])
        list_roots = AsyncMock(return_value=result)
    session.list_roots = list_roots
    return session


@pytest.fixture
def roots_query():
    return _roots_query


@pytest.fixture
def make_session():
    return _make_session
