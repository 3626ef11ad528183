from pathlib import Path

import pytest

from memvid_mcp.config import MEMVID_BINARY, MemvidMcpConfig, TimeoutConfig, load_config


def test_defaults_without_file():
    config = load_config()

    assert config == MemvidMcpConfig()
    assert config.server.name == "memvid-mcp"
    assert config.server.log_level == "warning"
    assert config.binary.path == MEMVID_BINARY
    assert config.binary.max_retries == 2
    assert config.timeouts.default == 120.0
    assert config.timeouts.heavy == 300.0
    assert config.timeouts.rag == 180.0
    assert config.limits.character_limit == 50000


def test_toml_sections_applied(tmp_path: Path):
    path = tmp_path / "custom.toml"
    path.write_text(
        '[server]\nlog_format = "json"\nroots_timeout = 3.5\n'
        '[binary]\npath = "/opt/memvid/bin/memvid"\nmax_retries = 0\n'
        "[timeouts]\nheavy = 900\n"
        "[limits]\ncharacter_limit = 1000\n"
        "[unknown]\nkey = 1\n"
    )

    config = load_config(path)

    assert config.server.log_format == "json"
    assert config.server.roots_timeout == 3.5
    assert config.binary.path == "/opt/memvid/bin/memvid"
    assert config.binary.max_retries == 0
    assert config.timeouts.heavy == 900
    assert config.timeouts.default == 120.0
    assert config.limits.character_limit == 1000


def test_default_file_in_cwd_is_picked_up(tmp_path: Path):
    (tmp_path / "memvid-mcp.toml").write_text('[binary]\nverbose = true\n')

    assert load_config().binary.verbose is True


def test_config_env_var_selects_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "elsewhere.toml"
    path.write_text('[server]\nlog_level = "debug"\n')
    monkeypatch.setenv("MEMVID_MCP_CONFIG", str(path))

    assert load_config().server.log_level == "debug"


def test_env_beats_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    (tmp_path / "memvid-mcp.toml").write_text('[binary]\npath = "/from/toml"\n[server]\nlog_level = "info"\n')
    monkeypatch.setenv("MEMVID_PATH", "/from/env")
    monkeypatch.setenv("MEMVID_VERBOSE", "1")
    monkeypatch.setenv("MEMVID_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("MEMVID_LOG_FORMAT", "json")

    config = load_config()

    assert config.binary.path == "/from/env"
    assert config.binary.verbose is True
    assert config.server.log_level == "error"
    assert config.server.log_format == "json"


def test_verbose_env_falsey(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MEMVID_VERBOSE", "no")

    assert load_config().binary.verbose is False


@pytest.mark.parametrize(
    "toml",
    [
        '[server]\nlog_level = "loud"\n',
        '[server]\nlog_format = "xml"\n',
        "[binary]\nmax_retries = -1\n",
        "[timeouts]\nrag = 0\n",
        "[limits]\ncharacter_limit = 0\n",
    ],
)
def test_invalid_values_rejected(tmp_path: Path, toml: str):
    path = tmp_path / "bad.toml"
    path.write_text(toml)

    with pytest.raises(ValueError):
        load_config(path)


def test_timeout_classes():
    timeouts = TimeoutConfig(default=1.0, heavy=2.0, rag=3.0)

    assert timeouts.for_class("default") == 1.0
    assert timeouts.for_class("heavy") == 2.0
    assert timeouts.for_class("rag") == 3.0
    with pytest.raises(ValueError):
        timeouts.for_class("validate")
