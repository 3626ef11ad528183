"""MCP configuration loader - reads from memvid-mcp.toml with ENV overrides."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import tomllib
from typing import Any, cast

IS_WINDOWS = os.name == "nt"

# Binary name: "memvid.exe" on Windows, "memvid" elsewhere
MEMVID_BINARY = "memvid.exe" if IS_WINDOWS else "memvid"

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class ServerConfig:
    """Server identity and logging settings."""

    name: str = "memvid-mcp"
    log_level: str = "warning"
    log_format: str = "text"  # "text" | "json"
    roots_timeout: float = 10.0

    def validate(self) -> None:
        if self.log_level.lower() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")
        if self.log_format not in ("text", "json"):
            raise ValueError(f"Invalid log_format: {self.log_format}")
        if self.roots_timeout <= 0:
            raise ValueError("roots_timeout must be positive")


@dataclass
class BinaryConfig:
    """Location and invocation policy for the memvid binary."""

    path: str = MEMVID_BINARY
    verbose: bool = False
    max_retries: int = 2
    retry_delay: float = 0.1
    terminate_grace: float = 5.0

    def validate(self) -> None:
        if not self.path:
            raise ValueError("binary path must not be empty")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")
        if self.terminate_grace <= 0:
            raise ValueError("terminate_grace must be positive")


@dataclass
class TimeoutConfig:
    """Per operation class timeouts, in seconds."""

    default: float = 120.0
    heavy: float = 300.0
    rag: float = 180.0

    def validate(self) -> None:
        for name in ("default", "heavy", "rag"):
            if getattr(self, name) <= 0:
                raise ValueError(f"timeouts.{name} must be positive")

    def for_class(self, timeout_class: str) -> float:
        """Resolve a tool's timeout class ("default", "heavy", "rag")."""
        if timeout_class not in ("default", "heavy", "rag"):
            raise ValueError(f"Unknown timeout class: {timeout_class}")
        return cast(float, getattr(self, timeout_class))


@dataclass
class LimitsConfig:
    """Response limits."""

    character_limit: int = 50000

    def validate(self) -> None:
        if self.character_limit <= 0:
            raise ValueError("character_limit must be positive")


@dataclass
class MemvidMcpConfig:
    """Root configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    binary: BinaryConfig = field(default_factory=BinaryConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)

    def validate(self) -> None:
        self.server.validate()
        self.binary.validate()
        self.timeouts.validate()
        self.limits.validate()


def _truthy(value: str | None) -> bool:
    return (value or "").lower() in ("1", "true", "yes")


def _apply_section(target: Any, data: dict[str, Any]) -> None:
    """Copy known keys from a TOML table onto a config dataclass."""
    for key, value in data.items():
        if hasattr(target, key):
            setattr(target, key, value)


def _apply_env_overrides(cfg: MemvidMcpConfig) -> MemvidMcpConfig:
    """Apply environment variable overrides. ENV beats TOML."""
    # MEMVID_PATH
    if os.getenv("MEMVID_PATH"):
        cfg.binary.path = os.getenv("MEMVID_PATH", cfg.binary.path)

    # MEMVID_VERBOSE
    if os.getenv("MEMVID_VERBOSE"):
        cfg.binary.verbose = _truthy(os.getenv("MEMVID_VERBOSE"))

    # MEMVID_LOG_LEVEL
    if os.getenv("MEMVID_LOG_LEVEL"):
        cfg.server.log_level = os.getenv("MEMVID_LOG_LEVEL", cfg.server.log_level).lower()

    # MEMVID_LOG_FORMAT
    if os.getenv("MEMVID_LOG_FORMAT"):
        cfg.server.log_format = os.getenv("MEMVID_LOG_FORMAT", cfg.server.log_format).lower()

    return cfg


def load_config(config_path: str | Path | None = None) -> MemvidMcpConfig:
    """
    Load config from memvid-mcp.toml with ENV overrides.

    Precedence: ENV → TOML → defaults

    Args:
        config_path: Path to the TOML file. If None, searches:
            1. MEMVID_MCP_CONFIG env var
            2. ./memvid-mcp.toml

    Returns:
        MemvidMcpConfig dataclass with merged settings.
    """
    if config_path is None:
        if os.getenv("MEMVID_MCP_CONFIG"):
            config_path = Path(cast(str, os.getenv("MEMVID_MCP_CONFIG")))
        else:
            config_path = Path("memvid-mcp.toml")
    else:
        config_path = Path(config_path)

    cfg = MemvidMcpConfig()

    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        _apply_section(cfg.server, data.get("server", {}))
        _apply_section(cfg.binary, data.get("binary", {}))
        _apply_section(cfg.timeouts, data.get("timeouts", {}))
        _apply_section(cfg.limits, data.get("limits", {}))

    cfg = _apply_env_overrides(cfg)
    cfg.validate()

    return cfg
