"""Encryption of memory files (.mv2 <-> .mv2e)."""

from __future__ import annotations

from pydantic import Field

from memvid_mcp.args import build_args
from memvid_mcp.paths import PathField
from memvid_mcp.tools.base import ToolInput, ToolSpec


class LockInput(ToolInput):
    file: PathField = Field(description="Path to the .mv2 file to encrypt")
    output: PathField = Field(description="Output path for the encrypted file (.mv2e)")
    password: str | None = Field(default=None, description="Encryption password (required for non-interactive use)")


class UnlockInput(ToolInput):
    file: PathField = Field(description="Path to the encrypted .mv2e file")
    output: PathField = Field(description="Output path for the decrypted file (.mv2)")
    password: str | None = Field(default=None, description="Decryption password (required for non-interactive use)")


TOOLS = [
    ToolSpec(
        name="memvid_lock",
        title="Encrypt Memory File",
        description="Encrypt a memory file (creates .mv2e encrypted file)",
        params=LockInput,
        build=lambda p: build_args(["lock", "--output", p.output, p.file], {"password": p.password}),
    ),
    ToolSpec(
        name="memvid_unlock",
        title="Decrypt Memory File",
        description="Decrypt an encrypted memory file",
        params=UnlockInput,
        build=lambda p: build_args(["unlock", "--output", p.output, p.file], {"password": p.password}),
    ),
]
