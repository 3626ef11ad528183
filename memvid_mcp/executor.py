"""
memvid binary execution for the MCP server.

One call to ``MemvidExecutor.execute`` runs one memvid sub-command:
- stdin is never connected; stdout/stderr are drained in full
- wall-clock timeout, then SIGTERM, then SIGKILL after a grace period
- spawn failures (binary missing, not executable) are retried with a linear
  backoff; timeouts and non-zero exits are returned as-is
- stdout is parsed as JSON when requested, falling back to raw text

Per attempt: NOT_STARTED -> RUNNING -> COMPLETED | TIMED_OUT, or
NOT_STARTED -> SPAWN_FAILED.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
import errno
import json
import logging
from pathlib import Path
import shutil
import subprocess
from typing import Any

from memvid_mcp.config import IS_WINDOWS, MEMVID_BINARY, BinaryConfig

logger = logging.getLogger("memvid-mcp.exec")

MAX_RETRIES = 2
RETRY_DELAY = 0.1  # seconds, multiplied by attempt number
DEFAULT_TIMEOUT = 120.0
TERMINATE_GRACE = 5.0

# Argument preview in logs: never the full argv (may carry passwords).
PREVIEW_ARGS = 2
PREVIEW_CHARS = 80


class AttemptState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    SPAWN_FAILED = "spawn_failed"


@dataclass
class ExecutionResult:
    """Outcome of one memvid invocation."""

    success: bool
    exit_code: int
    state: AttemptState = AttemptState.COMPLETED
    data: Any = None
    error: str | None = None
    stderr: str | None = None
    spawn_error_code: str | None = None

    @property
    def is_spawn_error(self) -> bool:
        """The process never started."""
        return self.state is AttemptState.SPAWN_FAILED

    @property
    def timed_out(self) -> bool:
        return self.state is AttemptState.TIMED_OUT

    @property
    def failure_kind(self) -> str | None:
        """One of spawn, timeout or command; None on success."""
        if self.success:
            return None
        if self.is_spawn_error:
            return "spawn"
        if self.timed_out:
            return "timeout"
        return "command"


def should_retry(result: ExecutionResult) -> bool:
    """Only launch failures are retried; a process that ran is never re-run."""
    return result.is_spawn_error


def preview_args(args: Sequence[str]) -> list[str]:
    """Arguments after the sub-command, at most two, each truncated."""
    preview = []
    for arg in args[1 : 1 + PREVIEW_ARGS]:
        preview.append(arg if len(arg) <= PREVIEW_CHARS else arg[:PREVIEW_CHARS] + "...")
    return preview


def classify_spawn_error(exc: OSError, binary: str) -> tuple[str, str]:
    """Return (error code, remediation hint) for a failed process launch."""
    code = errno.errorcode.get(exc.errno, "") if exc.errno else ""

    if isinstance(exc, FileNotFoundError) or code == "ENOENT":
        return (
            code or "ENOENT",
            f'memvid binary not found at "{binary}". Set MEMVID_PATH environment variable '
            f'to the correct path, or ensure "memvid" is in your system PATH.',
        )
    if isinstance(exc, PermissionError) or code == "EACCES":
        return (
            code or "EACCES",
            f'Permission denied running "{binary}". Check file permissions.',
        )
    return code or type(exc).__name__, f"Is MEMVID_PATH set correctly? Current: {binary}"


Spawner = Callable[..., Awaitable[asyncio.subprocess.Process]]
Sleeper = Callable[[float], Awaitable[Any]]


class MemvidExecutor:
    """Runs memvid sub-commands with timeout, retry and output capture."""

    def __init__(
        self,
        binary: str = MEMVID_BINARY,
        verbose: bool = False,
        *,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        default_timeout: float = DEFAULT_TIMEOUT,
        terminate_grace: float = TERMINATE_GRACE,
        spawn: Spawner | None = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.binary = binary
        self.verbose = verbose
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.default_timeout = default_timeout
        self.terminate_grace = terminate_grace
        self._spawn_exec = spawn or asyncio.create_subprocess_exec
        self._sleep = sleep
        self._path_verified = False

    @classmethod
    def from_config(cls, config: BinaryConfig, default_timeout: float = DEFAULT_TIMEOUT) -> MemvidExecutor:
        return cls(
            binary=config.path,
            verbose=config.verbose,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            default_timeout=default_timeout,
            terminate_grace=config.terminate_grace,
        )

    def verify_path(self) -> bool:
        """Check (and log, once) that the binary resolves. Never fatal."""
        if self._path_verified:
            return True

        exists = shutil.which(self.binary) is not None or Path(self.binary).exists()
        if exists:
            logger.info(f"Memvid path verified: {self.binary}")
            self._path_verified = True
        else:
            logger.error(f"Memvid path does not exist: {self.binary}")
        return exists

    def full_args(self, args: Sequence[str], skip_json: bool = False) -> list[str]:
        full = list(args)
        if not skip_json:
            full.append("--json")
        if self.verbose:
            full.append("--verbose")
        return full

    async def _spawn(self, full_args: list[str]) -> asyncio.subprocess.Process:
        kwargs: dict[str, Any] = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.PIPE,
            "stderr": subprocess.PIPE,
        }
        if IS_WINDOWS:
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW
            # Batch shims (memvid.cmd from npm-style installs) need cmd.exe
            if self.binary.lower().endswith((".cmd", ".bat")):
                cmdline = subprocess.list2cmdline([self.binary, *full_args])
                return await asyncio.create_subprocess_shell(cmdline, **kwargs)
        return await self._spawn_exec(self.binary, *full_args, **kwargs)

    async def _terminate(self, proc: asyncio.subprocess.Process) -> None:
        """SIGTERM, then SIGKILL if the child outlives the grace period."""
        try:
            proc.terminate()
        except ProcessLookupError:
            return

        try:
            await asyncio.wait_for(proc.wait(), self.terminate_grace)
        except asyncio.TimeoutError:
            logger.warning(f"memvid (pid={proc.pid}) ignored SIGTERM for {self.terminate_grace:g}s, killing")
            self._kill(proc)
            await proc.wait()
        except asyncio.CancelledError:
            self._kill(proc)
            raise

    @staticmethod
    def _kill(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is not None:
            return
        try:
            proc.kill()
        except ProcessLookupError:
            pass

    def _spawn_failure(self, exc: OSError, command: str) -> ExecutionResult:
        code, hint = classify_spawn_error(exc, self.binary)
        logger.error(
            f"Spawn failed: {exc} (path={self.binary}, command={command}, code={code})",
            extra={"command": command, "error": code},
        )
        return ExecutionResult(
            success=False,
            exit_code=-1,
            state=AttemptState.SPAWN_FAILED,
            error=f"Failed to spawn memvid: {exc}. {hint}",
            spawn_error_code=code,
        )

    def _completed(
        self,
        returncode: int,
        stdout: bytes,
        stderr: bytes,
        command: str,
        skip_json: bool,
    ) -> ExecutionResult:
        stdout_str = stdout.decode("utf-8", errors="replace").strip()
        stderr_str = stderr.decode("utf-8", errors="replace").strip()

        if returncode != 0:
            logger.info(f"Command failed: memvid {command} (exit_code={returncode})")
            error = (
                stderr_str
                or stdout_str
                or f"memvid {command} failed with exit code {returncode}. "
                "Check that the file exists and the command arguments are correct."
            )
            return ExecutionResult(
                success=False,
                exit_code=returncode,
                error=error,
                stderr=stderr_str,
            )

        data: Any = stdout_str
        if not skip_json:
            try:
                parsed = json.loads(stdout_str)
            except json.JSONDecodeError as e:
                # Some sub-commands have no JSON mode; surface the text instead
                logger.warning(
                    f"JSON parse failed for: memvid {command} ({e.msg}, output_length={len(stdout_str)})"
                )
            else:
                # A bare `null` is no payload; keep the text
                if parsed is not None:
                    data = parsed

        logger.debug(f"Command success: memvid {command}")
        return ExecutionResult(success=True, exit_code=0, data=data, stderr=stderr_str or None)

    async def execute_once(
        self,
        full_args: list[str],
        command: str,
        timeout: float,
        skip_json: bool,
    ) -> ExecutionResult:
        """Single attempt, no retry."""
        try:
            proc = await self._spawn(full_args)
        except OSError as e:
            return self._spawn_failure(e, command)

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Command timeout: memvid {command} (timeout={timeout:g}s)", extra={"command": command})
            await self._terminate(proc)
            return ExecutionResult(
                success=False,
                exit_code=-1,
                state=AttemptState.TIMED_OUT,
                error=f"Command timed out after {timeout:g}s: memvid {command}",
            )
        except asyncio.CancelledError:
            # Caller went away; do not leave the child running
            self._kill(proc)
            raise

        returncode = proc.returncode if proc.returncode is not None else -1
        return self._completed(returncode, stdout, stderr, command, skip_json)

    async def execute(
        self,
        args: Sequence[str],
        timeout: float | None = None,
        skip_json: bool = False,
    ) -> ExecutionResult:
        """
        Run ``memvid <args>`` and return a normalized result.

        Args:
            args: Sub-command followed by its arguments
            timeout: Seconds before the child is terminated (default_timeout if None)
            skip_json: Do not append --json and do not parse stdout

        Returns:
            ExecutionResult; this method does not raise for process failures.
        """
        self.verify_path()

        timeout = self.default_timeout if timeout is None else timeout
        full_args = self.full_args(args, skip_json)
        command = args[0] if args else "unknown"
        logger.debug(f"Executing: memvid {command} {preview_args(args)}", extra={"command": command})

        attempt = 0
        result = await self.execute_once(full_args, command, timeout, skip_json)
        while should_retry(result) and attempt < self.max_retries:
            logger.warning(
                f"Spawn error on attempt {attempt + 1}, will retry (code={result.spawn_error_code})",
                extra={"command": command, "attempt": attempt + 1},
            )
            attempt += 1
            logger.info(f"Retry {attempt}/{self.max_retries} for: memvid {command}")
            await self._sleep(self.retry_delay * attempt)
            result = await self.execute_once(full_args, command, timeout, skip_json)

        return result
