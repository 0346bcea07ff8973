from __future__ import annotations

import asyncio
import contextlib
import shlex
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel, Field

from practiceops.utils.diagnostics import CommandExecutionError


class CommandResult(BaseModel):
    """Captured output of an external command that exited cleanly."""

    command: list[str] = Field(default_factory=list)
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


def _decode(raw: bytes | None) -> str:
    if not raw:
        return ""
    return raw.decode("utf-8", errors="replace")


async def run_command(
    command: Sequence[str],
    cwd: Path | None = None,
    timeout_seconds: float = 30.0,
) -> CommandResult:
    """Run an external command without a shell and capture its output.

    Raises CommandExecutionError when the command cannot be spawned, exits
    non-zero, or runs past ``timeout_seconds``. A timed out child is killed
    and reaped before the error is raised.
    """
    argv = [str(part) for part in command]
    display = shlex.join(argv)

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd is not None else None,
        )
    except OSError as exc:
        raise CommandExecutionError(
            f"Command failed: {display}\n{exc}",
            command=argv,
        ) from exc

    try:
        stdout_raw, stderr_raw = await asyncio.wait_for(process.communicate(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()
        raise CommandExecutionError(
            f"Command timed out after {timeout_seconds:g}s: {display}",
            command=argv,
            timed_out=True,
        ) from None

    stdout = _decode(stdout_raw)
    stderr = _decode(stderr_raw)

    if process.returncode != 0:
        raise CommandExecutionError(
            f"Command failed: {display}\n{stderr.strip()}".rstrip(),
            command=argv,
            returncode=process.returncode,
            stderr=stderr,
        )

    return CommandResult(command=argv, stdout=stdout, stderr=stderr, returncode=process.returncode)


class CommandRunner:
    """Runs orchestration CLI commands from a fixed working directory."""

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd

    async def run(self, command: Sequence[str], timeout_seconds: float) -> CommandResult:
        return await run_command(command, cwd=self.cwd, timeout_seconds=timeout_seconds)
