from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Sequence

from practiceops.cli.formatter import OutputFormatter
from practiceops.core.models import OperationResult
from practiceops.runtime.commands import CommandRunner
from practiceops.utils.diagnostics import CommandExecutionError

NOT_CONFIGURED_MESSAGE = "Docker Compose file not found. Docker services are not configured."

START_BENIGN_MARKERS = ("Creating", "Starting")
STOP_BENIGN_MARKERS = ("Stopping", "Removing")


class DiagnosticClass(str, Enum):
    """Classification of an orchestration command's stderr text."""

    BENIGN = "benign"
    ERROR = "error"


def classify_diagnostic(text: str, benign_markers: Sequence[str]) -> DiagnosticClass:
    """Classify stderr: empty or progress output is benign, anything else is an error.

    The orchestration CLI writes progress lines to stderr and reports some
    partial failures there with a zero exit code.
    """
    if not text.strip():
        return DiagnosticClass.BENIGN
    if any(marker in text for marker in benign_markers):
        return DiagnosticClass.BENIGN
    return DiagnosticClass.ERROR


@dataclass(frozen=True)
class ComposeAction:
    """One compose invocation and the wording used to report it."""

    args: tuple[str, ...]
    benign_markers: tuple[str, ...]
    progressive: str
    infinitive: str
    past: str


START_ACTION = ComposeAction(
    args=("up", "-d"),
    benign_markers=START_BENIGN_MARKERS,
    progressive="starting",
    infinitive="start",
    past="started",
)

STOP_ACTION = ComposeAction(
    args=("down",),
    benign_markers=STOP_BENIGN_MARKERS,
    progressive="stopping",
    infinitive="stop",
    past="stopped",
)


class DependencyLifecycleController:
    """Start, stop and restart the orchestrated dependency set.

    Stateless between calls: every operation re-checks the manifest and relies
    on the orchestration tool for the actual container state.
    """

    def __init__(
        self,
        runner: CommandRunner,
        manifest_path: Path,
        compose_command: Sequence[str] = ("docker-compose",),
        start_timeout_seconds: float = 60.0,
        stop_timeout_seconds: float = 30.0,
        settle_seconds: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.runner = runner
        self.manifest_path = manifest_path
        self.compose_command = list(compose_command)
        self.start_timeout_seconds = start_timeout_seconds
        self.stop_timeout_seconds = stop_timeout_seconds
        self.settle_seconds = settle_seconds
        self._sleep = sleep

    def is_configured(self) -> bool:
        return self.manifest_path.exists()

    async def start(self) -> OperationResult:
        return await self._run_action(START_ACTION, self.start_timeout_seconds)

    async def stop(self) -> OperationResult:
        return await self._run_action(STOP_ACTION, self.stop_timeout_seconds)

    async def restart(self) -> OperationResult:
        """Stop, wait for the settle delay, then start. Start is skipped when stop fails."""
        stop_result = await self.stop()
        if not stop_result.success:
            return stop_result

        await self._sleep(self.settle_seconds)
        return await self.start()

    async def _run_action(self, action: ComposeAction, timeout_seconds: float) -> OperationResult:
        if not self.is_configured():
            return OperationResult(success=False, message=NOT_CONFIGURED_MESSAGE)

        command = [*self.compose_command, "-f", str(self.manifest_path), *action.args]
        OutputFormatter.log(f"{action.progressive.capitalize()} Docker services...", severity="info")

        try:
            result = await self.runner.run(command, timeout_seconds=timeout_seconds)
        except CommandExecutionError as exc:
            OutputFormatter.log(f"Error {action.progressive} Docker services: {exc.message}", severity="error")
            return OperationResult(
                success=False,
                message=f"Failed to {action.infinitive} Docker services: {exc.message}",
            )

        if classify_diagnostic(result.stderr, action.benign_markers) == DiagnosticClass.ERROR:
            OutputFormatter.log(f"Docker Compose stderr: {result.stderr.strip()}", severity="error")
            return OperationResult(
                success=False,
                message=f"Error {action.progressive} Docker services: {result.stderr}",
            )

        message = f"Docker services {action.past} successfully"
        OutputFormatter.log(message, severity="success")
        return OperationResult(success=True, message=message)
