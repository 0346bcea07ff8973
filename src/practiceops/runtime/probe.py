from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel

from practiceops.runtime.commands import CommandRunner
from practiceops.utils.diagnostics import CommandExecutionError

INSPECT_FORMAT = "{{.Name}},{{.State.Running}}"


class ProbeState(str, Enum):
    """Classification of a container probe."""

    ABSENT = "absent"
    FOUND = "found"
    FAILED = "failed"


class ContainerProbeResult(BaseModel):
    """Canonical name and running flag of a container backing a service."""

    name: str
    running: bool


class ContainerProbe(BaseModel):
    """Result payload from probing one compose service."""

    service: str
    state: ProbeState
    container: ContainerProbeResult | None = None
    reason: str

    @property
    def result(self) -> ContainerProbeResult | None:
        """Return the container when one was found, else None."""
        if self.state != ProbeState.FOUND:
            return None
        return self.container


def parse_inspect_output(output: str) -> ContainerProbeResult:
    """Parse `name,running` inspect output; raises ValueError when malformed."""
    line = output.strip().splitlines()[0] if output.strip() else ""
    name, separator, running = line.partition(",")
    if not separator or not name.strip():
        raise ValueError(f"Unexpected inspect output: {output.strip()!r}")

    return ContainerProbeResult(
        name=name.strip().removeprefix("/"),
        running=running.strip() == "true",
    )


class ContainerProber:
    """Asks the orchestration CLI whether a service's container exists and runs."""

    def __init__(
        self,
        runner: CommandRunner,
        manifest_path: Path,
        compose_command: Sequence[str] = ("docker-compose",),
        container_command: str = "docker",
        timeout_seconds: float = 10.0,
    ) -> None:
        self.runner = runner
        self.manifest_path = manifest_path
        self.compose_command = list(compose_command)
        self.container_command = container_command
        self.timeout_seconds = timeout_seconds

    async def probe(self, service_name: str) -> ContainerProbe:
        """Probe a compose service; never raises."""
        try:
            listing = await self.runner.run(
                [*self.compose_command, "-f", str(self.manifest_path), "ps", "-q", service_name],
                timeout_seconds=self.timeout_seconds,
            )
        except CommandExecutionError as exc:
            return ContainerProbe(service=service_name, state=ProbeState.FAILED, reason=exc.message)

        container_ids = listing.stdout.split()
        if not container_ids:
            return ContainerProbe(
                service=service_name,
                state=ProbeState.ABSENT,
                reason=f"No container found for service '{service_name}'.",
            )

        container_id = container_ids[0]
        try:
            inspect = await self.runner.run(
                [self.container_command, "inspect", container_id, "--format", INSPECT_FORMAT],
                timeout_seconds=self.timeout_seconds,
            )
            container = parse_inspect_output(inspect.stdout)
        except (CommandExecutionError, ValueError) as exc:
            reason = exc.message if isinstance(exc, CommandExecutionError) else str(exc)
            return ContainerProbe(service=service_name, state=ProbeState.FAILED, reason=reason)

        return ContainerProbe(
            service=service_name,
            state=ProbeState.FOUND,
            container=container,
            reason=f"Container '{container.name}' is {'running' if container.running else 'stopped'}.",
        )
