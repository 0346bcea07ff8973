from __future__ import annotations

import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from practiceops.cli.formatter import OutputFormatter
from practiceops.core.context import LATEST_SNAPSHOT_NAME
from practiceops.core.models import (
    DependencySpec,
    DeploymentMode,
    DeploymentStatus,
    ServiceState,
    ServiceStatus,
    default_dependencies,
)
from practiceops.runtime.probe import ContainerProber, ProbeState

APPLICATION_SERVICE_NAME = "api"


def resolve_repo_root(cwd: Path) -> Path:
    """Return the repository root for a working directory inside `apps/api` or at the root."""
    if cwd.parts[-2:] == ("apps", "api"):
        return cwd.parent.parent
    return cwd


def resolve_manifest_path(cwd: Path, candidates: Sequence[str]) -> Path:
    """Return the first existing manifest candidate, or the first candidate as a default."""
    if not candidates:
        raise ValueError("At least one orchestration manifest candidate is required.")

    repo_root = resolve_repo_root(cwd)
    candidate_paths = [repo_root / candidate for candidate in candidates]
    for candidate_path in candidate_paths:
        if candidate_path.exists():
            return candidate_path
    return candidate_paths[0]


class DeploymentDetector:
    """Reports native vs hybrid deployment and the status of each dependency."""

    def __init__(
        self,
        prober: ContainerProber,
        manifest_path: Path,
        snapshot_dir: Path,
        port: int,
        dependencies: Sequence[DependencySpec] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.prober = prober
        self.manifest_path = manifest_path
        self.snapshot_dir = snapshot_dir
        self.port = port
        self.dependencies = list(dependencies) if dependencies is not None else default_dependencies()
        self._clock = clock
        self.started_at = clock()

    def manifest_exists(self) -> bool:
        return self.manifest_path.exists()

    def uptime_seconds(self) -> int:
        return max(0, int(self._clock() - self.started_at))

    async def get_status(self) -> DeploymentStatus:
        """Build a fresh status document; dependency probe failures never fail the call."""
        status = DeploymentStatus(
            is_online=True,
            mode=DeploymentMode.NATIVE,
            services={
                APPLICATION_SERVICE_NAME: ServiceStatus(
                    status=ServiceState.RUNNING,
                    port=self.port,
                    pid=os.getpid(),
                ),
            },
            uptime=self.uptime_seconds(),
        )

        if self.manifest_exists():
            status.mode = DeploymentMode.HYBRID
            status.services.update(await self._probe_dependencies())

        status.last_snapshot = self._last_snapshot_time()
        return status

    async def _probe_dependencies(self) -> dict[str, ServiceStatus]:
        services: dict[str, ServiceStatus] = {}
        for dependency in self.dependencies:
            try:
                probe = await self.prober.probe(dependency.service)
            except Exception as exc:
                OutputFormatter.log(
                    f"Error checking container for '{dependency.service}': {exc}",
                    severity="warning",
                )
                continue

            if probe.state == ProbeState.FAILED:
                OutputFormatter.log(
                    f"Error checking container for '{dependency.service}': {probe.reason}",
                    severity="warning",
                )
                continue

            container = probe.result
            if container is None:
                continue

            services[dependency.name] = ServiceStatus(
                status=ServiceState.RUNNING if container.running else ServiceState.STOPPED,
                container=container.name,
                port=dependency.port,
            )
        return services

    def _last_snapshot_time(self) -> datetime | None:
        latest_path = self.snapshot_dir / LATEST_SNAPSHOT_NAME
        try:
            if not latest_path.exists():
                return None
            return datetime.fromtimestamp(latest_path.stat().st_mtime, tz=timezone.utc)
        except OSError:
            OutputFormatter.log("No snapshot found", severity="debug")
            return None
