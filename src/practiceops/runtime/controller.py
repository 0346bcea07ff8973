from __future__ import annotations

from pathlib import Path
from typing import Optional

from practiceops.config.loader import CONFIG_FILE_NAME, load_config
from practiceops.core.context import LifecycleContext
from practiceops.core.models import DeploymentStatus, LoadResult, OperationResult, SnapshotResult
from practiceops.runtime.commands import CommandRunner
from practiceops.runtime.dependencies import DependencyLifecycleController
from practiceops.runtime.deployment import DeploymentDetector, resolve_manifest_path
from practiceops.runtime.probe import ContainerProber
from practiceops.storage.retention import PruneResult
from practiceops.storage.snapshots import SnapshotInfo, Snapshotter


class ServerLifecycleController:
    """Host-facing entry point for status, dependency lifecycle and snapshots.

    Constructed once when the hosting application boots and shared by
    reference; the construction time is the uptime origin and the manifest
    path is resolved here once.
    """

    def __init__(
        self,
        root_dir: Path,
        context: Optional[LifecycleContext] = None,
        runner: Optional[CommandRunner] = None,
    ) -> None:
        self.root_dir = Path(root_dir).expanduser().resolve()

        if context is None:
            config_data = load_config(self.root_dir / CONFIG_FILE_NAME)
            context = LifecycleContext(config_dict=config_data, root_dir=self.root_dir)
        self.context = context

        orchestration = self.context.orchestration
        self.runner = runner if runner is not None else CommandRunner(cwd=self.root_dir)
        self.manifest_path = resolve_manifest_path(self.root_dir, orchestration.manifest_candidates)

        self.prober = ContainerProber(
            runner=self.runner,
            manifest_path=self.manifest_path,
            compose_command=orchestration.compose_command,
            container_command=orchestration.container_command,
            timeout_seconds=orchestration.probe_timeout_seconds,
        )
        self.detector = DeploymentDetector(
            prober=self.prober,
            manifest_path=self.manifest_path,
            snapshot_dir=self.context.snapshot_dir,
            port=self.context.server.port,
            dependencies=self.context.dependencies,
        )
        self.dependencies = DependencyLifecycleController(
            runner=self.runner,
            manifest_path=self.manifest_path,
            compose_command=orchestration.compose_command,
            start_timeout_seconds=orchestration.start_timeout_seconds,
            stop_timeout_seconds=orchestration.stop_timeout_seconds,
            settle_seconds=orchestration.restart_settle_seconds,
        )
        self.snapshotter = Snapshotter(
            storage_root=self.context.storage_root,
            snapshot_dir=self.context.snapshot_dir,
            detector=self.detector,
            retention=self.context.snapshots.retention,
            format_version=self.context.snapshots.format_version,
        )

    async def get_status(self) -> DeploymentStatus:
        return await self.detector.get_status()

    async def start_dependencies(self) -> OperationResult:
        return await self.dependencies.start()

    async def stop_dependencies(self) -> OperationResult:
        return await self.dependencies.stop()

    async def restart_dependencies(self) -> OperationResult:
        return await self.dependencies.restart()

    async def create_snapshot(self) -> SnapshotResult:
        return await self.snapshotter.create_snapshot()

    async def load_snapshot(self, path: Optional[str] = None) -> LoadResult:
        return await self.snapshotter.load_snapshot(path)

    def list_snapshots(self) -> list[SnapshotInfo]:
        return self.snapshotter.list_snapshots()

    def prune_snapshots(self, keep: Optional[int] = None) -> PruneResult:
        return self.snapshotter.prune(keep)
