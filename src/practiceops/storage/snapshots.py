from __future__ import annotations

import contextlib
import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable
from uuid import uuid4

import aiofiles
from pydantic import BaseModel

from practiceops.cli.formatter import OutputFormatter
from practiceops.core.context import LATEST_SNAPSHOT_NAME
from practiceops.core.models import DataCategory, LoadResult, SnapshotDocument, SnapshotResult
from practiceops.runtime.deployment import DeploymentDetector
from practiceops.storage.categories import read_data_files
from practiceops.storage.retention import (
    DEFAULT_RETENTION,
    SNAPSHOT_PREFIX,
    SNAPSHOT_SUFFIX,
    PruneResult,
    list_snapshot_artifacts,
    prune_snapshots,
)

SNAPSHOT_NOT_FOUND_MESSAGE = "Snapshot file not found"
DEFAULT_FORMAT_VERSION = "1.0.0"


class SnapshotInfo(BaseModel):
    """Listing entry for one timestamped snapshot artifact."""

    name: str
    path: str
    size_bytes: int
    modified_at: datetime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_snapshot_timestamp(moment: datetime) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and a `Z` suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def snapshot_artifact_name(timestamp: str) -> str:
    """Return the filesystem-safe, lexicographically sortable artifact name."""
    safe_timestamp = timestamp.replace(":", "-").replace(".", "-")
    return f"{SNAPSHOT_PREFIX}{safe_timestamp}{SNAPSHOT_SUFFIX}"


async def write_text_atomic(path: Path, content: str) -> None:
    """Write through a hidden temp file in the same directory, then rename into place."""
    temp_path = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
    try:
        async with aiofiles.open(temp_path, "w", encoding="utf-8") as handle:
            await handle.write(content)
        os.replace(temp_path, path)
    except Exception:
        with contextlib.suppress(OSError):
            temp_path.unlink()
        raise


class Snapshotter:
    """Creates, loads and lists snapshots of the file-based data store."""

    def __init__(
        self,
        storage_root: Path,
        snapshot_dir: Path,
        detector: DeploymentDetector,
        retention: int = DEFAULT_RETENTION,
        format_version: str = DEFAULT_FORMAT_VERSION,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.storage_root = storage_root
        self.snapshot_dir = snapshot_dir
        self.detector = detector
        self.retention = retention
        self.format_version = format_version
        self._clock = clock

    @property
    def latest_path(self) -> Path:
        return self.snapshot_dir / LATEST_SNAPSHOT_NAME

    async def build_document(self, timestamp: str) -> SnapshotDocument:
        """Assemble status plus every category; categories are read one after another."""
        server_status = await self.detector.get_status()
        data: dict[str, list] = {}
        for category in DataCategory:
            category_result = await read_data_files(self.storage_root, category)
            data[category.value] = category_result.records

        return SnapshotDocument(
            timestamp=timestamp,
            version=self.format_version,
            server_status=server_status,
            data=data,
        )

    def reserve_artifact(self, moment: datetime) -> tuple[str, Path]:
        """Claim an unused artifact name, stepping forward a millisecond on collision.

        Artifacts are never overwritten; the claimed name is created empty and
        replaced by the finished document.
        """
        while True:
            timestamp = format_snapshot_timestamp(moment)
            snapshot_path = self.snapshot_dir / snapshot_artifact_name(timestamp)
            try:
                with snapshot_path.open("x", encoding="utf-8"):
                    pass
            except FileExistsError:
                moment = moment + timedelta(milliseconds=1)
                continue
            return timestamp, snapshot_path

    async def create_snapshot(self) -> SnapshotResult:
        snapshot_path: Path | None = None
        artifact_written = False

        try:
            self.snapshot_dir.mkdir(parents=True, exist_ok=True)
            timestamp, snapshot_path = self.reserve_artifact(self._clock())
            document = await self.build_document(timestamp)
            payload = json.dumps(document.to_payload(), indent=2)
            await write_text_atomic(snapshot_path, payload)
            artifact_written = True
            await write_text_atomic(self.latest_path, payload)
        except Exception as exc:
            if snapshot_path is not None and not artifact_written:
                with contextlib.suppress(OSError):
                    snapshot_path.unlink()
            OutputFormatter.log(f"Error creating snapshot: {exc}", severity="error")
            return SnapshotResult(success=False, message=f"Failed to create snapshot: {exc}")

        OutputFormatter.log(f"Snapshot created: {snapshot_path}", severity="success")
        self.prune()

        return SnapshotResult(
            success=True,
            message="Snapshot created successfully",
            path=str(snapshot_path),
        )

    async def load_snapshot(self, path: str | Path | None = None) -> LoadResult:
        """Read a snapshot back verbatim; the document's shape is not validated."""
        target_path = Path(path) if path else self.latest_path

        if not target_path.exists():
            return LoadResult(success=False, message=SNAPSHOT_NOT_FOUND_MESSAGE)

        try:
            async with aiofiles.open(target_path, "r", encoding="utf-8") as handle:
                content = await handle.read()
            snapshot = json.loads(content)
        except (OSError, ValueError) as exc:
            OutputFormatter.log(f"Error loading snapshot: {exc}", severity="error")
            return LoadResult(success=False, message=f"Failed to load snapshot: {exc}")

        OutputFormatter.log(f"Snapshot loaded from: {target_path}", severity="info")
        return LoadResult(success=True, message="Snapshot loaded successfully", data=snapshot)

    def list_snapshots(self) -> list[SnapshotInfo]:
        """List timestamped artifacts newest first; an absent directory lists nothing."""
        if not self.snapshot_dir.exists():
            return []

        snapshots: list[SnapshotInfo] = []
        for artifact in list_snapshot_artifacts(self.snapshot_dir):
            try:
                stat = artifact.stat()
            except OSError:
                continue
            snapshots.append(
                SnapshotInfo(
                    name=artifact.name,
                    path=str(artifact),
                    size_bytes=stat.st_size,
                    modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        return snapshots

    def prune(self, keep: int | None = None) -> PruneResult:
        if not self.snapshot_dir.exists():
            return PruneResult()
        return prune_snapshots(self.snapshot_dir, keep=self.retention if keep is None else keep)
