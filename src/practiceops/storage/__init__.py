"""Snapshot creation, loading and retention for the file-based data store."""

from practiceops.storage.categories import CategoryReadResult, list_data_files, read_data_files
from practiceops.storage.retention import PruneResult, is_snapshot_artifact, prune_snapshots
from practiceops.storage.snapshots import (
	SnapshotInfo,
	Snapshotter,
	format_snapshot_timestamp,
	snapshot_artifact_name,
	write_text_atomic,
)

__all__ = [
	"CategoryReadResult",
	"PruneResult",
	"SnapshotInfo",
	"Snapshotter",
	"format_snapshot_timestamp",
	"is_snapshot_artifact",
	"list_data_files",
	"prune_snapshots",
	"read_data_files",
	"snapshot_artifact_name",
	"write_text_atomic",
]
