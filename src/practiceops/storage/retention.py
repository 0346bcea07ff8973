from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from practiceops.cli.formatter import OutputFormatter

SNAPSHOT_PREFIX = "snapshot-"
SNAPSHOT_SUFFIX = ".json"
DEFAULT_RETENTION = 10


class PruneResult(BaseModel):
    """Outcome of one retention pass."""

    kept: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


def is_snapshot_artifact(file_name: str) -> bool:
    return file_name.startswith(SNAPSHOT_PREFIX) and file_name.endswith(SNAPSHOT_SUFFIX)


def list_snapshot_artifacts(snapshot_dir: Path) -> list[Path]:
    """Return timestamped artifacts newest first; names sort in timestamp order."""
    artifacts = [entry for entry in snapshot_dir.iterdir() if is_snapshot_artifact(entry.name)]
    return sorted(artifacts, key=lambda entry: entry.name, reverse=True)


def prune_snapshots(snapshot_dir: Path, keep: int = DEFAULT_RETENTION) -> PruneResult:
    """Delete all but the `keep` most recent artifacts; never raises."""
    result = PruneResult()

    try:
        artifacts = list_snapshot_artifacts(snapshot_dir)
    except OSError as exc:
        OutputFormatter.log(f"Error cleaning up old snapshots: {exc}", severity="warning")
        result.errors.append(str(exc))
        return result

    retained = max(keep, 0)
    result.kept = [artifact.name for artifact in artifacts[:retained]]

    for artifact in artifacts[retained:]:
        try:
            artifact.unlink()
        except OSError as exc:
            OutputFormatter.log(f"Error deleting old snapshot {artifact.name}: {exc}", severity="warning")
            result.errors.append(f"{artifact.name}: {exc}")
            continue
        result.deleted.append(artifact.name)
        OutputFormatter.log(f"Deleted old snapshot: {artifact.name}", severity="debug")

    return result
