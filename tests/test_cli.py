import json

import pytest
from typer.testing import CliRunner

from practiceops.cli.formatter import OutputFormatter
from practiceops.cli.main import app

runner = CliRunner()


def _combined_output(result) -> str:
    try:
        stderr = result.stderr
    except ValueError:
        stderr = ""
    return f"{result.stdout}{stderr}"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    monkeypatch.delenv("STORAGE_PATH", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("PRACTICEOPS_LOG_LEVEL", raising=False)
    yield
    OutputFormatter.set_level("info")


@pytest.fixture
def data_root(tmp_path):
    clients = tmp_path / "mdj-data" / "clients"
    clients.mkdir(parents=True)
    (clients / "c-1.json").write_text(json.dumps({"id": "c-1"}))
    (clients / "index.json").write_text(json.dumps(["c-1"]))
    return tmp_path


def test_help_lists_commands():
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("status", "start", "stop", "restart", "snapshot", "load", "snapshots", "prune"):
        assert command in result.stdout


def test_status_native_mode(data_root):
    result = runner.invoke(app, ["status", "--root", str(data_root)])

    assert result.exit_code == 0
    assert '"mode": "native"' in result.stdout
    assert '"isOnline": true' in result.stdout
    assert '"api"' in result.stdout
    assert '"database"' not in result.stdout
    assert '"redis"' not in result.stdout


def test_status_table(data_root):
    result = runner.invoke(app, ["status", "--root", str(data_root), "--table"])

    assert result.exit_code == 0
    assert "Server Status (native)" in _combined_output(result)


def test_missing_root_exits_with_error(tmp_path):
    result = runner.invoke(app, ["status", "--root", str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert "Root directory" in _combined_output(result)


def test_invalid_config_exits_with_error(tmp_path):
    (tmp_path / "practiceops.yaml").write_text("snapshots:\n  retention: 0\n")

    result = runner.invoke(app, ["status", "--root", str(tmp_path)])

    assert result.exit_code == 1
    assert "Invalid configuration" in _combined_output(result)


def test_start_without_manifest_fails(data_root):
    result = runner.invoke(app, ["start", "--root", str(data_root)])

    assert result.exit_code == 1
    assert '"success": false' in result.stdout
    assert "Docker Compose file not found. Docker services are not configured." in result.stdout


@pytest.mark.parametrize("command", ["stop", "restart"])
def test_stop_and_restart_without_manifest_fail(data_root, command):
    result = runner.invoke(app, [command, "--root", str(data_root)])

    assert result.exit_code == 1
    assert "Docker services are not configured" in result.stdout


def test_snapshot_then_load(data_root):
    created = runner.invoke(app, ["snapshot", "--root", str(data_root)])

    assert created.exit_code == 0
    assert "Snapshot created successfully" in created.stdout
    assert (data_root / "mdj-data" / "snapshots" / "latest.json").exists()

    loaded = runner.invoke(app, ["load", "--root", str(data_root)])

    assert loaded.exit_code == 0
    assert "Snapshot loaded successfully" in loaded.stdout
    assert '"id": "c-1"' in loaded.stdout


def test_load_missing_snapshot_exits_with_error(data_root):
    result = runner.invoke(app, ["load", "--root", str(data_root)])

    assert result.exit_code == 1
    assert "Snapshot file not found" in result.stdout


def test_load_explicit_path(data_root, tmp_path):
    snapshot_file = tmp_path / "manual.json"
    snapshot_file.write_text(json.dumps({"timestamp": "manual", "data": {}}))

    result = runner.invoke(app, ["load", "--root", str(data_root), "--path", str(snapshot_file)])

    assert result.exit_code == 0
    assert '"timestamp": "manual"' in result.stdout


def test_snapshots_lists_newest_first(data_root):
    snapshot_dir = data_root / "mdj-data" / "snapshots"
    snapshot_dir.mkdir()
    (snapshot_dir / "snapshot-2026-01-01T00-00-00-000Z.json").write_text("{}")
    (snapshot_dir / "snapshot-2026-01-02T00-00-00-000Z.json").write_text("{}")
    (snapshot_dir / "latest.json").write_text("{}")

    result = runner.invoke(app, ["snapshots", "--root", str(data_root)])

    assert result.exit_code == 0
    newer = result.stdout.index("snapshot-2026-01-02")
    older = result.stdout.index("snapshot-2026-01-01")
    assert newer < older
    assert "latest.json" not in result.stdout


def test_snapshots_table_without_artifacts(data_root):
    result = runner.invoke(app, ["snapshots", "--root", str(data_root), "--table"])

    assert result.exit_code == 0
    assert "No snapshots found." in _combined_output(result)


def test_prune_with_keep(data_root):
    snapshot_dir = data_root / "mdj-data" / "snapshots"
    snapshot_dir.mkdir()
    for day in range(1, 5):
        (snapshot_dir / f"snapshot-2026-01-0{day}T00-00-00-000Z.json").write_text("{}")

    result = runner.invoke(app, ["prune", "--root", str(data_root), "--keep", "2"])

    assert result.exit_code == 0
    remaining = sorted(entry.name for entry in snapshot_dir.iterdir())
    assert remaining == [
        "snapshot-2026-01-03T00-00-00-000Z.json",
        "snapshot-2026-01-04T00-00-00-000Z.json",
    ]


def test_prune_without_snapshot_directory_succeeds(data_root):
    result = runner.invoke(app, ["prune", "--root", str(data_root)])

    assert result.exit_code == 0
    assert '"deleted": []' in result.stdout


def test_prune_rejects_zero_keep(data_root):
    result = runner.invoke(app, ["prune", "--root", str(data_root), "--keep", "0"])

    assert result.exit_code != 0
