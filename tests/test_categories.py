import json

import pytest

from practiceops.core.models import DataCategory
from practiceops.storage.categories import list_data_files, read_data_files


def _write(path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))


@pytest.mark.anyio
async def test_read_data_files_excludes_index(tmp_path):
    _write(tmp_path / "clients" / "a.json", {"id": "1"})
    _write(tmp_path / "clients" / "b.json", {"id": "2"})
    _write(tmp_path / "clients" / "index.json", {"ids": ["1", "2"]})

    result = await read_data_files(tmp_path, "clients")

    assert result.category == "clients"
    assert sorted(result.records, key=lambda record: record["id"]) == [{"id": "1"}, {"id": "2"}]
    assert result.skipped == []


@pytest.mark.anyio
async def test_read_data_files_keeps_directory_enumeration_order(tmp_path):
    for name in ("c.json", "a.json", "b.json"):
        _write(tmp_path / "tasks" / name, {"file": name})

    result = await read_data_files(tmp_path, DataCategory.TASKS)

    expected = [entry.name for entry in list_data_files(tmp_path / "tasks")]
    assert [record["file"] for record in result.records] == expected


@pytest.mark.anyio
async def test_read_data_files_missing_directory_is_empty(tmp_path):
    result = await read_data_files(tmp_path, DataCategory.CALENDAR)

    assert result.records == []
    assert result.skipped == []


@pytest.mark.anyio
async def test_read_data_files_skips_malformed_but_keeps_siblings(tmp_path):
    _write(tmp_path / "compliance" / "good.json", {"id": "ok"})
    _write(tmp_path / "compliance" / "bad.json", "{not valid json")

    result = await read_data_files(tmp_path, DataCategory.COMPLIANCE)

    assert result.records == [{"id": "ok"}]
    assert result.skipped == ["bad.json"]


@pytest.mark.anyio
async def test_read_data_files_ignores_non_json_and_skips_unreadable(tmp_path):
    _write(tmp_path / "services" / "notes.txt", "not a record")
    (tmp_path / "services" / "nested.json").mkdir()
    _write(tmp_path / "services" / "svc.json", {"id": "svc"})

    result = await read_data_files(tmp_path, DataCategory.SERVICES)

    assert result.records == [{"id": "svc"}]
    assert result.skipped == ["nested.json"]


def test_list_data_files_filters_by_suffix(tmp_path):
    _write(tmp_path / "clients" / "a.json", {})
    _write(tmp_path / "clients" / "index.json", {})
    _write(tmp_path / "clients" / "a.json.bak", "{}")

    names = sorted(entry.name for entry in list_data_files(tmp_path / "clients"))

    assert names == ["a.json"]
