from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import aiofiles
from pydantic import BaseModel, Field

from practiceops.cli.formatter import OutputFormatter
from practiceops.core.models import DataCategory

DATA_FILE_SUFFIX = ".json"
INDEX_FILE_NAME = "index.json"


class CategoryReadResult(BaseModel):
    """Records read from one category directory plus the files that were skipped."""

    category: str
    records: list[Any] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


def list_data_files(category_dir: Path) -> list[Path]:
    """Return record files in directory enumeration order, excluding the index file."""
    return [
        entry
        for entry in category_dir.iterdir()
        if entry.name.endswith(DATA_FILE_SUFFIX) and entry.name != INDEX_FILE_NAME
    ]


async def read_data_files(storage_root: Path, category: DataCategory | str) -> CategoryReadResult:
    """Read and parse every record of a category.

    A file that cannot be read or parsed is skipped with a warning; a missing
    or unlistable directory yields an empty result.
    """
    category_name = category.value if isinstance(category, DataCategory) else str(category)
    result = CategoryReadResult(category=category_name)
    category_dir = Path(storage_root) / category_name

    try:
        if not category_dir.exists():
            return result
        data_files = list_data_files(category_dir)
    except OSError as exc:
        OutputFormatter.log(f"Error reading data files for category {category_name}: {exc}", severity="warning")
        return result

    for data_file in data_files:
        try:
            async with aiofiles.open(data_file, "r", encoding="utf-8") as handle:
                content = await handle.read()
            result.records.append(json.loads(content))
        except (OSError, ValueError) as exc:
            OutputFormatter.log(f"Error reading file {data_file.name}: {exc}", severity="warning")
            result.skipped.append(data_file.name)

    return result
