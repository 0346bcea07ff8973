from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from practiceops.core.models import (
    DependencySpec,
    FrameworkSettings,
    OrchestrationSettings,
    ServerSettings,
    SnapshotSettings,
    default_dependencies,
)

SNAPSHOT_DIR_NAME = "snapshots"
LATEST_SNAPSHOT_NAME = "latest.json"


class LifecycleContext(BaseModel):
    """
    Parsed configuration shared by every lifecycle component.
    """
    model_config = ConfigDict(extra="forbid")

    # Framework Settings (Maps to 'practiceops' section)
    settings: FrameworkSettings = Field(default_factory=FrameworkSettings)

    # Hosting application (Maps to 'server' section)
    server: ServerSettings = Field(default_factory=ServerSettings)

    # Orchestration CLI (Maps to 'orchestration' section)
    orchestration: OrchestrationSettings = Field(default_factory=OrchestrationSettings)

    # Orchestrated dependency registry (Maps to 'dependencies' section)
    dependencies: List[DependencySpec] = Field(default_factory=default_dependencies)

    # Snapshot retention and format (Maps to 'snapshots' section)
    snapshots: SnapshotSettings = Field(default_factory=SnapshotSettings)

    # Directory relative paths are resolved against
    root_dir: Path = Field(default_factory=Path.cwd)

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None, **data: Any):
        """
        Initialize the context, optionally with a configuration dictionary.
        """
        if config_dict:
            if 'settings' not in data:
                data['settings'] = FrameworkSettings(**(config_dict.get('practiceops') or {}))
            if 'server' not in data:
                data['server'] = ServerSettings(**(config_dict.get('server') or {}))
            if 'orchestration' not in data:
                data['orchestration'] = OrchestrationSettings(**(config_dict.get('orchestration') or {}))
            if 'dependencies' not in data and config_dict.get('dependencies') is not None:
                data['dependencies'] = [
                    DependencySpec(**entry) for entry in config_dict['dependencies']
                ]
            if 'snapshots' not in data:
                data['snapshots'] = SnapshotSettings(**(config_dict.get('snapshots') or {}))

        super().__init__(**data)

    @property
    def storage_root(self) -> Path:
        storage_path = Path(self.server.storage_path).expanduser()
        if storage_path.is_absolute():
            return storage_path
        return self.root_dir / storage_path

    @property
    def snapshot_dir(self) -> Path:
        return self.storage_root / SNAPSHOT_DIR_NAME
