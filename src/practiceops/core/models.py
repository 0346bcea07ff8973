from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict


class FrameworkSettings(BaseSettings):
    """
    Framework-level settings (the 'practiceops' section in practiceops.yaml).
    """
    model_config = SettingsConfigDict(env_prefix='PRACTICEOPS_', extra='ignore')

    env: str = "development"
    app_name: str = "Practice Ops"
    log_level: str = "INFO"


class ServerSettings(BaseSettings):
    """
    Hosting application settings (the 'server' section in practiceops.yaml).

    Falls back to the STORAGE_PATH and PORT environment variables.
    """
    model_config = SettingsConfigDict(extra='ignore')

    storage_path: str = "./mdj-data"
    port: int = Field(default=3001, ge=1, le=65535)


class OrchestrationSettings(BaseModel):
    """
    External orchestration CLI settings (the 'orchestration' section in practiceops.yaml).
    """
    model_config = ConfigDict(extra='ignore')

    compose_command: List[str] = Field(default_factory=lambda: ["docker-compose"])
    container_command: str = "docker"
    manifest_candidates: List[str] = Field(
        default_factory=lambda: ["docker-compose.yml", "docker-compose.prod.yml"],
        min_length=1,
    )
    start_timeout_seconds: float = Field(default=60.0, gt=0)
    stop_timeout_seconds: float = Field(default=30.0, gt=0)
    probe_timeout_seconds: float = Field(default=10.0, gt=0)
    restart_settle_seconds: float = Field(default=2.0, ge=0)


class DependencySpec(BaseModel):
    """
    One externally orchestrated dependency: the key it is reported under,
    the compose service backing it, and its well-known port.
    """
    model_config = ConfigDict(extra='forbid')

    name: str = Field(..., pattern=r'^[a-zA-Z][a-zA-Z0-9_-]{0,63}$')
    service: str
    port: Optional[int] = Field(default=None, ge=1, le=65535)


def default_dependencies() -> List[DependencySpec]:
    return [
        DependencySpec(name="database", service="postgres", port=5432),
        DependencySpec(name="redis", service="redis", port=6379),
    ]


class SnapshotSettings(BaseModel):
    """
    Snapshot settings (the 'snapshots' section in practiceops.yaml).
    """
    model_config = ConfigDict(extra='ignore')

    retention: int = Field(default=10, ge=1)
    format_version: str = "1.0.0"


class DataCategory(str, Enum):
    """Fixed partitions of the file-based data store."""

    CLIENTS = "clients"
    SERVICES = "services"
    TASKS = "tasks"
    COMPLIANCE = "compliance"
    CALENDAR = "calendar"


class WireModel(BaseModel):
    """Base for payloads exchanged with the HTTP boundary and the CLI."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ServiceState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"


class DeploymentMode(str, Enum):
    NATIVE = "native"
    HYBRID = "hybrid"


class ServiceStatus(WireModel):
    """Status of the hosting application or one of its dependencies."""

    status: ServiceState
    container: Optional[str] = None
    port: Optional[int] = None
    pid: Optional[int] = None


class DeploymentStatus(WireModel):
    """Aggregate status document, rebuilt on every query."""

    is_online: bool = True
    mode: DeploymentMode = DeploymentMode.NATIVE
    services: Dict[str, ServiceStatus] = Field(default_factory=dict)
    last_snapshot: Optional[datetime] = None
    uptime: int = 0


class SnapshotDocument(WireModel):
    """Composite snapshot of server status plus every data category."""

    timestamp: str
    version: str
    server_status: DeploymentStatus
    data: Dict[str, List[Any]] = Field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        # Records are opaque and must be written back untouched.
        return {
            "timestamp": self.timestamp,
            "version": self.version,
            "serverStatus": self.server_status.to_payload(),
            "data": self.data,
        }


class OperationResult(WireModel):
    """Outcome of a lifecycle operation."""

    success: bool
    message: str


class SnapshotResult(OperationResult):
    path: Optional[str] = None


class LoadResult(OperationResult):
    data: Optional[Any] = None
