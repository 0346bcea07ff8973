import json
import typer
from typing import Any, List
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from practiceops.core.models import DeploymentStatus

# Create a stderr console for logging
error_console = Console(stderr=True)

SEVERITY_LEVELS = {
    "debug": 10,
    "info": 20,
    "success": 20,
    "warning": 30,
    "error": 40,
    "critical": 50,
}

_log_threshold = SEVERITY_LEVELS["info"]


class OutputFormatter:
    """
    Handles output formatting for the CLI and for lifecycle components.
    Ensures separation of concerns between System Logs (stderr) and Data (stdout).
    """

    @staticmethod
    def set_level(level: str) -> None:
        """Set the minimum severity printed by `log`; unknown names fall back to info."""
        global _log_threshold
        _log_threshold = SEVERITY_LEVELS.get(level.lower(), SEVERITY_LEVELS["info"])

    @staticmethod
    def log(message: str, severity: str = "info") -> None:
        """
        Print system messages to stderr with color coding.
        """
        if SEVERITY_LEVELS.get(severity, SEVERITY_LEVELS["info"]) < _log_threshold:
            return

        style = "white"
        prefix = "[SYSTEM]"

        if severity == "debug":
            style = "dim"
        elif severity == "warning":
            style = "yellow"
        elif severity == "error":
            style = "red"
        elif severity == "critical":
            style = "bold red"
        elif severity == "success":
            style = "green"

        error_console.print(f"[{style}]{escape(prefix)} {escape(message)}[/{style}]")

    @staticmethod
    def print_status(status: DeploymentStatus) -> None:
        """
        Prints a human-readable table of the deployment status.
        """
        title = f"Server Status ({status.mode.value})"
        table = Table(title=title, header_style="bold cyan")
        table.add_column("Service", style="bold")
        table.add_column("Status")
        table.add_column("Container")
        table.add_column("Port")
        table.add_column("PID")

        for name, service in status.services.items():
            color = "green"
            if service.status.value == "stopped":
                color = "yellow"
            elif service.status.value == "error":
                color = "red"

            table.add_row(
                name,
                f"[{color}]{service.status.value.upper()}[/{color}]",
                service.container or "-",
                str(service.port) if service.port is not None else "-",
                str(service.pid) if service.pid is not None else "-",
            )

        error_console.print(table)
        last_snapshot = status.last_snapshot.isoformat() if status.last_snapshot else "never"
        error_console.print(f"Uptime: {status.uptime}s  Last snapshot: {last_snapshot}")
        error_console.print()

    @staticmethod
    def print_snapshots(snapshots: List[BaseModel]) -> None:
        """Print the retained snapshot artifacts, newest first."""
        if not snapshots:
            OutputFormatter.log("No snapshots found.", severity="info")
            return

        table = Table(title="Snapshots", header_style="bold cyan")
        table.add_column("Name", style="bold")
        table.add_column("Size")
        table.add_column("Modified")

        for info in snapshots:
            payload = info.model_dump(mode="json")
            table.add_row(payload["name"], str(payload["size_bytes"]), payload["modified_at"])

        error_console.print(table)
        error_console.print()

    @staticmethod
    def print_data(data: Any) -> None:
        """
        Print a result payload to stdout.
        Handles Pydantic models and complex types.
        """
        if isinstance(data, str):
            typer.echo(data)
            return

        def json_serializer(obj):
            if isinstance(obj, BaseModel):
                return obj.model_dump(mode='json', by_alias=True, exclude_none=True)
            if hasattr(obj, "isoformat"):
                return obj.isoformat()
            return str(obj)

        try:
            output = json.dumps(data, indent=2, default=json_serializer)
            typer.echo(output)
        except (TypeError, ValueError) as e:
            OutputFormatter.log(f"JSON Serialization failed: {e}", severity="error")
            typer.echo(str(data))
