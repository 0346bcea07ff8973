import asyncio
import typer
from pathlib import Path
from typing import Optional

from practiceops.cli.formatter import OutputFormatter
from practiceops.config.loader import CONFIG_FILE_NAME, load_config
from practiceops.core.context import LifecycleContext
from practiceops.core.models import OperationResult
from practiceops.runtime.controller import ServerLifecycleController

app = typer.Typer(
    name="practiceops",
    help="Server lifecycle and snapshot manager for the practice API",
    rich_markup_mode=None,
)

ROOT_HELP = f"Directory holding {CONFIG_FILE_NAME}; relative paths resolve against it."


def _build_controller(root_dir: Path) -> ServerLifecycleController:
    root_path = root_dir.expanduser().resolve()
    if not root_path.exists():
        OutputFormatter.log(f"Error: Root directory '{root_dir}' does not exist.", severity="error")
        raise typer.Exit(code=1)

    config_data = load_config(root_path / CONFIG_FILE_NAME)
    try:
        context = LifecycleContext(config_dict=config_data, root_dir=root_path)
    except (TypeError, ValueError) as e:
        OutputFormatter.log(f"Error: Invalid configuration in {CONFIG_FILE_NAME}: {e}", severity="error")
        raise typer.Exit(code=1)

    OutputFormatter.set_level(context.settings.log_level)
    return ServerLifecycleController(root_dir=root_path, context=context)


def _emit_result(result: OperationResult) -> None:
    OutputFormatter.print_data(result.to_payload())
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def status(
    root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_HELP),
    table: bool = typer.Option(False, "--table", help="Render a table on stderr instead of JSON."),
):
    """
    Report deployment mode and the status of the API and its dependencies.
    """
    controller = _build_controller(root)
    result = asyncio.run(controller.get_status())
    if table:
        OutputFormatter.print_status(result)
        return
    OutputFormatter.print_data(result.to_payload())


@app.command()
def start(root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_HELP)):
    """Start the orchestrated dependencies."""
    controller = _build_controller(root)
    _emit_result(asyncio.run(controller.start_dependencies()))


@app.command()
def stop(root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_HELP)):
    """Stop the orchestrated dependencies."""
    controller = _build_controller(root)
    _emit_result(asyncio.run(controller.stop_dependencies()))


@app.command()
def restart(root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_HELP)):
    """Stop then start the orchestrated dependencies."""
    controller = _build_controller(root)
    _emit_result(asyncio.run(controller.restart_dependencies()))


@app.command()
def snapshot(root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_HELP)):
    """
    Snapshot every data category plus server status and prune old artifacts.
    """
    controller = _build_controller(root)
    _emit_result(asyncio.run(controller.create_snapshot()))


@app.command()
def load(
    root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_HELP),
    path: Optional[str] = typer.Option(None, "--path", "-p", help="Snapshot file; defaults to the latest snapshot."),
):
    """Load a snapshot document and print it."""
    controller = _build_controller(root)
    _emit_result(asyncio.run(controller.load_snapshot(path)))


@app.command()
def snapshots(
    root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_HELP),
    table: bool = typer.Option(False, "--table", help="Render a table on stderr instead of JSON."),
):
    """List retained snapshot artifacts, newest first."""
    controller = _build_controller(root)
    entries = controller.list_snapshots()
    if table:
        OutputFormatter.print_snapshots(entries)
        return
    OutputFormatter.print_data([entry.model_dump(mode="json") for entry in entries])


@app.command()
def prune(
    root: Path = typer.Option(Path("."), "--root", "-r", help=ROOT_HELP),
    keep: Optional[int] = typer.Option(None, "--keep", "-k", min=1, help="Artifacts to retain; defaults to the configured retention."),
):
    """Delete snapshot artifacts beyond the retention window."""
    controller = _build_controller(root)
    result = controller.prune_snapshots(keep)
    OutputFormatter.print_data(result.model_dump(mode="json"))
    if result.errors:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
