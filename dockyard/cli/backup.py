"""
Backup commands for Dockyard.

``backup directory`` is the helper-mode entry point run inside helper
containers; ``backup volume`` and ``backup container`` orchestrate helpers.
"""

from typing import List, Optional

import typer
from docker.errors import DockerException

from dockyard.cli import utils
from dockyard.helpers import archive
from dockyard.helpers import ui_utils
from dockyard.helpers.errors import DockyardError
from dockyard.helpers.logging import get_logger

logger = get_logger(__name__)

# Create sub-app for backup commands
app = typer.Typer(
    help="Back up directories, volumes and containers",
)


@app.command(name="directory")
def backup_directory(
    input_path: str = typer.Argument(..., metavar="INPUT", help="Directory or file to back up"),
    output: str = typer.Argument(..., help="Directory receiving the archive"),
    name: Optional[str] = typer.Option(None, "--name", help="Archive name (defaults to a timestamp)"),
):
    """
    Archive a local directory

    The archive path relative to OUTPUT is printed as the last line.
    """
    try:
        path = archive.backup_directory(input_path, output, name=name)
    except (DockyardError, OSError) as e:
        logger.error(f"Failed to back up {input_path}: {e}")
        raise typer.Exit(1)
    typer.echo(path)


@app.command(name="volume")
def backup_volume(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Volume to back up"),
    output: Optional[str] = typer.Argument(None, help="Backup destination (defaults to config)"),
    output_type: Optional[str] = typer.Option(
        None, "--output-type", help="Destination type: directory or volume",
    ),
):
    """Back up a named volume through a helper container"""
    cfg = utils.get_config(ctx)
    destination = utils.destination_mount(
        output or cfg.backup_destination,
        utils.check_resource_type(output_type or cfg.destination_type),
    )
    utils.install_shutdown_handler(ctx)

    try:
        path = utils.get_backup_manager(ctx).backup_volume(name, destination)
    except (DockyardError, DockerException) as e:
        ui_utils.print_error(f"Backup of volume {name} failed: {utils.describe_error(e)}")
        raise typer.Exit(1)

    ui_utils.print_success(f"Backed up volume {name} to {path}")


@app.command(name="container")
def backup_container(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Container to back up"),
    output: Optional[str] = typer.Argument(None, help="Backup destination (defaults to config)"),
    output_type: Optional[str] = typer.Option(
        None, "--output-type", help="Destination type: directory or volume",
    ),
    exclude_volume: Optional[List[str]] = typer.Option(
        None, "--exclude-volume", "-e", help="Volume to leave out (repeatable)",
    ),
):
    """
    Back up a container

    Every eligible mount is archived, then a manifest describing the
    container is written next to the archives.
    """
    cfg = utils.get_config(ctx)
    destination = utils.destination_mount(
        output or cfg.backup_destination,
        utils.check_resource_type(output_type or cfg.destination_type),
    )
    excluded = set(cfg.exclude_volumes) | set(exclude_volume or [])
    utils.install_shutdown_handler(ctx)

    ui_utils.print_header(f"Backing up container {name}", f"Destination: {destination.source}")
    try:
        path = utils.get_backup_manager(ctx).backup_container(name, destination, excluded)
    except (DockyardError, DockerException) as e:
        ui_utils.print_error(f"Backup of container {name} failed: {utils.describe_error(e)}")
        raise typer.Exit(1)

    ui_utils.print_success(f"Backed up container {name} to {path}")


# Register backup commands to main app
def register_to_main_app(main_app: typer.Typer):
    """Register backup commands to main CLI app"""
    main_app.add_typer(app, name="backup")
