"""
Restore commands for Dockyard.

``restore directory`` is the helper-mode entry point; ``restore volume``
and ``restore container`` orchestrate helper containers.
"""

import os

import typer
from docker.errors import DockerException

from dockyard.cli import utils
from dockyard.helpers import archive
from dockyard.helpers import ui_utils
from dockyard.helpers.errors import DockyardError
from dockyard.helpers.logging import get_logger
from dockyard.types import bind_mount, volume_mount

logger = get_logger(__name__)

app = typer.Typer(
    help="Restore directories, volumes and containers",
)


@app.command(name="directory")
def restore_directory(
    archive_path: str = typer.Argument(..., metavar="ARCHIVE", help="Archive to extract"),
    output: str = typer.Argument(..., help="Directory to extract into"),
):
    """Extract a local archive into a directory"""
    try:
        archive.restore_directory(archive_path, output)
    except (DockyardError, OSError) as e:
        logger.error(f"Failed to restore {archive_path}: {e}")
        raise typer.Exit(1)


@app.command(name="volume")
def restore_volume(
    ctx: typer.Context,
    archive_path: str = typer.Argument(..., metavar="ARCHIVE", help="Archive path relative to INPUT"),
    input_location: str = typer.Argument(..., metavar="INPUT", help="Directory or volume holding the backups"),
    volume: str = typer.Argument(..., help="Volume (or directory) to restore into"),
    volume_type: str = typer.Option(
        "volume", "--volume-type", help="Restore target type: volume or bind",
    ),
    input_type: str = typer.Option(
        "directory", "--input-type", callback=utils.check_resource_type,
        help="Backup source type: directory or volume",
    ),
):
    """Restore a volume (or bind directory) from an archive"""
    if volume_type not in ("volume", "bind"):
        ui_utils.print_error(f"Unknown volume type {volume_type}, expected volume or bind")
        raise typer.Exit(1)

    source = utils.destination_mount(input_location, input_type)
    target = volume_mount(volume) if volume_type == "volume" else bind_mount(os.path.abspath(volume))
    utils.install_shutdown_handler(ctx)

    try:
        utils.get_restore_manager(ctx).restore_volume(archive_path, source, target)
    except (DockyardError, DockerException) as e:
        ui_utils.print_error(f"Restore of {volume} failed: {utils.describe_error(e)}")
        raise typer.Exit(1)

    ui_utils.print_success(f"Restored {volume} from {archive_path}")


@app.command(name="container")
def restore_container(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Manifest path relative to INPUT"),
    input_location: str = typer.Argument(..., metavar="INPUT", help="Directory or volume holding the backups"),
    name: str = typer.Argument(..., help="Name of the container to create"),
    input_type: str = typer.Option(
        "directory", "--input-type", callback=utils.check_resource_type,
        help="Backup source type: directory or volume",
    ),
):
    """
    Recreate a container from a manifest

    Mount contents are restored first; the container is created but not
    started.
    """
    source = utils.destination_mount(input_location, input_type)
    utils.install_shutdown_handler(ctx)

    ui_utils.print_header(f"Restoring container {name}", f"Manifest: {file}")
    try:
        container_id = utils.get_restore_manager(ctx).restore_container(file, name, source)
    except (DockyardError, DockerException) as e:
        ui_utils.print_error(f"Restore of container {name} failed: {utils.describe_error(e)}")
        raise typer.Exit(1)

    ui_utils.print_success(f"Created container {name} ({container_id[:12]})")
    ui_utils.print_info(f"Start it with: docker start {name}")


def register_to_main_app(main_app: typer.Typer):
    """Register restore commands to main CLI app"""
    main_app.add_typer(app, name="restore")
