"""
Long-running and maintenance commands: ``watch`` and ``cleanup``.
"""

from typing import List, Optional

import typer
from docker.errors import DockerException

from dockyard.cli import utils
from dockyard.cores import BackupScheduler
from dockyard.helpers import ui_utils
from dockyard.helpers.errors import DockyardError
from dockyard.helpers.logging import get_logger

logger = get_logger(__name__)


def watch_command(
    ctx: typer.Context,
    output: Optional[str] = typer.Argument(None, help="Backup destination (defaults to config)"),
    output_type: Optional[str] = typer.Option(
        None, "--output-type", help="Destination type: directory or volume",
    ),
    cron: Optional[str] = typer.Option(None, "--cron", help="Cron expression for backup passes"),
    exclude_volume: Optional[List[str]] = typer.Option(
        None, "--exclude-volume", help="Volume to leave out (repeatable)",
    ),
    exclude_container: Optional[List[str]] = typer.Option(
        None, "--exclude-container", help="Container to leave out (repeatable)",
    ),
):
    """
    Back up all running containers on a schedule

    Containers labelled com.github.dockyard.enabled=false are skipped.
    """
    cfg = utils.get_config(ctx)
    destination = utils.destination_mount(
        output or cfg.backup_destination,
        utils.check_resource_type(output_type or cfg.destination_type),
    )

    try:
        scheduler = BackupScheduler(
            utils.get_client(ctx),
            utils.get_backup_manager(ctx),
            destination,
            cron=cron or cfg.cron,
            exclude_volumes=set(cfg.exclude_volumes) | set(exclude_volume or []),
            exclude_containers=set(cfg.exclude_containers) | set(exclude_container or []),
        )
    except ValueError as e:
        ui_utils.print_error(str(e))
        raise typer.Exit(1)

    utils.install_shutdown_handler(ctx)
    ui_utils.print_header("Dockyard watch", f"Schedule: {scheduler.cron}  Destination: {destination.source}")

    try:
        scheduler.run_forever()
    except (DockyardError, DockerException) as e:
        ui_utils.print_error(f"Backup pass failed: {utils.describe_error(e)}")
        raise typer.Exit(1)


def cleanup_command(
    ctx: typer.Context,
    pid: Optional[int] = typer.Option(None, "--pid", help="Only remove helpers started by this PID"),
):
    """Stop and remove helper containers left behind"""
    manager = utils.get_lifecycle_manager(ctx)
    try:
        if pid is None:
            removed = manager.cleanup_all()
        else:
            removed = manager.cleanup_by_owner(pid)
    except DockerException as e:
        ui_utils.print_error(f"Cleanup failed: {e}")
        raise typer.Exit(1)

    if removed:
        ui_utils.print_success(f"Removed {removed} helper containers")
    else:
        ui_utils.print_info("No helper containers found")


def register_to_main_app(main_app: typer.Typer):
    """Register service commands to main CLI app"""
    main_app.command(name="watch")(watch_command)
    main_app.command(name="cleanup")(cleanup_command)
