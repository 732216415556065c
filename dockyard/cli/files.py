"""
Helper-mode file commands: ``write`` and ``cat``.

Used by the orchestrator to persist and read back container manifests on
the backup destination.
"""

import typer

from dockyard.helpers import file_utils
from dockyard.helpers.logging import get_logger

logger = get_logger(__name__)


def write_command(
    file: str = typer.Option(..., "--file", "-f", help="File to write"),
    contents: str = typer.Option(..., "--contents", "-c", help="Contents to write"),
    encoded: bool = typer.Option(False, "--encoded", "-e", help="Contents are base64 encoded"),
):
    """Write contents to a file, creating parent directories"""
    try:
        if encoded:
            file_utils.decode_and_write_file(contents, file)
        else:
            file_utils.write_file(contents, file)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to write {file}: {e}")
        raise typer.Exit(1)


def cat_command(
    file: str = typer.Option(..., "--file", "-f", help="File to print"),
    encoded: bool = typer.Option(False, "--encoded", "-e", help="Print contents base64 encoded"),
):
    """Print the contents of a file"""
    try:
        contents = file_utils.read_and_encode_file(file) if encoded else file_utils.read_file(file)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {file}: {e}")
        raise typer.Exit(1)
    typer.echo(contents)


def register_to_main_app(main_app: typer.Typer):
    """Register file commands to main CLI app"""
    main_app.command(name="write")(write_command)
    main_app.command(name="cat")(cat_command)
