"""
Main CLI application using Typer

Entry point for the dockyard command, both for operators and for the
helper containers dockyard starts.
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from dockyard.cli import backup
from dockyard.cli import config
from dockyard.cli import files
from dockyard.cli import restore
from dockyard.cli import service
from dockyard.helpers.config import Config
from dockyard.helpers.constants import VERSION
from dockyard.helpers.logging import setup_logging

# Create Typer app
app = typer.Typer(
    name="dockyard",
    help="Dockyard - back up and restore Docker containers, volumes and binds",
    add_completion=False,
)

console = Console(stderr=True)

# Register sub-commands
backup.register_to_main_app(app)
restore.register_to_main_app(app)
files.register_to_main_app(app)
service.register_to_main_app(app)
config.register_to_main_app(app)


@app.callback()
def initialize_context(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True,
        help="Increase verbosity (-v, -vv, -vvv)",
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config",
        help="Path to configuration file",
    ),
):
    """
    Dockyard - Docker backup tool

    Filesystem work runs in short-lived dockyard helper containers.
    """
    cfg = Config(config_path)
    setup_logging(verbose, cfg.log_file, cfg.log_level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg
    ctx.obj["verbosity"] = verbose


@app.command()
def version():
    """Show version information"""
    typer.echo(f"dockyard {VERSION}")


def cli_main():
    """
    Entry point for CLI

    This function is called by the console script entry point.
    """
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
