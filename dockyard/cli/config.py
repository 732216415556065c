"""
Configuration commands for Dockyard.
"""

from pathlib import Path
from typing import Optional

import typer

from dockyard.cli import utils
from dockyard.helpers import ui_utils
from dockyard.helpers.config import create_default_config

app = typer.Typer(
    help="Show, create and validate the configuration",
)


@app.command(name="show")
def config_show(ctx: typer.Context):
    """Show the effective configuration"""
    cfg = utils.get_config(ctx)
    source = str(cfg.config_file) if cfg.config_file else "built-in defaults"
    ui_utils.print_header("Dockyard configuration", f"Source: {source}")
    if not cfg.config_file:
        ui_utils.print_warning("No config file found, run 'dockyard config init' to create one")
    ui_utils.print_config_sections(cfg.items())


@app.command(name="init")
def config_init(
    path: Optional[Path] = typer.Option(None, "--path", help="Where to create the config file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    """Write a config file with default values"""
    try:
        created = create_default_config(path, force=force)
    except OSError as e:
        ui_utils.print_error(f"Could not create configuration: {e}")
        raise typer.Exit(1)
    ui_utils.print_success(f"Configuration at {created}")


@app.command(name="validate")
def config_validate(ctx: typer.Context):
    """Check the configuration for invalid values"""
    errors = utils.get_config(ctx).validate()
    if errors:
        for error in errors:
            ui_utils.print_error(error)
        raise typer.Exit(1)
    ui_utils.print_success("Configuration is valid")


@app.command(name="set")
def config_set(
    ctx: typer.Context,
    section: str = typer.Argument(..., help="Config section, e.g. backup"),
    option: str = typer.Argument(..., help="Option name, e.g. cron"),
    value: str = typer.Argument(..., help="New value"),
):
    """Change one value and save the config file"""
    cfg = utils.get_config(ctx)
    cfg.set(section, option, value)

    errors = cfg.validate()
    if errors:
        for error in errors:
            ui_utils.print_error(error)
        raise typer.Exit(1)

    try:
        path = cfg.save()
    except OSError as e:
        ui_utils.print_error(f"Could not save configuration: {e}")
        raise typer.Exit(1)
    ui_utils.print_success(f"Set {section}.{option} in {path}")


def register_to_main_app(main_app: typer.Typer):
    """Register config commands to main CLI app"""
    main_app.add_typer(app, name="config")
