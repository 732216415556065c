"""
Shared CLI plumbing.

Configuration and verbosity are put on the typer context once by the main
callback; commands pull their tools from there.
"""

from __future__ import annotations

import os
from typing import Optional

import typer

from ..cores import (
    BackupManager,
    LifecycleManager,
    MountClassifier,
    RestoreManager,
    ShutdownHandler,
    SidecarRunner,
)
from ..helpers.config import Config
from ..helpers.constants import RESOURCE_TYPES
from ..helpers.docker_client import create_client
from ..types import Mount, backup_directory_mount, backup_volume_mount


def get_config(ctx: typer.Context) -> Config:
    """Get config from the tool bench, falling back to defaults."""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        obj["config"] = Config()
    return obj["config"]


def get_verbosity(ctx: typer.Context) -> int:
    return ctx.ensure_object(dict).get("verbosity", 0)


def get_client(ctx: typer.Context):
    """Docker client shared by every manager of this invocation."""
    obj = ctx.ensure_object(dict)
    if "client" not in obj:
        obj["client"] = create_client(get_config(ctx).docker_base_url)
    return obj["client"]


def get_runner(ctx: typer.Context) -> SidecarRunner:
    obj = ctx.ensure_object(dict)
    if "runner" not in obj:
        cfg = get_config(ctx)
        obj["runner"] = SidecarRunner(
            get_client(ctx),
            cfg.sidecar_image,
            verbosity=get_verbosity(ctx),
            owner_pid=os.getpid(),
        )
    return obj["runner"]


def get_backup_manager(ctx: typer.Context) -> BackupManager:
    cfg = get_config(ctx)
    classifier = MountClassifier(get_client(ctx), cfg.docker_socket)
    return BackupManager(get_client(ctx), get_runner(ctx), classifier)


def get_restore_manager(ctx: typer.Context) -> RestoreManager:
    return RestoreManager(get_client(ctx), get_runner(ctx))


def get_lifecycle_manager(ctx: typer.Context) -> LifecycleManager:
    return LifecycleManager(get_client(ctx), get_config(ctx).stop_timeout)


def install_shutdown_handler(ctx: typer.Context) -> ShutdownHandler:
    """Clean up this process's helpers if it gets interrupted."""
    cfg = get_config(ctx)
    handler = ShutdownHandler(
        lambda: create_client(cfg.docker_base_url),
        os.getpid(),
        cfg.stop_timeout,
    )
    handler.install_handlers()
    return handler


def check_resource_type(value: str) -> str:
    """Typer callback accepting only known resource types."""
    if value not in RESOURCE_TYPES:
        raise typer.BadParameter(f"must be one of {', '.join(RESOURCE_TYPES)}")
    return value


def destination_mount(location: str, resource_type: str) -> Mount:
    """Backup destination (or source) mount for a directory or volume."""
    if resource_type == "volume":
        return backup_volume_mount(location)
    return backup_directory_mount(os.path.abspath(location))


def describe_error(error: Exception) -> str:
    """Error message including the underlying cause, if any."""
    cause: Optional[BaseException] = error.__cause__
    if cause is not None:
        return f"{error}: {cause}"
    return str(error)
