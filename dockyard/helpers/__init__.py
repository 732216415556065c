"""Helper modules and utilities for Dockyard."""

from .config import Config, create_default_config
from .constants import VERSION, DEFAULT_CONFIG_PATHS
from .docker_client import create_client
from .errors import (
    DockyardError,
    SidecarError,
    EmptyBackupError,
    InvalidBackupError,
    ArchiveError,
    MountBackupError,
    MountRestoreError,
)
from .logging import get_logger, setup_logging

__all__ = [
    'Config',
    'create_default_config',
    'VERSION',
    'DEFAULT_CONFIG_PATHS',
    'create_client',
    'DockyardError',
    'SidecarError',
    'EmptyBackupError',
    'InvalidBackupError',
    'ArchiveError',
    'MountBackupError',
    'MountRestoreError',
    'get_logger',
    'setup_logging',
]
