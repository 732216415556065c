################################################################################
# DOCKYARD
#
# @file:        __init__.py
# @module:      dockyard
# @description: Exposes version, manifest models and core managers.
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
# ==============================================================================
# Hinweise:
# - Re-exports Config, the managers and the manifest models
# - Sets __version__ from constants.VERSION for tooling introspection
################################################################################

"""
Dockyard: backup and restore of Docker containers, volumes and bind mounts.

Filesystem work is done by short-lived dockyard helper containers, so the
orchestrating process never needs direct access to volume contents.
"""

from .helpers.constants import VERSION

__version__ = VERSION

from .helpers.config import Config
from .helpers.logging import get_logger, setup_logging
from .models import ContainerBackup, MountBackup, MountPoint
from .types import Mount, MountKind, SidecarResult
from .cores import (
    BackupManager,
    BackupScheduler,
    LifecycleManager,
    MountClassifier,
    RestoreManager,
    SidecarRunner,
)

__all__ = [
    "VERSION",
    "Config",
    "get_logger",
    "setup_logging",
    "ContainerBackup",
    "MountBackup",
    "MountPoint",
    "Mount",
    "MountKind",
    "SidecarResult",
    "BackupManager",
    "BackupScheduler",
    "LifecycleManager",
    "MountClassifier",
    "RestoreManager",
    "SidecarRunner",
]
