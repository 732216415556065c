"""Core business logic modules for Dockyard."""

from .backup_manager import BackupManager
from .lifecycle_manager import LifecycleManager, ShutdownHandler
from .mount_classifier import MountClassifier
from .restore_manager import RestoreManager
from .scheduler import BackupScheduler
from .sidecar_runner import SidecarRunner, handle_sidecar_output

__all__ = [
    'BackupManager',
    'LifecycleManager',
    'ShutdownHandler',
    'MountClassifier',
    'RestoreManager',
    'BackupScheduler',
    'SidecarRunner',
    'handle_sidecar_output',
]
