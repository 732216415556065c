"""
Exception types raised by Dockyard operations.

Docker SDK exceptions are never wrapped here: daemon communication errors
propagate as raised by the ``docker`` package.
"""

from typing import List, Optional, Sequence


class DockyardError(Exception):
    """Base class for all Dockyard errors."""


class SidecarError(DockyardError):
    """A helper container exited with a non-zero code."""

    def __init__(self, args: Sequence[str], exit_code: int, output: Optional[List[str]] = None):
        self.cmd = list(args)
        self.exit_code = exit_code
        self.output = list(output or [])
        super().__init__(f"Helper exited with code {exit_code}")


class EmptyBackupError(DockyardError):
    """A container backup file was read back empty."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Found empty backup file {path}")


class ArchiveError(DockyardError):
    """Archive input or output could not be resolved."""


class InvalidBackupError(DockyardError):
    """A container backup file could not be decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid backup file {path}: {reason}")


class MountBackupError(DockyardError):
    """Backing up one mount of a container failed."""

    def __init__(self, mount_name: str, container: str):
        self.mount_name = mount_name
        self.container = container
        super().__init__(f"Failed to back up mount {mount_name} of container {container}")


class MountRestoreError(DockyardError):
    """Restoring one mount of a container failed."""

    def __init__(self, mount_name: str, container: str):
        self.mount_name = mount_name
        self.container = container
        super().__init__(f"Failed to restore mount {mount_name} for container {container}")
