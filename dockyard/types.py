################################################################################
# DOCKYARD
#
# @file:        types.py
# @module:      dockyard.types
# @description: Mount descriptors and helper-container results shared by cores.
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
# ==============================================================================
# Hinweise:
# - Mount is an immutable value record, several may point at the same volume
# - SidecarResult carries exit code and output lines of one helper run
# - Factories build the mounts the CLI hands to the managers
################################################################################

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from docker.types import Mount as DockerMount

from .helpers.constants import BACKUP_MOUNT_TARGET, VOLUME_MOUNT_TARGET


class MountKind(str, Enum):
    BIND = "bind"
    VOLUME = "volume"


@dataclass(frozen=True)
class Mount:
    source: str
    target: str
    kind: MountKind
    read_only: bool = False

    def to_docker(self) -> DockerMount:
        return DockerMount(
            target=self.target,
            source=self.source,
            type=self.kind.value,
            read_only=self.read_only,
        )

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.source}->{self.target}"


@dataclass
class SidecarResult:
    exit_code: int
    lines: List[str] = field(default_factory=list)
    container_name: str = ""
    args: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


# ---- Mount factories ----

def backup_directory_mount(path: str) -> Mount:
    return Mount(source=path, target=BACKUP_MOUNT_TARGET, kind=MountKind.BIND)


def backup_volume_mount(volume: str) -> Mount:
    return Mount(source=volume, target=BACKUP_MOUNT_TARGET, kind=MountKind.VOLUME)


def bind_mount(path: str) -> Mount:
    return Mount(source=path, target=VOLUME_MOUNT_TARGET, kind=MountKind.BIND)


def volume_mount(volume: str) -> Mount:
    return Mount(source=volume, target=VOLUME_MOUNT_TARGET, kind=MountKind.VOLUME)
