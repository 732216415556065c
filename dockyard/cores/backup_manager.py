################################################################################
# DOCKYARD
#
# @file:        backup_manager.py
# @module:      dockyard.cores.backup_manager
# @description: Backs up directories, volumes and whole containers via helpers.
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
# ==============================================================================
# Hinweise:
# - Mounts are backed up one at a time, in inspect order
# - The first failing mount aborts the container backup, no manifest is written
# - Archives already written stay on the destination
################################################################################

"""
Backup orchestration.

All paths returned by this module are relative to the backup destination
root, so a manifest stays valid no matter where the destination is mounted.
"""

from __future__ import annotations

import posixpath
from typing import Collection, List

from docker.errors import DockerException

from ..helpers import archive
from ..helpers.archive import timestamp
from ..helpers.constants import (
    ARCHIVE_SUFFIX,
    BIND_BACKUP_DIR,
    CONTAINER_BACKUP_DIR,
    INPUT_MOUNT_TARGET,
    MANIFEST_SUFFIX,
    VOLUME_BACKUP_DIR,
    VOLUME_MOUNT_TARGET,
)
from ..helpers.errors import ArchiveError, DockyardError, MountBackupError
from ..helpers.logging import get_logger
from ..models import ContainerBackup, MountBackup, MountPoint, container_spec_from_config
from ..types import Mount, MountKind, SidecarResult
from .mount_classifier import MountClassifier
from .sidecar_runner import SidecarRunner, handle_sidecar_output

logger = get_logger(__name__)


def archive_name_from_output(result: SidecarResult) -> str:
    """Last whitespace separated token of the last non-empty output line."""
    for line in reversed(result.lines):
        if line.strip():
            return line.split()[-1]
    raise ArchiveError(f"Helper {result.container_name} did not report an archive path")


def bind_backup_dir(source: str) -> str:
    return f"{BIND_BACKUP_DIR}/{source.replace('/', ':')}"


class BackupManager:
    """Back up containers and their mounts to a destination mount."""

    def __init__(self, client, runner: SidecarRunner, classifier: MountClassifier):
        self.client = client
        self.runner = runner
        self.classifier = classifier

    # --------------- Host-side ---------------

    @staticmethod
    def backup_directory(input_path: str, output: str) -> str:
        """Archive a local directory without a helper container."""
        return archive.backup_directory(input_path, output)

    # --------------- Via helper containers ---------------

    def backup_directory_via_sidecar(self, input_dir: str, output: str, destination: Mount) -> str:
        """
        Back up a host directory into ``output`` on the destination.

        Args:
            input_dir: Host directory (bind source)
            output: Directory relative to the destination root
            destination: Backup destination mount

        Returns:
            Archive path relative to the destination root
        """
        logger.info(f"Backing up directory {input_dir} to {output}/ on {destination.source}")
        mounts = [
            Mount(source=input_dir, target=INPUT_MOUNT_TARGET, kind=MountKind.BIND),
            destination,
        ]
        args = [
            "backup", "directory",
            INPUT_MOUNT_TARGET,
            posixpath.join(destination.target, output),
        ]
        result = self.runner.run(mounts, args)
        handle_sidecar_output(result, f"backup directory {input_dir}")
        return posixpath.join(output, archive_name_from_output(result))

    def backup_volume(self, volume: str, destination: Mount) -> str:
        """
        Back up a named volume.

        The archive name is chosen here, so the returned path
        ``dockyard/volumes/<volume>/<timestamp>.tgz`` does not depend on
        helper output.
        """
        output = f"{VOLUME_BACKUP_DIR}/{volume}"
        name = timestamp()
        logger.info(f"Backing up volume {volume} to {output} on {destination.source}")
        mounts = [
            Mount(source=volume, target=VOLUME_MOUNT_TARGET, kind=MountKind.VOLUME),
            destination,
        ]
        args = [
            "backup", "directory",
            VOLUME_MOUNT_TARGET,
            posixpath.join(destination.target, output),
            "--name", name,
        ]
        result = self.runner.run(mounts, args)
        handle_sidecar_output(result, f"backup volume {volume}")
        return f"{output}/{name}{ARCHIVE_SUFFIX}"

    def backup_container(
        self,
        name: str,
        destination: Mount,
        exclude_volumes: Collection[str] = (),
    ) -> str:
        """
        Back up every eligible mount of a container and write its manifest.

        Args:
            name: Container name or id
            destination: Backup destination mount
            exclude_volumes: Volume names never backed up

        Returns:
            Manifest path relative to the destination root
        """
        logger.info(f"Backing up container {name} to {CONTAINER_BACKUP_DIR}/{name}")
        info = self.client.containers.get(name).attrs
        mount_points = [MountPoint.model_validate(m) for m in info.get("Mounts") or []]
        eligible = self.classifier.filter_mounts(mount_points, exclude_volumes)

        mount_backups: List[MountBackup] = []
        for mount_point in eligible:
            try:
                archive_path = self._backup_mount(mount_point, destination)
            except DockyardError as e:
                raise MountBackupError(mount_point.label, name) from e
            except DockerException:
                logger.error(f"Failed to back up mount {mount_point.label} of container {name}")
                raise
            logger.info(f"Successfully backed up to {archive_path}")
            mount_backups.append(MountBackup(archive_path=archive_path, mount=mount_point))

        backup = ContainerBackup(
            name=name,
            container_spec=container_spec_from_config(info.get("Config") or {}, info.get("Id", "")),
            host_spec=info.get("HostConfig") or {},
            mounts=mount_backups,
        )
        return self._write_container_backup(backup, destination)

    # --------------- Private ---------------

    def _backup_mount(self, mount_point: MountPoint, destination: Mount) -> str:
        if mount_point.is_bind:
            return self.backup_directory_via_sidecar(
                mount_point.source, bind_backup_dir(mount_point.source), destination
            )
        return self.backup_volume(mount_point.name, destination)

    def _write_container_backup(self, backup: ContainerBackup, destination: Mount) -> str:
        """Persist the manifest through the helper ``write`` command."""
        path = f"{CONTAINER_BACKUP_DIR}/{backup.name}/{timestamp()}{MANIFEST_SUFFIX}"
        logger.info(f"Writing container backup file {path}")
        args = [
            "write",
            "--file", posixpath.join(destination.target, path),
            "--contents", backup.encode(),
            "--encoded",
        ]
        result = self.runner.run([destination], args)
        handle_sidecar_output(result, f"backup container {backup.name}")
        return path
