################################################################################
# DOCKYARD
#
# @file:        restore_manager.py
# @module:      dockyard.cores.restore_manager
# @description: Restores directories, volumes and containers from backups.
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
# ==============================================================================
# Hinweise:
# - Binds go back to the host path they were backed up from
# - Missing named volumes are created with the local driver
# - Restored containers are created, never started
################################################################################

from __future__ import annotations

import posixpath
from typing import Any, Dict

from docker.errors import DockerException, ImageNotFound, NotFound

from ..helpers import archive
from ..helpers.constants import OUTPUT_MOUNT_TARGET
from ..helpers.errors import DockyardError, EmptyBackupError, InvalidBackupError, MountRestoreError
from ..helpers.logging import get_logger
from ..models import CONTAINER_SPEC_KEYS, ContainerBackup, MountBackup, decode_b64
from ..types import Mount, MountKind, volume_mount
from .sidecar_runner import SidecarRunner, handle_sidecar_output

logger = get_logger(__name__)


class RestoreManager:
    """Reverse of BackupManager: archives and manifests back into Docker."""

    def __init__(self, client, runner: SidecarRunner):
        self.client = client
        self.runner = runner

    @staticmethod
    def restore_directory(archive_path: str, output: str) -> None:
        """Extract a local archive without a helper container."""
        archive.restore_directory(archive_path, output)

    def restore_directory_via_sidecar(self, archive_path: str, source: Mount, target_dir: str) -> None:
        """
        Extract ``archive_path`` (relative to ``source``) into a host directory.
        """
        logger.info(f"Restoring directory {target_dir} from {archive_path}")
        mounts = [
            source,
            Mount(source=target_dir, target=OUTPUT_MOUNT_TARGET, kind=MountKind.BIND),
        ]
        args = [
            "restore", "directory",
            posixpath.join(source.target, archive_path),
            OUTPUT_MOUNT_TARGET,
        ]
        result = self.runner.run(mounts, args)
        handle_sidecar_output(result, f"restore directory {target_dir}")

    def restore_volume(self, archive_path: str, source: Mount, target: Mount) -> None:
        """
        Extract ``archive_path`` into a volume (or bind) mount.

        Named volumes are created first when they do not exist yet.
        """
        logger.info(f"Restoring volume {target.source} from {archive_path}")
        if target.kind == MountKind.VOLUME:
            self.ensure_volume(target.source)
        args = [
            "restore", "directory",
            posixpath.join(source.target, archive_path),
            target.target,
        ]
        result = self.runner.run([source, target], args)
        handle_sidecar_output(result, f"restore volume {target.source}")

    def restore_container(self, manifest_path: str, new_name: str, source: Mount) -> str:
        """
        Recreate a container from its backup manifest.

        Args:
            manifest_path: Manifest path relative to ``source``
            new_name: Name of the container to create
            source: Mount holding the backups

        Returns:
            Id of the created (stopped) container

        Raises:
            EmptyBackupError: If the manifest is empty
            MountRestoreError: If restoring one of the mounts failed
        """
        logger.info(f"Restoring container {new_name} from {manifest_path}")
        backup = self.read_container_backup(manifest_path, source)

        for mount_backup in backup.mounts:
            label = mount_backup.mount.label
            try:
                self._restore_mount(mount_backup, source)
            except DockyardError as e:
                raise MountRestoreError(label, new_name) from e
            except DockerException:
                logger.error(f"Failed to restore mount {label} for container {new_name}")
                raise
            logger.info(f"Successfully restored mount {label}")

        if backup.image:
            self.ensure_image(backup.image)

        response = self.client.api.create_container_from_config(
            self.build_container_config(backup), name=new_name
        )
        logger.info(f"Successfully restored container {new_name}")
        return response.get("Id", "")

    def read_container_backup(self, manifest_path: str, source: Mount) -> ContainerBackup:
        """Read and decode a manifest through the helper ``cat`` command."""
        args = ["cat", "--encoded", "-f", posixpath.join(source.target, manifest_path)]
        result = self.runner.run([source], args)
        prefix = f"restore container {manifest_path}"
        # On success the last line is the encoded manifest itself
        handle_sidecar_output(result, prefix, lines=result.lines[:-1] if result.ok else None)

        encoded = result.lines[-1].strip() if result.lines else ""
        if not encoded:
            raise EmptyBackupError(manifest_path)
        try:
            if not decode_b64(encoded).strip():
                raise EmptyBackupError(manifest_path)
            return ContainerBackup.decode(encoded)
        except ValueError as e:
            raise InvalidBackupError(manifest_path, str(e).splitlines()[0]) from e

    @staticmethod
    def build_container_config(backup: ContainerBackup) -> Dict[str, Any]:
        """Raw create-container payload: preserved config plus full host config."""
        config = {
            key: value
            for key, value in backup.container_spec.items()
            if key in CONTAINER_SPEC_KEYS
        }
        config["HostConfig"] = dict(backup.host_spec)
        return config

    def ensure_volume(self, name: str) -> None:
        try:
            self.client.volumes.get(name)
            logger.debug(f"Volume {name} already exists")
        except NotFound:
            logger.info(f"Creating volume {name}")
            self.client.volumes.create(name=name, driver="local")

    def ensure_image(self, image: str) -> None:
        try:
            self.client.images.get(image)
        except ImageNotFound:
            logger.info(f"Pulling image {image}")
            self.client.images.pull(image)

    def _restore_mount(self, mount_backup: MountBackup, source: Mount) -> None:
        mount = mount_backup.mount
        if mount.is_bind:
            self.restore_directory_via_sidecar(mount_backup.archive_path, source, mount.source)
        else:
            self.restore_volume(mount_backup.archive_path, source, volume_mount(mount.name))
