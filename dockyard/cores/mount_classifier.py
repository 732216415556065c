################################################################################
# DOCKYARD
#
# @file:        mount_classifier.py
# @module:      dockyard.cores.mount_classifier
# @description: Decides which container mounts take part in a backup.
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
# ==============================================================================
# Hinweise:
# - Binds are included unless they point at the daemon control socket
# - Volumes on NFS drivers and excluded volumes are skipped
# - Every other mount type (tmpfs, npipe, ...) is skipped
################################################################################

from __future__ import annotations

from typing import Collection, List

from ..helpers.constants import DOCKER_SOCKET, NETWORK_VOLUME_TYPES
from ..helpers.logging import get_logger
from ..models import MountPoint

logger = get_logger(__name__)


class MountClassifier:
    """Filter container mounts down to the ones worth backing up."""

    def __init__(self, client, docker_socket: str = DOCKER_SOCKET):
        self.client = client
        self.docker_socket = docker_socket

    def should_include(self, mount: MountPoint, exclude_volumes: Collection[str] = ()) -> bool:
        """
        Decide whether ``mount`` participates in a backup.

        Named volumes are inspected on the daemon to read their driver
        options; daemon errors propagate unchanged.
        """
        if mount.is_bind:
            if mount.source == self.docker_socket:
                logger.info(f"Ignoring bind {mount.source}")
                return False
            logger.info(f"Including bind {mount.source}")
            return True

        if mount.is_volume:
            volume_name = mount.name
            options = self.client.volumes.get(volume_name).attrs.get("Options") or {}
            if options.get("type") in NETWORK_VOLUME_TYPES:
                logger.info(f"Ignoring network volume {volume_name}")
                return False
            if volume_name in exclude_volumes:
                logger.info(f"Ignoring excluded volume {volume_name}")
                return False
            logger.info(f"Including volume {volume_name}")
            return True

        logger.info(f"Ignoring mount with type {mount.type}")
        return False

    def filter_mounts(
        self,
        mounts: List[MountPoint],
        exclude_volumes: Collection[str] = (),
    ) -> List[MountPoint]:
        """Eligible mounts, in their original order."""
        return [m for m in mounts if self.should_include(m, exclude_volumes)]
