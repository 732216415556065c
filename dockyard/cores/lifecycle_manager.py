################################################################################
# DOCKYARD
#
# @file:        lifecycle_manager.py
# @module:      dockyard.cores.lifecycle_manager
# @description: Sweeps helper containers and cleans up on SIGINT/SIGTERM.
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
# ==============================================================================
# Hinweise:
# - Owner-scoped cleanup uses the PID label set by the sidecar runner
# - Full cleanup targets every container carrying the tool label
# - A second signal during cleanup exits immediately
################################################################################

from __future__ import annotations

import signal
import sys
from typing import Callable, List, Optional

from ..helpers.constants import CONTAINER_STOP_TIMEOUT, ENABLED_VALUE, OWNER_LABEL, TOOL_LABEL
from ..helpers.logging import get_logger

logger = get_logger(__name__)


class LifecycleManager:
    """Stop and remove containers started by dockyard."""

    def __init__(self, client, stop_timeout: int = CONTAINER_STOP_TIMEOUT):
        self.client = client
        self.stop_timeout = stop_timeout

    def containers_by_owner(self, pid: int) -> List:
        return self.client.containers.list(all=True, filters={"label": f"{OWNER_LABEL}={pid}"})

    def managed_containers(self) -> List:
        return self.client.containers.list(all=True, filters={"label": f"{TOOL_LABEL}={ENABLED_VALUE}"})

    def cleanup_by_owner(self, pid: int) -> int:
        """Remove every helper started by process ``pid``. Returns the count."""
        containers = self.containers_by_owner(pid)
        logger.info(f"Removing {len(containers)} child containers for PID {pid}")
        return self._stop_and_remove(containers)

    def cleanup_all(self) -> int:
        """Remove every helper dockyard ever started. Returns the count."""
        containers = self.managed_containers()
        logger.info(f"Removing {len(containers)} dockyard containers")
        return self._stop_and_remove(containers)

    def _stop_and_remove(self, containers: List) -> int:
        for container in containers:
            if container.status == "running":
                logger.info(f"Stopping container {container.name}")
                container.stop(timeout=self.stop_timeout)
            logger.info(f"Removing container {container.name}")
            container.remove(force=True)
        return len(containers)


class ShutdownHandler:
    """
    Remove this process's helper containers when it is interrupted.

    The handler opens a fresh daemon connection, since the signal may
    arrive while the main client is in the middle of a call.

    Args:
        client_factory: Callable returning a new Docker client
        pid: Owner PID whose helpers are removed
        stop_timeout: Seconds to wait when stopping a running helper
    """

    def __init__(
        self,
        client_factory: Callable,
        pid: int,
        stop_timeout: int = CONTAINER_STOP_TIMEOUT,
    ):
        self.client_factory = client_factory
        self.pid = pid
        self.stop_timeout = stop_timeout
        self._cleanup_in_progress = False
        self._original_sigint: Optional[Callable] = None
        self._original_sigterm: Optional[Callable] = None

    def install_handlers(self) -> None:
        self._original_sigint = signal.signal(signal.SIGINT, self._signal_handler)
        self._original_sigterm = signal.signal(signal.SIGTERM, self._signal_handler)
        logger.debug("Signal handlers installed for SIGINT and SIGTERM")

    def restore_handlers(self) -> None:
        if self._original_sigint is not None:
            signal.signal(signal.SIGINT, self._original_sigint)
            self._original_sigint = None
        if self._original_sigterm is not None:
            signal.signal(signal.SIGTERM, self._original_sigterm)
            self._original_sigterm = None

    def _signal_handler(self, signum: int, frame) -> None:
        exit_code = 128 + signum
        if self._cleanup_in_progress:
            logger.warning("Cleanup already running, exiting immediately")
            sys.exit(exit_code)
            return

        self._cleanup_in_progress = True
        logger.warning(f"Received {signal.Signals(signum).name}, removing helper containers")
        try:
            client = self.client_factory()
            LifecycleManager(client, self.stop_timeout).cleanup_by_owner(self.pid)
        except Exception as e:
            logger.error(f"Cleanup of helper containers failed: {e}")
            exit_code = 1
        sys.exit(exit_code)
