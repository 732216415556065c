################################################################################
# DOCKYARD
#
# @file:        sidecar_runner.py
# @module:      dockyard.cores.sidecar_runner
# @description: Runs dockyard itself inside a short-lived helper container.
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
# ==============================================================================
# Hinweise:
# - Helpers are labelled with the owner PID so cleanup can find them
# - Helpers are labelled as disabled so scheduled passes skip them
# - The helper container is force-removed whatever the outcome
################################################################################

"""
Sidecar runner.

The orchestrating process cannot reach the contents of named volumes, so
filesystem work is delegated to a copy of dockyard running in a container
with the relevant mounts attached.
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import List, Optional, Sequence

from docker.errors import APIError, ImageNotFound, NotFound

from ..helpers.constants import (
    DISABLED_VALUE,
    ENABLED_LABEL,
    ENABLED_VALUE,
    OWNER_LABEL,
    PROGRAM_NAME,
    TOOL_LABEL,
    UNREADABLE_STATES,
)
from ..helpers.errors import SidecarError
from ..helpers.logging import get_logger
from ..types import Mount, SidecarResult

logger = get_logger(__name__)


def verbosity_args(verbosity: int) -> List[str]:
    """Mirror the orchestrator's ``-v`` count as a single helper flag."""
    if verbosity > 0:
        return ["-" + "v" * verbosity]
    return []


class SidecarRunner:
    """
    Run dockyard helper commands in throwaway containers.

    Args:
        client: Docker client shared by the orchestrators
        image: Image reference of the dockyard helper
        verbosity: ``-v`` count passed on to the helper
        owner_pid: Process id stored in the owner label
    """

    def __init__(self, client, image: str, verbosity: int = 0, owner_pid: Optional[int] = None):
        self.client = client
        self.image = image
        self.verbosity = verbosity
        self.owner_pid = owner_pid if owner_pid is not None else os.getpid()
        self._resolved_image: Optional[str] = None

    def labels(self) -> dict:
        return {
            OWNER_LABEL: str(self.owner_pid),
            TOOL_LABEL: ENABLED_VALUE,
            ENABLED_LABEL: DISABLED_VALUE,
        }

    def command(self, args: Sequence[str]) -> List[str]:
        return [PROGRAM_NAME, *verbosity_args(self.verbosity), *args]

    def resolve_image(self) -> str:
        """Make sure the helper image is available locally, pulling it once."""
        if self._resolved_image is None:
            try:
                self.client.images.get(self.image)
            except ImageNotFound:
                logger.info(f"Image {self.image} not found locally, pulling")
                self.client.images.pull(self.image)
            self._resolved_image = self.image
        return self._resolved_image

    def run(self, mounts: Sequence[Mount], args: Sequence[str]) -> SidecarResult:
        """
        Run one helper command to completion.

        Args:
            mounts: Mounts attached to the helper
            args: Helper subcommand and its arguments

        Returns:
            Exit code and output lines of the helper
        """
        image = self.resolve_image()
        name = f"{PROGRAM_NAME}_{uuid.uuid4()}"
        command = self.command(args)

        logger.debug(f"Running '{' '.join(command)}' in container {name}")
        logger.debug(f"Mounts for {name}: {', '.join(str(m) for m in mounts)}")

        container = self.client.containers.create(
            image,
            command=command,
            name=name,
            labels=self.labels(),
            mounts=[m.to_docker() for m in mounts],
        )
        try:
            container.start()
            container.wait()
            container.reload()

            state = container.attrs.get("State") or {}
            exit_code = int(state.get("ExitCode") or 0)
            status = str(state.get("Status", "")).lower()

            lines: List[str] = []
            if status in UNREADABLE_STATES:
                logger.warning(f"Container {name} is {status}, skipping log retrieval")
            else:
                try:
                    raw = container.logs(stdout=True, stderr=True)
                    lines = raw.decode("utf-8", errors="replace").splitlines()
                except APIError as e:
                    logger.warning(f"Failed to retrieve logs of container {name}: {e}")
        finally:
            logger.debug(f"Removing container {name}")
            try:
                container.remove(force=True)
            except NotFound:
                logger.debug(f"Container {name} is already gone")

        return SidecarResult(exit_code=exit_code, lines=lines, container_name=name, args=list(args))


def handle_sidecar_output(result: SidecarResult, prefix: str, lines: Optional[List[str]] = None) -> None:
    """
    Log helper output and fail on a non-zero exit code.

    Args:
        result: Helper result
        prefix: Operation and resource, e.g. ``backup volume data``
        lines: Subset of output to log (defaults to all lines)

    Raises:
        SidecarError: If the helper exited with a non-zero code
    """
    level = logging.DEBUG if result.ok else logging.ERROR
    for line in result.lines if lines is None else lines:
        logger.log(level, f"[{prefix}] {line.strip()}")
    if not result.ok:
        raise SidecarError(result.args, result.exit_code, result.lines)
