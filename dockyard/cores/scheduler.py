"""
Periodic backup of every running container.

A pass backs up containers one at a time; the first failure ends the pass
and is raised to the caller.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Collection, List, Optional

from croniter import croniter

from ..helpers.constants import DEFAULT_CRON, DISABLED_VALUE, ENABLED_LABEL
from ..helpers.logging import get_logger
from ..types import Mount
from .backup_manager import BackupManager

logger = get_logger(__name__)


class BackupScheduler:
    def __init__(
        self,
        client,
        backup_manager: BackupManager,
        destination: Mount,
        cron: str = DEFAULT_CRON,
        exclude_volumes: Collection[str] = (),
        exclude_containers: Collection[str] = (),
    ):
        if not croniter.is_valid(cron):
            raise ValueError(f"Invalid cron expression: {cron}")
        self.client = client
        self.backup_manager = backup_manager
        self.destination = destination
        self.cron = cron
        self.exclude_volumes = set(exclude_volumes)
        self.exclude_containers = set(exclude_containers)
        self._stop_event = threading.Event()

    def eligible_containers(self) -> List[str]:
        """Names of running containers that a pass backs up."""
        names = []
        for container in self.client.containers.list():
            labels = container.labels or {}
            if labels.get(ENABLED_LABEL, "").lower() == DISABLED_VALUE:
                logger.debug(f"Skipping disabled container {container.name}")
                continue
            if container.name in self.exclude_containers:
                logger.info(f"Ignoring excluded container {container.name}")
                continue
            names.append(container.name)
        return names

    def run_pass(self) -> List[str]:
        """Back up every eligible container, returning the manifest paths."""
        manifests = []
        containers = self.eligible_containers()
        logger.info(f"Starting backup pass for {len(containers)} containers")
        for name in containers:
            manifests.append(
                self.backup_manager.backup_container(name, self.destination, self.exclude_volumes)
            )
        logger.info(f"Backup pass finished, {len(manifests)} containers backed up")
        return manifests

    def next_run(self, now: Optional[datetime] = None) -> datetime:
        return croniter(self.cron, now or datetime.now()).get_next(datetime)

    def run_forever(self) -> None:
        """Run passes on the cron schedule until stop() is called."""
        while not self._stop_event.is_set():
            next_run = self.next_run()
            logger.info(f"Next backup at {next_run.isoformat()}")
            delay = max(0.0, (next_run - datetime.now()).total_seconds())
            if self._stop_event.wait(delay):
                break
            self.run_pass()
        logger.info("Scheduler stopped")

    def stop(self) -> None:
        self._stop_event.set()
