"""
Unit tests for BackupScheduler.
"""

from datetime import datetime

import pytest
from unittest.mock import MagicMock, Mock, patch

from dockyard.cores.scheduler import BackupScheduler
from dockyard.helpers.constants import ENABLED_LABEL
from dockyard.helpers.errors import MountBackupError


def make_container(name, labels=None):
    container = MagicMock()
    container.name = name
    container.labels = labels or {}
    return container


def make_scheduler(containers, destination, **kwargs):
    client = MagicMock()
    client.containers.list.return_value = containers
    backup_manager = Mock()
    backup_manager.backup_container.side_effect = lambda name, *a: f"dockyard/containers/{name}/t.json"
    return BackupScheduler(client, backup_manager, destination, **kwargs), backup_manager


@pytest.mark.unit
class TestBackupScheduler:
    """Tests for pass selection and execution."""

    def test_invalid_cron_raises(self, destination):
        with pytest.raises(ValueError, match="Invalid cron expression"):
            BackupScheduler(MagicMock(), Mock(), destination, cron="whenever")

    def test_skips_disabled_and_excluded_containers(self, destination):
        containers = [
            make_container("web"),
            make_container("dockyard_1234", {ENABLED_LABEL: "false"}),
            make_container("proxy"),
            make_container("db", {ENABLED_LABEL: "true"}),
        ]
        scheduler, _ = make_scheduler(containers, destination, exclude_containers=["proxy"])

        assert scheduler.eligible_containers() == ["web", "db"]

    def test_run_pass_backs_up_sequentially(self, destination):
        scheduler, backup_manager = make_scheduler(
            [make_container("web"), make_container("db")],
            destination,
            exclude_volumes=["cache"],
        )

        manifests = scheduler.run_pass()

        assert manifests == ["dockyard/containers/web/t.json", "dockyard/containers/db/t.json"]
        calls = backup_manager.backup_container.call_args_list
        assert [c.args[0] for c in calls] == ["web", "db"]
        assert calls[0].args[1] == destination
        assert calls[0].args[2] == {"cache"}

    def test_first_failure_aborts_pass(self, destination):
        scheduler, backup_manager = make_scheduler(
            [make_container("web"), make_container("db"), make_container("cache")],
            destination,
        )
        backup_manager.backup_container.side_effect = [
            "dockyard/containers/web/t.json",
            MountBackupError("data", "db"),
        ]

        with pytest.raises(MountBackupError):
            scheduler.run_pass()

        assert backup_manager.backup_container.call_count == 2

    def test_next_run_follows_cron(self, destination):
        scheduler, _ = make_scheduler([], destination, cron="30 2 * * *")

        assert scheduler.next_run(datetime(2024, 5, 1, 1, 0)) == datetime(2024, 5, 1, 2, 30)

    def test_stopped_scheduler_runs_nothing(self, destination):
        scheduler, backup_manager = make_scheduler([make_container("web")], destination)
        scheduler.stop()

        scheduler.run_forever()

        backup_manager.backup_container.assert_not_called()

    def test_run_forever_runs_due_pass(self, destination):
        scheduler, backup_manager = make_scheduler([make_container("web")], destination)

        def backup_and_stop(name, *args):
            scheduler.stop()
            return "dockyard/containers/web/t.json"

        backup_manager.backup_container.side_effect = backup_and_stop

        with patch.object(scheduler, "next_run", return_value=datetime(2000, 1, 1)):
            scheduler.run_forever()

        backup_manager.backup_container.assert_called_once()

    def test_run_forever_propagates_errors(self, destination):
        scheduler, backup_manager = make_scheduler([make_container("web")], destination)
        backup_manager.backup_container.side_effect = MountBackupError("data", "web")

        with patch.object(scheduler, "next_run", return_value=datetime(2000, 1, 1)):
            with pytest.raises(MountBackupError):
                scheduler.run_forever()
