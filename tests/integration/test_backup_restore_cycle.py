"""
Integration tests for the backup/restore cycle.

These tests need a running Docker daemon and the dockyard helper image
(build it with ``docker build -t dockyard:<version> .``). They are skipped
otherwise.
"""

import os
import uuid

import docker
import pytest
from docker.errors import DockerException, ImageNotFound

from dockyard.cores import BackupManager, LifecycleManager, MountClassifier, RestoreManager, SidecarRunner
from dockyard.helpers.constants import DEFAULT_IMAGE, OWNER_LABEL
from dockyard.types import backup_volume_mount, volume_mount


def helper_image_available() -> bool:
    """Check that the daemon answers and the helper image is present."""
    try:
        client = docker.from_env()
        client.ping()
        client.images.get(DEFAULT_IMAGE)
        return True
    except (DockerException, ImageNotFound):
        return False


pytestmark = [
    pytest.mark.integration,
    pytest.mark.requires_docker,
    pytest.mark.skipif(not helper_image_available(), reason=f"Docker or {DEFAULT_IMAGE} not available"),
]


@pytest.fixture
def client():
    client = docker.from_env()
    yield client
    client.close()


@pytest.fixture
def volume_factory(client):
    """Create throwaway volumes, removed after the test."""
    created = []

    def factory():
        volume = client.volumes.create(name=f"dockyard-test-{uuid.uuid4().hex[:8]}")
        created.append(volume)
        return volume.name

    yield factory
    for volume in created:
        volume.remove(force=True)


def run_in_volume(client, volume, script):
    """Run a shell script in the helper image with VOLUME mounted at /data."""
    output = client.containers.run(
        DEFAULT_IMAGE,
        ["sh", "-c", script],
        volumes={volume: {"bind": "/data", "mode": "rw"}},
        remove=True,
    )
    return output.decode()


@pytest.fixture
def runner(client):
    return SidecarRunner(client, DEFAULT_IMAGE, owner_pid=os.getpid())


@pytest.mark.slow
class TestVolumeCycle:
    """Volume backup through helpers and restore into a fresh volume."""

    def test_volume_round_trip(self, client, runner, volume_factory):
        data = volume_factory()
        backups = volume_factory()
        restored = volume_factory()
        run_in_volume(client, data, "mkdir -p /data/sub && echo hello > /data/sub/greeting.txt")

        destination = backup_volume_mount(backups)
        manager = BackupManager(client, runner, MountClassifier(client))
        archive_path = manager.backup_volume(data, destination)

        RestoreManager(client, runner).restore_volume(archive_path, destination, volume_mount(restored))

        assert run_in_volume(client, restored, "cat /data/sub/greeting.txt").strip() == "hello"

    def test_no_helpers_left_behind(self, client, runner, volume_factory):
        data = volume_factory()
        destination = backup_volume_mount(volume_factory())

        BackupManager(client, runner, MountClassifier(client)).backup_volume(data, destination)

        leftover = client.containers.list(all=True, filters={"label": f"{OWNER_LABEL}={os.getpid()}"})
        assert leftover == []


@pytest.mark.slow
class TestContainerCycle:
    """Container backup and recreation from its manifest."""

    def test_container_round_trip(self, client, runner, volume_factory):
        data = volume_factory()
        destination = backup_volume_mount(volume_factory())
        run_in_volume(client, data, "echo state > /data/state")
        name = f"dockyard-test-{uuid.uuid4().hex[:8]}"
        original = client.containers.create(
            DEFAULT_IMAGE,
            ["sleep", "60"],
            name=name,
            environment={"APP_ENV": "test"},
            volumes={data: {"bind": "/data", "mode": "rw"}},
        )
        restored_name = f"{name}-restored"
        try:
            manifest_path = BackupManager(client, runner, MountClassifier(client)).backup_container(
                name, destination
            )
            run_in_volume(client, data, "rm /data/state")

            container_id = RestoreManager(client, runner).restore_container(
                manifest_path, restored_name, destination
            )

            restored = client.containers.get(container_id)
            assert restored.name == restored_name
            assert restored.status == "created"
            assert "APP_ENV=test" in restored.attrs["Config"]["Env"]
            assert run_in_volume(client, data, "cat /data/state").strip() == "state"
        finally:
            original.remove(force=True)
            for container in client.containers.list(all=True, filters={"name": restored_name}):
                container.remove(force=True)


class TestCleanup:
    """cleanup_by_owner() against real containers."""

    def test_cleanup_removes_labelled_containers(self, client):
        pid = 999999
        client.containers.create(
            DEFAULT_IMAGE, ["sleep", "60"], labels={OWNER_LABEL: str(pid)}
        ).start()

        removed = LifecycleManager(client, stop_timeout=1).cleanup_by_owner(pid)

        assert removed == 1
        assert client.containers.list(all=True, filters={"label": f"{OWNER_LABEL}={pid}"}) == []

