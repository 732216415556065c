"""
Unit tests for MountClassifier.
"""

import pytest
from unittest.mock import MagicMock
from docker.errors import APIError

from dockyard.cores.mount_classifier import MountClassifier
from dockyard.models import MountPoint


def make_classifier(volume_options=None):
    client = MagicMock()
    volume = MagicMock()
    volume.attrs = {"Name": "data", "Driver": "local", "Options": volume_options}
    client.volumes.get.return_value = volume
    return MountClassifier(client), client


def bind(source):
    return MountPoint(Type="bind", Source=source, Destination="/mnt")


def volume(name):
    return MountPoint(Type="volume", Name=name, Source=f"/var/lib/docker/volumes/{name}/_data", Destination="/data")


@pytest.mark.unit
class TestShouldInclude:
    """Tests for MountClassifier.should_include()."""

    def test_includes_bind(self):
        classifier, client = make_classifier()

        assert classifier.should_include(bind("/srv/app")) is True
        client.volumes.get.assert_not_called()

    def test_excludes_docker_socket(self):
        classifier, _ = make_classifier()

        assert classifier.should_include(bind("/var/run/docker.sock")) is False

    def test_custom_socket_path(self):
        classifier = MountClassifier(MagicMock(), docker_socket="/run/user/1000/docker.sock")

        assert classifier.should_include(bind("/run/user/1000/docker.sock")) is False
        assert classifier.should_include(bind("/var/run/docker.sock")) is True

    def test_includes_local_volume(self):
        classifier, client = make_classifier(volume_options=None)

        assert classifier.should_include(volume("data")) is True
        client.volumes.get.assert_called_once_with("data")

    @pytest.mark.parametrize("fs_type", ["nfs", "nfs4"])
    def test_excludes_network_volume(self, fs_type):
        classifier, _ = make_classifier(volume_options={"type": fs_type, "device": ":/export"})

        assert classifier.should_include(volume("shared")) is False

    def test_includes_volume_with_other_options(self):
        classifier, _ = make_classifier(volume_options={"type": "tmpfs", "device": "tmpfs"})

        assert classifier.should_include(volume("scratch")) is True

    def test_excludes_named_volume(self):
        classifier, _ = make_classifier()

        assert classifier.should_include(volume("excluded-vol"), {"excluded-vol"}) is False
        assert classifier.should_include(volume("kept"), {"excluded-vol"}) is True

    def test_excludes_other_mount_types(self):
        classifier, _ = make_classifier()

        assert classifier.should_include(MountPoint(Type="tmpfs", Destination="/run")) is False
        assert classifier.should_include(MountPoint(Type="npipe", Destination="/pipe")) is False

    def test_daemon_error_propagates(self):
        classifier, client = make_classifier()
        client.volumes.get.side_effect = APIError("daemon gone")

        with pytest.raises(APIError):
            classifier.should_include(volume("data"))


@pytest.mark.unit
def test_filter_mounts_keeps_order(container_inspect):
    classifier, _ = make_classifier()
    mounts = [MountPoint.model_validate(m) for m in container_inspect["Mounts"]]

    eligible = classifier.filter_mounts(mounts)

    assert [m.label for m in eligible] == ["/srv/webapp/config", "webapp-data"]
