"""
Shared pytest fixtures for Dockyard tests.

Provides common fixtures for mocking, temporary files, and test data.
"""

import logging

import pytest
from unittest.mock import MagicMock, Mock, patch
from typer.testing import CliRunner

from dockyard.cores.sidecar_runner import SidecarRunner
from dockyard.types import SidecarResult, backup_directory_mount


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Drop handlers installed by setup_logging() during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.getLogger("dockyard").setLevel(logging.NOTSET)


@pytest.fixture
def cli_runner():
    """Typer CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def mock_docker_client():
    """Mock docker.from_env() to return a mock client."""
    with patch("docker.from_env") as mock_from_env:
        client = MagicMock()
        mock_from_env.return_value = client
        yield client


@pytest.fixture
def tmp_config(tmp_path):
    """Create a temporary dockyard config file."""
    config_file = tmp_path / "dockyard.conf"
    config_file.write_text(
        "[docker]\n"
        "socket = /var/run/docker.sock\n"
        "image = dockyard:test\n"
        "stop_timeout = 5\n"
        "\n"
        "[backup]\n"
        f"destination = {tmp_path / 'backups'}\n"
        "destination_type = directory\n"
        "exclude_volumes = cache, tmp-data\n"
        "exclude_containers = proxy\n"
        "cron = */15 * * * *\n"
        "\n"
        "[logging]\n"
        "level = INFO\n"
    )
    return config_file



@pytest.fixture
def destination():
    """Backup destination bound from a host directory."""
    return backup_directory_mount("/srv/backups")


@pytest.fixture
def mock_runner():
    """SidecarRunner double returning successful results."""
    runner = Mock(spec=SidecarRunner)
    runner.run.return_value = SidecarResult(exit_code=0, lines=[], container_name="dockyard_test")
    return runner


@pytest.fixture
def container_inspect():
    """Docker inspect output for a container with mixed mounts."""
    return {
        "Id": "3f2a9c81d0e4b7a6c5d4e3f2a1b0c9d8e7f6a5b4c3d2e1f0a9b8c7d6e5f4a3b2",
        "Name": "/webapp",
        "State": {"Running": True, "Status": "running"},
        "Config": {
            "Hostname": "3f2a9c81d0e4",
            "User": "app",
            "Env": ["APP_ENV=production", "PORT=8080"],
            "Cmd": ["gunicorn", "app:wsgi"],
            "Image": "example/webapp:1.4",
            "WorkingDir": "/srv/app",
            "Entrypoint": None,
            "Labels": {"team": "web"},
            "ExposedPorts": {"8080/tcp": {}},
            "Tty": False,
        },
        "HostConfig": {
            "RestartPolicy": {"Name": "unless-stopped", "MaximumRetryCount": 0},
            "Memory": 536870912,
            "Binds": ["/srv/webapp/config:/etc/webapp"],
        },
        "Mounts": [
            {
                "Type": "bind",
                "Source": "/srv/webapp/config",
                "Destination": "/etc/webapp",
                "Mode": "",
                "RW": True,
                "Propagation": "rprivate",
            },
            {
                "Type": "volume",
                "Name": "webapp-data",
                "Source": "/var/lib/docker/volumes/webapp-data/_data",
                "Destination": "/data",
                "Driver": "local",
                "Mode": "z",
                "RW": True,
                "Propagation": "",
            },
            {
                "Type": "bind",
                "Source": "/var/run/docker.sock",
                "Destination": "/var/run/docker.sock",
                "Mode": "",
                "RW": True,
                "Propagation": "rprivate",
            },
            {
                "Type": "tmpfs",
                "Source": "",
                "Destination": "/run",
                "Mode": "",
                "RW": True,
                "Propagation": "",
            },
        ],
    }
