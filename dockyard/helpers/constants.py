"""
Constants used throughout the Dockyard application.

This module defines all constant values used across different modules
to ensure consistency and ease of maintenance.
"""

from pathlib import Path

# Version information
VERSION = "0.2.0"
PROGRAM_NAME = "dockyard"

# Default paths
DEFAULT_CONFIG_PATHS = {
    'root': Path('/etc/dockyard.conf'),
    'user': Path.home() / '.config' / 'dockyard' / 'config.conf'
}
CONFIG_ENV_VAR = 'DOCKYARD_CONFIG'

# Docker
DOCKER_SOCKET = '/var/run/docker.sock'
DEFAULT_IMAGE = f'{PROGRAM_NAME}:{VERSION}'

# Labels put on every helper container
OWNER_LABEL = 'com.github.dockyard.pid'
TOOL_LABEL = 'com.github.dockyard.managed'
ENABLED_LABEL = 'com.github.dockyard.enabled'
ENABLED_VALUE = 'true'
DISABLED_VALUE = 'false'

# Fixed paths inside helper containers
BACKUP_MOUNT_TARGET = '/backup'
VOLUME_MOUNT_TARGET = '/volume'
INPUT_MOUNT_TARGET = '/input'
OUTPUT_MOUNT_TARGET = '/output'

# Layout on the backup destination
BACKUP_ROOT_DIR = 'dockyard'
VOLUME_BACKUP_DIR = f'{BACKUP_ROOT_DIR}/volumes'
BIND_BACKUP_DIR = f'{BACKUP_ROOT_DIR}/binds'
CONTAINER_BACKUP_DIR = f'{BACKUP_ROOT_DIR}/containers'
ARCHIVE_SUFFIX = '.tgz'
MANIFEST_SUFFIX = '.json'

# Network filesystem driver options that are never backed up
NETWORK_VOLUME_TYPES = ('nfs', 'nfs4')

# Helper container states where log retrieval is unreliable
UNREADABLE_STATES = ('dead', 'removing')

# Resource types accepted by the CLI
RESOURCE_TYPES = ('directory', 'volume')

# Schedule
DEFAULT_CRON = '0 0 * * *'

# Timeouts (in seconds)
CONTAINER_STOP_TIMEOUT = 10

# Logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
