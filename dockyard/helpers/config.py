################################################################################
# DOCKYARD
#
# @file:        config.py
# @module:      dockyard.helpers.config
# @description: Configuration discovery, defaults, validation and persistence
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
################################################################################

"""
Configuration management for Dockyard.

Handles loading, validation, and access to configuration settings.
Helper containers run without any config file, so a missing file is not an
error: the built-in defaults are used instead.
"""

from __future__ import annotations

import configparser
import os
import tempfile
from pathlib import Path
from typing import Optional, List, Dict, Any

from croniter import croniter

from .constants import (
    CONFIG_ENV_VAR,
    CONTAINER_STOP_TIMEOUT,
    DEFAULT_CONFIG_PATHS,
    DEFAULT_CRON,
    DEFAULT_IMAGE,
    DOCKER_SOCKET,
    LOG_LEVELS,
    RESOURCE_TYPES,
)
from .logging import get_logger

logger = get_logger(__name__)


class Config:
    """
    Configuration manager for Dockyard.

    Loads configuration from INI files on top of built-in defaults.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_path: Optional path to config file. Created with
                defaults when it does not exist yet.
        """
        # Interpolation off: cron expressions and paths may contain %
        self._config = configparser.ConfigParser(interpolation=None)
        self._config.read_dict(self._get_default_config())

        self.config_file = self._find_config_file(config_path)
        if config_path and not self.config_file.exists():
            logger.info(f"No configuration found. Creating default at {self.config_file}")
            create_default_config(self.config_file)

        if self.config_file and self.config_file.exists():
            self._load_config()

    # --------------- Properties ---------------

    @property
    def docker_socket(self) -> str:
        return self.get('docker', 'socket', fallback=DOCKER_SOCKET)

    @property
    def docker_base_url(self) -> Optional[str]:
        return self.get('docker', 'base_url', fallback='') or None

    @property
    def sidecar_image(self) -> str:
        return self.get('docker', 'image', fallback=DEFAULT_IMAGE) or DEFAULT_IMAGE

    @property
    def stop_timeout(self) -> int:
        return self.getint('docker', 'stop_timeout', CONTAINER_STOP_TIMEOUT)

    @property
    def backup_destination(self) -> str:
        return self.get('backup', 'destination')

    @property
    def destination_type(self) -> str:
        return self.get('backup', 'destination_type', fallback='directory')

    @property
    def exclude_volumes(self) -> List[str]:
        return self.getlist('backup', 'exclude_volumes')

    @property
    def exclude_containers(self) -> List[str]:
        return self.getlist('backup', 'exclude_containers')

    @property
    def cron(self) -> str:
        return self.get('backup', 'cron', fallback=DEFAULT_CRON) or DEFAULT_CRON

    @property
    def log_level(self) -> str:
        return self.get('logging', 'level', fallback='INFO')

    @property
    def log_file(self) -> Optional[str]:
        return self.get('logging', 'file', fallback='') or None

    # --------------- Core Methods ---------------

    def get(self, section: str, option: str, fallback: Any = None) -> Any:
        """Get configuration value with fallback."""
        try:
            return self._config.get(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def getint(self, section: str, option: str, fallback: int = 0) -> int:
        """Get integer value, falling back on missing or malformed values."""
        value = self.get(section, option)
        if value is None or str(value).strip() == '':
            return fallback
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Invalid integer for [{section}] {option}: {value}")
            return fallback

    def getboolean(self, section: str, option: str, fallback: bool = False) -> bool:
        """Get boolean value."""
        try:
            return self._config.getboolean(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getlist(self, section: str, option: str, fallback: Optional[List[str]] = None) -> List[str]:
        """Get comma-separated list value."""
        value = self.get(section, option)
        if not value:
            return list(fallback or [])
        return [item.strip() for item in value.split(',') if item.strip()]

    def set(self, section: str, option: str, value: Any) -> None:
        """Set configuration value."""
        if not self._config.has_section(section):
            self._config.add_section(section)
        if isinstance(value, (list, tuple, set)):
            value = ','.join(str(v) for v in value)
        self._config.set(section, option, str(value))

    def save(self, path: Optional[Path] = None) -> Path:
        """Save configuration to file atomically with proper permissions."""
        target = Path(path or self.config_file or DEFAULT_CONFIG_PATHS['user']).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)

        temp_fd, temp_path = tempfile.mkstemp(
            dir=target.parent,
            prefix='.dockyard-config-',
            suffix='.tmp'
        )
        try:
            with os.fdopen(temp_fd, 'w', encoding='utf-8') as f:
                self._config.write(f)
            os.replace(temp_path, target)
            os.chmod(target, 0o600)
        except Exception as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            logger.error(f"Failed to save configuration: {e}")
            raise

        self.config_file = target
        logger.info(f"Configuration saved to {target}")
        return target

    def items(self) -> Dict[str, Dict[str, str]]:
        """Return all sections as plain dictionaries."""
        return {
            section: dict(self._config.items(section))
            for section in self._config.sections()
        }

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of error messages (empty when everything is fine)
        """
        errors = []

        if self.destination_type not in RESOURCE_TYPES:
            errors.append(
                f"destination_type must be one of {', '.join(RESOURCE_TYPES)}: "
                f"{self.destination_type}"
            )

        if not self.backup_destination:
            errors.append("No backup destination configured")

        if not croniter.is_valid(self.cron):
            errors.append(f"Invalid cron expression: {self.cron}")

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"Invalid log level: {self.log_level}")

        stop_timeout = self.get('docker', 'stop_timeout')
        try:
            if int(stop_timeout) < 0:
                errors.append(f"stop_timeout must not be negative: {stop_timeout}")
        except (TypeError, ValueError):
            errors.append(f"stop_timeout must be an integer: {stop_timeout}")

        return errors

    # --------------- Private Methods ---------------

    @staticmethod
    def _get_default_config() -> Dict[str, Dict[str, Any]]:
        """Default configuration structure."""
        return {
            'docker': {
                'socket': DOCKER_SOCKET,
                'base_url': '',
                'image': DEFAULT_IMAGE,
                'stop_timeout': str(CONTAINER_STOP_TIMEOUT),
            },
            'backup': {
                'destination': '/backup',
                'destination_type': 'directory',
                'exclude_volumes': '',
                'exclude_containers': '',
                'cron': DEFAULT_CRON,
            },
            'logging': {
                'level': 'INFO',
                'file': '',
            },
        }

    def _find_config_file(self, config_path: Optional[Path] = None) -> Optional[Path]:
        """
        Find configuration file path.

        Args:
            config_path: Explicitly provided configuration path

        Returns:
            Path to the configuration file, or None when only defaults apply
        """
        if config_path:
            return Path(config_path).expanduser().resolve()

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()

        for location in (DEFAULT_CONFIG_PATHS['user'], DEFAULT_CONFIG_PATHS['root']):
            expanded = Path(location).expanduser()
            if expanded.exists():
                if os.access(expanded, os.R_OK):
                    logger.debug(f"Using config file: {expanded}")
                    return expanded
                logger.warning(f"Config file exists but not readable: {expanded}")

        logger.debug("No config file found, using defaults")
        return None

    def _load_config(self) -> None:
        """Load configuration from file with UTF-8 encoding."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                self._config.read_file(f)
            logger.debug(f"Configuration loaded from {self.config_file}")
        except (configparser.Error, UnicodeDecodeError) as e:
            logger.error(f"Failed to load configuration {self.config_file}: {e}")
            raise


def create_default_config(path: Optional[Path] = None, force: bool = False) -> Path:
    """
    Write the default configuration to disk.

    Args:
        path: Where to create the config file
        force: Overwrite an existing file

    Returns:
        Path to the config file
    """
    if path is None:
        path = DEFAULT_CONFIG_PATHS['root'] if os.geteuid() == 0 else DEFAULT_CONFIG_PATHS['user']
    path = Path(path).expanduser()

    if path.exists() and not force:
        logger.warning(f"Configuration file already exists at {path}")
        return path

    parser = configparser.ConfigParser(interpolation=None)
    parser.read_dict(Config._get_default_config())
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        parser.write(f)
    path.chmod(0o600)

    logger.info(f"Configuration created at {path}")
    return path
