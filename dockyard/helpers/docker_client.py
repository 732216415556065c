"""
Docker daemon connection factory.
"""

from __future__ import annotations

from typing import Optional

import docker

from .logging import get_logger

logger = get_logger(__name__)


def create_client(base_url: Optional[str] = None) -> docker.DockerClient:
    """
    Connect to the Docker daemon.

    Args:
        base_url: Explicit daemon URL; environment defaults when omitted

    Returns:
        Connected DockerClient
    """
    if base_url:
        logger.debug(f"Connecting to Docker daemon at {base_url}")
        return docker.DockerClient(base_url=base_url)
    logger.debug("Connecting to Docker daemon from environment")
    return docker.from_env()
