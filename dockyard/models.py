"""
Backup manifest models.

A ContainerBackup is written once per container backup as base64-encoded
JSON and only ever read back by a restore.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Config keys a recreated container keeps; runtime and identity fields are left out
CONTAINER_SPEC_KEYS = (
    "Hostname",
    "Domainname",
    "User",
    "AttachStdin",
    "AttachStdout",
    "AttachStderr",
    "ExposedPorts",
    "Tty",
    "OpenStdin",
    "StdinOnce",
    "Env",
    "Cmd",
    "Healthcheck",
    "ArgsEscaped",
    "Image",
    "Volumes",
    "WorkingDir",
    "Entrypoint",
    "NetworkDisabled",
    "MacAddress",
    "OnBuild",
    "Labels",
    "StopSignal",
    "StopTimeout",
    "Shell",
)


def container_spec_from_config(config: Dict[str, Any], container_id: str = "") -> Dict[str, Any]:
    """
    Keep the recreatable subset of a container's ``Config``.

    The hostname Docker derives from the container ID is dropped so the
    new container gets its own.
    """
    spec = {key: config[key] for key in CONTAINER_SPEC_KEYS if config.get(key) is not None}
    hostname = spec.get("Hostname")
    if hostname and container_id and container_id.startswith(hostname):
        del spec["Hostname"]
    return spec


def encode_b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_b64(data: str) -> str:
    """Decode base64 text, raising ValueError on malformed input."""
    try:
        return base64.b64decode(data.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid base64 content: {e}") from e


class MountPoint(BaseModel):
    """One entry of the ``Mounts`` list of a container inspect record."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str = Field(alias="Type")
    name: Optional[str] = Field(default=None, alias="Name")
    source: str = Field(default="", alias="Source")
    destination: str = Field(alias="Destination")
    driver: Optional[str] = Field(default=None, alias="Driver")
    mode: str = Field(default="", alias="Mode")
    rw: bool = Field(default=True, alias="RW")
    propagation: str = Field(default="", alias="Propagation")

    @property
    def is_bind(self) -> bool:
        return self.type == "bind"

    @property
    def is_volume(self) -> bool:
        return self.type == "volume"

    @property
    def label(self) -> str:
        """Human readable identity: volume name or bind source."""
        return self.name if self.is_volume and self.name else self.source


class MountBackup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    archive_path: str
    mount: MountPoint


class ContainerBackup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    container_spec: Dict[str, Any] = Field(default_factory=dict)
    host_spec: Dict[str, Any] = Field(default_factory=dict)
    mounts: List[MountBackup] = Field(default_factory=list)

    @property
    def image(self) -> Optional[str]:
        return self.container_spec.get("Image")

    def encode(self) -> str:
        """Serialize to base64-encoded JSON."""
        return encode_b64(self.model_dump_json(by_alias=True, indent=2))

    @classmethod
    def decode(cls, data: str) -> "ContainerBackup":
        return cls.model_validate_json(decode_b64(data))
