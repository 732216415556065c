"""
File helpers behind the helper-mode ``write`` and ``cat`` commands.
"""

from __future__ import annotations

from pathlib import Path

from ..models import decode_b64, encode_b64
from .logging import get_logger

logger = get_logger(__name__)


def write_file(contents: str, output: str) -> None:
    """Write text to ``output``, creating parent directories."""
    logger.debug(f"Writing contents to {output}")
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")


def decode_and_write_file(contents: str, output: str) -> None:
    logger.debug("Decoding input as base64")
    write_file(decode_b64(contents), output)


def read_file(path: str) -> str:
    logger.debug(f"Reading {path}")
    return Path(path).read_text(encoding="utf-8")


def read_and_encode_file(path: str) -> str:
    contents = read_file(path)
    logger.debug(f"Encoding contents of {path} as base64")
    return encode_b64(contents)
