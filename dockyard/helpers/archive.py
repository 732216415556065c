"""
Archive codec used by the helper-mode ``backup directory`` and
``restore directory`` commands.

Directories are packed into gzip-compressed tarballs; a plain file is
copied as-is next to the archives.
"""

from __future__ import annotations

import shutil
import tarfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .constants import ARCHIVE_SUFFIX
from .errors import ArchiveError
from .logging import get_logger

logger = get_logger(__name__)


def timestamp() -> str:
    """UTC timestamp used to name archives and manifests."""
    return datetime.now(timezone.utc).isoformat()


def backup_directory(input_path: str, output: str, name: Optional[str] = None) -> str:
    """
    Archive ``input_path`` into ``output``.

    Args:
        input_path: Directory (or single file) to back up
        output: Directory receiving the archive, created when missing
        name: Archive stem; a UTC timestamp when omitted

    Returns:
        Archive path relative to ``output``

    Raises:
        ArchiveError: If the input does not exist
    """
    source = Path(input_path)
    target_dir = Path(output)
    stem = name or timestamp()

    if not source.exists():
        raise ArchiveError(f"Input path does not exist: {source}")

    target_dir.mkdir(parents=True, exist_ok=True)

    if source.is_dir():
        archive_path = target_dir / f"{stem}{ARCHIVE_SUFFIX}"
        logger.info(f"Backing up directory {source} to {archive_path}")
        with tarfile.open(archive_path, "w:gz") as tar:
            tar.add(str(source), arcname=".")
    else:
        archive_path = target_dir / stem
        logger.info(f"Backing up file {source} to {archive_path}")
        shutil.copy2(source, archive_path)

    return str(archive_path.relative_to(target_dir))


def restore_directory(archive: str, output: str) -> None:
    """
    Extract ``archive`` into ``output``, creating it when absent.

    Raises:
        ArchiveError: If the archive does not exist or is not a tarball
    """
    archive_path = Path(archive)
    target_dir = Path(output)

    if not archive_path.is_file():
        raise ArchiveError(f"Archive not found: {archive_path}")

    logger.info(f"Restoring {archive_path} to {target_dir}")
    target_dir.mkdir(parents=True, exist_ok=True)

    try:
        with tarfile.open(archive_path, "r:*") as tar:
            tar.extractall(target_dir, filter="tar")
    except tarfile.ReadError as e:
        raise ArchiveError(f"Not a readable archive: {archive_path}: {e}") from e
