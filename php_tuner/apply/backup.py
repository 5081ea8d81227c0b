"""
Pre-write backup of the pool configuration.

The backup is a byte-exact sibling copy (``www.conf.backup``) written
through a temporary file, verified, then renamed into place. An
existing backup is replaced.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from ..config.tables import BACKUP_SUFFIX
from ..exceptions import BackupWriteError, ExecutionContext
from ..logger import default_logger


def backup_path_for(path: Union[str, Path], suffix: str = BACKUP_SUFFIX) -> Path:
    path = Path(path)
    return path.with_name(path.name + suffix)


def write_backup(
    path: Union[str, Path],
    suffix: str = BACKUP_SUFFIX,
    content: Optional[bytes] = None,
) -> Path:
    """
    Copy ``path`` to its backup sibling.

    Args:
        path: File to back up
        suffix: Appended to the file name
        content: Bytes already read from ``path``; read from disk when None

    Returns:
        Path of the written backup

    Raises:
        BackupWriteError: source unreadable, write failed, or verification failed
    """
    source = Path(path)
    backup_path = backup_path_for(source, suffix)
    temp_path = backup_path.with_name(backup_path.name + ".tmp")
    context = ExecutionContext(operation="backup", config_path=str(source))

    try:
        data = source.read_bytes() if content is None else content
        temp_path.write_bytes(data)

        written = temp_path.read_bytes()
        if written != data:
            raise BackupWriteError(
                f"backup verification failed: {temp_path} does not match {source}",
                context=context,
            )

        os.replace(temp_path, backup_path)
    except OSError as e:
        _discard(temp_path)
        raise BackupWriteError(
            f"failed to create backup: {e}", context=context, original_exception=e
        ) from e
    except BackupWriteError:
        _discard(temp_path)
        raise

    default_logger().info("backup written", path=str(backup_path), bytes=len(data))
    return backup_path


def _discard(temp_path: Path) -> None:
    if temp_path.exists():
        temp_path.unlink()
