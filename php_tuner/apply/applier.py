"""
Apply calculated PHP-FPM settings to a live pool config.

Sequence: locate and validate the pool file, read it, back it up,
patch, write, then optionally restart the service. The original file
is never written unless the backup succeeded, and a failed restart
leaves the written config in place.
"""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

from ..calculator.models import PreforkConfig
from ..config.settings import ApplySettings
from ..config.tables import CONFIG_PATH_CANDIDATES, SERVICE_NAME_CANDIDATES
from ..exceptions import (
    ConfigNotFoundError,
    ConfigWriteError,
    ExecutionContext,
    InvalidConfigPathError,
    RestartError,
)
from ..logger import default_logger
from ..resources.system_probe import current_platform
from .backup import write_backup
from .patcher import ConfigPatchResult, patch_config


@dataclass
class ApplyResult:
    """Outcome of an apply operation"""

    config_path: Path
    backup_path: Optional[Path] = None
    service_name: Optional[str] = None
    restarted: bool = False
    changes: List[str] = field(default_factory=list)
    patch: Optional[ConfigPatchResult] = None


def find_config_file(candidates: Sequence[str] = CONFIG_PATH_CANDIDATES) -> Path:
    """Return the first existing candidate path.

    Raises:
        ConfigNotFoundError: none of the candidates exist
    """
    for candidate in candidates:
        path = Path(candidate)
        if path.exists():
            return path
    raise ConfigNotFoundError(candidates, context=ExecutionContext(operation="find_config"))


def list_config_files(candidates: Sequence[str] = CONFIG_PATH_CANDIDATES) -> List[Path]:
    """All candidate paths that exist, in search order."""
    return [Path(c) for c in candidates if Path(c).exists()]


def validate_config_path(path: Union[str, Path]) -> Path:
    """Check that ``path`` is an existing regular file named ``*.conf`` or with no extension.

    Raises:
        InvalidConfigPathError: missing, a directory, or a wrong extension
    """
    path = Path(path)
    context = ExecutionContext(operation="validate_config", config_path=str(path))
    if not path.exists():
        raise InvalidConfigPathError(f"file not found: {path}", path=str(path), context=context)
    if path.is_dir():
        raise InvalidConfigPathError(
            f"path is a directory, not a file: {path}", path=str(path), context=context
        )
    if not path.is_file():
        raise InvalidConfigPathError(f"not a regular file: {path}", path=str(path), context=context)
    if path.suffix not in (".conf", ""):
        raise InvalidConfigPathError(
            f"file does not appear to be a PHP-FPM config (expected .conf extension): {path}",
            path=str(path),
            context=context,
        )
    return path


def find_service_name(
    candidates: Sequence[str] = SERVICE_NAME_CANDIDATES,
    platform: Optional[str] = None,
) -> Optional[str]:
    """Name of the running PHP-FPM service, or None when none is detected."""
    platform = platform or current_platform()
    logger = default_logger()

    if platform == "linux":
        for name in candidates:
            try:
                completed = subprocess.run(
                    ["systemctl", "is-active", "--quiet", name],
                    capture_output=True,
                    check=False,
                )
            except OSError as e:
                logger.debug("systemctl unavailable", error=str(e))
                return None
            if completed.returncode == 0:
                return name
        return None

    if platform == "darwin":
        try:
            completed = subprocess.run(
                ["brew", "services", "list"], capture_output=True, text=True, check=False
            )
        except OSError as e:
            logger.debug("brew unavailable", error=str(e))
            return None
        if completed.returncode != 0:
            return None
        for line in completed.stdout.splitlines():
            if "php" in line and "started" in line:
                fields = line.split()
                if fields:
                    return fields[0]
        return None

    return None


def restart_service(name: str, platform: Optional[str] = None) -> None:
    """Restart ``name`` through the platform service manager, once.

    Raises:
        RestartError: unsupported platform or the restart command failed
    """
    platform = platform or current_platform()
    context = ExecutionContext(operation="restart", platform=platform, service_name=name)

    if platform == "linux":
        command = ["sudo", "systemctl", "restart", name]
    elif platform == "darwin":
        command = ["brew", "services", "restart", name]
    else:
        raise RestartError("unsupported platform for service restart", context=context)

    try:
        subprocess.run(command, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise RestartError(
            f"failed to restart {name}: {e}", context=context, original_exception=e
        ) from e
    default_logger().info("service restarted", service=name)


def apply_configuration(
    config: PreforkConfig,
    config_path: Union[str, Path],
    restart: bool = False,
    settings: Optional[ApplySettings] = None,
    service_name: Optional[str] = None,
    platform: Optional[str] = None,
) -> ApplyResult:
    """
    Back up, patch and rewrite the pool config, then optionally restart.

    Args:
        config: Calculated pool settings
        config_path: Validated pool config path
        restart: Restart the service after writing
        settings: Apply tables and markers; defaults when None
        service_name: Already-detected service; looked up when None and restart is set
        platform: Override of the detected platform name

    Returns:
        ApplyResult describing the backup, changes and restart

    Raises:
        BackupWriteError: backup failed, nothing was written
        ConfigWriteError: config could not be read or written
        RestartError: config written but restart failed; carries the result
    """
    settings = settings or ApplySettings()
    path = Path(config_path)
    context = ExecutionContext(operation="apply", config_path=str(path))
    logger = default_logger()

    try:
        original = path.read_bytes()
    except OSError as e:
        raise ConfigWriteError(
            f"failed to read config file: {e}", context=context, original_exception=e
        ) from e

    result = ApplyResult(config_path=path)
    result.backup_path = write_backup(path, suffix=settings.backup_suffix, content=original)

    patch = patch_config(
        original.decode("utf-8", errors="surrogateescape"),
        config,
        section_marker=settings.section_marker,
    )
    result.patch = replace(patch, backup_path=str(result.backup_path))
    result.changes = list(patch.change_log)

    try:
        path.write_bytes(patch.updated_text.encode("utf-8", errors="surrogateescape"))
    except OSError as e:
        raise ConfigWriteError(
            f"failed to write config file: {e}", context=context, original_exception=e
        ) from e
    logger.info("config written", path=str(path), changes=len(result.changes))

    if restart:
        result.service_name = service_name or find_service_name(
            settings.service_name_candidates, platform
        )
        if result.service_name:
            try:
                restart_service(result.service_name, platform)
            except RestartError as e:
                raise RestartError(
                    f"config applied but failed to restart service: {e.message}",
                    result=result,
                    context=e.context,
                    original_exception=e.original_exception,
                ) from e
            result.restarted = True
        else:
            logger.warning("restart requested but no PHP-FPM service detected")

    return result


def confirm(prompt: str, input_stream: Optional[IO[str]] = None, output: Optional[IO[str]] = None) -> bool:
    """Ask a y/N question; only ``y`` or ``yes`` (any case) confirms."""
    input_stream = input_stream or sys.stdin
    output = output or sys.stdout
    output.write(f"{prompt} [y/N]: ")
    output.flush()

    response = input_stream.readline()
    if not response:
        return False
    return response.strip().lower() in ("y", "yes")
