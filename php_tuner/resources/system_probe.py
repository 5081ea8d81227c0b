"""
Host CPU and memory detection.

Reads the logical processor count and platform memory accounting
through psutil and converts byte counts to whole megabytes.
"""

from __future__ import annotations

import sys
from typing import Optional

import psutil

from ..exceptions import ExecutionContext, ProbeError
from ..logger import default_logger
from .data_models import SystemMetrics

SUPPORTED_PLATFORMS = ("linux", "darwin")

_BYTES_PER_MB = 1024 * 1024


def current_platform() -> str:
    """Normalised platform name: ``linux``, ``darwin``, ``win32``, ..."""
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def detect_system(platform: Optional[str] = None) -> SystemMetrics:
    """
    Detect CPU cores and memory totals for this host.

    Args:
        platform: Override of the detected platform name

    Returns:
        SystemMetrics snapshot

    Raises:
        ProbeError: unsupported platform or unreadable memory source
    """
    platform = platform or current_platform()
    context = ExecutionContext(operation="detect_system", platform=platform)

    if platform not in SUPPORTED_PLATFORMS:
        raise ProbeError(f"unsupported platform: {platform}", context=context)

    cpu_cores = psutil.cpu_count(logical=True)
    if not cpu_cores or cpu_cores < 1:
        raise ProbeError("could not determine CPU core count", context=context)

    try:
        memory = psutil.virtual_memory()
    except (OSError, psutil.Error) as e:
        raise ProbeError(
            f"failed to read memory information: {e}",
            context=context,
            original_exception=e,
        ) from e

    metrics = SystemMetrics(
        cpu_cores=cpu_cores,
        total_memory_mb=int(memory.total // _BYTES_PER_MB),
        available_memory_mb=int(memory.available // _BYTES_PER_MB),
        free_memory_mb=int(memory.free // _BYTES_PER_MB),
        platform=platform,
    )
    default_logger().debug(
        "system detected",
        cpu_cores=metrics.cpu_cores,
        total_mb=metrics.total_memory_mb,
        available_mb=metrics.available_memory_mb,
    )
    return metrics
