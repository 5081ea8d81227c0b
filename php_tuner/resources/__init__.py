"""
Resources package: host and PHP worker probing.

Provides the one-shot snapshots the sizing calculators work from.
"""

from .data_models import ProcessMetrics, SystemMetrics, WorkerProcess
from .php_runtime import UNLIMITED, get_memory_limit, parse_memory_limit
from .process_probe import detect_processes
from .system_probe import SUPPORTED_PLATFORMS, current_platform, detect_system

__all__ = [
    # Data models
    "ProcessMetrics",
    "SystemMetrics",
    "WorkerProcess",
    # Probes
    "detect_processes",
    "detect_system",
    "current_platform",
    "SUPPORTED_PLATFORMS",
    # PHP runtime
    "get_memory_limit",
    "parse_memory_limit",
    "UNLIMITED",
]
