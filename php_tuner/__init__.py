"""
php-tuner core package

Probes host resources and PHP workers, sizes PHP-FPM pools and
FrankenPHP threads, and patches PHP-FPM pool configuration files.
"""

from .calculator import (
    AUTO,
    Override,
    PoolType,
    PreforkConfig,
    PreforkOptions,
    TrafficProfile,
    WorkerServerConfig,
    WorkerServerOptions,
    calculate_prefork,
    calculate_worker_server,
)
from .exceptions import (
    BackupWriteError,
    ConfigNotFoundError,
    ConfigWriteError,
    InvalidConfigPathError,
    ProbeError,
    RestartError,
    TunerError,
)
from .resources import ProcessMetrics, SystemMetrics, detect_processes, detect_system

__all__ = [
    "AUTO",
    "Override",
    "PoolType",
    "PreforkConfig",
    "PreforkOptions",
    "TrafficProfile",
    "WorkerServerConfig",
    "WorkerServerOptions",
    "calculate_prefork",
    "calculate_worker_server",
    "BackupWriteError",
    "ConfigNotFoundError",
    "ConfigWriteError",
    "InvalidConfigPathError",
    "ProbeError",
    "RestartError",
    "TunerError",
    "ProcessMetrics",
    "SystemMetrics",
    "detect_processes",
    "detect_system",
]
