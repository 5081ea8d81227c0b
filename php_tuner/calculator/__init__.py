"""Sizing calculators for PHP-FPM and FrankenPHP."""

from .models import (
    AUTO,
    Auto,
    Override,
    PoolType,
    PreforkConfig,
    PreforkOptions,
    Setting,
    TrafficProfile,
    WorkerServerConfig,
    WorkerServerOptions,
    resolve,
)
from .prefork import calculate_prefork
from .worker_server import calculate_worker_server

__all__ = [
    "AUTO",
    "Auto",
    "Override",
    "PoolType",
    "PreforkConfig",
    "PreforkOptions",
    "Setting",
    "TrafficProfile",
    "WorkerServerConfig",
    "WorkerServerOptions",
    "resolve",
    "calculate_prefork",
    "calculate_worker_server",
]
