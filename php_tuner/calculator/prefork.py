"""
PHP-FPM process manager sizing.

max_children is derived from the memory left after a reservation for
the OS and co-located services, divided by the per-worker footprint.
Spare-server counts follow from the CPU core count.
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional

from ..exceptions import ProbeError
from ..logger import default_logger
from ..resources.data_models import ProcessMetrics, SystemMetrics
from .models import (
    Override,
    PoolType,
    PreforkConfig,
    PreforkOptions,
    TrafficProfile,
    resolve,
)

MIN_AVAILABLE_MB = 256
BASE_RESERVED_MB = 512
RESERVED_PERCENT = 15
MAX_RESERVED_MB = 4096
FALLBACK_PROCESS_MB = 64
MIN_WORKERS = 5
MAX_WORKERS = 1000
MAX_REQUESTS = 500

POOL_BY_TRAFFIC = {
    TrafficProfile.LOW: PoolType.ONDEMAND,
    TrafficProfile.MEDIUM: PoolType.DYNAMIC,
    TrafficProfile.HIGH: PoolType.STATIC,
}

IDLE_TIMEOUT_BY_TRAFFIC = {
    TrafficProfile.LOW: "10s",
    TrafficProfile.MEDIUM: "5s",
    TrafficProfile.HIGH: "3s",
}

MemoryLimitProvider = Callable[[], int]


def default_reserved_memory(total_memory_mb: int) -> int:
    """512MB for the OS plus 15% of total for buffers and other services, capped at 4GB."""
    return min(BASE_RESERVED_MB + total_memory_mb * RESERVED_PERCENT // 100, MAX_RESERVED_MB)


def resolve_pool_type(options: PreforkOptions) -> PoolType:
    return resolve(options.pool_type, lambda: POOL_BY_TRAFFIC[options.traffic_profile])


def _memory_limit_estimate(provider: Optional[MemoryLimitProvider]) -> float:
    # Workers rarely reach memory_limit; half of it is the working estimate
    if provider is None:
        return 0.0
    try:
        limit = provider()
    except ProbeError as e:
        default_logger().debug("memory_limit unavailable", error=str(e))
        return 0.0
    return limit / 2 if limit > 0 else 0.0


def determine_process_memory(
    processes: ProcessMetrics,
    options: PreforkOptions,
    memory_limit_provider: Optional[MemoryLimitProvider] = None,
) -> float:
    """
    Per-worker memory in MB, by tier: override, measured average,
    half of PHP's memory_limit, else 0 (caller falls back to 64MB).
    """
    if isinstance(options.process_memory_mb, Override):
        return float(options.process_memory_mb.value)
    if processes.average_memory_mb > 0:
        return processes.average_memory_mb
    return _memory_limit_estimate(memory_limit_provider)


def calculate_prefork(
    system: SystemMetrics,
    processes: ProcessMetrics,
    options: Optional[PreforkOptions] = None,
    memory_limit_provider: Optional[MemoryLimitProvider] = None,
) -> PreforkConfig:
    """
    Compute PHP-FPM pool settings.

    Args:
        system: Host snapshot
        processes: Running worker snapshot, possibly empty
        options: User overrides and traffic profile
        memory_limit_provider: Returns PHP's memory_limit in MB; only
            called when neither an override nor a measurement exists

    Returns:
        PreforkConfig with warnings and recommendations
    """
    options = options or PreforkOptions()
    warnings: List[str] = []

    process_memory = determine_process_memory(processes, options, memory_limit_provider)
    reserved = resolve(options.reserved_memory_mb, lambda: default_reserved_memory(system.total_memory_mb))

    available = system.total_memory_mb - reserved
    if available < MIN_AVAILABLE_MB:
        available = MIN_AVAILABLE_MB
        warnings.append(f"Very low available memory, using minimum of {MIN_AVAILABLE_MB}MB")

    pool_type = resolve_pool_type(options)

    estimated = process_memory <= 0
    if estimated:
        process_memory = float(FALLBACK_PROCESS_MB)
        warnings.append(
            f"Could not detect PHP process memory, using {FALLBACK_PROCESS_MB}MB estimate"
        )
    max_workers = int(math.floor(available / process_memory))

    if max_workers < MIN_WORKERS:
        max_workers = MIN_WORKERS
        warnings.append(f"max_children increased to minimum of {MIN_WORKERS}")
    if max_workers > MAX_WORKERS:
        max_workers = MAX_WORKERS
        warnings.append(f"max_children capped at {MAX_WORKERS}")

    cores = system.cpu_cores
    start_workers = cores * 4
    min_spare = cores * 2
    max_spare = cores * 4

    if start_workers > max_workers:
        start_workers = max_workers
    if min_spare > max_workers:
        min_spare = max_workers // 2
    if max_spare > max_workers:
        max_spare = max_workers

    if min_spare > start_workers:
        min_spare = start_workers
    if max_spare < start_workers:
        max_spare = start_workers

    config = PreforkConfig(
        pool_type=pool_type,
        max_workers=max_workers,
        start_workers=start_workers,
        min_spare_workers=min_spare,
        max_spare_workers=max_spare,
        max_requests_per_worker=MAX_REQUESTS,
        idle_timeout=IDLE_TIMEOUT_BY_TRAFFIC[options.traffic_profile],
        reserved_memory_mb=reserved,
        available_memory_mb=available,
        process_memory_mb=process_memory,
        process_memory_estimated=estimated,
        warnings=tuple(warnings),
        recommendations=tuple(_recommendations(pool_type, max_workers, system)),
    )

    logger = default_logger()
    for warning in config.warnings:
        logger.debug("prefork sizing warning", warning=warning)
    logger.info(
        "prefork sizing calculated",
        pm=pool_type.value,
        max_children=max_workers,
        reserved_mb=reserved,
        available_mb=available,
    )
    return config


def _recommendations(pool_type: PoolType, max_workers: int, system: SystemMetrics) -> List[str]:
    recommendations = []

    if pool_type is PoolType.STATIC:
        recommendations.append(
            "Static PM keeps all workers running. Best for high-traffic, dedicated PHP servers."
        )
    elif pool_type is PoolType.ONDEMAND:
        recommendations.append(
            "Ondemand PM spawns workers only when needed. Best for low-traffic or shared hosting."
        )
    else:
        recommendations.append(
            "Dynamic PM balances memory usage and response time. Good for most use cases."
        )

    if system.total_memory_mb < 2048:
        recommendations.append(
            "Consider using 'ondemand' PM on low-memory systems to conserve resources."
        )

    if max_workers > 100:
        recommendations.append(
            "High max_children value. Monitor for diminishing returns due to context switching."
        )

    recommendations.append(
        "Set pm.max_requests to prevent memory leaks from accumulating over time."
    )
    recommendations.append(
        "Consider separate pools for frontend/backend with different PM configurations."
    )
    return recommendations


__all__ = [
    "calculate_prefork",
    "default_reserved_memory",
    "determine_process_memory",
    "resolve_pool_type",
]
