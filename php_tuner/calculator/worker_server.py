"""FrankenPHP thread sizing."""

from __future__ import annotations

from typing import List, Optional

from ..logger import default_logger
from ..resources.data_models import SystemMetrics
from .models import TrafficProfile, WorkerServerConfig, WorkerServerOptions, resolve

DEFAULT_THREAD_MB = 30.0
MIN_AVAILABLE_MB = 128
BASE_RESERVED_MB = 256
RESERVED_PERCENT = 10
MAX_RESERVED_MB = 2048
MIN_THREADS = 2
MAX_THREADS = 1000

MAX_WAIT_BY_TRAFFIC = {
    TrafficProfile.LOW: "",
    TrafficProfile.MEDIUM: "10s",
    TrafficProfile.HIGH: "5s",
}


def default_reserved_memory(total_memory_mb: int) -> int:
    """256MB for the OS and Caddy plus 10% of total, capped at 2GB."""
    return min(BASE_RESERVED_MB + total_memory_mb * RESERVED_PERCENT // 100, MAX_RESERVED_MB)


def calculate_worker_server(
    system: SystemMetrics,
    options: Optional[WorkerServerOptions] = None,
) -> WorkerServerConfig:
    """
    Compute FrankenPHP ``num_threads``, ``max_threads`` and worker count.

    Threads share the PHP process, so the per-thread estimate is a fixed
    30MB rather than a measurement.
    """
    options = options or WorkerServerOptions()
    warnings: List[str] = []

    def _default_thread_memory() -> float:
        warnings.append(
            f"Using estimated {DEFAULT_THREAD_MB:.0f}MB per thread. "
            "Use --thread-mem to override if known."
        )
        return DEFAULT_THREAD_MB

    thread_memory = float(resolve(options.thread_memory_mb, _default_thread_memory))
    reserved = resolve(options.reserved_memory_mb, lambda: default_reserved_memory(system.total_memory_mb))

    available = system.total_memory_mb - reserved
    if available < MIN_AVAILABLE_MB:
        available = MIN_AVAILABLE_MB
        warnings.append(f"Very low available memory, using minimum of {MIN_AVAILABLE_MB}MB")

    cores = system.cpu_cores
    max_by_memory = int(available / thread_memory)

    num_threads = cores * 2
    if max_by_memory < num_threads:
        num_threads = max_by_memory
        warnings.append("Thread count limited by available memory")

    if num_threads < MIN_THREADS:
        num_threads = MIN_THREADS
        warnings.append(f"num_threads increased to minimum of {MIN_THREADS}")
    if num_threads > MAX_THREADS:
        num_threads = MAX_THREADS
        warnings.append(f"num_threads capped at {MAX_THREADS}")

    max_threads = min(cores * 4, max_by_memory)
    if max_threads < num_threads:
        max_threads = num_threads

    config = WorkerServerConfig(
        num_threads=num_threads,
        max_threads=max_threads,
        worker_count=num_threads if options.worker_mode else 0,
        max_wait_time=MAX_WAIT_BY_TRAFFIC[options.traffic_profile],
        reserved_memory_mb=reserved,
        available_memory_mb=available,
        thread_memory_mb=thread_memory,
        worker_mode=options.worker_mode,
        warnings=tuple(warnings),
        recommendations=tuple(_recommendations(options, system)),
    )

    default_logger().info(
        "worker-server sizing calculated",
        num_threads=num_threads,
        max_threads=max_threads,
        reserved_mb=reserved,
        available_mb=available,
    )
    return config


def _recommendations(options: WorkerServerOptions, system: SystemMetrics) -> List[str]:
    recommendations = []
    if options.worker_mode:
        recommendations.append("Worker mode keeps your app in memory for faster responses.")
    else:
        recommendations.append("Consider enabling worker mode for significant performance gains.")

    if system.total_memory_mb < 1024:
        recommendations.append("Low memory system detected. Monitor memory usage closely.")

    recommendations.append(
        "FrankenPHP threads share memory, so they're more efficient than FPM processes."
    )
    recommendations.append("Use the 'watch' directive in development for hot reloading.")
    return recommendations
