"""PHP worker process discovery and resident memory aggregation."""

from __future__ import annotations

import re
from typing import List

import psutil

from ..config.tables import PROCESS_NAME_PATTERN
from ..exceptions import ExecutionContext, ProbeError
from ..logger import default_logger
from .data_models import ProcessMetrics, WorkerProcess


def detect_processes(pattern: str = PROCESS_NAME_PATTERN) -> ProcessMetrics:
    """
    Find processes whose name matches ``pattern`` and aggregate their RSS.

    Processes that exit or deny access mid-scan are skipped, as are
    processes reporting no resident memory. Finding nothing is not an
    error and yields ``ProcessMetrics.empty()``.

    Raises:
        ProbeError: the process table itself could not be enumerated
    """
    matcher = re.compile(pattern)
    found: List[WorkerProcess] = []

    try:
        for proc in psutil.process_iter(["pid", "name", "memory_info"]):
            info = proc.info
            name = info.get("name") or ""
            if not matcher.search(name):
                continue
            memory_info = info.get("memory_info")
            if memory_info is None:
                continue
            memory_kb = int(memory_info.rss // 1024)
            if memory_kb <= 0:
                continue
            found.append(WorkerProcess(pid=info["pid"], memory_kb=memory_kb, command=name))
    except (OSError, psutil.Error) as e:
        raise ProbeError(
            f"failed to enumerate processes: {e}",
            context=ExecutionContext(operation="detect_processes"),
            original_exception=e,
        ) from e

    metrics = ProcessMetrics.from_processes(tuple(found))
    default_logger().debug(
        "worker processes detected",
        count=metrics.count,
        average_mb=round(metrics.average_memory_mb, 1),
    )
    return metrics
