"""
Data models for host and worker-process probing.

This module has no internal dependencies and serves as a stable
foundation layer for the probes and calculators.
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class SystemMetrics:
    """Snapshot of host CPU and memory, in whole megabytes."""

    cpu_cores: int
    total_memory_mb: int
    available_memory_mb: int
    free_memory_mb: int = 0
    platform: str = ""

    def __post_init__(self) -> None:
        if self.cpu_cores < 1:
            raise ValueError(f"cpu_cores must be >= 1, got {self.cpu_cores}")
        if self.total_memory_mb < 0 or self.available_memory_mb < 0:
            raise ValueError("memory values must be >= 0")

    @property
    def used_memory_mb(self) -> int:
        return self.total_memory_mb - self.available_memory_mb


@dataclass(frozen=True)
class WorkerProcess:
    """A single matched PHP worker process."""

    pid: int
    memory_kb: int
    command: str


@dataclass(frozen=True)
class ProcessMetrics:
    """Aggregate resident memory of matched PHP worker processes."""

    count: int = 0
    average_memory_mb: float = 0.0
    total_memory_mb: float = 0.0
    processes: Tuple[WorkerProcess, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "ProcessMetrics":
        return cls()

    @classmethod
    def from_processes(cls, processes: Tuple[WorkerProcess, ...]) -> "ProcessMetrics":
        """Aggregate count, total and average from per-process kB readings."""
        count = len(processes)
        if count == 0:
            return cls.empty()
        total_mb = sum(p.memory_kb for p in processes) / 1024
        return cls(
            count=count,
            average_memory_mb=total_mb / count,
            total_memory_mb=total_mb,
            processes=tuple(processes),
        )
