"""
Value types shared by the sizing calculators.

User inputs that may be auto-detected are modelled as ``Auto`` or
``Override(value)`` and collapsed once with :func:`resolve`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Generic, Tuple, TypeVar, Union

T = TypeVar("T")


class TrafficProfile(str, Enum):
    """Expected traffic level"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: str) -> "TrafficProfile":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"unknown traffic profile {value!r} (expected low, medium or high)"
            ) from None


class PoolType(str, Enum):
    """PHP-FPM process manager type"""
    STATIC = "static"
    DYNAMIC = "dynamic"
    ONDEMAND = "ondemand"

    @classmethod
    def parse(cls, value: str) -> "PoolType":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"unknown process manager {value!r} (expected static, dynamic or ondemand)"
            ) from None


class Auto:
    """Marker for a value the calculator derives itself."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "AUTO"


AUTO = Auto()


@dataclass(frozen=True)
class Override(Generic[T]):
    """A value supplied explicitly by the user."""
    value: T


Setting = Union[Auto, Override[T]]


def resolve(setting: "Setting[T]", fallback: Callable[[], T]) -> T:
    """Return the override value, or call ``fallback`` for ``AUTO``."""
    if isinstance(setting, Override):
        return setting.value
    return fallback()


def _require_positive(name: str, setting: Setting) -> None:
    if isinstance(setting, Override) and not setting.value > 0:
        raise ValueError(f"{name} override must be > 0, got {setting.value}")


@dataclass(frozen=True)
class PreforkOptions:
    """Inputs to the PHP-FPM calculation."""

    reserved_memory_mb: Setting[int] = AUTO
    process_memory_mb: Setting[float] = AUTO
    traffic_profile: TrafficProfile = TrafficProfile.MEDIUM
    pool_type: Setting[PoolType] = AUTO

    def __post_init__(self) -> None:
        _require_positive("reserved_memory_mb", self.reserved_memory_mb)
        _require_positive("process_memory_mb", self.process_memory_mb)


@dataclass(frozen=True)
class WorkerServerOptions:
    """Inputs to the FrankenPHP calculation."""

    reserved_memory_mb: Setting[int] = AUTO
    thread_memory_mb: Setting[float] = AUTO
    traffic_profile: TrafficProfile = TrafficProfile.MEDIUM
    worker_mode: bool = True

    def __post_init__(self) -> None:
        _require_positive("reserved_memory_mb", self.reserved_memory_mb)
        _require_positive("thread_memory_mb", self.thread_memory_mb)


@dataclass(frozen=True)
class PreforkConfig:
    """Calculated PHP-FPM pool settings plus the figures behind them."""

    pool_type: PoolType
    max_workers: int
    start_workers: int
    min_spare_workers: int
    max_spare_workers: int
    max_requests_per_worker: int
    idle_timeout: str

    reserved_memory_mb: int
    available_memory_mb: int
    process_memory_mb: float
    process_memory_estimated: bool = False
    warnings: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    def settings(self) -> dict:
        """Every pool key with its textual value, in write order."""
        return {
            "pm": self.pool_type.value,
            "pm.max_children": str(self.max_workers),
            "pm.start_servers": str(self.start_workers),
            "pm.min_spare_servers": str(self.min_spare_workers),
            "pm.max_spare_servers": str(self.max_spare_workers),
            "pm.max_requests": str(self.max_requests_per_worker),
            "pm.process_idle_timeout": self.idle_timeout,
        }


@dataclass(frozen=True)
class WorkerServerConfig:
    """Calculated FrankenPHP thread settings plus the figures behind them."""

    num_threads: int
    max_threads: int
    worker_count: int
    max_wait_time: str

    reserved_memory_mb: int
    available_memory_mb: int
    thread_memory_mb: float
    worker_mode: bool = True
    warnings: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
