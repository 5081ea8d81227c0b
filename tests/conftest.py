"""
Pytest Configuration for php-tuner
==================================

Root conftest.py - shared fixtures and location-based markers.
"""

from pathlib import Path

import pytest

from php_tuner import logger as tuner_logger
from php_tuner.resources.data_models import ProcessMetrics, SystemMetrics, WorkerProcess

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_collection_modifyitems(config, items):
    """Automatically add markers based on test location."""
    for item in items:
        if "/unit/" in item.nodeid:
            item.add_marker(pytest.mark.unit)
            item.add_marker(pytest.mark.fast)  # Unit tests are fast by default
        elif "/integration/" in item.nodeid:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)

        # Feature area markers
        for area in ("cli", "config", "apply", "calculator", "resources"):
            if f"/{area}/" in item.nodeid:
                item.add_marker(getattr(pytest.mark, area))


@pytest.fixture(autouse=True)
def reset_default_logger():
    """Each test starts with a fresh process-wide logger bound to the current stderr."""
    tuner_logger._default_logger = None
    yield
    if tuner_logger._default_logger is not None:
        tuner_logger._default_logger.close()
    tuner_logger._default_logger = None


@pytest.fixture
def make_system():
    """Factory for SystemMetrics snapshots."""

    def _make(cpu_cores=4, total_memory_mb=4096, available_memory_mb=None, platform="linux"):
        if available_memory_mb is None:
            available_memory_mb = total_memory_mb // 2
        return SystemMetrics(
            cpu_cores=cpu_cores,
            total_memory_mb=total_memory_mb,
            available_memory_mb=available_memory_mb,
            free_memory_mb=available_memory_mb // 2,
            platform=platform,
        )

    return _make


@pytest.fixture
def medium_host(make_system):
    """4 cores, 4GB: the reference sizing host."""
    return make_system(cpu_cores=4, total_memory_mb=4096)


@pytest.fixture
def no_processes():
    return ProcessMetrics.empty()


@pytest.fixture
def measured_processes():
    """Three workers averaging 40MB resident."""
    return ProcessMetrics.from_processes((
        WorkerProcess(pid=101, memory_kb=30 * 1024, command="php-fpm8.2"),
        WorkerProcess(pid=102, memory_kb=40 * 1024, command="php-fpm8.2"),
        WorkerProcess(pid=103, memory_kb=50 * 1024, command="php-fpm8.2"),
    ))


@pytest.fixture
def sample_pool_text() -> str:
    """Debian-style www.conf with defaults partly commented out."""
    return (FIXTURES_DIR / "www.conf").read_text(encoding="utf-8")


@pytest.fixture
def pool_config_file(tmp_path, sample_pool_text) -> Path:
    """Writable copy of the sample pool config."""
    path = tmp_path / "www.conf"
    path.write_text(sample_pool_text, encoding="utf-8")
    return path
