"""Unit tests for host detection."""

from types import SimpleNamespace
from unittest.mock import patch

import psutil
import pytest

from php_tuner.exceptions import ErrorCategory, ProbeError
from php_tuner.resources import SystemMetrics, detect_system
from php_tuner.resources.system_probe import current_platform

MB = 1024 * 1024


def virtual_memory(total_mb=8192, available_mb=6000, free_mb=2000):
    return SimpleNamespace(total=total_mb * MB, available=available_mb * MB, free=free_mb * MB)


class TestDetectSystem:

    @pytest.mark.fast
    @patch("psutil.virtual_memory")
    @patch("psutil.cpu_count")
    def test_converts_to_megabytes(self, mock_cpu, mock_vm):
        mock_cpu.return_value = 8
        mock_vm.return_value = virtual_memory()

        system = detect_system(platform="linux")

        mock_cpu.assert_called_once_with(logical=True)
        assert system == SystemMetrics(
            cpu_cores=8,
            total_memory_mb=8192,
            available_memory_mb=6000,
            free_memory_mb=2000,
            platform="linux",
        )
        assert system.used_memory_mb == 2192

    @patch("psutil.virtual_memory")
    @patch("psutil.cpu_count")
    def test_partial_megabytes_truncate(self, mock_cpu, mock_vm):
        mock_cpu.return_value = 2
        mock_vm.return_value = SimpleNamespace(total=MB * 3 - 1, available=MB + 10, free=0)

        system = detect_system(platform="darwin")

        assert system.total_memory_mb == 2
        assert system.available_memory_mb == 1

    def test_unsupported_platform(self):
        with pytest.raises(ProbeError, match="unsupported platform: win32") as exc_info:
            detect_system(platform="win32")

        assert exc_info.value.category is ErrorCategory.RESOURCE
        assert exc_info.value.context.platform == "win32"

    @patch("psutil.cpu_count", return_value=None)
    def test_unknown_core_count(self, mock_cpu):
        with pytest.raises(ProbeError, match="CPU core count"):
            detect_system(platform="linux")

    @patch("psutil.virtual_memory", side_effect=psutil.AccessDenied())
    @patch("psutil.cpu_count", return_value=4)
    def test_memory_read_failure(self, mock_cpu, mock_vm):
        with pytest.raises(ProbeError, match="failed to read memory information") as exc_info:
            detect_system(platform="linux")

        assert isinstance(exc_info.value.original_exception, psutil.AccessDenied)


class TestSystemMetrics:

    def test_rejects_zero_cores(self):
        with pytest.raises(ValueError, match="cpu_cores"):
            SystemMetrics(cpu_cores=0, total_memory_mb=1024, available_memory_mb=512)

    def test_rejects_negative_memory(self):
        with pytest.raises(ValueError, match="memory"):
            SystemMetrics(cpu_cores=1, total_memory_mb=-1, available_memory_mb=0)

    def test_current_platform_normalises_linux(self, monkeypatch):
        monkeypatch.setattr("sys.platform", "linux2")

        assert current_platform() == "linux"
