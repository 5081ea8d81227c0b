"""Unit tests for configuration block rendering."""

from php_tuner.calculator import PoolType, PreforkConfig, WorkerServerConfig
from php_tuner.output import render_prefork_block, render_worker_server_block


def prefork(pool_type, idle_timeout):
    return PreforkConfig(
        pool_type=pool_type,
        max_workers=46,
        start_workers=16,
        min_spare_workers=8,
        max_spare_workers=16,
        max_requests_per_worker=500,
        idle_timeout=idle_timeout,
        reserved_memory_mb=1126,
        available_memory_mb=2970,
        process_memory_mb=64.0,
    )


def worker_server(num=8, maximum=16, count=8, wait="10s", worker_mode=True):
    return WorkerServerConfig(
        num_threads=num,
        max_threads=maximum,
        worker_count=count,
        max_wait_time=wait,
        reserved_memory_mb=665,
        available_memory_mb=3431,
        thread_memory_mb=30.0,
        worker_mode=worker_mode,
    )


class TestPreforkBlock:

    def test_dynamic(self):
        assert render_prefork_block(prefork(PoolType.DYNAMIC, "5s")) == (
            "pm = dynamic\n"
            "pm.max_children = 46\n"
            "pm.process_idle_timeout = 5s\n"
            "pm.start_servers = 16\n"
            "pm.min_spare_servers = 8\n"
            "pm.max_spare_servers = 16\n"
            "pm.max_requests = 500\n"
        )

    def test_static(self):
        assert render_prefork_block(prefork(PoolType.STATIC, "3s")) == (
            "pm = static\n"
            "pm.max_children = 46\n"
            "pm.max_requests = 500\n"
        )

    def test_ondemand(self):
        assert render_prefork_block(prefork(PoolType.ONDEMAND, "10s")) == (
            "pm = ondemand\n"
            "pm.max_children = 46\n"
            "pm.process_idle_timeout = 10s\n"
            "pm.max_requests = 500\n"
        )


class TestWorkerServerBlock:

    def test_full_block(self):
        assert render_worker_server_block(worker_server()) == (
            "{\n"
            "    frankenphp {\n"
            "        num_threads 8\n"
            "        max_threads 16\n"
            "        max_wait_time 10s\n"
            "        worker {\n"
            "            file /path/to/your/public/index.php\n"
            "            num 8\n"
            "        }\n"
            "    }\n"
            "}\n"
        )

    def test_minimal_block(self):
        block = render_worker_server_block(worker_server(num=4, maximum=4, count=0, wait="", worker_mode=False))

        assert block == "{\n    frankenphp {\n        num_threads 4\n    }\n}\n"
