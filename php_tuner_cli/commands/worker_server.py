"""
FrankenPHP command for php-tuner CLI

Detects the host, sizes FrankenPHP threads and prints a Caddyfile block.
"""

from __future__ import annotations

from typing import Optional

from php_tuner.calculator import TrafficProfile, WorkerServerOptions, calculate_worker_server
from php_tuner.exceptions import ProbeError
from php_tuner.output import ReportPrinter, render_worker_server_block
from php_tuner.resources import detect_system

from .common import as_setting, fail


def run_worker_server(
    traffic: TrafficProfile = TrafficProfile.MEDIUM,
    reserved: Optional[int] = None,
    thread_mem: Optional[float] = None,
    worker: bool = True,
    config_only: bool = False,
    no_color: bool = False,
) -> None:
    printer = ReportPrinter(no_color=no_color, config_only=config_only)
    printer.header("FrankenPHP Optimizer")

    try:
        system = detect_system()
    except ProbeError as e:
        fail(e)
    printer.system_info(system)

    options = WorkerServerOptions(
        reserved_memory_mb=as_setting(reserved),
        thread_memory_mb=as_setting(thread_mem),
        traffic_profile=traffic,
        worker_mode=worker,
    )
    config = calculate_worker_server(system, options)

    printer.worker_server_calculation(config)
    printer.config_block(render_worker_server_block(config))
    printer.warnings(config.warnings)
    printer.recommendations(config.recommendations)
    printer.worker_server_usage()
