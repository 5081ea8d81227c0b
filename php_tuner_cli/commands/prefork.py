"""
PHP-FPM command for php-tuner CLI

Detects the host and running PHP-FPM workers, sizes the pool, and
optionally writes the settings into the pool config.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.text import Text

from php_tuner.apply import (
    ApplyResult,
    apply_configuration,
    confirm,
    find_config_file,
    find_service_name,
    validate_config_path,
)
from php_tuner.calculator import (
    AUTO,
    Override,
    PoolType,
    PreforkConfig,
    PreforkOptions,
    TrafficProfile,
    calculate_prefork,
)
from php_tuner.config import TunerSettings
from php_tuner.exceptions import ConfigNotFoundError, ProbeError, RestartError, TunerError
from php_tuner.logger import default_logger
from php_tuner.output import ReportPrinter, render_prefork_block
from php_tuner.resources import ProcessMetrics, detect_processes, detect_system, get_memory_limit

from .common import as_setting, fail


def run_prefork(
    settings: TunerSettings,
    traffic: TrafficProfile = TrafficProfile.MEDIUM,
    pm: Optional[PoolType] = None,
    reserved: Optional[int] = None,
    process_mem: Optional[float] = None,
    config_only: bool = False,
    no_color: bool = False,
    apply_config: bool = False,
    config: Optional[Path] = None,
    restart: bool = False,
    yes: bool = False,
) -> None:
    printer = ReportPrinter(no_color=no_color, config_only=config_only)
    printer.header("PHP-FPM Process Manager Optimizer")

    try:
        system = detect_system()
    except ProbeError as e:
        fail(e)
    printer.system_info(system)

    try:
        processes = detect_processes(settings.probe.process_name_pattern)
    except ProbeError as e:
        default_logger().warning(f"Could not detect PHP processes: {e.message}")
        processes = ProcessMetrics.empty()
    printer.process_info(processes)

    options = PreforkOptions(
        reserved_memory_mb=as_setting(reserved),
        process_memory_mb=as_setting(process_mem),
        traffic_profile=traffic,
        pool_type=Override(pm) if pm is not None else AUTO,
    )
    pool = calculate_prefork(
        system,
        processes,
        options,
        memory_limit_provider=lambda: get_memory_limit(
            settings.probe.php_binary, settings.probe.php_timeout_seconds
        ),
    )

    printer.prefork_calculation(pool)
    printer.config_block(render_prefork_block(pool))
    printer.warnings(pool.warnings)

    if apply_config:
        try:
            _apply(printer, pool, config, restart, yes, settings)
        except TunerError as e:
            fail(e)
    else:
        printer.recommendations(pool.recommendations)
        printer.prefork_usage()


def _apply(
    printer: ReportPrinter,
    pool: PreforkConfig,
    config_path: Optional[Path],
    restart: bool,
    yes: bool,
    settings: TunerSettings,
) -> None:
    console = printer.console
    console.print()
    console.print(Text("Apply Configuration", style="bold cyan"))
    console.print()

    if config_path is None:
        try:
            path = find_config_file(settings.apply.config_path_candidates)
        except ConfigNotFoundError as e:
            console.print(Text("Searched locations:", style="yellow"))
            for candidate in e.candidates:
                console.print(f"  - {candidate}", markup=False)
            raise
    else:
        path = config_path
    path = validate_config_path(path)

    console.print(Text.assemble("  Config file:  ", (str(path), "green")))

    service = find_service_name(settings.apply.service_name_candidates)
    if service:
        console.print(Text.assemble("  Service:      ", (service, "green")))
    else:
        console.print(Text.assemble("  Service:      ", ("(not detected)", "yellow")))

    if restart and not service:
        console.print()
        console.print(Text.assemble(
            ("Warning:", "yellow"), " --restart specified but no PHP-FPM service detected"
        ))
    console.print()

    if not yes:
        action = "Apply these settings"
        if restart:
            action += " and restart PHP-FPM"
        if not confirm(action + "?"):
            console.print("Aborted.")
            return
        console.print()

    try:
        result = apply_configuration(pool, path, restart, settings.apply, service_name=service)
    except RestartError as e:
        if e.result is not None:
            _print_result(printer, e.result, restart)
        raise
    _print_result(printer, result, restart)


def _print_result(printer: ReportPrinter, result: ApplyResult, restart: bool) -> None:
    console = printer.console
    console.print(Text("Changes Applied", style="bold green"))
    console.print()

    if not result.changes:
        console.print("  No changes were necessary (config already up to date)")
    else:
        for change in result.changes:
            console.print(Text.assemble("  ", ("*", "cyan"), f" {change}"))

    console.print()
    console.print(f"  Backup saved to: {result.backup_path}", markup=False)

    if result.restarted:
        console.print(Text.assemble("  Service ", (result.service_name or "", "green"), " restarted successfully"))
    elif restart and result.service_name:
        console.print()
        console.print(Text.assemble(
            "  ", ("Note:", "yellow"), f" Run 'sudo systemctl restart {result.service_name}' to apply changes"
        ))
    elif not restart:
        console.print()
        console.print(Text.assemble("  ", ("Note:", "yellow"), " Restart PHP-FPM to apply changes:"))
        console.print("        sudo systemctl restart php-fpm")
    console.print()
