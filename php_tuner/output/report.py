"""
Human-readable report rendering with Rich.

Every section is suppressed in config-only mode except the
configuration block itself, which is then written without decoration.
"""

from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..calculator.models import PreforkConfig, WorkerServerConfig
from ..resources.data_models import ProcessMetrics, SystemMetrics


def make_console(no_color: bool = False) -> Console:
    """Console on stdout; ``no_color`` drops every ANSI style."""
    if no_color:
        return Console(color_system=None, no_color=True, highlight=False, soft_wrap=True)
    return Console(highlight=False, soft_wrap=True)


class ReportPrinter:
    """Sectioned report: system, processes, calculation, config, warnings, advice."""

    def __init__(
        self,
        console: Optional[Console] = None,
        no_color: bool = False,
        config_only: bool = False,
    ):
        self.console = console or make_console(no_color)
        self.config_only = config_only

    def header(self, title: str) -> None:
        if self.config_only:
            return
        self.console.print()
        self.console.print(Text(title, style="bold cyan"))
        self.console.print(Text("─" * 40, style="dim"))
        self.console.print()

    def _section(self, title: str, style: str = "bold") -> None:
        self.console.print(Text(title, style=style))
        self.console.print()

    def _rows(self, rows: Iterable[tuple]) -> None:
        grid = Table.grid(padding=(0, 1))
        grid.add_column(style="dim", min_width=20)
        grid.add_column()
        for label, value in rows:
            grid.add_row(f"  {label}", value)
        self.console.print(grid)
        self.console.print()

    def system_info(self, system: SystemMetrics) -> None:
        if self.config_only:
            return
        self._section("System Information")
        self._rows([
            ("Platform", system.platform or "unknown"),
            ("CPU Cores", str(system.cpu_cores)),
            ("Total Memory", f"{system.total_memory_mb} MB"),
            ("Available Memory", f"{system.available_memory_mb} MB"),
            ("Used Memory", f"{system.used_memory_mb} MB"),
        ])

    def process_info(self, processes: ProcessMetrics) -> None:
        if self.config_only:
            return
        self._section("PHP-FPM Processes")
        if processes.count == 0:
            self.console.print(Text("  No PHP-FPM processes detected", style="yellow"))
            self.console.print(Text("  Using estimates based on php.ini memory_limit", style="dim"))
            self.console.print()
            return
        self._rows([
            ("Process Count", str(processes.count)),
            ("Average Memory", f"{processes.average_memory_mb:.1f} MB"),
            ("Total Memory", f"{processes.total_memory_mb:.1f} MB"),
        ])

    def prefork_calculation(self, config: PreforkConfig) -> None:
        if self.config_only:
            return
        self._section("Calculation")
        per_worker = f"{config.process_memory_mb:.1f} MB"
        if config.process_memory_estimated:
            per_worker += " (estimate)"
        self._rows([
            ("Reserved Memory", f"{config.reserved_memory_mb} MB (for OS/services)"),
            ("Available for PHP", f"{config.available_memory_mb} MB"),
            ("Process Memory", per_worker),
            ("Formula", f"{config.available_memory_mb} MB / {config.process_memory_mb:.1f} MB"
                        f" = {config.max_workers} workers"),
        ])

    def worker_server_calculation(self, config: WorkerServerConfig) -> None:
        if self.config_only:
            return
        self._section("Calculation")
        self._rows([
            ("Reserved Memory", f"{config.reserved_memory_mb} MB (for OS/Caddy)"),
            ("Available for PHP", f"{config.available_memory_mb} MB"),
            ("Thread Memory", f"{config.thread_memory_mb:.1f} MB"),
            ("Formula", f"{config.available_memory_mb} MB / {config.thread_memory_mb:.1f} MB"
                        f" = {config.num_threads} threads"),
        ])

    def config_block(self, block: str) -> None:
        if self.config_only:
            self.console.out(block, end="", highlight=False)
            return
        self._section("Recommended Configuration", style="bold green")
        self.console.out(block, end="", highlight=False)
        self.console.print()

    def warnings(self, warnings: Iterable[str]) -> None:
        warnings = list(warnings)
        if self.config_only or not warnings:
            return
        self._section("Warnings", style="bold yellow")
        for warning in warnings:
            self.console.print(Text.assemble("  ", ("!", "yellow"), f" {warning}"))
        self.console.print()

    def recommendations(self, recommendations: Iterable[str]) -> None:
        recommendations = list(recommendations)
        if self.config_only or not recommendations:
            return
        self._section("Recommendations", style="bold blue")
        for recommendation in recommendations:
            self.console.print(Text.assemble("  ", ("*", "cyan"), f" {recommendation}"))
        self.console.print()

    def _steps(self, steps: Iterable[tuple]) -> None:
        self._section("How to Apply")
        for i, (description, commands) in enumerate(steps, 1):
            self.console.print(f"  {i}. {description}")
            for command in commands:
                self.console.print(Text(f"     {command}", style="dim"))
            self.console.print()

    def prefork_usage(self) -> None:
        if self.config_only:
            return
        self._steps([
            ("Edit your PHP-FPM pool configuration:", ["/etc/php/8.x/fpm/pool.d/www.conf"]),
            ("Restart PHP-FPM:", ["sudo systemctl restart php-fpm"]),
        ])

    def worker_server_usage(self) -> None:
        if self.config_only:
            return
        self._steps([
            ("Add the configuration to your Caddyfile:",
             ["/etc/frankenphp/Caddyfile", "or ./Caddyfile (current directory)"]),
            ("Restart FrankenPHP:",
             ["frankenphp reload", "# or with Docker:", "docker compose restart"]),
        ])
