#!/usr/bin/env python3
"""
php-tuner CLI

Rich-based CLI that sizes PHP-FPM pools and FrankenPHP threads for
this host, with optional in-place PHP-FPM pool config updates.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from php_tuner.calculator import PoolType, TrafficProfile
from php_tuner.config import LoggingSettings, TunerSettings, load_settings
from php_tuner.exceptions import SettingsError
from php_tuner.logger import configure_logging

from .commands.common import fail
from .commands.prefork import run_prefork
from .commands.worker_server import run_worker_server

# Initialize Rich console
console = Console()

# Main app
app = typer.Typer(
    name="php-tuner",
    help="PHP Tuner - Optimize your PHP runtime configuration",
    rich_markup_mode="rich",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

DEFAULT_COMMAND = "worker-server"

_TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}

# Add version callback
def version_callback(value: bool):
    if value:
        from _version import get_full_version
        console.print(f"php-tuner {get_full_version()}")
        raise typer.Exit()

@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version information"
    ),
    settings_file: Optional[Path] = typer.Option(
        None, "--settings", help="YAML settings file (default: $PHP_TUNER_SETTINGS)"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level for stderr diagnostics (default: WARNING)"
    ),
):
    """
    [bold blue]PHP Tuner[/bold blue]

    Analyzes CPU, memory and running PHP workers to calculate process
    manager and thread pool settings.

    [dim]Examples:[/dim]
        php-tuner                           # FrankenPHP (default)
        php-tuner f --traffic high          # High-traffic FrankenPHP
        php-tuner fpm                       # PHP-FPM
        php-tuner fpm --apply --restart     # PHP-FPM with auto-apply
    """
    try:
        settings = load_settings(settings_file)
    except SettingsError as e:
        fail(e)

    try:
        logging_settings = LoggingSettings(
            level=log_level or settings.logging.level, log_dir=settings.logging.log_dir
        )
    except ValidationError:
        raise typer.BadParameter(f"unknown log level: {log_level}", param_hint="--log-level")
    configure_logging(logging_settings.level, logging_settings.log_dir)
    ctx.obj = settings


def _settings(ctx: typer.Context) -> TunerSettings:
    return ctx.obj if isinstance(ctx.obj, TunerSettings) else TunerSettings()


@app.command("worker-server")
def worker_server(
    traffic: TrafficProfile = typer.Option(
        TrafficProfile.MEDIUM, "--traffic", case_sensitive=False,
        help="Traffic profile: low (no wait timeout), medium, high (strict timeouts)",
    ),
    reserved: Optional[int] = typer.Option(
        None, "--reserved", help="Memory to reserve for OS/Caddy in MB (default: 256MB + 10% of total)"
    ),
    thread_mem: Optional[float] = typer.Option(
        None, "--thread-mem", help="Override estimated thread memory in MB (default: 30MB)"
    ),
    worker: bool = typer.Option(
        True, "--worker/--no-worker",
        help="Worker mode; --worker=false disables it (not recommended)",
    ),
    config_only: bool = typer.Option(
        False, "--config-only", "-c", help="Output only the configuration (for piping to a file)"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """FrankenPHP configuration in Caddyfile format (alias: f)."""
    run_worker_server(
        traffic=traffic,
        reserved=reserved,
        thread_mem=thread_mem,
        worker=worker,
        config_only=config_only,
        no_color=no_color,
    )


@app.command("prefork")
def prefork(
    ctx: typer.Context,
    traffic: TrafficProfile = typer.Option(
        TrafficProfile.MEDIUM, "--traffic", case_sensitive=False,
        help="Traffic profile: low (ondemand), medium (dynamic), high (static)",
    ),
    pm: Optional[PoolType] = typer.Option(
        None, "--pm", case_sensitive=False,
        help="Process manager type (default: selected from traffic profile)",
    ),
    reserved: Optional[int] = typer.Option(
        None, "--reserved", help="Memory to reserve for OS/services in MB (default: 512MB + 15% of total)"
    ),
    process_mem: Optional[float] = typer.Option(
        None, "--process-mem", help="Override detected PHP process memory in MB"
    ),
    config_only: bool = typer.Option(
        False, "--config-only", "-c", help="Output only the configuration (for piping to a file)"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    apply_config: bool = typer.Option(
        False, "--apply", help="Apply configuration directly to the PHP-FPM pool config"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to PHP-FPM pool config (default: auto-detect)"
    ),
    restart: bool = typer.Option(False, "--restart", help="Restart PHP-FPM after applying"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompts"),
):
    """PHP-FPM pool configuration (alias: fpm)."""
    run_prefork(
        _settings(ctx),
        traffic=traffic,
        pm=pm,
        reserved=reserved,
        process_mem=process_mem,
        config_only=config_only,
        no_color=no_color,
        apply_config=apply_config,
        config=config,
        restart=restart,
        yes=yes,
    )


# Short aliases
app.command("f", hidden=True)(worker_server)
app.command("fpm", hidden=True)(prefork)


@app.command("version")
def version():
    """Show version information."""
    version_callback(True)


def _expand_bool_flags(args: List[str]) -> List[str]:
    """Rewrite `--worker=<bool>` into the `--worker` / `--no-worker` flag pair."""
    expanded = []
    for arg in args:
        if arg.startswith("--worker="):
            value = arg.split("=", 1)[1].strip().lower()
            if value in _TRUE_VALUES:
                arg = "--worker"
            elif value in _FALSE_VALUES:
                arg = "--no-worker"
        expanded.append(arg)
    return expanded


def _click_exceptions():
    """The exception module typer's commands raise from (bundled or standalone click)."""
    return importlib.import_module(typer.BadParameter.__module__)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit code; usage errors exit 1."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        args = [DEFAULT_COMMAND]
    args = _expand_bool_flags(args)

    command = typer.main.get_command(app)
    exceptions = _click_exceptions()
    try:
        rc = command.main(args=args, prog_name="php-tuner", standalone_mode=False)
    except exceptions.Abort:
        typer.echo("Aborted.", err=True)
        return 1
    except exceptions.ClickException as e:
        e.show()
        return 1
    return rc if isinstance(rc, int) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
