"""Configuration blocks in each runtime's native syntax."""

from __future__ import annotations

from ..calculator.models import PreforkConfig, WorkerServerConfig
from ..config.tables import SETTING_RELEVANCE

PREFORK_BLOCK_ORDER = (
    "pm",
    "pm.max_children",
    "pm.process_idle_timeout",
    "pm.start_servers",
    "pm.min_spare_servers",
    "pm.max_spare_servers",
    "pm.max_requests",
)

WORKER_SCRIPT_PLACEHOLDER = "/path/to/your/public/index.php"


def render_prefork_block(config: PreforkConfig) -> str:
    """PHP-FPM pool ``key = value`` lines for the keys relevant to the pool type."""
    values = config.settings()
    pool = config.pool_type.value
    lines = [
        f"{key} = {values[key]}"
        for key in PREFORK_BLOCK_ORDER
        if pool in SETTING_RELEVANCE[key]
    ]
    return "\n".join(lines) + "\n"


def render_worker_server_block(config: WorkerServerConfig) -> str:
    """Caddyfile global options block for FrankenPHP."""
    lines = [
        "{",
        "    frankenphp {",
        f"        num_threads {config.num_threads}",
    ]
    if config.max_threads > config.num_threads:
        lines.append(f"        max_threads {config.max_threads}")
    if config.max_wait_time:
        lines.append(f"        max_wait_time {config.max_wait_time}")
    if config.worker_mode and config.worker_count > 0:
        lines.extend([
            "        worker {",
            f"            file {WORKER_SCRIPT_PLACEHOLDER}",
            f"            num {config.worker_count}",
            "        }",
        ])
    lines.extend(["    }", "}"])
    return "\n".join(lines) + "\n"
