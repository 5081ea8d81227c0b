"""Immutable lookup tables for config discovery, service restart and patching."""

from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

# Common PHP-FPM pool configuration paths, searched in order
CONFIG_PATH_CANDIDATES: Tuple[str, ...] = (
    # Debian/Ubuntu
    "/etc/php/8.3/fpm/pool.d/www.conf",
    "/etc/php/8.2/fpm/pool.d/www.conf",
    "/etc/php/8.1/fpm/pool.d/www.conf",
    "/etc/php/8.0/fpm/pool.d/www.conf",
    "/etc/php/7.4/fpm/pool.d/www.conf",
    # RHEL/CentOS/Fedora
    "/etc/php-fpm.d/www.conf",
    # Generic
    "/etc/php-fpm.conf",
    # macOS (Homebrew)
    "/opt/homebrew/etc/php/8.3/php-fpm.d/www.conf",
    "/opt/homebrew/etc/php/8.2/php-fpm.d/www.conf",
    "/usr/local/etc/php/8.3/php-fpm.d/www.conf",
    "/usr/local/etc/php/8.2/php-fpm.d/www.conf",
)

SERVICE_NAME_CANDIDATES: Tuple[str, ...] = (
    "php-fpm",
    "php8.3-fpm",
    "php8.2-fpm",
    "php8.1-fpm",
    "php8.0-fpm",
    "php7.4-fpm",
)

# Matches the worker binary family: php-fpm, php-fpm8.2, php8.3, ...
PROCESS_NAME_PATTERN = r"php-fpm|php[0-9]"

SECTION_MARKER = "[www]"
BACKUP_SUFFIX = ".backup"

# Pool setting keys in the order they are written
SETTING_KEYS: Tuple[str, ...] = (
    "pm",
    "pm.max_children",
    "pm.start_servers",
    "pm.min_spare_servers",
    "pm.max_spare_servers",
    "pm.max_requests",
    "pm.process_idle_timeout",
)

_ALL_POOLS: FrozenSet[str] = frozenset({"static", "dynamic", "ondemand"})

# Pool types (by value) for which each key is written
SETTING_RELEVANCE: Mapping[str, FrozenSet[str]] = MappingProxyType({
    "pm": _ALL_POOLS,
    "pm.max_children": _ALL_POOLS,
    "pm.max_requests": _ALL_POOLS,
    "pm.start_servers": frozenset({"dynamic"}),
    "pm.min_spare_servers": frozenset({"dynamic"}),
    "pm.max_spare_servers": frozenset({"dynamic"}),
    "pm.process_idle_timeout": frozenset({"dynamic", "ondemand"}),
})
