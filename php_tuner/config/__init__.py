"""Tool settings and the immutable lookup tables they default to."""

from .loader import SETTINGS_ENV_VAR, load_settings
from .settings import ApplySettings, LoggingSettings, ProbeSettings, TunerSettings
from .tables import (
    BACKUP_SUFFIX,
    CONFIG_PATH_CANDIDATES,
    PROCESS_NAME_PATTERN,
    SECTION_MARKER,
    SERVICE_NAME_CANDIDATES,
    SETTING_KEYS,
    SETTING_RELEVANCE,
)

__all__ = [
    "ApplySettings",
    "LoggingSettings",
    "ProbeSettings",
    "TunerSettings",
    "SETTINGS_ENV_VAR",
    "load_settings",
    "BACKUP_SUFFIX",
    "CONFIG_PATH_CANDIDATES",
    "PROCESS_NAME_PATTERN",
    "SECTION_MARKER",
    "SERVICE_NAME_CANDIDATES",
    "SETTING_KEYS",
    "SETTING_RELEVANCE",
]
