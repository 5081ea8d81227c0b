"""Tool settings: logging, probing and apply behaviour."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .tables import (
    BACKUP_SUFFIX,
    CONFIG_PATH_CANDIDATES,
    PROCESS_NAME_PATTERN,
    SECTION_MARKER,
    SERVICE_NAME_CANDIDATES,
)


class LoggingSettings(BaseModel):
    """Logging threshold and optional JSON log directory."""
    model_config = ConfigDict(frozen=True)

    level: str = Field(default="WARNING", description="Minimum log level")
    log_dir: Optional[Path] = Field(default=None, description="Directory for JSON log file")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


class ProbeSettings(BaseModel):
    """Process and PHP runtime probing."""
    model_config = ConfigDict(frozen=True)

    process_name_pattern: str = Field(default=PROCESS_NAME_PATTERN, description="Regex matched against process names")
    php_binary: str = Field(default="php", description="PHP CLI used to read memory_limit")
    php_timeout_seconds: float = Field(default=5.0, gt=0, le=60.0, description="Timeout for the PHP CLI call")

    @field_validator("process_name_pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid process name pattern: {e}")
        return value


class ApplySettings(BaseModel):
    """Config discovery, patching and service restart tables."""
    model_config = ConfigDict(frozen=True)

    config_path_candidates: Tuple[str, ...] = Field(default=CONFIG_PATH_CANDIDATES, description="Pool config search order")
    service_name_candidates: Tuple[str, ...] = Field(default=SERVICE_NAME_CANDIDATES, description="Service names probed for restart")
    section_marker: str = Field(default=SECTION_MARKER, min_length=1, description="Insert missing keys after this line")
    backup_suffix: str = Field(default=BACKUP_SUFFIX, min_length=1, description="Suffix of the sibling backup file")


class TunerSettings(BaseModel):
    """Top-level settings model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    probe: ProbeSettings = Field(default_factory=ProbeSettings)
    apply: ApplySettings = Field(default_factory=ApplySettings)
