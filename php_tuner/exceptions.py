"""
Structured exception hierarchy with execution context for php-tuner.

All exceptions include:
- execution_context: platform, operation, config path, service name
- resolution_hints: Actionable suggestions for common issues
- severity: ERROR, WARNING
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from .apply.applier import ApplyResult


class ErrorSeverity(str, Enum):
    """Error severity levels"""
    ERROR = "error"            # Aborts the invocation
    WARNING = "warning"        # Reported, earlier work stands


class ErrorCategory(str, Enum):
    """Error categories for diagnostics and resolution routing"""
    RESOURCE = "resource"              # CPU, memory and process probes
    CONFIGURATION = "configuration"    # Pool config lookup and tool settings
    FILESYSTEM = "filesystem"          # Backup and config writes
    SERVICE = "service"                # Service manager interaction


@dataclass
class ExecutionContext:
    """Execution context attached to every error"""

    operation: Optional[str] = None
    platform: Optional[str] = None
    config_path: Optional[str] = None
    service_name: Optional[str] = None

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize context for logging"""
        return {
            k: v for k, v in self.__dict__.items()
            if v is not None and not k.startswith('_')
        }

    def format_summary(self) -> str:
        """Human-readable one-line summary"""
        parts = []
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.platform:
            parts.append(f"platform={self.platform}")
        if self.config_path:
            parts.append(f"config={self.config_path}")
        if self.service_name:
            parts.append(f"service={self.service_name}")
        if self.correlation_id:
            parts.append(f"correlation_id={self.correlation_id}")
        return " | ".join(parts)


@dataclass
class ResolutionHint:
    """Actionable resolution guidance for common error patterns"""

    title: str
    description: str
    steps: List[str]


class TunerError(Exception):
    """
    Base exception for php-tuner with structured context.

    The CLI catches this type, prints the one-line message to stderr
    and exits non-zero.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[ExecutionContext] = None,
        category: ErrorCategory = ErrorCategory.RESOURCE,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        resolution_hints: Optional[List[ResolutionHint]] = None,
        original_exception: Optional[BaseException] = None,
        **kwargs
    ):
        super().__init__(message)
        self.message = message
        self.context = context or ExecutionContext()
        self.category = category
        self.severity = severity
        self.resolution_hints = resolution_hints or []
        self.original_exception = original_exception
        self.additional_data = kwargs

    def format_diagnostic_message(self) -> str:
        """Format multi-line diagnostic message with context and hints."""
        lines = [
            f"ERROR: {self.message}",
            f"Severity: {self.severity.value.upper()} | Category: {self.category.value}",
            f"Context: {self.context.format_summary()}",
        ]

        if self.resolution_hints:
            lines.append("")
            lines.append("RESOLUTION HINTS:")
            for i, hint in enumerate(self.resolution_hints, 1):
                lines.append(f"{i}. {hint.title}")
                lines.append(f"   {hint.description}")
                for step in hint.steps:
                    lines.append(f"     - {step}")

        if self.original_exception:
            lines.append("")
            lines.append(
                f"Caused by {type(self.original_exception).__name__}: {self.original_exception}"
            )

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for structured logging"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context.to_dict() if self.context else {},
            "resolution_hints": [
                {"title": hint.title, "description": hint.description, "steps": hint.steps}
                for hint in self.resolution_hints
            ],
            "original_exception": str(self.original_exception) if self.original_exception else None,
            **self.additional_data
        }


# Probe Errors
class ProbeError(TunerError):
    """Unsupported platform or unreadable OS metric source"""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, category=ErrorCategory.RESOURCE, **kwargs)


# Configuration Errors
class ConfigurationError(TunerError):
    """Pool config lookup and tool settings errors"""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, category=ErrorCategory.CONFIGURATION, **kwargs)


class ConfigNotFoundError(ConfigurationError):
    """No candidate PHP-FPM pool config exists and none was given"""
    def __init__(self, candidates: Sequence[str], **kwargs):
        self.candidates = [str(c) for c in candidates]
        message = (
            "could not auto-detect PHP-FPM config file. Use --config to specify the path"
        )
        if "resolution_hints" not in kwargs:
            kwargs["resolution_hints"] = [
                ResolutionHint(
                    title="Point at the pool config",
                    description="None of the known pool config locations exist",
                    steps=[f"Searched: {c}" for c in self.candidates]
                    + ["Pass --config /path/to/www.conf"],
                )
            ]
        super().__init__(message, **kwargs)


class InvalidConfigPathError(ConfigurationError):
    """Missing file, directory given, or wrong extension"""
    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        self.path = path
        super().__init__(message, **kwargs)


class SettingsError(ConfigurationError):
    """Tool settings file missing or invalid"""


# Filesystem Errors
class FileWriteError(TunerError):
    """Backup or config write failure"""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, category=ErrorCategory.FILESYSTEM, **kwargs)


class BackupWriteError(FileWriteError):
    """Backup could not be written; the original file is untouched"""


class ConfigWriteError(FileWriteError):
    """Config could not be read or written"""


# Service Errors
class RestartError(TunerError):
    """Config applied but the service restart failed"""
    def __init__(
        self,
        message: str,
        result: Optional["ApplyResult"] = None,
        **kwargs
    ):
        self.result = result
        if "resolution_hints" not in kwargs:
            kwargs["resolution_hints"] = [
                ResolutionHint(
                    title="Restart manually",
                    description="The new pool settings are on disk but not yet active",
                    steps=[
                        "sudo systemctl restart php-fpm",
                        "or: brew services restart php",
                    ],
                )
            ]
        super().__init__(
            message,
            category=ErrorCategory.SERVICE,
            severity=ErrorSeverity.WARNING,
            **kwargs
        )
