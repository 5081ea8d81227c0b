"""
Structured JSON Logging for php-tuner

Human-readable lines go to stderr so the report and config block on
stdout stay pipeable. An optional rotating JSON log file carries run
correlation for audit of apply/restart operations.
"""

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional, Union


class JSONFormatter(logging.Formatter):
    """Formatter that outputs structured JSON logs"""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "process": record.process,
        }

        if record.exc_info and isinstance(record.exc_info, tuple):
            exc_type, exc_value, _ = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line console format with structured fields appended"""

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = getattr(record, "extra_data", None)
        if extra:
            line += " " + " ".join(f"{k}={v}" for k, v in extra.items())
        return line


class TunerLogger:
    """
    Logger with run correlation and keyword-based structured fields.

    Features:
    - Console output on stderr
    - Optional JSON file output with rotation
    - Context-aware logging with custom fields
    """

    def __init__(
        self,
        run_id: Optional[str] = None,
        log_level: str = "WARNING",
        log_dir: Optional[Union[str, Path]] = None,
    ):
        """
        Args:
            run_id: Unique identifier for this invocation. Generated if not provided.
            log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for the JSON log file; no file output when None
        """
        self.run_id = run_id or self._generate_run_id()
        self.log_level = getattr(logging, log_level.upper())
        self.log_dir = Path(log_dir) if log_dir else None
        self._setup_logging()

    def _generate_run_id(self) -> str:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{timestamp}-{str(uuid.uuid4())[:8]}"

    def _setup_logging(self) -> None:
        self.logger = logging.getLogger(f"php_tuner.{self.run_id}")
        self.logger.setLevel(self.log_level)

        # Prevent duplicate handlers if logger already exists
        if self.logger.handlers:
            return

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ConsoleFormatter())
        console_handler.setLevel(self.log_level)
        self.logger.addHandler(console_handler)

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            json_handler = RotatingFileHandler(
                self.log_dir / "php-tuner.log",
                maxBytes=1024 * 1024,
                backupCount=3,
            )
            json_handler.setFormatter(JSONFormatter(self.run_id))
            json_handler.setLevel(self.log_level)
            self.logger.addHandler(json_handler)

        self.logger.propagate = False

    def log_event(self, level: str, message: str, exc_info: Any = None, **kwargs) -> None:
        """
        Log structured event with additional context

        Args:
            level: Log level name
            message: Human-readable log message
            **kwargs: Additional structured data to include
        """
        levelno = getattr(logging, level.upper())
        if not self.logger.isEnabledFor(levelno):
            return
        record = self.logger.makeRecord(
            name=self.logger.name,
            level=levelno,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=exc_info,
        )
        record.extra_data = kwargs
        self.logger.handle(record)

    def debug(self, message: str, **kwargs) -> None:
        self.log_event("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self.log_event("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.log_event("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.log_event("ERROR", message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log exception with traceback"""
        self.log_event("ERROR", message, exc_info=sys.exc_info(), **kwargs)

    def close(self) -> None:
        """Close all handlers and cleanup"""
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)


_default_logger: Optional[TunerLogger] = None


def get_logger(
    run_id: Optional[str] = None,
    log_level: str = "WARNING",
    log_dir: Optional[Union[str, Path]] = None,
) -> TunerLogger:
    """
    Factory function to get a configured logger

    Args:
        run_id: Optional run ID. Generated if not provided.
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Optional directory for JSON log output

    Returns:
        Configured TunerLogger instance
    """
    return TunerLogger(run_id=run_id, log_level=log_level, log_dir=log_dir)


def configure_logging(
    log_level: str = "WARNING", log_dir: Optional[Union[str, Path]] = None
) -> TunerLogger:
    """Replace the process-wide logger used by library modules."""
    global _default_logger
    if _default_logger is not None:
        _default_logger.close()
    _default_logger = get_logger(log_level=log_level, log_dir=log_dir)
    return _default_logger


def default_logger() -> TunerLogger:
    """Return the process-wide logger, creating a WARNING-level one on first use."""
    global _default_logger
    if _default_logger is None:
        _default_logger = get_logger()
    return _default_logger
