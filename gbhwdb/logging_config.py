"""
Structured logging configuration for the gbhwdb pipeline.

Provides JSON-formatted logging with file rotation for production builds
and human-readable console logging for development.

Loggers:
- crawler: Directory walking, unit skips, identity derivation
- metadata: Metadata reading and schema validation
- photos: Photo copies and thumbnail generation
- export: CSV and JSON data exports
- build: Build orchestration and summaries
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

LOGGER_NAMES = ["crawler", "metadata", "photos", "export", "build"]


class JSONFormatter(logging.Formatter):
    """
    Custom formatter that outputs logs as JSON for structured logging.

    Each log record includes:
    - timestamp: ISO 8601 format
    - level: Log level (INFO, ERROR, etc.)
    - logger: Logger name (gbhwdb.crawler, gbhwdb.photos, ...)
    - message: Log message
    - module: Python module name
    - function: Function name where log was created
    - line: Line number
    - Additional fields: exception info, extra fields
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # logger.warning("msg", extra={"extra_fields": {...}})
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output in development.

    Format: [TIMESTAMP] LEVEL - LOGGER - MESSAGE
    Example: [2025-12-29 10:30:45] WARNING - gbhwdb.crawler - Skipping directory without metadata ...
    """

    def __init__(self):
        super().__init__(
            fmt="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def _get_log_level(level: Optional[str] = None) -> int:
    """
    Resolve the log level.

    Args:
        level: Explicit level name; falls back to GBHWDB_LOG_LEVEL, then INFO

    Returns:
        Log level constant (logging.DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level_str = (level or os.environ.get("GBHWDB_LOG_LEVEL", "INFO")).upper()
    return getattr(logging, level_str, logging.INFO)


def _get_log_dir() -> Path:
    """
    Get log directory path from GBHWDB_LOG_DIR or use ./logs.

    Returns:
        Path to log directory
    """
    log_dir = Path(os.environ.get("GBHWDB_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _is_production() -> bool:
    """Check GBHWDB_ENV for a production build."""
    return os.environ.get("GBHWDB_ENV", "development").lower() == "production"


def configure_logging(level: Optional[str] = None) -> Dict[str, logging.Logger]:
    """
    Configure structured logging for the pipeline.

    Behavior:
    - Production (GBHWDB_ENV=production):
      * JSON-formatted logs to files with rotation
      * Separate files per logger: crawler.log, photos.log, ...
      * File rotation: 10MB max size, 5 backup files

    - Development (default):
      * Human-readable console output on stderr
      * No file logging

    Args:
        level: Optional log level name overriding GBHWDB_LOG_LEVEL

    Returns:
        Dictionary mapping short logger names to configured Logger instances
    """
    log_level = _get_log_level(level)
    is_prod = _is_production()
    log_dir = _get_log_dir() if is_prod else None

    loggers = {}

    for logger_name in LOGGER_NAMES:
        logger = logging.getLogger(f"gbhwdb.{logger_name}")
        logger.setLevel(log_level)
        logger.handlers.clear()

        if is_prod:
            file_handler = logging.handlers.RotatingFileHandler(
                log_dir / f"{logger_name}.log",
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8"
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)
            logger.propagate = False
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(ConsoleFormatter())
            logger.addHandler(console_handler)
            # Keep propagation so pytest's caplog still sees records
            logger.propagate = True

        loggers[logger_name] = logger

    return loggers


_loggers: Optional[Dict[str, logging.Logger]] = None


def get_logger(name: str) -> logging.Logger:
    """
    Get a pipeline logger by short name.

    Loggers are plain ``logging.getLogger("gbhwdb.<name>")`` instances, so
    modules can log before ``init_logging()`` runs; handlers are only
    attached by ``init_logging()``.

    Args:
        name: Logger name (crawler, metadata, photos, export, build)

    Returns:
        Logger instance

    Raises:
        ValueError: If logger name is not recognized
    """
    if name not in LOGGER_NAMES:
        raise ValueError(
            f"Unknown logger name: {name}. "
            f"Valid names: {', '.join(LOGGER_NAMES)}"
        )

    if _loggers is not None:
        return _loggers[name]
    return logging.getLogger(f"gbhwdb.{name}")


def init_logging(level: Optional[str] = None) -> Dict[str, logging.Logger]:
    """
    Initialize logging configuration (called once at build start).

    Args:
        level: Optional log level name

    Returns:
        Dictionary of configured loggers
    """
    global _loggers
    _loggers = configure_logging(level)
    return _loggers
