from __future__ import annotations

import logging
import logging.handlers
import sys
from typing import IO, Any

import structlog

from py_category_sync.infrastructure.config.settings import BaseAppSettings, get_settings

__all__ = ["configure_logging", "get_logger"]


def _resolve_level(level_name: str) -> int:
    """Return logging level from name with safe fallback to INFO."""
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handler(settings: BaseAppSettings) -> logging.Handler:
    if settings.log_rotation == "size":
        return logging.handlers.RotatingFileHandler(
            filename=settings.log_file,
            maxBytes=max(1024, settings.log_max_bytes),
            backupCount=max(1, settings.log_backup_count),
            encoding="utf-8",
        )
    return logging.handlers.TimedRotatingFileHandler(
        filename=settings.log_file,
        when=settings.log_rotate_when,
        interval=1,
        backupCount=max(1, settings.log_backup_count),
        utc=settings.log_rotate_utc,
        encoding="utf-8",
    )


def configure_logging(stream: IO[str] | None = None, settings: BaseAppSettings | None = None) -> None:
    """Initialize structlog + stdlib logging for console or JSON rendering.

    - stdout (or ``stream``) handler for console output; rotating file handler
      when JSON logs and LOG_FILE are set
    - contextvars merged, ISO timestamp, level and logger name on every record
    - records from ``logging.getLogger(__name__)`` in library modules go through
      the same ProcessorFormatter as structlog events
    - ``force=True`` so repeated calls (tests, CLI re-entry) do not stack handlers

    stream: optional text stream for the console handler (defaults to sys.stdout).
    settings: explicit settings; defaults to ``get_settings()``.
    """
    settings = settings or get_settings()
    if not settings.logging_enabled:
        logging.basicConfig(handlers=[logging.NullHandler()], level=logging.CRITICAL + 1, force=True)
        structlog.configure(cache_logger_on_first_use=True)
        return
    level_value = _resolve_level(settings.log_level)

    timestamper = structlog.processors.TimeStamper(fmt="iso")
    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        timestamper,
    ]

    if settings.json_logs:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    if settings.json_logs and settings.log_file:
        handler = _file_handler(settings)
    else:
        handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=pre_chain,
        )
    )

    logging.basicConfig(handlers=[handler], level=level_value, force=True)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level_value, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            timestamper,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,  # type: ignore[arg-type]
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "py_category_sync") -> structlog.stdlib.BoundLogger:
    """Return a structured logger; configure on first use if needed."""
    if not logging.getLogger().handlers:
        configure_logging()
    return structlog.get_logger(name)
