"""
Structured logging utilities using structlog.

Provides JSON-formatted logging for production and
human-readable logging for development.
"""

import logging
import sys
import structlog
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, TextIO


# file opened by setup_logger when log_dir is given
_log_file: Optional[TextIO] = None


def setup_logger(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    log_format: str = "json",
    service_name: str = "bian"
) -> structlog.BoundLogger:
    """
    Configure and return a structured logger.

    The library itself never calls this; applications embedding the client
    call it once at startup and shutdown_logger() on exit.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files (stdout if None)
        log_format: "json" for production, "console" for development
        service_name: Name of the service for log context

    Returns:
        Configured structlog logger instance
    """
    global _log_file
    _close_log_file()

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        log_filename = f"bian_{datetime.now(timezone.utc).strftime('%Y-%m-%d')}.log"
        log_file = _log_file = open(log_path / log_filename, "a")
    else:
        log_file = sys.stdout

    if log_format == "json":
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ]
    else:  # console format for development
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=log_file is sys.stdout)
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=log_file),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger(service=service_name)


def shutdown_logger() -> None:
    """Close the log file opened by setup_logger and restore structlog defaults."""
    _close_log_file()
    structlog.reset_defaults()


def _close_log_file():
    global _log_file
    if _log_file is not None:
        _log_file.close()
        _log_file = None


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger instance with optional name context.

    Args:
        name: Optional logger name (typically __name__)

    Returns:
        Logger instance
    """
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()


class EventType:
    """Standard event types for client logging."""

    # Connection events
    WEBSOCKET_CONNECTED = "WEBSOCKET_CONNECTED"
    WEBSOCKET_DISCONNECTED = "WEBSOCKET_DISCONNECTED"
    WEBSOCKET_HANDSHAKE_FAILED = "WEBSOCKET_HANDSHAKE_FAILED"

    # REST events
    API_ERROR = "API_ERROR"
    RATE_LIMIT_WARNING = "RATE_LIMIT_WARNING"

    # User data stream events
    LISTEN_KEY_CREATED = "LISTEN_KEY_CREATED"
    LISTEN_KEY_REFRESHED = "LISTEN_KEY_REFRESHED"
    LISTEN_KEY_CLOSED = "LISTEN_KEY_CLOSED"


def log_system_event(
    logger: structlog.BoundLogger,
    event_type: str,
    message: str,
    **kwargs
) -> None:
    """
    Log a system event.

    Args:
        logger: Logger instance
        event_type: Event type from EventType class
        message: Event message
        **kwargs: Additional context
    """
    logger.info(
        message,
        event_type=event_type,
        timestamp=datetime.now(timezone.utc).isoformat(),
        **kwargs
    )
