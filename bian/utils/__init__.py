"""
Shared utilities (logging, bounded attempts).
"""

from .logger import get_logger, setup_logger, shutdown_logger, EventType, log_system_event
from .retry import retry_on_error

__all__ = [
    "get_logger",
    "setup_logger",
    "shutdown_logger",
    "EventType",
    "log_system_event",
    "retry_on_error",
]
