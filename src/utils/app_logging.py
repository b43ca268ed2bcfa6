import logging
import os
import sys
from typing import IO, Optional

import structlog

LOG_FILE_NAME = "vertexedit.log"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def default_log_dir() -> str:
    """Get the logs directory next to the application."""
    # Determine if we're running from PyInstaller
    if getattr(sys, "frozen", False):
        app_dir = os.path.dirname(sys.executable)
    else:
        app_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(app_dir, "logs")


def _configure(file_handler: IO, level: int) -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=file_handler),
        cache_logger_on_first_use=False,
    )


def setup_app_logging(log_dir: Optional[str] = None, level: str = "DEBUG") -> IO:
    """Configure structlog to write JSON lines to a log file.

    Args:
        log_dir: Directory for the log file; next to the application if omitted
        level: Minimum level name to write

    Returns:
        The open log file, which the caller closes on shutdown
    """
    log_level = _LEVELS.get(level.upper(), logging.DEBUG)
    log_dir = log_dir or default_log_dir()

    try:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = open(
            os.path.join(log_dir, LOG_FILE_NAME), "a", encoding="utf-8"
        )
    except OSError:
        # Fallback to the home directory if we can't write to the app directory
        temp_dir = os.path.join(os.path.expanduser("~"), ".vertexedit", "logs")
        os.makedirs(temp_dir, exist_ok=True)
        file_handler = open(
            os.path.join(temp_dir, LOG_FILE_NAME), "a", encoding="utf-8"
        )

    _configure(file_handler, log_level)
    return file_handler
