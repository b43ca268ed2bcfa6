"""Logging configuration wrapper for the map component.

This module provides level-gated structlog loggers for the map component,
allowing runtime control of the logging level for the chatty marker editing
code paths (every drag movement passes through them).

The level is read from ``config/logging.json`` and can be overridden with the
``MARKER_EDIT_LOG_LEVEL`` environment variable.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict

from structlog import get_logger as _get_logger

_logging_config_path = (
    Path(__file__).parent.parent.parent.parent.parent / "config" / "logging.json"
)

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def _load_logging_config() -> Dict[str, Any]:
    if _logging_config_path.exists():
        try:
            with open(_logging_config_path, "r") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            # Defaults below apply when the file is unreadable
            pass
    return {"LOGGING_LEVEL": "INFO", "LOGGING_FORMAT": "json"}


_config = _load_logging_config()


def effective_level() -> str:
    """Get the level currently applied to map component loggers."""
    return os.environ.get(
        "MARKER_EDIT_LOG_LEVEL", _config.get("LOGGING_LEVEL", "INFO")
    ).upper()


class MapLogger:
    """Logger wrapper for the map component with a configurable level."""

    def __init__(self, name: str, level: str = None):
        self._logger = _get_logger(name)
        self._name = name
        self._effective_level_num = _LEVELS.get((level or effective_level()).upper(), 20)

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current level."""
        return _LEVELS.get(level, 20) >= self._effective_level_num

    def debug(self, message: str, **kwargs) -> None:
        if self._should_log("DEBUG"):
            self._logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        if self._should_log("INFO"):
            self._logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        if self._should_log("WARNING"):
            self._logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message (always logged)."""
        self._logger.error(message, **kwargs)


def get_map_logger(name: str) -> MapLogger:
    """Get a configurable logger for the map component.

    Args:
        name: Logger name (typically __name__)

    Returns:
        MapLogger instance with configurable level support
    """
    return MapLogger(name)
