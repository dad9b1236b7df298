"""
Logging setup for the API process and the session modules.

uvicorn and the sessionward package log to stdout. Access lines for
polling endpoints (health checks) are dropped so they do not drown out
session events.
"""

import logging
from typing import Any, Dict, Iterable, Tuple

ACCESS_LOGGER = "uvicorn.access"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
QUIET_PATHS: Tuple[str, ...] = ("/health",)


class QuietPathFilter(logging.Filter):
    """Drop uvicorn access records whose request path is in a quiet list."""

    def __init__(self, paths: Iterable[str] = QUIET_PATHS):
        super().__init__()
        self.paths = tuple(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != ACCESS_LOGGER:
            return True
        return self._request_path(record) not in self.paths

    @staticmethod
    def _request_path(record: logging.LogRecord) -> str:
        # uvicorn logs (client, method, path, http_version, status)
        args = record.args
        if isinstance(args, tuple) and len(args) >= 3:
            target = str(args[2])
        else:
            parts = record.getMessage().split()
            target = parts[3] if len(parts) > 3 else ""
        return target.split("?", 1)[0]


def _stdout_handler(formatter: str, *filters: str) -> Dict[str, Any]:
    handler: Dict[str, Any] = {
        "class": "logging.StreamHandler",
        "formatter": formatter,
        "stream": "ext://sys.stdout",
    }
    if filters:
        handler["filters"] = list(filters)
    return handler


def _isolated_logger(handler: str, level: str) -> Dict[str, Any]:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(
    level: str = "INFO",
    access_level: str = "INFO",
    quiet_paths: Iterable[str] = QUIET_PATHS,
) -> Dict[str, Any]:
    """
    Build a logging.config.dictConfig dictionary.

    Args:
        level: Level for the sessionward loggers (DEBUG shows per-session events)
        access_level: Level for uvicorn request lines
        quiet_paths: Request paths whose access lines are dropped
    """
    loggers = {
        name: _isolated_logger("default", "INFO")
        for name in ("uvicorn", "uvicorn.error")
    }
    loggers[ACCESS_LOGGER] = _isolated_logger("access", access_level.upper())
    loggers["sessionward"] = _isolated_logger("default", level.upper())

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "quiet_paths": {"()": QuietPathFilter, "paths": list(quiet_paths)},
        },
        "formatters": {
            "default": {"format": DEFAULT_FORMAT},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "default": _stdout_handler("default"),
            "access": _stdout_handler("access", "quiet_paths"),
        },
        "loggers": loggers,
        "root": {"level": "INFO", "handlers": ["default"]},
    }
