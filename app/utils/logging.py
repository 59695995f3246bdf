"""Logging configuration utilities."""

import logging
import logging.config
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict

from app.settings import get_settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(request_id)s %(message)s"


class RequestIdFilter(logging.Filter):
    """Stamp every record with the ID of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def get_logging_config() -> Dict[str, Any]:
    """
    Get logging configuration dictionary.

    Application records go to the console and to a size-rotated file under
    ``log_dir``; library loggers only reach the console.

    Returns:
        Logging configuration for dictConfig
    """
    settings = get_settings()
    formatter = "json" if settings.log_format == "json" else "text"
    log_file = Path(settings.log_dir) / "auth.log"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_id": {"()": RequestIdFilter},
        },
        "formatters": {
            "text": {
                "format": TEXT_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "fmt": JSON_FORMAT,
                "rename_fields": {"levelname": "level", "name": "logger"},
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.log_level,
                "formatter": formatter,
                "filters": ["request_id"],
                "stream": "ext://sys.stdout",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": settings.log_level,
                "formatter": formatter,
                "filters": ["request_id"],
                "filename": str(log_file),
                "maxBytes": 5 * 1024 * 1024,
                "backupCount": 5,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "app": {
                "level": settings.log_level,
                "handlers": ["console", "file"],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "INFO" if settings.debug else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "passlib": {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": settings.log_level,
            "handlers": ["console"],
        },
    }


def setup_logging() -> None:
    """Create the log directory and apply the logging configuration."""
    Path(get_settings().log_dir).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(get_logging_config())
    logging.getLogger("app").debug("Logging configured")
