"""Structured logging configuration for the timeline service."""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

SERVICE_NAME = "workflow-timeline"


class JSONFormatter(logging.Formatter):
    """Renders each record as a single JSON line for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "at": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        # Structured fields arrive via extra={"context": {...}}
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    to_file: bool = True,
) -> None:
    """
    Route all logging through JSONFormatter to stdout and, unless `to_file`
    is off, a rotating file (default 04_logs/app.log). The level falls back
    to LOG_LEVEL, then INFO.
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    if log_file is None:
        log_file = str(DEFAULT_LOG_PATH)

    handlers: dict[str, dict] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    }
    if to_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "timeline.logging_config.JSONFormatter",
            },
        },
        "handlers": handlers,
        "loggers": {
            # httpx logs every request at INFO; page fetches are logged here instead
            "httpx": {"level": "WARNING"},
        },
        "root": {
            "level": log_level.upper(),
            "handlers": list(handlers),
        },
    }

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    """Module logger; configuration is applied once by setup_logging."""
    return logging.getLogger(name)
