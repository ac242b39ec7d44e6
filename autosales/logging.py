"""Logging configuration.

All modules log through the stdlib ``logging`` package using short
``event_name key=value`` messages. ``configure_logging`` is called once when
the application module is imported.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import UTC, datetime

from autosales.config import settings

_CONFIGURED = False


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return
    level_name = (level or settings.log_level).upper()
    use_json = settings.log_json if json_output is None else json_output
    formatter = "json" if use_json else "plain"
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                },
            },
            "root": {"handlers": ["console"], "level": level_name},
            "loggers": {
                "uvicorn.access": {"level": "WARNING"},
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
