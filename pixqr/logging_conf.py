"""Application logging configuration helpers."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.config import dictConfig
from typing import Any

from .config import settings

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _json_formatter(record: logging.LogRecord) -> str:
    payload: dict[str, Any] = {
        "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    payload.update({k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS})
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    return json.dumps(payload, ensure_ascii=False, default=str)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - overrides base
        return _json_formatter(record)


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure global logging based on settings; arguments override them."""

    level = (level or settings.logging.level).upper()
    use_json = settings.logging.json_logs if json_logs is None else json_logs

    formatter: dict[str, Any] = {"()": JsonFormatter} if use_json else {"format": "%(levelname)s %(name)s %(message)s"}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": formatter},
            "handlers": {
                "default": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                }
            },
            "loggers": {
                "": {
                    "handlers": ["default"],
                    "level": level,
                }
            },
        }
    )
