"""structlog over stdlib logging, shared with uvicorn.

Records from structlog and from foreign stdlib loggers (uvicorn, httpx) are
rendered by one ``ProcessorFormatter``. Jellyfin URLs carry the API key in
the query string, so every string value is scrubbed before rendering.
"""

from __future__ import annotations

import logging
import logging.config
import re
from datetime import datetime, timezone
from typing import Any

import structlog

from streambridge.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# HTTP client libraries log one line per request.
_CHATTY_LOGGERS = ("httpx", "httpcore")

_API_KEY_RE = re.compile(r"(api_key=)[^&\s\"']+", re.IGNORECASE)


def _drop_color_message(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    # Uvicorn adds "color_message", which duplicates the event.
    event_dict.pop("color_message", None)
    return event_dict


def _stamp_foreign_record(
    _: Any, __: Any, event_dict: dict[str, Any]
) -> dict[str, Any]:
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = dt.isoformat().replace("+00:00", "Z")
    return event_dict


def redact_api_key(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Replace ``api_key=<value>`` in every string value with ``api_key=***``."""
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _API_KEY_RE.sub(r"\1***", value)
    return event_dict


def _renderer(config: AppConfig) -> structlog.typing.Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _formatter(config: AppConfig) -> dict[str, Any]:
    return {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": [
            _drop_color_message,
            structlog.contextvars.merge_contextvars,
            _stamp_foreign_record,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
        ],
        "processors": [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            redact_api_key,
            _renderer(config),
        ],
    }


def _stream_handler(stream: str) -> dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "formatter": "structlog",
        "stream": stream,
    }


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """Build the dictConfig handed to both ``logging`` and ``uvicorn.run``.

    uvicorn's loggers and the root logger follow ``config.log_level``.
    httpx/httpcore never go below WARNING.
    """
    level = config.log_level
    chatty_level = level if logging.getLevelName(level) > logging.WARNING else "WARNING"

    loggers: dict[str, Any] = {
        "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
        "uvicorn.error": {"level": level},
        "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
    }
    for name in _CHATTY_LOGGERS:
        loggers[name] = {"level": chatty_level}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"structlog": _formatter(config)},
        "handlers": {
            "default": _stream_handler("ext://sys.stderr"),
            "access": _stream_handler("ext://sys.stdout"),
        },
        "loggers": loggers,
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """Configure structlog and stdlib logging; return the dictConfig for uvicorn."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    cfg = build_logging_config(config)
    logging.config.dictConfig(cfg)

    log.info(
        "logging_configured", log_format=config.log_format, log_level=config.log_level
    )
    return cfg
