from __future__ import annotations

import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

import structlog

from flixscrape.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# Server loggers follow the configured level and never propagate to root.
_SERVER_LOGGERS: dict[str, str] = {
    "uvicorn": "default",
    "uvicorn.access": "access",
    "fastapi": "default",
}

# Log every outgoing request at INFO; only useful when debugging scrapes.
_HTTP_CLIENT_LOGGERS = ("httpx", "httpcore")


def _drop_color_message(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    # uvicorn duplicates the message as "color_message".
    event_dict.pop("color_message", None)
    return event_dict


def _add_record_created_timestamp_utc(
    _: Any, __: Any, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp foreign (stdlib) records with their creation time in UTC."""
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = dt.isoformat().replace("+00:00", "Z")
    return event_dict


def _renderer(config: AppConfig) -> structlog.typing.Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _stream_handler(stream: str) -> dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "formatter": "structlog",
        "stream": f"ext://sys.{stream}",
    }


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """
    Build the dictConfig handed to ``uvicorn.run(log_config=...)``.

    Server, access and library records all render through one structlog
    ProcessorFormatter, so JSON output stays uniform in production.
    """
    level = config.log_level
    loggers: dict[str, dict[str, Any]] = {
        name: {"handlers": [handler], "level": level, "propagate": False}
        for name, handler in _SERVER_LOGGERS.items()
    }
    loggers["uvicorn.error"] = {"level": level}

    quiet_level = "DEBUG" if level == "DEBUG" else "WARNING"
    for name in _HTTP_CLIENT_LOGGERS:
        loggers[name] = {"level": quiet_level}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": [
                    _drop_color_message,
                    structlog.contextvars.merge_contextvars,
                    _add_record_created_timestamp_utc,
                    structlog.stdlib.add_logger_name,
                    structlog.stdlib.add_log_level,
                ],
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    _renderer(config),
                ],
            },
        },
        "handlers": {
            "default": _stream_handler("stderr"),
            "access": _stream_handler("stdout"),
        },
        "loggers": loggers,
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """Configure structlog and stdlib logging, returning the dictConfig for uvicorn."""
    structlog.configure(
        processors=[
            _drop_color_message,
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
