"""Structured logging setup with JSON-lines output.

Engine decision events go through ``structlog`` loggers that wrap stdlib
loggers (``get_event_logger``); nothing is configured at import time.
Applications (and the bundled CLI) opt in with ``setup_logging``.
"""

from __future__ import annotations

import json
import logging
import math
import sys
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any, Final, TextIO

import structlog

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

_DEFAULT_LOGGER_NAME: Final[str] = "typed_transform"

_STANDARD_LOG_RECORD_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "taskName",
    }
)

_ACTIVE_LOCK = threading.Lock()
_ACTIVE_HANDLERS: dict[str, logging.Handler] = {}


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Configuration for JSON-lines logging."""

    level: int | str = "WARNING"
    logger_name: str = _DEFAULT_LOGGER_NAME
    stream: TextIO | None = None
    log_path: Path | str | None = None


class _JsonLineFormatter(logging.Formatter):
    """Formatter that emits canonical JSON objects per log line."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, JSONValue] = {
            "timestamp": _iso8601z_from_epoch(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = _extract_extra_fields(record)
        if extras:
            event["fields"] = extras

        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            event["stack"] = str(record.stack_info)

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Attach a JSON-lines handler to the configured logger and return it."""
    cfg = config or LoggingConfig()
    level = _parse_log_level(cfg.level)

    handler: logging.Handler
    if cfg.log_path is not None:
        path = Path(cfg.log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(cfg.stream if cfg.stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_JsonLineFormatter())

    logger = logging.getLogger(cfg.logger_name)
    logger.setLevel(level)
    logger.propagate = False

    with _ACTIVE_LOCK:
        previous = _ACTIVE_HANDLERS.pop(cfg.logger_name, None)
        if previous is not None:
            logger.removeHandler(previous)
            previous.close()
        logger.addHandler(handler)
        _ACTIVE_HANDLERS[cfg.logger_name] = handler

    return logger


def get_event_logger(name: str) -> Any:
    """Return a ``structlog`` logger whose events land on the stdlib logger ``name``.

    Event keyword arguments become ``extra`` fields, which the JSON-lines
    formatter renders under ``fields``. Nothing is emitted until handlers are
    installed, e.g. via ``setup_logging``.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[structlog.stdlib.render_to_log_kwargs],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def shutdown_logging(logger_name: str | None = None) -> None:
    """Detach and close handlers installed by ``setup_logging``."""
    with _ACTIVE_LOCK:
        names = list(_ACTIVE_HANDLERS) if logger_name is None else [logger_name]
        for name in names:
            handler = _ACTIVE_HANDLERS.pop(name, None)
            if handler is None:
                continue
            logger = logging.getLogger(name)
            logger.removeHandler(handler)
            logger.propagate = True
            handler.flush()
            handler.close()


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value

    if not isinstance(value, str):
        raise ValueError(f"level must be int or str, got {type(value).__name__}")

    normalized = value.strip().upper()
    parsed = logging.getLevelName(normalized)
    if isinstance(parsed, int):
        return parsed

    raise ValueError(f"unsupported logging level {value!r}")


def _iso8601z_from_epoch(epoch_seconds: float) -> str:
    timestamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, JSONValue]:
    fields: dict[str, JSONValue] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOG_RECORD_FIELDS:
            continue
        if key.startswith("_"):
            continue
        fields[key] = _normalize_json_value(value)
    return fields


def _normalize_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else repr(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Mapping):
        return {str(key): _normalize_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_json_value(item) for item in value]
    if isinstance(value, (set, frozenset)):
        normalized_items = [_normalize_json_value(item) for item in value]
        return sorted(
            normalized_items,
            key=lambda item: json.dumps(
                item, sort_keys=True, separators=(",", ":"), ensure_ascii=False
            ),
        )
    return repr(value)


__all__ = [
    "JSONScalar",
    "JSONValue",
    "LoggingConfig",
    "get_event_logger",
    "setup_logging",
    "shutdown_logging",
]
