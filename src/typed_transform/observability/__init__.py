"""Public observability primitives: structured JSON-lines logging."""

from typed_transform.observability.logging import (
    JSONValue,
    LoggingConfig,
    get_event_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "JSONValue",
    "LoggingConfig",
    "get_event_logger",
    "setup_logging",
    "shutdown_logging",
]
