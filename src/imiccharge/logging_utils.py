"""Structured JSON logging utilities for event-based logging."""

import json
import logging
from datetime import datetime, timezone
from typing import Any


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "event_type"):
            log_data["event_type"] = record.event_type
        if hasattr(record, "event_data"):
            log_data.update(record.event_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def log_api_request(
    logger: logging.Logger,
    operation: str,
    method: str,
    path: str,
    status: int | None = None,
    duration: float | None = None,
    **kwargs: Any,
) -> None:
    """
    Log one completed HTTP exchange with the backend.

    Args:
        logger: Logger instance
        operation: Client operation name (e.g., "get_account_balance")
        method: HTTP method
        path: Request path relative to the base URL
        status: HTTP status code, if a response arrived
        duration: Round-trip time in seconds
        **kwargs: Additional fields to include

    Request bodies are never logged; they may hold credentials.
    """
    event_data: dict[str, Any] = {
        "operation": operation,
        "method": method,
        "path": path,
    }

    if status is not None:
        event_data["status"] = status
    if duration is not None:
        event_data["duration_ms"] = round(duration * 1000, 2)

    for key, value in kwargs.items():
        if value is not None:
            event_data[key] = value

    extra = {
        "event_type": "api_request",
        "event_data": event_data,
    }

    logger.info(f"API {method} {path}: {status}", extra=extra)


def log_error(
    logger: logging.Logger,
    error_type: str,
    message: str,
    operation: str | None = None,
    exc_info: Exception | None = None,
    **kwargs: Any,
) -> None:
    """
    Log an error event.

    Args:
        logger: Logger instance
        error_type: Type of error (e.g., "transport", "plugin_error")
        message: Error message
        operation: Client operation name (if applicable)
        exc_info: Exception object (will extract traceback)
        **kwargs: Additional fields to include
    """
    event_data = {
        "error_type": error_type,
    }

    if operation is not None:
        event_data["operation"] = operation

    for key, value in kwargs.items():
        if value is not None:
            event_data[key] = value

    extra = {
        "event_type": "error",
        "event_data": event_data,
    }
    logger.error(message, extra=extra, exc_info=exc_info)
