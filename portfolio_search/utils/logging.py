"""Structured JSON logging for the search server."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# Loggers of libraries that are chatty at INFO level
NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "httpx", "httpcore")

# Record attributes copied into the JSON line when passed via ``extra``
EXTRA_FIELDS = ("context", "execution_time_ms", "error_code")


class JSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, component, message and extras."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        return json.dumps(log_data, default=str)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Send all logging to stderr as JSON.

    stdout belongs to the MCP stdio transport, so the root logger gets a
    single stderr handler and any existing handlers are removed.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger named after a component, e.g. "ResultAggregator"."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    execution_time_ms: Optional[float] = None,
    error_code: Optional[str] = None
) -> None:
    """Log ``message`` with the given extras; empty ones are left out."""
    extra = {
        name: value
        for name, value in (
            ("context", context or None),
            ("execution_time_ms", execution_time_ms),
            ("error_code", error_code or None),
        )
        if value is not None
    }
    logger.log(level, message, extra=extra)
