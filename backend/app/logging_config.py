"""
Structured JSON logging configuration.

Every log line is a single JSON object written to stdout, tagged with a
channel (http, db, students, courses, registrations) and the id of the HTTP
request that produced it, so container log aggregation can filter by
either.
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# Request id of the HTTP request being served, attached to every log entry
# emitted while handling it. Empty outside a request.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CHANNELS = ["http", "db", "students", "courses", "registrations"]


class StructuredJsonFormatter(logging.Formatter):
    """
    Formats records as JSON objects with the keys:

    - timestamp: ISO 8601 UTC with millisecond precision
    - level: log severity name
    - message: human-readable message
    - channel: log source category (see CHANNELS)
    - context: business identifiers (request_id, student_id, course_id, ...)
    - extra: additional metadata (error text, duration_ms, counts)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", record.name.split(".")[-1] if "." in record.name else "app"),
            "context": {
                "request_id": request_id_var.get(""),
                **(getattr(record, "context", {}) or {})
            },
            "extra": getattr(record, "extra_data", {}) or {}
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = None):
    """
    Install the JSON formatter on the root logger and set the level of the
    channel loggers.

    Safe to call more than once; the root handler list is replaced, not
    appended to.
    """
    log_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logging.getLogger(f"app.{channel}").setLevel(log_level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    """Logger for one of the CHANNELS."""
    return logging.getLogger(f"app.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None):
    """
    Emit a structured log entry.

    Args:
        logger: The channel logger to use
        level: Log level string (INFO, WARNING, ERROR, DEBUG)
        message: Human-readable log message
        context: Business identifiers (student_id, course_id, registration_id)
        extra_data: Additional metadata (error, duration_ms, ip)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        extra={"context": context or {}, "extra_data": extra_data or {}, "channel": logger.name.split(".")[-1]}
    )


def generate_request_id() -> str:
    """Generate a new UUID for request tracking."""
    return str(uuid.uuid4())
