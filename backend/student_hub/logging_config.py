"""
Structured JSON logging for the Student Hub backend.

Every log line is one JSON object on stdout. Entries carry a channel
(http, db, attendance, uploads), the current request ID and any
business context passed by the caller (student_id, attendance_id, ...).
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# Request ID of the request currently being served. Set by the HTTP
# middleware and picked up by every log entry emitted while handling it.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CHANNELS = ("http", "db", "attendance", "uploads")


class StructuredJsonFormatter(logging.Formatter):
    """
    Formats a LogRecord as a single JSON object.

    Keys: timestamp (UTC, ISO 8601), level, message, channel,
    context (request_id plus caller context) and extra.
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


def setup_logging():
    """Install the JSON formatter on the root logger and set channel levels."""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    level = getattr(logging, LOG_LEVEL, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logging.getLogger(f"student_hub.{channel}").setLevel(level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    """Return the logger for a channel (http, db, attendance, uploads)."""
    return logging.getLogger(f"student_hub.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None,
                     exc_info: bool = False):
    """
    Emit a structured log entry.

    Args:
        logger: Channel logger from get_logger()
        level: Level name (DEBUG, INFO, WARNING, ERROR)
        message: Human-readable message
        context: Business identifiers (student_id, attendance_id, badge_id)
        extra_data: Metadata such as duration_ms or query params
        exc_info: Attach the active exception traceback
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        exc_info=exc_info,
        extra={"context": context or {}, "extra_data": extra_data or {}, "channel": logger.name.split(".")[-1]}
    )


def generate_request_id() -> str:
    """New UUID4 string for request tracing."""
    return str(uuid.uuid4())
