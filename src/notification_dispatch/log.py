"""Structured JSON logging for the dispatch service.

Every line is one JSON object. Fields passed with ``extra={...}`` are
merged into it, so delivery logs can be filtered by ``notification_id``,
``channel`` or ``attempt`` downstream.
"""

import datetime
import enum
import json
import logging
import sys
import uuid
from collections.abc import Sequence
from typing import Any

from notification_dispatch.db.models import NotificationLog

# Attributes every LogRecord carries; anything else came in via `extra={...}`.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
    | {"message", "asctime"}
)

NOISY_LOGGERS: tuple[str, ...] = ("werkzeug", "httpx", "httpcore", "sqlalchemy.engine")


def _to_json(value: object) -> object:
    """``json.dumps`` fallback for the types delivery logs carry."""
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    return repr(value)


def notification_context(
    notification: NotificationLog, **fields: Any
) -> dict[str, Any]:
    """Log fields identifying *notification*, plus any extra *fields*."""
    return {
        "notification_id": notification.id,
        "channel": notification.channel,
        "type": notification.notification_type,
        **fields,
    }


class JsonFormatter(logging.Formatter):
    """Single-line JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, object] = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        )
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=_to_json, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    suppress: Sequence[str] = NOISY_LOGGERS,
) -> None:
    """Route the root logger through ``JsonFormatter`` on stdout.

    Unknown level names fall back to INFO. Loggers named in *suppress*
    are raised to WARNING.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    numeric_level = logging.getLevelName(level.upper())
    root.setLevel(numeric_level if isinstance(numeric_level, int) else logging.INFO)
    root.handlers.clear()
    root.addHandler(handler)

    for name in suppress:
        logging.getLogger(name).setLevel(logging.WARNING)