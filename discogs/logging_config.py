"""JSON and text formatters for the ``discogs`` logger, plus handler setup."""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone

from discogs.config import ClientSettings
from discogs.services.request_context import get_request_id

LOGGER_NAME = "discogs"

# Whatever a bare LogRecord carries is not an ``extra`` field.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


def _dispatch_fields(record: logging.LogRecord) -> dict:
    """Correlation ID (when inside a dispatch) and the record's ``extra`` fields."""
    fields: dict = {}
    request_id = get_request_id()
    if request_id:
        fields["request_id"] = request_id
    for key, value in vars(record).items():
        if key not in _RECORD_ATTRS and not key.startswith("_"):
            fields[key] = value
    return fields


def _format_exc(record: logging.LogRecord) -> str:
    if not record.exc_info or record.exc_info[0] is None:
        return ""
    return "".join(traceback.format_exception(*record.exc_info))


class JSONFormatter(logging.Formatter):
    """One JSON object per line with dispatch fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        entry = {
            "timestamp": _timestamp(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.message,
            **_dispatch_fields(record),
        }
        exc = _format_exc(record)
        if exc:
            entry["exception"] = exc
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``<ts> <LEVEL> [rid] logger - message key=value ...``

    The request ID is cut to 12 characters; other fields follow sorted by name.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        fields = _dispatch_fields(record)
        request_id = fields.pop("request_id", "")

        parts = [_timestamp(record).strftime("%Y-%m-%d %H:%M:%S"), f"{record.levelname:<8}"]
        if request_id:
            parts.append(f"[{request_id[:12]}]")
        parts.append(f"{record.name} - {record.message}")
        parts.extend(f"{key}={value}" for key, value in sorted(fields.items()))

        line = " ".join(parts)
        exc = _format_exc(record)
        return f"{line}\n{exc}" if exc else line


def setup_logging(log_level: str = "INFO", log_format: str = "text") -> None:
    """Send ``discogs`` log records to stderr.

    Only the library's own logger is touched. Calling it again replaces the
    handler it installed.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    formatter = JSONFormatter() if log_format.lower() == "json" else TextFormatter()
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def configure_logging(settings: ClientSettings | None = None) -> None:
    """``setup_logging`` driven by ``DISCOGS_LOG_LEVEL`` / ``DISCOGS_LOG_FORMAT``."""
    settings = settings if settings is not None else ClientSettings()
    setup_logging(settings.log_level, settings.log_format)
