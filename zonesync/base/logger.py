"""
JSON log lines for the zone updater.

Every line names the zone, the zone version and the record it concerns,
plus the transaction step (``clone``, ``locate``, ``activate``...).
All lines written during one update attempt share a ``request_id``, so
a failed clone-edit-activate sequence and its rollback can be pulled out
of the daemon's output with a single filter.
"""

from __future__ import annotations

import json
import logging
from typing import Any

# Keys copied from a record's ``extra`` into the JSON line, in this order
CONTEXT_FIELDS = ("request_id", "zone_id", "version", "record", "operation")


class StructuredFormatter(logging.Formatter):
    """Render one log record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


class ZoneSyncLogger:
    """Logger for the poll loop and the update transaction.

    Writes to stderr through :class:`StructuredFormatter` at ``INFO``
    unless the named logger already has handlers (tests, embedding apps).
    """

    def __init__(self, name: str = "zonesync") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def set_level(self, level: str | int) -> None:
        """Apply ``--log-level``; names are case-insensitive (``debug``, ``WARNING``)."""
        if isinstance(level, str):
            resolved = logging.getLevelName(level.upper())
            if not isinstance(resolved, int):
                raise ValueError(f"Unknown log level: {level}")
            level = resolved
        self.logger.setLevel(level)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        zone_id: int | None = None,
        version: int | None = None,
        record: str | None = None,
        operation: str | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Log *message* tagged with the zone update it belongs to.

        Args:
            level: Logging level (e.g. logging.WARNING for a failed retire).
            message: Human-readable message.
            zone_id: Zone being updated.
            version: Zone version the step worked on (the clone, or the
                previously active version when retiring it).
            record: Name of the tracked record.
            operation: Transaction step or loop phase (``clone``,
                ``rollback``, ``bootstrap``, ``poll``...).
            request_id: Id of the update attempt. Lines logged outside a
                transaction carry none.
            exc_info: Whether to include exception info.
        """
        extra = {
            "zone_id": zone_id,
            "version": version,
            "record": record,
            "operation": operation,
            "request_id": request_id,
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


zs_logger = ZoneSyncLogger()
