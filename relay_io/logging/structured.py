"""
Structured JSON Logger
======================

Bounded Context: Observability of fitting jobs

Design:
- One JSON document per event, keyed by a LogEvent
- The entry travels on the LogRecord (record.structured); JSONFormatter
  serializes it, so other handlers still see a readable message
- bind() returns a child logger that stamps fixed context (job_id, zone)
  into every entry's metadata

Example:
    >>> events = StructuredLogger(component="fit_service").bind(job_id="feeder_12")
    >>> events.info(LogEvent.ZONE_FIT_COMPLETED, "Zone 1 fitted", {'zone': 1, 'fitness': 99.8})

Output:
    {"timestamp": "2025-10-24T15:30:45.123456+00:00", "level": "INFO",
     "component": "fit_service", "event": "fit.zone.completed",
     "message": "Zone 1 fitted",
     "metadata": {"job_id": "feeder_12", "zone": 1, "fitness": 99.8}}
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .events import LogEvent

STRUCTURED_ATTR = 'structured'


class JSONFormatter(logging.Formatter):
    """Serialize the structured entry of a record (plain records get a minimal one)."""

    def format(self, record: logging.LogRecord) -> str:
        entry = getattr(record, STRUCTURED_ATTR, None)
        if entry is None:
            entry = {
                'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
                'level': record.levelname,
                'component': record.name,
                'message': record.getMessage(),
            }
        return json.dumps(entry, default=str)


class StructuredLogger:
    """
    Event logger writing JSON entries through a stdlib logger.

    Attributes:
        component: Component name (e.g. "fit_service", "cli")
        context: Metadata added to every entry
        logger: Underlying logging.Logger (shared by bound children)
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.component = component
        self.context = dict(context or {})
        self.logger = logging.getLogger(logger_name or f"relay_io.{component}")
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def bind(self, **context: Any) -> 'StructuredLogger':
        """Child logger on the same stdlib logger with extra fixed metadata."""
        child = StructuredLogger.__new__(StructuredLogger)
        child.component = self.component
        child.context = {**self.context, **context}
        child.logger = self.logger
        return child

    def entry(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        error: Optional[BaseException] = None,
    ) -> Dict[str, Any]:
        """Build the JSON-ready entry for one event."""
        entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        merged = {**self.context, **(metadata or {})}
        if merged:
            entry['metadata'] = merged

        if error is not None:
            entry['exception'] = {'type': type(error).__name__, 'message': str(error)}
        return entry

    def log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(
            level,
            f"[{event.value}] {message}",
            extra={STRUCTURED_ATTR: self.entry(level, event, message, metadata, error)},
        )

    def debug(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.DEBUG, event, message, metadata)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.INFO, event, message, metadata)

    def warning(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.WARNING, event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        """
        Log an ERROR entry; exc_info adds an "exception" object (type, message).

        Example:
            >>> try:
            ...     fitter.fit(current, [])
            ... except EmptyDatasetError as e:
            ...     events.error(LogEvent.EMPTY_DATASET_ERROR, "Nothing to fit", exc_info=e)
        """
        self.log(logging.ERROR, event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)


def create_logger(component: str, level: int = logging.INFO) -> StructuredLogger:
    return StructuredLogger(component=component, level=level)
