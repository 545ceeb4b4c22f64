"""
Relay IO Logging
================

JSON event logs for fitting jobs.

    LogEvent          fit.*, config.*, error.* event names
    StructuredLogger  entry builder on top of a stdlib logger; bind() for job context
    JSONFormatter     handler formatter that writes one JSON document per line

Example:
    >>> events = create_logger("fit_service").bind(job_id="feeder_12")
    >>> events.info(LogEvent.ZONE_FIT_COMPLETED, "Zone 2 fitted", {'zone': 2, 'fitness': 97.4})
"""

from .events import LogEvent
from .structured import StructuredLogger, JSONFormatter, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'JSONFormatter',
    'create_logger',
]
