"""
Relay IO
========

Bounded Context: Data exchange and observability around the fitting engine.

    relay_io/
    ├── schemas/    # FitResultMessage, Timestamp
    └── logging/    # StructuredLogger, LogEvent
"""

__version__ = "1.0.0"
