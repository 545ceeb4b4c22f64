"""
Relay Zone Schemas
==================

Bounded Context: Data Structures

Design:
- Frozen dataclasses (immutability)
- to_dict() for JSON serialization
- from_dict() for deserialization
- Schema versioning for evolution

Public API
----------
    Timestamp: UTC ISO 8601 timestamp
    zone_key, parse_zone_key: zone numbers as JSON keys
    FitResultMessage: Result of a fitting job
"""

from .common import Timestamp, parse_zone_key, zone_key
from .fit_result import FitResultMessage, SCHEMA_VERSION

__all__ = [
    'Timestamp',
    'zone_key',
    'parse_zone_key',
    'FitResultMessage',
    'SCHEMA_VERSION',
]
