"""
Analytics Layer
===============

Bounded Context: Classification statistics of fitted zones.

Responsibilities:
- Accumulate classification outcomes (mutable state)
- Generate immutable statistics snapshots

Design Philosophy:
- Mutable accumulators (ZoneCounter)
- Immutable outputs (ZoneStats)
"""

from relay_zone.analytics.counter import ZoneCounter, ZoneStats, evaluate_zones

__all__ = [
    "ZoneCounter",
    "ZoneStats",
    "evaluate_zones",
]
