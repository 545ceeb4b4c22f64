"""
Fit Result Schema
=================

Bounded Context: Result of a zone fitting job

The message carries the fitted parameters of every zone plus the
classification statistics of the fitted characteristics. Field names of the
parameters follow the relay settings convention (distCharAngle, X, R, ...).
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from relay_zone.analytics.counter import ZoneStats
from relay_zone.geometry.shapes import CharacteristicParams

from .common import Timestamp, parse_zone_key, zone_key

SCHEMA_VERSION = "1.0"


def _stats_from_dict(data: Dict[str, Any]) -> Dict[int, ZoneStats]:
    # accuracy is derived, ZoneStats recomputes it
    return {
        parse_zone_key(zone): ZoneStats(**{k: v for k, v in entry.items() if k != 'accuracy'})
        for zone, entry in data.items()
    }


@dataclass(frozen=True)
class FitResultMessage:
    """
    Complete result of a fitting job.

    Attributes:
        schema_version: Message schema version (for evolution)
        job_id: Job identifier from the job configuration
        timestamp: ISO 8601 timestamp of message creation
        zones: Fitted parameters per zone
        stats: Classification statistics per zone (fitted parameters)
        baseline_stats: Classification statistics of the settings before fitting
        elapsed_s: Wall-clock duration of the fit

    Example:
        >>> msg = FitResultMessage(
        ...     job_id="feeder_12",
        ...     timestamp=Timestamp.now(),
        ...     zones={1: zone1, 2: zone2, 3: zone3},
        ... )
        >>> msg.to_json()
    """
    job_id: str
    timestamp: Timestamp
    zones: Dict[int, CharacteristicParams] = field(default_factory=dict)
    stats: Dict[int, ZoneStats] = field(default_factory=dict)
    baseline_stats: Dict[int, ZoneStats] = field(default_factory=dict)
    elapsed_s: float = 0.0
    schema_version: str = SCHEMA_VERSION

    def __post_init__(self):
        """Validate invariants."""
        if not self.job_id:
            raise ValueError("job_id cannot be empty")
        if self.elapsed_s < 0:
            raise ValueError(f"elapsed_s must be >= 0, got {self.elapsed_s}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict (zone keys become strings)."""
        return {
            'schema_version': self.schema_version,
            'job_id': self.job_id,
            'timestamp': self.timestamp.to_dict(),
            'elapsed_s': self.elapsed_s,
            'zones': {zone_key(z): p.to_dict() for z, p in self.zones.items()},
            'stats': {zone_key(z): s.to_dict() for z, s in self.stats.items()},
            'baseline_stats': {zone_key(z): s.to_dict() for z, s in self.baseline_stats.items()},
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FitResultMessage':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            return cls(
                schema_version=str(data['schema_version']),
                job_id=str(data['job_id']),
                timestamp=Timestamp(value=data['timestamp']),
                elapsed_s=float(data.get('elapsed_s', 0.0)),
                zones={
                    parse_zone_key(zone): CharacteristicParams.from_dict(params)
                    for zone, params in data.get('zones', {}).items()
                },
                stats=_stats_from_dict(data.get('stats', {})),
                baseline_stats=_stats_from_dict(data.get('baseline_stats', {})),
            )
        except KeyError as e:
            raise ValueError(f"Missing required FitResultMessage field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid FitResultMessage data: {e}")

    @property
    def zone_count(self) -> int:
        """Number of zones in this message."""
        return len(self.zones)
