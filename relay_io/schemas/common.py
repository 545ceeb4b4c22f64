"""
Common Schema Types
===================

Bounded Context: Pieces shared by every result message

Types:
- Timestamp: UTC instant in ISO 8601 form
- zone_key / parse_zone_key: JSON object keys for zone numbers
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def zone_key(zone: int) -> str:
    """JSON object key of a zone number (JSON keys are always strings)."""
    return str(int(zone))


def parse_zone_key(key: Any) -> int:
    """
    Zone number from a JSON object key.

    Raises:
        ValueError: If the key is not an integer
    """
    try:
        return int(key)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid zone key: {key!r}") from e


@dataclass(frozen=True)
class Timestamp:
    """
    UTC instant, kept as its ISO 8601 string.

    Naive values are read as UTC, so every timestamp compares and
    serializes the same way.

    Example:
        >>> Timestamp(value="2025-10-24T15:30:45").value
        '2025-10-24T15:30:45+00:00'
    """
    value: str

    def __post_init__(self):
        object.__setattr__(self, 'value', self.to_datetime().isoformat())

    @classmethod
    def now(cls) -> 'Timestamp':
        return cls.from_datetime(datetime.now(timezone.utc))

    @classmethod
    def from_datetime(cls, dt: datetime) -> 'Timestamp':
        return cls(value=dt.isoformat())

    def to_datetime(self) -> datetime:
        """
        Parse to an aware UTC datetime.

        Raises:
            ValueError: If the value is not ISO 8601
        """
        try:
            dt = datetime.fromisoformat(self.value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid ISO timestamp: {self.value!r}") from e

        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    def seconds_until(self, other: 'Timestamp') -> float:
        """Signed seconds from this instant to other."""
        return (other.to_datetime() - self.to_datetime()).total_seconds()

    def to_dict(self) -> str:
        return self.value
