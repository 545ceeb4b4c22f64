"""
Zone Counter Module
===================

Stateful accumulator for zone classification statistics.

Design:
- Mutable state (counters)
- Immutable snapshots (ZoneStats)
- Reset capability
"""

import numpy as np
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Sequence

from relay_zone.errors import EmptyDatasetError
from relay_zone.geometry.detector import ZoneDetector
from relay_zone.geometry.shapes import CharacteristicParams, DataPoint, build_characteristic
from relay_zone.zone import ZONES, is_zone_allowed


@dataclass(frozen=True)
class ZoneStats:
    """
    Immutable classification snapshot for a zone.

    Design:
    - Frozen dataclass (thread-safe read)
    - Value object (no identity)
    - Can be serialized to JSON
    """

    zone: int
    total_points: int = 0
    expected_inside: int = 0
    classified_inside: int = 0
    correct: int = 0
    false_inside: int = 0
    false_outside: int = 0
    polygon_area: float = 0.0

    @property
    def accuracy(self) -> float:
        """Fraction of correctly classified points (0.0 without points)."""
        if self.total_points == 0:
            return 0.0
        return self.correct / self.total_points

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["accuracy"] = self.accuracy
        return data

    def __str__(self) -> str:
        return (
            f"Zone {self.zone}: {self.correct}/{self.total_points} correct "
            f"(+{self.false_inside} inside, -{self.false_outside} outside)"
        )


class ZoneCounter:
    """
    Stateful counter of classification outcomes for one zone.

    Usage:
        counter = ZoneCounter(zone=1)
        counter.update(inside_mask, expected_mask)
        stats = counter.get_stats()  # Immutable
    """

    def __init__(self, zone: int, polygon_area: float = 0.0):
        self.zone = zone
        self.polygon_area = polygon_area

        self._total = 0
        self._expected = 0
        self._inside = 0
        self._correct = 0
        self._false_inside = 0
        self._false_outside = 0

    def update(self, inside: np.ndarray, expected: np.ndarray) -> None:
        """
        Accumulate one batch of classifications.

        Args:
            inside: Boolean mask from the detector
            expected: Boolean mask of points that should be inside

        Raises:
            ValueError: If mask shapes differ
        """
        if inside.shape != expected.shape:
            raise ValueError(
                f"Mask shapes differ: inside {inside.shape}, expected {expected.shape}"
            )

        self._total += len(inside)
        self._expected += int(expected.sum())
        self._inside += int(inside.sum())
        self._correct += int(np.count_nonzero(inside == expected))
        self._false_inside += int(np.count_nonzero(inside & ~expected))
        self._false_outside += int(np.count_nonzero(~inside & expected))

    def get_stats(self) -> ZoneStats:
        """Immutable statistics snapshot."""
        return ZoneStats(
            zone=self.zone,
            total_points=self._total,
            expected_inside=self._expected,
            classified_inside=self._inside,
            correct=self._correct,
            false_inside=self._false_inside,
            false_outside=self._false_outside,
            polygon_area=self.polygon_area,
        )

    def reset(self) -> None:
        """Reset all counters to zero."""
        self._total = 0
        self._expected = 0
        self._inside = 0
        self._correct = 0
        self._false_inside = 0
        self._false_outside = 0


def evaluate_zones(
    zone_params: Mapping[int, CharacteristicParams],
    points: Sequence[DataPoint],
    trim_reactance: bool = False,
) -> Dict[int, ZoneStats]:
    """
    Classification statistics of every fitted zone present in zone_params.

    Raises:
        EmptyDatasetError: If points is empty
        DomainError: If a zone's angles are degenerate
    """
    if len(points) == 0:
        raise EmptyDatasetError("Cannot evaluate zones without data points")

    stats = {}
    for zone in ZONES:
        params = zone_params.get(zone)
        if params is None:
            continue
        polygon = build_characteristic(params, trim_reactance=trim_reactance)
        counter = ZoneCounter(zone=zone, polygon_area=polygon.area)
        expected = np.array([is_zone_allowed(p.zone, zone) for p in points], dtype=bool)
        counter.update(ZoneDetector.detect_characteristic(params, points), expected)
        stats[zone] = counter.get_stats()
    return stats
