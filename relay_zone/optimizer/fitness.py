"""
Fitness Evaluation Module
=========================

Scores one candidate characteristic for one zone.

Design:
- Points are vectorised once at construction, scoring is a numpy mask
- Ordering against the previous zone is a soft penalty, not an exception
- Score breakdown available for logging and tests
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence

from relay_zone.config import FitnessWeights
from relay_zone.errors import EmptyDatasetError
from relay_zone.geometry.detector import ZoneDetector, as_point_array
from relay_zone.geometry.shapes import CharacteristicParams, DataPoint, approximate_area
from relay_zone.zone import is_zone_allowed

# X * R * d_rad of the largest admissible shape (100 ohm reaches at 90 degrees)
MAX_APPROXIMATE_AREA = 100.0 * 100.0 * math.pi / 2.0

# Divergence from the previous zone's line angle that zeroes the continuity term
ANGLE_CONTINUITY_TOLERANCE = 45.0


@dataclass(frozen=True)
class FitnessBreakdown:
    """Individual score terms of one evaluation."""

    classification: float = 0.0
    area: float = 0.0
    angle_continuity: float = 0.0
    ordering_violated: bool = False
    total: float = 0.0


class FitnessEvaluator:
    """
    Scores candidate parameters for one target zone.

    Usage:
        evaluator = FitnessEvaluator(points, target_zone=2, previous=zone1)
        score = evaluator.evaluate(candidate)
    """

    def __init__(
        self,
        points: Sequence[DataPoint],
        target_zone: int,
        previous: Optional[CharacteristicParams] = None,
        weights: Optional[FitnessWeights] = None,
        include_angle_continuity: bool = True,
    ):
        """
        Args:
            points: Labeled data points
            target_zone: Zone being fitted (1..3)
            previous: Fitted parameters of the preceding zone (None for zone 1)
            weights: Score weights (default: reference weighting)
            include_angle_continuity: Reward line angles close to the previous zone's

        Raises:
            EmptyDatasetError: If points is empty
        """
        if len(points) == 0:
            raise EmptyDatasetError(f"Cannot score zone {target_zone} without data points")

        self.target_zone = target_zone
        self.previous = previous
        self.weights = weights or FitnessWeights()
        self.include_angle_continuity = include_angle_continuity

        self._points = as_point_array(points)
        self._expected = np.array(
            [is_zone_allowed(p.zone, target_zone) for p in points], dtype=bool
        )

    @property
    def point_count(self) -> int:
        return len(self._points)

    def violates_ordering(self, params: CharacteristicParams) -> bool:
        """True if the candidate does not strictly enclose the previous zone's reaches."""
        if self.previous is None:
            return False
        return (
            params.x_reach <= self.previous.x_reach
            or params.r_reach <= self.previous.r_reach
        )

    def breakdown(self, params: CharacteristicParams) -> FitnessBreakdown:
        """
        Score a candidate term by term.

        Raises:
            DomainError: If the candidate's angles are degenerate
        """
        if self.violates_ordering(params):
            return FitnessBreakdown(
                ordering_violated=True, total=self.weights.ordering_penalty
            )

        inside = ZoneDetector.detect_characteristic(params, self._points)
        matches = int(np.count_nonzero(inside == self._expected))
        classification = matches / len(self._points) * self.weights.classification

        area = self.weights.area * (1.0 - approximate_area(params) / MAX_APPROXIMATE_AREA)

        continuity = 0.0
        if self.include_angle_continuity and self.previous is not None:
            divergence = abs(params.dist_char_angle - self.previous.dist_char_angle)
            continuity = self.weights.angle_continuity * max(
                0.0, 1.0 - divergence / ANGLE_CONTINUITY_TOLERANCE
            )

        return FitnessBreakdown(
            classification=classification,
            area=area,
            angle_continuity=continuity,
            total=classification + area + continuity,
        )

    def evaluate(self, params: CharacteristicParams) -> float:
        """Total score of a candidate (higher is better)."""
        return self.breakdown(params).total
