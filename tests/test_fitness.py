"""
Fitness evaluation tests.
"""

import math

import numpy as np
import pytest

from relay_zone.config import FitnessWeights
from relay_zone.errors import EmptyDatasetError
from relay_zone.geometry.shapes import CharacteristicParams, DataPoint
from relay_zone.optimizer.fitness import MAX_APPROXIMATE_AREA, FitnessEvaluator


ZONE_1 = CharacteristicParams(80, 10, 10, 30, 30, 0)


def area_term(params, weight=20.0):
    return weight * (1 - params.x_reach * params.r_reach * math.radians(params.dist_char_angle) / MAX_APPROXIMATE_AREA)


# ═══════════════════════════════════════════════════════════════════════════════
# SCORE TERMS
# ═══════════════════════════════════════════════════════════════════════════════

class TestScoreTerms:

    def test_perfect_classification(self, scenario_points):
        evaluator = FitnessEvaluator(scenario_points, target_zone=1)
        result = evaluator.breakdown(ZONE_1)

        assert result.classification == pytest.approx(80.0)
        assert result.area == pytest.approx(area_term(ZONE_1))
        assert result.angle_continuity == 0.0
        assert result.total == pytest.approx(80.0 + area_term(ZONE_1))
        assert not result.ordering_violated

    def test_partial_classification(self, scenario_points):
        # Covers every point: zone 1 must exclude the zone 2 and 3 points
        huge = CharacteristicParams(80, 40, 40, 30, 30, 0)
        evaluator = FitnessEvaluator(scenario_points, target_zone=1)
        assert evaluator.breakdown(huge).classification == pytest.approx(80.0 / 3)

    def test_unknown_label_must_stay_outside(self):
        points = [DataPoint(5, 5, 0)]
        evaluator = FitnessEvaluator(points, target_zone=3)
        assert evaluator.breakdown(ZONE_1).classification == 0.0

    def test_evaluate_returns_total(self, scenario_points):
        evaluator = FitnessEvaluator(scenario_points, target_zone=1)
        assert evaluator.evaluate(ZONE_1) == evaluator.breakdown(ZONE_1).total

    def test_smaller_shape_scores_higher_area_term(self, scenario_points):
        evaluator = FitnessEvaluator(scenario_points, target_zone=1)
        small = evaluator.breakdown(ZONE_1)
        larger = evaluator.breakdown(ZONE_1.replace(x_reach=12, r_reach=12))
        assert small.area > larger.area

    def test_custom_weights(self, scenario_points):
        weights = FitnessWeights(classification=50, area=50)
        evaluator = FitnessEvaluator(scenario_points, target_zone=1, weights=weights)
        assert evaluator.breakdown(ZONE_1).classification == pytest.approx(50.0)


# ═══════════════════════════════════════════════════════════════════════════════
# ZONE ORDERING AND CONTINUITY
# ═══════════════════════════════════════════════════════════════════════════════

class TestPreviousZone:

    @pytest.mark.parametrize(
        "x_reach, r_reach",
        [(10, 20), (20, 10), (9, 20), (20, 5)],
    )
    def test_ordering_violation_penalty(self, scenario_points, x_reach, r_reach):
        evaluator = FitnessEvaluator(scenario_points, target_zone=2, previous=ZONE_1)
        candidate = CharacteristicParams(80, x_reach, r_reach, 30, 30, 0)

        result = evaluator.breakdown(candidate)

        assert result.ordering_violated
        assert result.total == -1000.0
        assert evaluator.evaluate(candidate) == -1000.0

    def test_strictly_larger_reaches_are_scored(self, scenario_points):
        evaluator = FitnessEvaluator(scenario_points, target_zone=2, previous=ZONE_1)
        candidate = CharacteristicParams(80, 10.01, 10.01, 30, 30, 0)
        assert not evaluator.breakdown(candidate).ordering_violated

    @pytest.mark.parametrize(
        "angle, expected",
        [(80, 10.0), (57.5, 5.0), (35, 0.0), (10, 0.0), (89, 8.0)],
    )
    def test_angle_continuity(self, scenario_points, angle, expected):
        evaluator = FitnessEvaluator(scenario_points, target_zone=2, previous=ZONE_1)
        candidate = CharacteristicParams(angle, 20, 20, 30, 30, 0)
        assert evaluator.breakdown(candidate).angle_continuity == pytest.approx(expected)

    def test_angle_continuity_can_be_disabled(self, scenario_points):
        evaluator = FitnessEvaluator(
            scenario_points, target_zone=2, previous=ZONE_1, include_angle_continuity=False
        )
        candidate = CharacteristicParams(80, 20, 20, 30, 30, 0)
        assert evaluator.breakdown(candidate).angle_continuity == 0.0


# ═══════════════════════════════════════════════════════════════════════════════
# BOUNDS AND ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

class TestBounds:

    def test_reference_weighting_bounds(self, scenario_points):
        rng = np.random.default_rng(11)
        previous = CharacteristicParams(70, 30, 30, 30, 30, 0)
        evaluators = [
            FitnessEvaluator(scenario_points, target_zone=zone, previous=prev,
                             include_angle_continuity=False)
            for zone, prev in ((1, None), (2, previous), (3, previous))
        ]

        for _ in range(500):
            candidate = CharacteristicParams(
                dist_char_angle=rng.uniform(0.01, 89.99),
                x_reach=rng.uniform(0, 100),
                r_reach=rng.uniform(0, 100),
                a1_angle=rng.uniform(0.01, 89.99),
                a2_angle=rng.uniform(0.01, 89.99),
                inclination_angle=rng.uniform(0, 30),
            )
            for evaluator in evaluators:
                assert -1000.0 <= evaluator.evaluate(candidate) <= 100.0

    def test_continuity_adds_at_most_ten(self, scenario_points):
        evaluator = FitnessEvaluator(scenario_points, target_zone=2, previous=ZONE_1)
        candidate = CharacteristicParams(80, 10.01, 10.01, 30, 30, 0)
        assert evaluator.evaluate(candidate) <= 110.0

    def test_empty_points_raise(self):
        with pytest.raises(EmptyDatasetError):
            FitnessEvaluator([], target_zone=1)

    def test_point_count(self, scenario_points):
        assert FitnessEvaluator(scenario_points, target_zone=1).point_count == 3
