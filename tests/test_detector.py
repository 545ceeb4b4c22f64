"""
Containment tests: analytic characteristic test, ray casting and vectorised masks.
"""

import numpy as np
import pytest

from relay_zone.errors import DomainError
from relay_zone.geometry.detector import (
    ZoneDetector,
    contains_point,
    distance_to_segment,
    point_in_polygon,
)
from relay_zone.geometry.shapes import CharacteristicParams, DataPoint, Polygon, build_characteristic


ZONE_1 = CharacteristicParams(80, 10, 10, 30, 30, 0)

# Plain, inclined, and an inclined shape that needs vertex cleanup
SHAPES = [
    CharacteristicParams(75, 30, 30, 30, 22, 0),
    CharacteristicParams(70, 20, 40, 20, 15, 15),
    CharacteristicParams(75, 5, 100, 30, 10, 30),
    CharacteristicParams(85, 60, 10, 45, 60, 5),
]


@pytest.fixture
def cloud():
    rng = np.random.default_rng(0)
    wide = rng.uniform(-60, 110, size=(3000, 2))
    near_origin = rng.uniform(-10, 20, size=(2000, 2))
    return np.vstack([wide, near_origin])


# ═══════════════════════════════════════════════════════════════════════════════
# ANALYTIC TEST
# ═══════════════════════════════════════════════════════════════════════════════

class TestContainsPoint:

    def test_point_on_line_angle_inside(self):
        assert contains_point(5, 5, ZONE_1)

    def test_point_beyond_reach_outside(self):
        assert not contains_point(15, 15, ZONE_1)

    def test_origin_inside(self):
        assert contains_point(0, 0, ZONE_1)

    def test_point_above_a1_sector_outside(self):
        # 71.6 degrees, sector ends at 75 - 30 = 45 degrees
        assert not contains_point(1, 3, CharacteristicParams(75, 30, 30, 30, 30, 0))

    def test_point_slightly_below_axis_inside(self):
        assert contains_point(10, -1, CharacteristicParams(75, 30, 30, 30, 30, 0))

    def test_third_quadrant_outside(self):
        assert not contains_point(-5, -5, CharacteristicParams(75, 30, 30, 30, 30, 0))

    def test_degenerate_angle_raises(self):
        with pytest.raises(DomainError):
            contains_point(1, 1, ZONE_1.replace(dist_char_angle=90))

    @pytest.mark.parametrize("params", SHAPES)
    def test_inside_implies_inside_polygon(self, params, cloud):
        polygon = build_characteristic(params)
        for r, x in cloud:
            if contains_point(r, x, params):
                assert point_in_polygon(r, x, polygon, tolerance=1e-6), (r, x)

    @pytest.mark.parametrize("params", SHAPES)
    def test_inside_implies_inside_trimmed_polygon(self, params, cloud):
        polygon = build_characteristic(params, trim_reactance=True)
        for r, x in cloud:
            if contains_point(r, x, params):
                assert point_in_polygon(r, x, polygon, tolerance=1e-6), (r, x)

    @pytest.mark.parametrize("params", SHAPES)
    def test_accepts_some_points(self, params, cloud):
        mask = ZoneDetector.detect_characteristic(params, cloud)
        assert mask.any()


# ═══════════════════════════════════════════════════════════════════════════════
# RAY CASTING
# ═══════════════════════════════════════════════════════════════════════════════

class TestPointInPolygon:

    @pytest.fixture
    def square(self):
        return Polygon(vertices=np.array([[0, 0], [10, 0], [10, 10], [0, 10]]))

    def test_inside(self, square):
        assert point_in_polygon(5, 5, square)

    def test_outside(self, square):
        assert not point_in_polygon(15, 5, square)
        assert not point_in_polygon(-0.5, 5, square)

    def test_on_edge_counts_as_inside(self, square):
        assert point_in_polygon(10, 5, square)
        assert point_in_polygon(5, 0, square)

    def test_tolerance_accepts_near_edge(self, square):
        assert not point_in_polygon(10.05, 5, square)
        assert point_in_polygon(10.05, 5, square, tolerance=0.1)

    def test_distance_to_segment(self):
        assert distance_to_segment((0, 1), (-1, 0), (1, 0)) == pytest.approx(1.0)
        assert distance_to_segment((3, 0), (-1, 0), (1, 0)) == pytest.approx(2.0)
        assert distance_to_segment((3, 4), (0, 0), (0, 0)) == pytest.approx(5.0)


# ═══════════════════════════════════════════════════════════════════════════════
# VECTORISED DETECTION
# ═══════════════════════════════════════════════════════════════════════════════

class TestZoneDetector:

    @pytest.mark.parametrize("params", SHAPES)
    def test_mask_matches_scalar_test(self, params, cloud):
        mask = ZoneDetector.detect_characteristic(params, cloud)
        expected = [contains_point(r, x, params) for r, x in cloud]
        assert mask.tolist() == expected

    def test_accepts_data_points(self):
        points = [DataPoint(5, 5, 1), DataPoint(15, 15, 2)]
        mask = ZoneDetector.detect_characteristic(ZONE_1, points)
        assert mask.tolist() == [True, False]

    def test_empty_cloud(self):
        assert ZoneDetector.detect_characteristic(ZONE_1, []).shape == (0,)

    def test_polygon_mask(self):
        polygon = build_characteristic(ZONE_1)
        mask = ZoneDetector.detect_polygon(polygon, np.array([[5, 5], [15, 15]]))
        assert mask.tolist() == [True, False]
