"""
Zone Detector Module
====================

Stateless containment logic - applies a characteristic to fault points.

Design:
- Pure functions (no state)
- Analytic test works on the six parameters directly (O(1), no polygon)
- Ray casting for arbitrary boundaries, with optional edge tolerance
- Vectorised masks for whole point clouds (numpy)
"""

import math
import numpy as np
from typing import Sequence, Tuple, Union

from relay_zone.geometry.shapes import CharacteristicParams, DataPoint, Polygon, check_angles

PointCloud = Union[np.ndarray, Sequence[DataPoint]]


def as_point_array(points: PointCloud) -> np.ndarray:
    """Nx2 float array of (R, X) from data points or an existing array."""
    if isinstance(points, np.ndarray):
        array = np.asarray(points, dtype=float)
    else:
        array = np.array([(p.r, p.x) for p in points], dtype=float)
    return array.reshape(-1, 2)


def contains_point(r: float, x: float, params: CharacteristicParams) -> bool:
    """
    Analytic containment test for a single point.

    The point is rotated by the inclination angle into the characteristic
    frame and checked against the angular sector and the reach box. It must
    then also satisfy the edge half-planes of the characteristic polygon, so
    an accepted point always lies inside build_characteristic(params).

    Args:
        r: Resistance coordinate
        x: Reactance coordinate
        params: Shape parameters

    Returns:
        True if the point lies inside the characteristic

    Raises:
        DomainError: If distCharAngle, a1Angle or a2Angle is not in (0, 90)
    """
    check_angles(params)

    d = math.radians(params.dist_char_angle)
    a1 = math.radians(params.a1_angle)
    a2 = math.radians(params.a2_angle)
    incl = math.radians(params.inclination_angle)
    x_reach = params.x_reach
    r_reach = params.r_reach

    cos_i = math.cos(incl)
    sin_i = math.sin(incl)
    x_rot = x * cos_i + r * sin_i
    r_rot = -x * sin_i + r * cos_i
    angle = math.atan2(x_rot, r_rot)

    if abs(angle) > d:
        return False
    if abs(x_rot) > x_reach or abs(r_rot) > r_reach:
        return False
    if angle > 0 and angle > d - a1:
        return False
    if angle < 0 and angle < -(d - a2):
        return False

    # Edge half-planes of the polygon
    td = math.tan(d)
    if x > x_reach or x < -x_reach:
        return False
    if r < -x * math.tan(a1):
        return False
    if x < -r * math.tan(a2):
        return False
    if r > r_reach + x / td:
        return False
    if params.inclination_angle != 0 and x > x_reach - math.tan(incl) * (r - x_reach / td):
        return False
    return True


def distance_to_segment(
    point: Tuple[float, float],
    start: Tuple[float, float],
    end: Tuple[float, float],
) -> float:
    """Euclidean distance from a point to the segment start-end."""
    pr, px = point
    sr, sx = start
    er, ex = end
    dr = er - sr
    dx = ex - sx
    length_sq = dr * dr + dx * dx
    if length_sq == 0.0:
        return math.hypot(pr - sr, px - sx)
    t = max(0.0, min(1.0, ((pr - sr) * dr + (px - sx) * dx) / length_sq))
    return math.hypot(pr - (sr + t * dr), px - (sx + t * dx))


def point_in_polygon(r: float, x: float, polygon: Polygon, tolerance: float = 0.0) -> bool:
    """
    Ray-casting test against an arbitrary polygon boundary.

    Points on an edge count as inside. With tolerance > 0, points within that
    distance of any edge count as inside too.
    """
    vertices = polygon.vertices
    n = len(vertices)
    inside = False

    for i in range(n):
        ri, xi = vertices[i]
        rj, xj = vertices[i - 1]

        if tolerance > 0 and distance_to_segment((r, x), (ri, xi), (rj, xj)) <= tolerance:
            return True

        if (xi > x) != (xj > x):
            intersect_r = (rj - ri) * (x - xi) / (xj - xi) + ri
            if r == intersect_r:
                return True
            if r < intersect_r:
                inside = not inside
        # Horizontal and vertical edges through the point
        if xi == xj == x and min(ri, rj) <= r <= max(ri, rj):
            return True
        if ri == rj == r and min(xi, xj) <= x <= max(xi, xj):
            return True

    return inside


class ZoneDetector:
    """
    Stateless detector applying zone characteristics to point clouds.

    Design Philosophy:
    - All methods are static (no instance state)
    - Inputs: Nx2 (R, X) arrays or DataPoint sequences
    - Returns boolean masks of shape (N,)
    """

    @staticmethod
    def detect_characteristic(params: CharacteristicParams, points: PointCloud) -> np.ndarray:
        """
        Vectorised analytic containment (same rules as contains_point).

        Args:
            params: Shape parameters
            points: Point cloud

        Returns:
            Boolean mask where True = inside the characteristic

        Raises:
            DomainError: If distCharAngle, a1Angle or a2Angle is not in (0, 90)
        """
        check_angles(params)
        array = as_point_array(points)
        if len(array) == 0:
            return np.array([], dtype=bool)

        r = array[:, 0]
        x = array[:, 1]
        d = math.radians(params.dist_char_angle)
        a1 = math.radians(params.a1_angle)
        a2 = math.radians(params.a2_angle)
        incl = math.radians(params.inclination_angle)
        x_reach = params.x_reach
        r_reach = params.r_reach

        cos_i = math.cos(incl)
        sin_i = math.sin(incl)
        x_rot = x * cos_i + r * sin_i
        r_rot = -x * sin_i + r * cos_i
        angle = np.arctan2(x_rot, r_rot)

        mask = np.abs(angle) <= d
        mask &= (np.abs(x_rot) <= x_reach) & (np.abs(r_rot) <= r_reach)
        mask &= ~((angle > 0) & (angle > d - a1))
        mask &= ~((angle < 0) & (angle < -(d - a2)))

        td = math.tan(d)
        mask &= (x <= x_reach) & (x >= -x_reach)
        mask &= r >= -x * math.tan(a1)
        mask &= x >= -r * math.tan(a2)
        mask &= r <= r_reach + x / td
        if params.inclination_angle != 0:
            mask &= x <= x_reach - math.tan(incl) * (r - x_reach / td)
        return mask

    @staticmethod
    def detect_polygon(polygon: Polygon, points: PointCloud, tolerance: float = 0.0) -> np.ndarray:
        """
        Ray-casting containment for every point.

        Returns:
            Boolean mask where True = inside (or within tolerance of) the boundary
        """
        array = as_point_array(points)
        return np.array(
            [point_in_polygon(r, x, polygon, tolerance) for r, x in array],
            dtype=bool,
        )
