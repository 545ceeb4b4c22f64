"""
Geometry Layer
==============

Bounded Context: Characteristic shapes and containment queries in the R-X plane.

Responsibilities:
- Shape parameters and polygon boundary (immutable)
- Analytic and ray-casting containment tests
- NO fitting, NO statistics

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Fail-fast angle validation (DomainError)
"""

from relay_zone.geometry.shapes import (
    CharacteristicParams,
    DataPoint,
    Polygon,
    build_characteristic,
    polygon_area,
    approximate_area,
    check_angles,
    round_2dp,
)
from relay_zone.geometry.detector import (
    ZoneDetector,
    contains_point,
    point_in_polygon,
    distance_to_segment,
)

__all__ = [
    "CharacteristicParams",
    "DataPoint",
    "Polygon",
    "build_characteristic",
    "polygon_area",
    "approximate_area",
    "check_angles",
    "round_2dp",
    "ZoneDetector",
    "contains_point",
    "point_in_polygon",
    "distance_to_segment",
]
