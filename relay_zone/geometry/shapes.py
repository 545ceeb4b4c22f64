"""
Characteristic Shapes Module
============================

Pure geometric representations of a relay zone in the R-X plane.

Design:
- Immutable shapes (frozen dataclass pattern)
- Six shape parameters -> ordered polygon boundary (PolygonModel)
- Vertices stored as read-only (R, X) arrays
- Thread-safe by design (immutability)
"""

import math
import numpy as np
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Mapping, Tuple

from relay_zone.errors import DomainError


# Serialised field names, as the relay settings UI and CSV exports spell them
_PARAM_KEYS = {
    "dist_char_angle": "distCharAngle",
    "x_reach": "X",
    "r_reach": "R",
    "a1_angle": "a1Angle",
    "a2_angle": "a2Angle",
    "inclination_angle": "inclinationAngle",
}


def round_2dp(value: float) -> float:
    """Round half-up to two decimals."""
    return math.floor(value * 100.0 + 0.5) / 100.0


@dataclass(frozen=True)
class CharacteristicParams:
    """
    Shape parameters of one zone characteristic.

    Angles are in degrees. Reaches are in ohms (secondary).

    Attributes:
        dist_char_angle: Distance characteristic (line) angle, [0, 90]
        x_reach: Reactive reach X, [0, 100]
        r_reach: Resistive reach R, [0, 100]
        a1_angle: Tilt of the left (directional) boundary, [0, 90]
        a2_angle: Tilt of the lower (directional) boundary, [0, 90]
        inclination_angle: Tilt of the top reactance line, [0, 30]

    Design:
    - Value object, no validation at construction: the optimizer creates
      thousands of these, angle checks happen where tangents are taken
    """

    dist_char_angle: float
    x_reach: float
    r_reach: float
    a1_angle: float = 30.0
    a2_angle: float = 30.0
    inclination_angle: float = 0.0

    def replace(self, **changes: float) -> "CharacteristicParams":
        """Return a copy with the given fields changed."""
        values = asdict(self)
        values.update(changes)
        return CharacteristicParams(**values)

    def rounded(self) -> "CharacteristicParams":
        """Copy with every field rounded half-up to two decimals."""
        return CharacteristicParams(**{k: round_2dp(v) for k, v in asdict(self).items()})

    def to_dict(self) -> Dict[str, float]:
        """Serialize with the external field names."""
        return {_PARAM_KEYS[k]: float(v) for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CharacteristicParams":
        """
        Deserialize from dict.

        Accepts either the external names (distCharAngle, X, R, ...) or the
        attribute names. a1Angle, a2Angle and inclinationAngle are optional.

        Raises:
            ValueError: If a required key is missing or a value is not numeric
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Characteristic parameters must be a mapping, got {data!r}")

        values = {}
        for attr, external in _PARAM_KEYS.items():
            if external in data:
                values[attr] = data[external]
            elif attr in data:
                values[attr] = data[attr]
        try:
            return cls(**{k: float(v) for k, v in values.items()})
        except TypeError as e:
            raise ValueError(f"Invalid characteristic parameters {data!r}: {e}") from e


@dataclass(frozen=True)
class DataPoint:
    """
    Labeled fault point in the R-X plane.

    Attributes:
        r: Resistance coordinate
        x: Reactance coordinate
        zone: Expected tripping zone (1..3; anything else is never inside)
    """

    r: float
    x: float
    zone: int

    def to_dict(self) -> Dict[str, float]:
        return {"R": self.r, "X": self.x, "Zone": self.zone}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataPoint":
        """
        Deserialize from a {R, X, Zone} dict.

        Raises:
            ValueError: If a key is missing or not numeric
        """
        try:
            return cls(r=float(data["R"]), x=float(data["X"]), zone=int(data["Zone"]))
        except KeyError as e:
            raise ValueError(f"Missing required data point field: {e}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid data point {data!r}: {e}") from e


@dataclass(frozen=True)
class Polygon:
    """
    Immutable closed polygon in the R-X plane.

    Attributes:
        vertices: Nx2 array of (R, X) vertices, implicitly closed
    """

    vertices: np.ndarray

    def __post_init__(self):
        """Validate and freeze vertices."""
        vertices = np.array(self.vertices, dtype=float)
        if vertices.ndim != 2 or vertices.shape[1] != 2:
            raise ValueError(f"vertices must be Nx2 array, got shape {vertices.shape}")
        if len(vertices) < 3:
            raise ValueError(f"Polygon must have at least 3 vertices, got {len(vertices)}")

        vertices.flags.writeable = False
        object.__setattr__(self, "vertices", vertices)

    def __len__(self) -> int:
        return len(self.vertices)

    @property
    def area(self) -> float:
        """Enclosed area (shoelace formula)."""
        return polygon_area(self.vertices)

    def to_list(self) -> List[Tuple[float, float]]:
        """Vertices as plain (R, X) tuples."""
        return [(float(r), float(x)) for r, x in self.vertices]


def check_angles(params: CharacteristicParams) -> None:
    """
    Fail fast on angles whose tangent is undefined or meaningless.

    Raises:
        DomainError: If distCharAngle, a1Angle or a2Angle is not in (0, 90)
    """
    for name in ("dist_char_angle", "a1_angle", "a2_angle"):
        value = getattr(params, name)
        if not 0.0 < value < 90.0:
            raise DomainError(
                f"{_PARAM_KEYS[name]} must be in the open interval (0, 90), got {value}"
            )


def polygon_area(vertices: np.ndarray) -> float:
    """Absolute area of a simple polygon (shoelace formula)."""
    r = vertices[:, 0]
    x = vertices[:, 1]
    return float(abs(np.dot(r, np.roll(x, -1)) - np.dot(x, np.roll(r, -1))) / 2.0)


def approximate_area(params: CharacteristicParams) -> float:
    """Cheap size proxy X * R * d_rad used by the fitness function."""
    return params.x_reach * params.r_reach * math.radians(params.dist_char_angle)


def _clip_below(vertices: List[Tuple[float, float]], floor: float) -> List[Tuple[float, float]]:
    """Clip a convex polygon to the half-plane X >= floor."""
    clipped = []
    for i, (r0, x0) in enumerate(vertices):
        r1, x1 = vertices[(i + 1) % len(vertices)]
        inside0 = x0 >= floor
        if inside0:
            clipped.append((r0, x0))
        if inside0 != (x1 >= floor):
            t = (floor - x0) / (x1 - x0)
            clipped.append((r0 + t * (r1 - r0), floor))
    return clipped


def build_characteristic(
    params: CharacteristicParams,
    *,
    cleanup: bool = True,
    trim_reactance: bool = False,
) -> Polygon:
    """
    Build the zone boundary polygon from its six shape parameters.

    Vertices, counter-clockwise from the origin:
        V0 origin
        V1 top-left, on the a1 line at reactance X
        V2 top-right (or the start of the inclined top line)
        V3 lower-right, on the right edge
        V4 lower-right corner without inclination (inclined shapes only)

    Args:
        params: Shape parameters
        cleanup: Drop the inclined lower-right vertex when it does not lie
            strictly above V4 (the inclined line would cross the lower edge)
        trim_reactance: Clip the boundary at reactance -X

    Returns:
        Polygon with 4 vertices (incl == 0) or 5 (inclined, before cleanup)

    Raises:
        DomainError: If distCharAngle, a1Angle or a2Angle is 0, 90 or outside
    """
    check_angles(params)

    td = math.tan(math.radians(params.dist_char_angle))
    t1 = math.tan(math.radians(params.a1_angle))
    t2 = math.tan(math.radians(params.a2_angle))
    ti = math.tan(math.radians(params.inclination_angle))
    x_reach = params.x_reach
    r_reach = params.r_reach
    inclined = params.inclination_angle != 0

    # Lower-right corner of the plain quadrilateral (right edge meets a2 line)
    corner = (
        r_reach * (1.0 - t2 / (t2 + td)),
        -r_reach * t2 * td / (t2 + td),
    )

    vertices = [(0.0, 0.0), (-x_reach * t1, x_reach)]
    if not inclined:
        vertices.append((x_reach / td + r_reach, x_reach))
        vertices.append(corner)
    else:
        vertices.append((x_reach / td, x_reach))
        vertices.append((
            x_reach / td + r_reach * (1.0 - ti / (ti + td)),
            x_reach - r_reach * ti * td / (ti + td),
        ))
        vertices.append(corner)

        if cleanup:
            # Tail pair must descend along the right edge
            while len(vertices) > 4 and vertices[-2][1] <= vertices[-1][1]:
                del vertices[-2]

    if trim_reactance:
        vertices = _clip_below(vertices, -x_reach)

    return Polygon(vertices=np.array(vertices, dtype=float))
