"""
Relay Zone Fitting Engine v1.0
==============================

Bounded Context: Distance protection zone characteristics in the R-X plane.

Design Philosophy:
- Separation of Concerns: Geometry, Optimizer, Analytics separated
- Immutable values, stateful pieces kept small (counters, RNG)
- Deterministic: same seed, same points -> same zones

Architecture:

    relay_zone/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── shapes.py      # CharacteristicParams, Polygon, build_characteristic
    │   └── detector.py    # contains_point, point_in_polygon, ZoneDetector
    │
    ├── optimizer/         # Scoring and search
    │   ├── fitness.py     # FitnessEvaluator
    │   └── genetic.py     # GeneticOptimizer, SearchState
    │
    ├── analytics/         # Statistics (stateful)
    │   └── counter.py     # ZoneCounter, ZoneStats
    │
    ├── zone.py            # ZONES, is_zone_allowed
    ├── config.py          # FitConfig, FitnessWeights
    └── pipeline.py        # SequentialZoneFitter, FitterBuilder

Usage:

    from relay_zone import CharacteristicParams, DataPoint, FitConfig, fit_zones

    points = [DataPoint(5, 5, 1), DataPoint(15, 15, 2), DataPoint(25, 25, 3)]
    current = {z: CharacteristicParams(75, 30, 30) for z in (1, 2, 3)}

    fitted = fit_zones(current, points, FitConfig(rng_seed=42))
    polygon = build_characteristic(fitted[1])
"""

from relay_zone.errors import RelayZoneError, DomainError, EmptyDatasetError

# Geometry Layer (immutable, stateless)
from relay_zone.geometry.shapes import (
    CharacteristicParams,
    DataPoint,
    Polygon,
    build_characteristic,
)
from relay_zone.geometry.detector import ZoneDetector, contains_point, point_in_polygon
from relay_zone.zone import ZONES, is_zone_allowed

# Optimizer
from relay_zone.config import FitConfig, FitnessWeights
from relay_zone.optimizer.fitness import FitnessEvaluator
from relay_zone.optimizer.genetic import GeneticOptimizer, SearchState

# Analytics Layer (stateful)
from relay_zone.analytics.counter import ZoneCounter, ZoneStats, evaluate_zones

# Pipeline (orchestration)
from relay_zone.pipeline import SequentialZoneFitter, FitterBuilder, fit_zones

__all__ = [
    # Errors
    "RelayZoneError",
    "DomainError",
    "EmptyDatasetError",
    # Geometry
    "CharacteristicParams",
    "DataPoint",
    "Polygon",
    "build_characteristic",
    "ZoneDetector",
    "contains_point",
    "point_in_polygon",
    "ZONES",
    "is_zone_allowed",
    # Optimizer
    "FitConfig",
    "FitnessWeights",
    "FitnessEvaluator",
    "GeneticOptimizer",
    "SearchState",
    # Analytics
    "ZoneCounter",
    "ZoneStats",
    "evaluate_zones",
    # Pipeline
    "SequentialZoneFitter",
    "FitterBuilder",
    "fit_zones",
]

__version__ = "1.0.0"
