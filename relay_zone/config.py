"""
Fit configuration for the zone fitting engine.

FitConfig is immutable and validated at construction. It can be built from a
plain dict (e.g. the `fit:` section of a job YAML) or loaded from a YAML file.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import yaml

from relay_zone.errors import DomainError


@dataclass(frozen=True)
class FitnessWeights:
    """
    Relative weights of the fitness terms.

    Reference weighting: 80 classification + 20 area -> [-1000, 100].
    The angle continuity term adds up to 10 on top.
    """

    classification: float = 80.0
    area: float = 20.0
    angle_continuity: float = 10.0
    ordering_penalty: float = -1000.0

    def __post_init__(self):
        """Validate weights."""
        for name in ("classification", "area", "angle_continuity"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} weight must be >= 0, got {value}")
        if self.ordering_penalty >= 0:
            raise ValueError(
                f"ordering_penalty must be negative, got {self.ordering_penalty}"
            )


@dataclass(frozen=True)
class FitConfig:
    """
    Genetic search configuration.

    Defaults follow the reference tuning (population 100, 50 generations,
    10% mutation rate, tournaments of 5).
    """

    population_size: int = 100
    generations: int = 50
    mutation_rate: float = 0.1
    tournament_size: int = 5
    mutation_scale: float = 10.0  # full width of the uniform mutation step

    # a1/a2 pinned to constants or searched freely
    fixed_a1_a2: bool = True
    fixed_a1_angle: float = 30.0
    fixed_a2_angle: float = 30.0

    include_angle_continuity: bool = True
    rng_seed: Optional[int] = None

    # Minimum margin between consecutive zones' reaches
    reach_epsilon: float = 0.1
    max_reach: float = 100.0
    angle_bounds: Tuple[float, float] = (0.01, 89.99)
    inclination_bounds: Tuple[float, float] = (0.0, 30.0)

    # Put the caller's current parameters into the initial population
    seed_current_params: bool = True
    # Put the tightest characteristic around the zone's own points into it
    seed_from_points: bool = True

    trim_reactance: bool = False
    weights: FitnessWeights = field(default_factory=FitnessWeights)

    def __post_init__(self):
        """Validate fit configuration."""
        if self.population_size < 2:
            raise ValueError(
                f"population_size must be >= 2, got {self.population_size}"
            )

        if self.generations < 1:
            raise ValueError(f"generations must be >= 1, got {self.generations}")

        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(
                f"mutation_rate must be in [0.0, 1.0], got {self.mutation_rate}"
            )

        if self.tournament_size < 1:
            raise ValueError(
                f"tournament_size must be >= 1, got {self.tournament_size}"
            )

        if self.mutation_scale < 0:
            raise ValueError(f"mutation_scale must be >= 0, got {self.mutation_scale}")

        if self.reach_epsilon <= 0:
            raise ValueError(f"reach_epsilon must be > 0, got {self.reach_epsilon}")

        if self.max_reach <= 0:
            raise ValueError(f"max_reach must be > 0, got {self.max_reach}")

        # Tangents of these angles are taken for every candidate
        low, high = self.angle_bounds
        if not 0.0 < low <= high < 90.0:
            raise DomainError(
                f"angle_bounds must lie inside (0, 90), got {self.angle_bounds}"
            )

        for name in ("fixed_a1_angle", "fixed_a2_angle"):
            value = getattr(self, name)
            if not 0.0 < value < 90.0:
                raise DomainError(f"{name} must be in (0, 90), got {value}")

        low, high = self.inclination_bounds
        if not 0.0 <= low <= high < 90.0:
            raise ValueError(
                f"inclination_bounds must lie inside [0, 90), got {self.inclination_bounds}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FitConfig":
        """
        Build from a plain dict (unknown keys are rejected).

        Raises:
            ValueError: On unknown keys or invalid values
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Fit config must be a mapping, got {type(data).__name__}")
        data = dict(data)
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(
                f"Unknown fit config keys: {sorted(unknown)}. Must be among {sorted(known)}"
            )

        weights_data = data.pop("weights", None) or {}
        if not isinstance(weights_data, dict):
            raise ValueError(f"weights must be a mapping, got {weights_data!r}")

        try:
            weights = FitnessWeights(**weights_data)
            for key in ("angle_bounds", "inclination_bounds"):
                if key in data:
                    data[key] = tuple(data[key])
            return cls(weights=weights, **data)
        except TypeError as e:
            raise ValueError(f"Invalid fit config: {e}") from e

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "FitConfig":
        """
        Load fit configuration from YAML file.

        Example YAML:
            population_size: 100
            generations: 50
            mutation_rate: 0.1
            fixed_a1_a2: true
            rng_seed: 42
            weights:
              classification: 80
              area: 20
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data)
