"""
Configuration schema for the fit service.

A job bundles the relay's current zone settings, the labeled fault points
and the genetic search configuration. It is loaded from YAML and validated
at startup.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple
import logging
import yaml

from relay_zone.config import FitConfig
from relay_zone.geometry.shapes import CharacteristicParams, DataPoint
from relay_zone.zone import ZONES

# Settings screen defaults of a fresh relay
DEFAULT_ZONE_PARAMS = CharacteristicParams(
    dist_char_angle=75.0,
    x_reach=30.0,
    r_reach=30.0,
    a1_angle=30.0,
    a2_angle=22.0,
    inclination_angle=0.0,
)


@dataclass(frozen=True)
class JobConfig:
    """
    Fit job configuration.

    Immutable after construction (frozen dataclass).
    """

    job_id: str
    points: Tuple[DataPoint, ...] = ()
    zones: Dict[int, CharacteristicParams] = field(
        default_factory=lambda: {zone: DEFAULT_ZONE_PARAMS for zone in ZONES}
    )
    fit_config: FitConfig = field(default_factory=FitConfig)
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate job configuration."""
        if not self.job_id:
            raise ValueError("job_id cannot be empty")

        unknown = set(self.zones) - set(ZONES)
        if unknown:
            raise ValueError(
                f"Invalid zone keys: {sorted(unknown)}. Must be among {ZONES}"
            )

        if not isinstance(self.log_level, str) or not isinstance(
            logging.getLevelName(self.log_level.upper()), int
        ):
            raise ValueError(f"Invalid log_level: {self.log_level}")

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    @classmethod
    def from_dict(cls, data: Dict) -> "JobConfig":
        """
        Build from parsed YAML/JSON.

        Zones missing from `zones` start from the relay defaults.

        Raises:
            ValueError: If required keys are missing or values invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"Job configuration must be a mapping, got {type(data).__name__}")
        if "job_id" not in data:
            raise ValueError("Missing required job field: 'job_id'")

        zones_data = data.get("zones") or {}
        if not isinstance(zones_data, dict):
            raise ValueError(f"zones must be a mapping of zone -> parameters, got {zones_data!r}")

        zones = {zone: DEFAULT_ZONE_PARAMS for zone in ZONES}
        for zone, params in zones_data.items():
            try:
                zone = int(zone)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid zone key: {zone!r}") from e
            zones[zone] = CharacteristicParams.from_dict(params)

        points_data = data.get("points") or []
        if not isinstance(points_data, list):
            raise ValueError(f"points must be a list of {{R, X, Zone}} entries, got {points_data!r}")
        points = tuple(DataPoint.from_dict(p) for p in points_data)

        return cls(
            job_id=str(data["job_id"]),
            points=points,
            zones=zones,
            fit_config=FitConfig.from_dict(data.get("fit")),
            log_level=data.get("log_level", "INFO"),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "JobConfig":
        """
        Load job configuration from YAML file.

        Example YAML:
            job_id: "feeder_12"
            log_level: "INFO"

            zones:
              1: {distCharAngle: 75, X: 10, R: 8, a1Angle: 30, a2Angle: 30}
              2: {distCharAngle: 75, X: 20, R: 16}

            points:
              - {R: 5, X: 5, Zone: 1}
              - {R: 15, X: 15, Zone: 2}

            fit:
              population_size: 100
              generations: 50
              rng_seed: 42

        Raises:
            FileNotFoundError: If yaml_path does not exist
            ValueError: If the YAML is invalid
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Job config not found: {yaml_path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

        return cls.from_dict(data)
