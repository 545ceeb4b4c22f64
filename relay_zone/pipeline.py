"""
Sequential Zone Fitting Module
==============================

Bounded Context: Fitting all three zones of a relay in order.

Design:
- Zones fitted 1 -> 2 -> 3, each result is the next zone's lower bound
- Explicit fold with an accumulator (result map, previous zone)
- Builder pattern: Fluent configuration
- Fail Fast: Empty data and bad config rejected before any generation

Dependencies:
- numpy (random Generator)
- relay_zone.optimizer (genetic search)
"""

import logging
import numpy as np
from dataclasses import replace
from functools import reduce
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from relay_zone.config import FitConfig
from relay_zone.errors import EmptyDatasetError
from relay_zone.geometry.shapes import CharacteristicParams, DataPoint
from relay_zone.optimizer.genetic import GeneticOptimizer, SearchState
from relay_zone.zone import ZONES

logger = logging.getLogger(__name__)

ZoneParameterMap = Dict[int, CharacteristicParams]
GenerationCallback = Callable[[int, SearchState], None]
ZoneCallback = Callable[[int, Optional[CharacteristicParams]], None]

# (fitted parameters so far, parameters of the zone just fitted)
_Accumulator = Tuple[ZoneParameterMap, Optional[CharacteristicParams]]


class SequentialZoneFitter:
    """
    Fits zones 1, 2 and 3 in order with strict nesting.

    Usage:
        fitter = SequentialZoneFitter(FitConfig(rng_seed=42))
        fitted = fitter.fit(current_params, points)
        fitted[2].x_reach > fitted[1].x_reach  # always
    """

    def __init__(
        self,
        config: Optional[FitConfig] = None,
        rng: Optional[np.random.Generator] = None,
        on_generation: Optional[GenerationCallback] = None,
        on_zone_start: Optional[ZoneCallback] = None,
    ):
        """
        Args:
            config: Search configuration (default: FitConfig())
            rng: Shared random generator. When omitted every fit() call
                starts a fresh generator from config.rng_seed
            on_generation: Called with (zone, state) after each generation
            on_zone_start: Called with (zone, previous) before a zone's search
        """
        self.config = config or FitConfig()
        self.rng = rng
        self.on_generation = on_generation
        self.on_zone_start = on_zone_start

    def fit(
        self,
        current_params: Mapping[int, CharacteristicParams],
        points: Sequence[DataPoint],
    ) -> ZoneParameterMap:
        """
        Fit all zones.

        Args:
            current_params: Caller's current parameters per zone (warm start,
                and carried over for keys that are not fitted)
            points: Labeled data points

        Returns:
            Parameter map in ascending zone order, zones 1-3 replaced

        Raises:
            EmptyDatasetError: If points is empty (no generation is run)
        """
        if len(points) == 0:
            raise EmptyDatasetError("Cannot fit zones without data points")

        rng = self.rng if self.rng is not None else np.random.default_rng(self.config.rng_seed)
        logger.info(
            "Fitting zones %s on %d points (population %d, %d generations)",
            ZONES, len(points), self.config.population_size, self.config.generations,
        )

        def fit_zone(acc: _Accumulator, zone: int) -> _Accumulator:
            fitted, previous = acc
            seed = current_params.get(zone) if self.config.seed_current_params else None
            optimizer = GeneticOptimizer(
                zone=zone,
                points=points,
                previous=previous,
                config=self.config,
                rng=rng,
                seed_params=seed,
            )

            if self.on_zone_start is not None:
                self.on_zone_start(zone, previous)

            def report(state: SearchState) -> None:
                if self.on_generation is not None:
                    self.on_generation(zone, state)

            params = optimizer.run(on_generation=report)
            return {**fitted, zone: params}, params

        initial: _Accumulator = (dict(current_params), None)
        fitted, _ = reduce(fit_zone, ZONES, initial)
        return dict(sorted(fitted.items()))


def fit_zones(
    current_params: Mapping[int, CharacteristicParams],
    points: Sequence[DataPoint],
    config: Optional[FitConfig] = None,
) -> ZoneParameterMap:
    """Functional entry point: fit zones 1-3 with the given configuration."""
    return SequentialZoneFitter(config).fit(current_params, points)


class FitterBuilder:
    """
    Builder for SequentialZoneFitter.

    Design:
    - Fluent API for construction
    - Fail-fast validation
    - Sensible defaults

    Usage:
        fitter = (
            FitterBuilder()
            .with_config(FitConfig(population_size=50))
            .with_seed(42)
            .with_generation_callback(progress)
            .build()
        )
    """

    def __init__(self):
        self._config: Optional[FitConfig] = None
        self._seed: Optional[int] = None
        self._rng: Optional[np.random.Generator] = None
        self._on_generation: Optional[GenerationCallback] = None
        self._on_zone_start: Optional[ZoneCallback] = None

    def with_config(self, config: FitConfig) -> "FitterBuilder":
        """Set search configuration."""
        self._config = config
        return self

    def with_seed(self, seed: int) -> "FitterBuilder":
        """Override the configuration's random seed."""
        self._seed = seed
        return self

    def with_rng(self, rng: np.random.Generator) -> "FitterBuilder":
        """Share an existing random generator."""
        self._rng = rng
        return self

    def with_generation_callback(self, callback: GenerationCallback) -> "FitterBuilder":
        """Set per-generation progress callback."""
        self._on_generation = callback
        return self

    def with_zone_start_callback(self, callback: ZoneCallback) -> "FitterBuilder":
        """Set callback run before each zone's search."""
        self._on_zone_start = callback
        return self

    def build(self) -> SequentialZoneFitter:
        """
        Build the fitter.

        Raises:
            ValueError: If both a seed and a generator are given
        """
        if self._seed is not None and self._rng is not None:
            raise ValueError("Use either .with_seed() or .with_rng(), not both")

        config = self._config or FitConfig()
        if self._seed is not None:
            config = replace(config, rng_seed=self._seed)

        return SequentialZoneFitter(
            config=config,
            rng=self._rng,
            on_generation=self._on_generation,
            on_zone_start=self._on_zone_start,
        )
