"""
Genetic Optimizer Module
========================

Per-zone genetic search over the six characteristic parameters.

Design:
- Immutable SearchState threaded through step() (generation by generation)
- Injected numpy Generator: same seed + same inputs -> same result
- Best-ever individual kept outside the population (first found wins ties)
- Bounds derived from the previous zone keep candidates strictly nested
- Initial population: random individuals, plus the warm start (caller's
  current settings) and a covering individual built from the points
"""

import logging
import math
import numpy as np
from dataclasses import dataclass, asdict
from typing import Callable, Dict, Iterator, Optional, Sequence, Tuple

from relay_zone.config import FitConfig
from relay_zone.geometry.shapes import CharacteristicParams, DataPoint, round_2dp
from relay_zone.optimizer.fitness import FitnessEvaluator
from relay_zone.zone import ZONES, is_zone_allowed

logger = logging.getLogger(__name__)

GENES = (
    "dist_char_angle",
    "x_reach",
    "r_reach",
    "a1_angle",
    "a2_angle",
    "inclination_angle",
)

# Relative slack around the points of a covering individual
COVER_MARGIN = 0.1
# Degrees between the steepest covered point and the top of the a1 sector
COVER_ANGLE_MARGIN = 1.0


@dataclass(frozen=True)
class SearchBounds:
    """
    Inclusive (lower, upper) range of every gene for one zone.

    Reaches start just above the previous zone's reaches. When that lower
    bound passes max_reach the upper bound follows it, so nesting always holds.
    """

    dist_char_angle: Tuple[float, float]
    x_reach: Tuple[float, float]
    r_reach: Tuple[float, float]
    a1_angle: Tuple[float, float]
    a2_angle: Tuple[float, float]
    inclination_angle: Tuple[float, float]

    @classmethod
    def for_zone(
        cls, config: FitConfig, previous: Optional[CharacteristicParams] = None
    ) -> "SearchBounds":
        def reach(prev_value: Optional[float]) -> Tuple[float, float]:
            low = 0.0 if prev_value is None else round_2dp(prev_value + config.reach_epsilon)
            return low, max(config.max_reach, low)

        return cls(
            dist_char_angle=config.angle_bounds,
            x_reach=reach(previous.x_reach if previous else None),
            r_reach=reach(previous.r_reach if previous else None),
            a1_angle=config.angle_bounds,
            a2_angle=config.angle_bounds,
            inclination_angle=config.inclination_bounds,
        )

    def clamp_gene(self, gene: str, value: float) -> float:
        low, high = getattr(self, gene)
        return min(high, max(low, value))

    def clamp(self, params: CharacteristicParams) -> CharacteristicParams:
        """Clamp every gene into range."""
        return CharacteristicParams(
            **{gene: self.clamp_gene(gene, getattr(params, gene)) for gene in GENES}
        )


@dataclass(frozen=True)
class SearchState:
    """
    Snapshot of the search after a generation.

    Attributes:
        generation: Number of generations scored so far
        population: Individuals of the next generation (not yet scored)
        scores: Scores of the generation that produced this population
        best: Best individual ever scored (None before the first generation)
        best_fitness: Score of best
        history: best_fitness after each generation
    """

    generation: int
    population: Tuple[CharacteristicParams, ...]
    scores: Tuple[float, ...] = ()
    best: Optional[CharacteristicParams] = None
    best_fitness: float = -math.inf
    history: Tuple[float, ...] = ()


class GeneticOptimizer:
    """
    Genetic search for one zone's characteristic.

    Usage:
        optimizer = GeneticOptimizer(zone=2, points=points, previous=zone1)
        params = optimizer.run()

        # or generation by generation
        for state in optimizer.iterate():
            print(state.generation, state.best_fitness)
    """

    def __init__(
        self,
        zone: int,
        points: Sequence[DataPoint],
        previous: Optional[CharacteristicParams] = None,
        config: Optional[FitConfig] = None,
        rng: Optional[np.random.Generator] = None,
        seed_params: Optional[CharacteristicParams] = None,
    ):
        """
        Args:
            zone: Zone being fitted (1..3)
            points: Labeled data points
            previous: Fitted parameters of the preceding zone
            config: Search configuration (default: FitConfig())
            rng: Random generator (default: seeded from config.rng_seed)
            seed_params: Warm start individual placed in the initial population

        Raises:
            ValueError: If zone is not 1, 2 or 3
            EmptyDatasetError: If points is empty
        """
        if zone not in ZONES:
            raise ValueError(f"zone must be one of {ZONES}, got {zone}")

        self.zone = zone
        self.previous = previous
        self.config = config or FitConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.rng_seed)
        self.seed_params = seed_params
        self.points = list(points)
        self.bounds = SearchBounds.for_zone(self.config, previous)
        self.evaluator = FitnessEvaluator(
            points,
            target_zone=zone,
            previous=previous,
            weights=self.config.weights,
            include_angle_continuity=self.config.include_angle_continuity,
        )

        self._pinned: Dict[str, float] = {}
        if self.config.fixed_a1_a2:
            self._pinned = {
                "a1_angle": self.config.fixed_a1_angle,
                "a2_angle": self.config.fixed_a2_angle,
            }

    # ─────────────────────────────────────────────────────────────
    # Operators
    # ─────────────────────────────────────────────────────────────

    def _finish(self, values: Dict[str, float]) -> CharacteristicParams:
        """Pin fixed genes, clamp into bounds and round to two decimals."""
        values.update(self._pinned)
        return CharacteristicParams(
            **{gene: self.bounds.clamp_gene(gene, round_2dp(values[gene])) for gene in GENES}
        )

    def random_individual(self) -> CharacteristicParams:
        values = {}
        for gene in GENES:
            if gene in self._pinned:
                continue
            low, high = getattr(self.bounds, gene)
            values[gene] = low + self.rng.random() * (high - low)
        return self._finish(values)

    def covering_individual(self) -> Optional[CharacteristicParams]:
        """
        Tightest plain characteristic around the points this zone must contain.

        Reaches are the largest R and X among those points plus COVER_MARGIN,
        and the line angle opens the a1 sector just past the steepest point.
        Returns None when no point belongs inside the zone.
        """
        inside = [p for p in self.points if is_zone_allowed(p.zone, self.zone)]
        if not inside:
            return None

        a1 = self._pinned.get("a1_angle", self.config.fixed_a1_angle)
        a2 = self._pinned.get("a2_angle", self.config.fixed_a2_angle)
        steepest = max(math.degrees(math.atan2(p.x, p.r)) for p in inside)
        margin = self.config.reach_epsilon

        return self._finish({
            "dist_char_angle": steepest + a1 + COVER_ANGLE_MARGIN,
            "x_reach": max(p.x for p in inside) * (1 + COVER_MARGIN) + margin,
            "r_reach": max(p.r for p in inside) * (1 + COVER_MARGIN) + margin,
            "a1_angle": a1,
            "a2_angle": a2,
            "inclination_angle": 0.0,
        })

    def crossover(
        self, parent1: CharacteristicParams, parent2: CharacteristicParams
    ) -> CharacteristicParams:
        """Uniform crossover: each gene from either parent with equal probability."""
        values = {}
        for gene in GENES:
            if gene in self._pinned:
                continue
            source = parent1 if self.rng.random() < 0.5 else parent2
            values[gene] = getattr(source, gene)
        return self._finish(values)

    def mutate(self, individual: CharacteristicParams) -> CharacteristicParams:
        """Shift each free gene by a uniform step with probability mutation_rate."""
        values = asdict(individual)
        for gene in GENES:
            if gene in self._pinned:
                continue
            if self.rng.random() < self.config.mutation_rate:
                values[gene] += (self.rng.random() - 0.5) * self.config.mutation_scale
        return self._finish(values)

    def tournament(self, scores: Sequence[float]) -> int:
        """
        Index of the fittest of k random draws (with replacement).

        The earliest draw wins ties.
        """
        draws = self.rng.integers(0, len(scores), size=self.config.tournament_size)
        winner = int(draws[0])
        for idx in draws[1:]:
            if scores[idx] > scores[winner]:
                winner = int(idx)
        return winner

    # ─────────────────────────────────────────────────────────────
    # Search loop
    # ─────────────────────────────────────────────────────────────

    def initial_state(self) -> SearchState:
        """
        Random population; seeded individuals replace the first slots.

        Slot order: warm start (seed_params), then the covering individual
        when config.seed_from_points is set.
        """
        population = [self.random_individual() for _ in range(self.config.population_size)]

        seeds = []
        if self.seed_params is not None:
            seeds.append(self._finish(asdict(self.seed_params)))
        if self.config.seed_from_points:
            covering = self.covering_individual()
            if covering is not None:
                seeds.append(covering)

        for slot, individual in enumerate(seeds[:len(population)]):
            population[slot] = individual
        return SearchState(generation=0, population=tuple(population))

    def step(self, state: SearchState) -> SearchState:
        """Score the population, update the best-ever individual and breed the next one."""
        scores = tuple(self.evaluator.evaluate(ind) for ind in state.population)

        best, best_fitness = state.best, state.best_fitness
        leader = int(np.argmax(scores))
        if scores[leader] > best_fitness:
            best, best_fitness = state.population[leader], scores[leader]

        offspring = []
        for _ in range(len(state.population)):
            parent1 = state.population[self.tournament(scores)]
            parent2 = state.population[self.tournament(scores)]
            offspring.append(self.mutate(self.crossover(parent1, parent2)))

        return SearchState(
            generation=state.generation + 1,
            population=tuple(offspring),
            scores=scores,
            best=best,
            best_fitness=best_fitness,
            history=state.history + (best_fitness,),
        )

    def iterate(self) -> Iterator[SearchState]:
        """Yield the state after each of config.generations generations."""
        state = self.initial_state()
        for _ in range(self.config.generations):
            state = self.step(state)
            logger.debug(
                "Zone %d generation %d: best fitness %.4f",
                self.zone, state.generation, state.best_fitness,
            )
            yield state

    def result(self, state: SearchState) -> CharacteristicParams:
        """Best-ever individual, rounded and clamped so it nests over the previous zone."""
        if state.best is None:
            raise ValueError("No generation has been scored yet")
        return self.bounds.clamp(state.best.rounded())

    def run(
        self, on_generation: Optional[Callable[[SearchState], None]] = None
    ) -> CharacteristicParams:
        """
        Run the full search.

        Args:
            on_generation: Called with the state after each generation

        Returns:
            Best parameters found for this zone
        """
        state = None
        for state in self.iterate():
            if on_generation is not None:
                on_generation(state)

        params = self.result(state)
        logger.info(
            "Zone %d fitted after %d generations (fitness %.4f)",
            self.zone, state.generation, state.best_fitness,
        )
        return params
