"""
Optimizer Layer
===============

Bounded Context: Scoring and searching zone characteristics.

Responsibilities:
- Score a candidate against labeled points (FitnessEvaluator)
- Genetic search per zone (GeneticOptimizer)
- NO zone sequencing (see relay_zone.pipeline)
"""

from relay_zone.optimizer.fitness import FitnessEvaluator, FitnessBreakdown
from relay_zone.optimizer.genetic import GeneticOptimizer, SearchBounds, SearchState

__all__ = [
    "FitnessEvaluator",
    "FitnessBreakdown",
    "GeneticOptimizer",
    "SearchBounds",
    "SearchState",
]
