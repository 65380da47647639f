"""Per-creature hill climbing."""

from __future__ import annotations

import random

from creatures.creature import Creature
from creatures.population import Generation, Population
from optimisation.base import OptimisationMethod
from physics.base import FitnessEvaluator


class HillClimbing(OptimisationMethod):
    """Independent local search on every creature lineage.

    Each creature gets one mutated candidate per generation. The candidate
    replaces it only when strictly fitter; otherwise the parent moves forward
    unchanged and keeps its score, so fitness never drops along a lineage.
    """

    name = "hill_climbing"

    def __init__(
        self,
        population: Population,
        evaluator: FitnessEvaluator | None = None,
        mutation_rate: float = 0.3,
        mutation_sigma: float = 0.1,
        verbose: bool = False,
    ) -> None:
        super().__init__(population, evaluator=evaluator, verbose=verbose)
        self.mutation_rate = float(mutation_rate)
        self.mutation_sigma = float(mutation_sigma)
        self.last_acceptance_ratio: float = 0.0

    def _next_creatures(
        self,
        current: Generation,
        scores: list[float],
        rng: random.Random,
    ) -> list[Creature]:
        next_creatures: list[Creature] = []
        accepted = 0
        for index, parent in enumerate(current):
            candidate = Creature(genome=parent.genome.mutate(rng, self.mutation_rate, self.mutation_sigma))
            candidate.fitness = self._evaluate(candidate, index)

            if candidate.fitness > scores[index]:
                next_creatures.append(candidate)
                accepted += 1
            else:
                next_creatures.append(Creature(genome=parent.genome, fitness=scores[index]))

        self.last_acceptance_ratio = float(accepted) / float(len(current))
        return next_creatures
