"""Tournament-selection genetic algorithm with elitism."""

from __future__ import annotations

import random

from creatures.creature import Creature
from creatures.population import Generation, Population
from optimisation.base import OptimisationMethod
from physics.base import FitnessEvaluator


class GeneticAlgorithm(OptimisationMethod):
    """Tournament-selection GA with uniform crossover + mutation.

    The best ``elite_count`` parents are carried over unchanged and keep their
    score, so with ``elite_count >= 1`` the best fitness of a run never drops.
    Every other slot is filled by a child of two tournament winners; children
    are scored at the start of the next advance.
    """

    name = "genetic_algorithm"

    def __init__(
        self,
        population: Population,
        evaluator: FitnessEvaluator | None = None,
        mutation_rate: float = 0.1,
        mutation_sigma: float = 0.1,
        crossover_rate: float = 0.7,
        tournament_size: int = 3,
        elite_count: int = 1,
        verbose: bool = False,
    ) -> None:
        super().__init__(population, evaluator=evaluator, verbose=verbose)
        self.mutation_rate = float(mutation_rate)
        self.mutation_sigma = float(mutation_sigma)
        self.crossover_rate = float(crossover_rate)
        self.tournament_size = max(1, int(tournament_size))
        self.elite_count = max(0, int(elite_count))
        self.last_crossover_ratio: float = 0.0

    def _next_creatures(
        self,
        current: Generation,
        scores: list[float],
        rng: random.Random,
    ) -> list[Creature]:
        size = len(current)

        # sorted() is stable, so equal scores keep creature order.
        ranked = sorted(range(size), key=lambda i: scores[i], reverse=True)
        next_creatures = [
            Creature(genome=current[i].genome, fitness=scores[i])
            for i in ranked[: min(self.elite_count, size)]
        ]

        crossovers = 0
        children = 0
        while len(next_creatures) < size:
            first = self._tournament_select(scores, rng)
            second = self._tournament_select(scores, rng)

            if rng.random() < self.crossover_rate:
                genome = current[first].genome.crossover(current[second].genome, rng)
                crossovers += 1
            else:
                genome = current[first].genome
            genome = genome.mutate(rng, self.mutation_rate, self.mutation_sigma)

            next_creatures.append(Creature(genome=genome))
            children += 1

        self.last_crossover_ratio = float(crossovers) / float(children) if children else 0.0
        return next_creatures[:size]

    def _tournament_select(self, scores: list[float], rng: random.Random) -> int:
        """Pick the best of ``tournament_size`` uniform draws, uniform among ties."""
        contenders = [rng.randrange(len(scores)) for _ in range(self.tournament_size)]
        best = max(scores[i] for i in contenders)
        tied = sorted({i for i in contenders if scores[i] == best})
        if len(tied) == 1:
            return tied[0]
        return rng.choice(tied)
