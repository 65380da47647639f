"""Per-creature simulated annealing with a geometric cooling schedule."""

from __future__ import annotations

import math
import random

from core.errors import InvalidConfiguration
from creatures.creature import Creature
from creatures.population import Generation, Population
from optimisation.base import OptimisationMethod
from physics.base import FitnessEvaluator


class SimulatedAnnealing(OptimisationMethod):
    """Metropolis acceptance over mutated candidates.

    The temperature for the step out of generation ``gen`` is
    ``max(min_temperature, initial_temperature * cooling_rate ** gen)`` and is
    shared by all creatures. Better or equal candidates are always accepted,
    worse ones with probability ``exp(delta / temperature)``. Fitness along a
    lineage can therefore drop.
    """

    name = "simulated_annealing"

    def __init__(
        self,
        population: Population,
        evaluator: FitnessEvaluator | None = None,
        initial_temperature: float = 10.0,
        cooling_rate: float = 0.95,
        min_temperature: float = 1e-3,
        mutation_rate: float = 0.3,
        mutation_sigma: float = 0.1,
        verbose: bool = False,
    ) -> None:
        if min_temperature <= 0.0:
            raise InvalidConfiguration("min_temperature must be > 0")
        if initial_temperature < min_temperature:
            raise InvalidConfiguration("initial_temperature must be >= min_temperature")
        if not 0.0 < cooling_rate <= 1.0:
            raise InvalidConfiguration("cooling_rate must be in (0.0, 1.0]")

        super().__init__(population, evaluator=evaluator, verbose=verbose)
        self.initial_temperature = float(initial_temperature)
        self.cooling_rate = float(cooling_rate)
        self.min_temperature = float(min_temperature)
        self.mutation_rate = float(mutation_rate)
        self.mutation_sigma = float(mutation_sigma)
        self.last_acceptance_ratio: float = 0.0

    def temperature_at(self, gen: int) -> float:
        return max(self.min_temperature, self.initial_temperature * self.cooling_rate ** gen)

    @property
    def temperature(self) -> float:
        return self.temperature_at(self.population.gen)

    def _next_creatures(
        self,
        current: Generation,
        scores: list[float],
        rng: random.Random,
    ) -> list[Creature]:
        temperature = self.temperature
        next_creatures: list[Creature] = []
        accepted = 0
        for index, parent in enumerate(current):
            candidate = Creature(genome=parent.genome.mutate(rng, self.mutation_rate, self.mutation_sigma))
            candidate.fitness = self._evaluate(candidate, index)

            delta = candidate.fitness - scores[index]
            if delta >= 0.0 or rng.random() < math.exp(delta / temperature):
                next_creatures.append(candidate)
                accepted += 1
            else:
                next_creatures.append(Creature(genome=parent.genome, fitness=scores[index]))

        self.last_acceptance_ratio = float(accepted) / float(len(current))
        return next_creatures
