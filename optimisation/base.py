"""Optimisation method contract shared by every search strategy."""

from __future__ import annotations

import logging
import math
import random
from abc import ABC, abstractmethod

from core.analytics import summarise_generation
from core.errors import EvaluationFailure, InvariantViolation
from creatures.creature import Creature
from creatures.population import Generation, Population
from physics.base import FitnessEvaluator
from physics.walker import WalkingTrial

LOGGER = logging.getLogger(__name__)


class OptimisationMethod(ABC):
    """Abstract strategy that turns one generation into the next.

    A method owns its ``Population`` outright. Callers that run several
    methods over the same starting creatures hand each one its own
    ``Population.clone()``.

    Each ``generation_single`` call either appends exactly one generation or
    raises and leaves the visible history untouched:

    1) score every unscored creature of the current generation,
    2) build ``generation_size`` creatures with the strategy rule,
    3) commit the scores, append the new generation, increment ``gen``.
    """

    name: str = ""

    def __init__(
        self,
        population: Population,
        evaluator: FitnessEvaluator | None = None,
        verbose: bool = False,
    ) -> None:
        self.population = population
        self.evaluator = evaluator if evaluator is not None else WalkingTrial()
        self.verbose = verbose
        self.last_summary: dict[str, float] | None = None

    def get_data(self) -> Population:
        """Return the full generation history for inspection."""
        return self.population

    def get_data_mut(self) -> Population:
        """Return the history for callers that reset transient creature state."""
        return self.population

    def generation_single(self, rng: random.Random) -> None:
        """Advance the run by one generation.

        Raises:
            EvaluationFailure: A physics trial failed; nothing is appended.
            InvariantViolation: The strategy produced the wrong number of
                creatures; nothing is appended.
        """
        current = self.population.current
        scores = self._score_generation(current)
        next_creatures = self._next_creatures(current, scores, rng)

        expected = self.population.generation_size
        if len(next_creatures) != expected:
            raise InvariantViolation(
                f"{self.name} produced {len(next_creatures)} creatures, expected {expected}."
            )

        for creature, score in zip(current, scores):
            creature.fitness = score
        self.population.append(Generation(creatures=next_creatures))

        self.last_summary = summarise_generation(current)
        LOGGER.log(
            logging.INFO if self.verbose else logging.DEBUG,
            "%s generation %d: max=%.4f mean=%.4f min=%.4f",
            self.name,
            current.index,
            self.last_summary["max_fitness"],
            self.last_summary["mean_fitness"],
            self.last_summary["min_fitness"],
        )

    @abstractmethod
    def _next_creatures(
        self,
        current: Generation,
        scores: list[float],
        rng: random.Random,
    ) -> list[Creature]:
        """Build the next generation from ``current`` and its aligned ``scores``.

        Invariants:
            - Must not assign ``fitness`` on creatures of ``current``.
            - Returned creatures must be new objects, never members of ``current``.
        """

    def _score_generation(self, generation: Generation) -> list[float]:
        scores: list[float] = []
        for index, creature in enumerate(generation):
            if creature.fitness is not None:
                scores.append(float(creature.fitness))
            else:
                scores.append(self._evaluate(creature, index))
        return scores

    def _evaluate(self, creature: Creature, index: int) -> float:
        """Run the physics trial, normalizing every failure to ``EvaluationFailure``."""
        try:
            score = float(self.evaluator.evaluate(creature))
        except EvaluationFailure as exc:
            if exc.creature_index is None:
                exc.creature_index = index
            raise
        except Exception as exc:
            raise EvaluationFailure(f"Evaluation of creature {index} failed: {exc}", creature_index=index) from exc

        if not math.isfinite(score):
            raise EvaluationFailure(f"Creature {index} produced non-finite fitness {score}.", creature_index=index)
        return score
