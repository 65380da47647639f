"""Fitness evaluation contract consumed by the optimisation methods."""

from __future__ import annotations

from abc import ABC, abstractmethod

from creatures.creature import Creature


class FitnessEvaluator(ABC):
    """Abstract physics trial that scores a single creature.

    Implementations run a body simulation for the creature's genome and
    return a scalar fitness, higher is better. Trials must be deterministic
    for equal genomes so cached scores stay valid across generations.
    """

    @abstractmethod
    def evaluate(self, creature: Creature) -> float:
        """Run one trial and return the creature's fitness.

        Args:
            creature (Creature): Creature to score. Its transient ``state`` may
                be reset and advanced by the trial.

        Returns:
            float: Finite fitness score.

        Raises:
            EvaluationFailure: If the trial diverges or cannot produce a score.

        Invariants:
            - Must not modify ``creature.genome`` or ``creature.fitness``.
            - Must start from the canonical pose regardless of prior state.
        """

    def step(self, creature: Creature) -> None:
        """Advance ``creature.state`` by one frame for replaying a trial.

        Evaluators that cannot replay frame by frame keep this default.
        """
        raise NotImplementedError(f"{type(self).__name__} does not support frame replay.")
