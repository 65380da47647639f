"""Genome contracts for the optimisation operators."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod


class Genome(ABC):
    """Abstract genome representation used by optimisation methods.

    Implementations encode a creature's morphology and behaviour. Every
    operator takes its randomness from an explicit ``rng`` argument so that a
    fixed seed and call sequence always reproduce the same genomes.
    """

    @classmethod
    @abstractmethod
    def random(cls, rng: random.Random) -> "Genome":
        """Create an independently randomized genome.

        Args:
            rng (random.Random): Source of every random draw.

        Returns:
            Genome: A newly created genome.
        """

    @abstractmethod
    def crossover(self, other: "Genome", rng: random.Random) -> "Genome":
        """Create an offspring genome from this genome and ``other``.

        Args:
            other (Genome): The second parent genome.
            rng (random.Random): Source of gene selection draws.

        Returns:
            Genome: A newly created offspring genome.

        Invariants:
            - Must not mutate either parent genome.
            - Must be defined for any two valid genomes of the same type.
        """

    @abstractmethod
    def mutate(self, rng: random.Random, rate: float, sigma: float = 0.1) -> "Genome":
        """Create a mutated genome derived from this genome.

        Args:
            rng (random.Random): Source of mutation draws.
            rate (float): Per-gene mutation probability.
            sigma (float): Step size relative to each gene's range.

        Returns:
            Genome: A mutated genome instance.

        Invariants:
            - Must not mutate the original genome instance in place.
            - Behavior must be deterministic given equivalent RNG state.
        """

    @abstractmethod
    def distance(self, other: "Genome") -> float:
        """Measure distance between this genome and ``other``.

        Invariants:
            - Distance must be deterministic for equivalent inputs.
            - Distance must be non-negative.
        """
