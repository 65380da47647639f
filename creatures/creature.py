"""Creature entity: a genome plus fitness and transient physics state."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from creatures.body_genome import BodyGenome


@dataclass
class BodyState:
    """In-flight physics state of one creature during a trial or replay."""

    positions: np.ndarray
    velocities: np.ndarray
    frame: int = 0

    @classmethod
    def at_rest(cls, genome: BodyGenome) -> "BodyState":
        positions = np.asarray(genome.node_positions(), dtype=float).reshape(-1, 2)
        return cls(positions=positions, velocities=np.zeros_like(positions), frame=0)

    def centre_x(self) -> float:
        return float(self.positions[:, 0].mean())


@dataclass
class Creature:
    """One candidate solution.

    ``fitness`` is ``None`` until the creature has been scored by a physics
    trial. ``state`` is transient and never read when comparing fitness.
    """

    genome: BodyGenome
    fitness: float | None = None
    state: BodyState = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.state = BodyState.at_rest(self.genome)

    @property
    def is_evaluated(self) -> bool:
        return self.fitness is not None

    @property
    def fitness_or_zero(self) -> float:
        """Fitness for display; unscored creatures report 0.0."""
        return float(self.fitness) if self.fitness is not None else 0.0

    def reset_position(self) -> None:
        """Return the transient physics state to the genome's starting pose."""
        self.state = BodyState.at_rest(self.genome)

    def copy(self, keep_fitness: bool = True) -> "Creature":
        """Return an independent creature at rest sharing the (immutable) genome."""
        return Creature(genome=self.genome, fitness=self.fitness if keep_fitness else None)
