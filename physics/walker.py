"""2D mass-spring walking trial scoring creatures by distance travelled."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from core.errors import EvaluationFailure
from creatures.body_genome import BodyGenome
from creatures.creature import BodyState, Creature
from physics.base import FitnessEvaluator


@dataclass(frozen=True)
class BodyArrays:
    """Genome parameters laid out as arrays for vectorized force updates."""

    a: np.ndarray
    b: np.ndarray
    strength: np.ndarray
    extended: np.ndarray
    contracted: np.ndarray
    phase: np.ndarray
    duty: np.ndarray
    friction: np.ndarray
    cycle: int

    @classmethod
    def from_genome(cls, genome: BodyGenome) -> "BodyArrays":
        muscles = genome.muscles
        return cls(
            a=np.array([m.a for m in muscles], dtype=int),
            b=np.array([m.b for m in muscles], dtype=int),
            strength=np.array([m.strength for m in muscles], dtype=float),
            extended=np.array([m.extended_length for m in muscles], dtype=float),
            contracted=np.array([m.contracted_length for m in muscles], dtype=float),
            phase=np.array([m.phase for m in muscles], dtype=float),
            duty=np.array([m.duty for m in muscles], dtype=float),
            friction=np.array([n.friction for n in genome.nodes], dtype=float),
            cycle=int(genome.cycle),
        )


@dataclass
class WalkingTrial(FitnessEvaluator):
    """Deterministic trial where muscles push nodes along flat ground.

    Each frame every muscle pulls its two nodes toward the rest length it has
    at the current point of the clock cycle. Nodes fall under gravity, stop at
    ``ground_y`` and lose horizontal speed in proportion to their friction.
    Fitness is the horizontal displacement of the mean node position. The
    creature is left at its start pose once the trial is over, including
    when it diverges.
    """

    steps: int = 300
    gravity: float = 0.005
    damping: float = 0.98
    ground_y: float = 0.0
    muscle_stiffness: float = 0.2

    def __post_init__(self) -> None:
        if self.steps <= 0:
            raise ValueError("steps must be > 0")

    def evaluate(self, creature: Creature) -> float:
        creature.reset_position()
        body = BodyArrays.from_genome(creature.genome)
        start_x = creature.state.centre_x()
        try:
            for _ in range(self.steps):
                self._advance(creature.state, body)
            return creature.state.centre_x() - start_x
        finally:
            creature.reset_position()

    def step(self, creature: Creature) -> None:
        """Advance the creature's transient state by one physics frame."""
        self._advance(creature.state, BodyArrays.from_genome(creature.genome))

    def _advance(self, state: BodyState, body: BodyArrays) -> None:
        cycle_position = (state.frame % body.cycle) / float(body.cycle)

        forces = np.zeros_like(state.positions)
        forces[:, 1] -= self.gravity

        with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
            if body.a.size:
                delta = state.positions[body.b] - state.positions[body.a]
                length = np.hypot(delta[:, 0], delta[:, 1])
                contracted = (cycle_position - body.phase) % 1.0 < body.duty
                target = np.where(contracted, body.contracted, body.extended)
                scale = np.where(
                    length > 1e-9,
                    self.muscle_stiffness * body.strength * (length - target) / np.maximum(length, 1e-9),
                    0.0,
                )
                pull = scale[:, None] * delta
                np.add.at(forces, body.a, pull)
                np.add.at(forces, body.b, -pull)

            state.velocities = (state.velocities + forces) * self.damping
            state.positions = state.positions + state.velocities

        grounded = state.positions[:, 1] < self.ground_y
        if grounded.any():
            state.positions[grounded, 1] = self.ground_y
            state.velocities[grounded, 1] = 0.0
            state.velocities[grounded, 0] *= 1.0 - body.friction[grounded]

        state.frame += 1
        if not np.all(np.isfinite(state.positions)):
            raise EvaluationFailure(f"Walking trial diverged at frame {state.frame}.")
