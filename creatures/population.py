"""Generation and population history containers shared by every optimisation method."""

from __future__ import annotations

import copy
import random
from dataclasses import dataclass, field
from typing import Callable, Iterator

from core.errors import InvalidConfiguration, InvariantViolation
from creatures.body_genome import BodyGenome
from creatures.creature import Creature


GenomeFactory = Callable[[random.Random], BodyGenome]


@dataclass
class Generation:
    """Ordered, fixed-size set of creatures produced by one optimisation step."""

    creatures: list[Creature]
    index: int = 0

    def __len__(self) -> int:
        return len(self.creatures)

    def __iter__(self) -> Iterator[Creature]:
        return iter(self.creatures)

    def __getitem__(self, index: int) -> Creature:
        return self.creatures[index]

    @property
    def is_evaluated(self) -> bool:
        return all(creature.is_evaluated for creature in self.creatures)

    def fitnesses(self) -> list[float]:
        """Return scores in creature order; unscored creatures report 0.0."""
        return [creature.fitness_or_zero for creature in self.creatures]

    def best(self) -> Creature:
        """Return the highest scoring creature, first one on ties."""
        return max(self.creatures, key=lambda creature: creature.fitness_or_zero)


@dataclass
class Population:
    """Generation-0 factory plus the ordered generation history of one run.

    Invariants:
        - ``len(generations) == gen + 1``.
        - Every generation holds exactly ``generation_size`` creatures.
    """

    generations: list[Generation] = field(default_factory=list)
    gen: int = 0

    def __post_init__(self) -> None:
        if not self.generations or not self.generations[0].creatures:
            raise InvalidConfiguration("Population requires a non-empty generation 0.")
        if len(self.generations) != self.gen + 1:
            raise InvariantViolation(
                f"Population history holds {len(self.generations)} generations for gen={self.gen}."
            )

    @classmethod
    def new(
        cls,
        size: int,
        rng: random.Random,
        genome_factory: GenomeFactory = BodyGenome.random,
    ) -> "Population":
        """Build ``size`` randomized creatures as generation 0.

        Raises:
            InvalidConfiguration: If ``size`` is not positive.
        """
        if int(size) <= 0:
            raise InvalidConfiguration(f"Population size must be > 0, got {size}.")
        creatures = [Creature(genome=genome_factory(rng)) for _ in range(int(size))]
        return cls(generations=[Generation(creatures=creatures, index=0)], gen=0)

    @property
    def generation_size(self) -> int:
        return len(self.generations[0])

    @property
    def current(self) -> Generation:
        return self.generations[-1]

    def append(self, generation: Generation) -> None:
        """Append the next generation, enforcing size conservation."""
        if len(generation) != self.generation_size:
            raise InvariantViolation(
                f"Generation {self.gen + 1} has {len(generation)} creatures, expected {self.generation_size}."
            )
        generation.index = self.gen + 1
        self.generations.append(generation)
        self.gen += 1

    def clone(self) -> "Population":
        """Deep-copy the full history so another method can start from it."""
        return copy.deepcopy(self)

    def creature(self, generation_index: int, creature_index: int) -> Creature:
        """Return one creature from history; negative indices are rejected."""
        if not 0 <= generation_index < len(self.generations):
            raise IndexError(f"Generation index {generation_index} out of range [0, {len(self.generations)}).")
        generation = self.generations[generation_index]
        if not 0 <= creature_index < len(generation):
            raise IndexError(f"Creature index {creature_index} out of range [0, {len(generation)}).")
        return generation[creature_index]

    def random_creature_index(self, rng: random.Random) -> int:
        """Uniform draw over ``[0, generation_size)`` for spectating."""
        return rng.randrange(self.generation_size)
