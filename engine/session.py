"""Run controller that drives every enabled optimisation method once per tick."""

from __future__ import annotations

import logging

from configs.loader import ExperimentConfig
from core.analytics import summarise_generation
from core.deterministic_rng import DeterministicRNG
from core.errors import InvalidConfiguration
from creatures.creature import Creature
from creatures.population import Population
from engine.component_registry import create_evaluator, create_method
from optimisation.base import OptimisationMethod
from physics.base import FitnessEvaluator

LOGGER = logging.getLogger(__name__)


class OptimisationSession:
    """Owns the seeded random source and the methods of one optimisation run.

    All enabled methods start from clones of one generation-0 population and
    draw from their own named RNG stream, so a method's results do not depend
    on which other methods run beside it. The session also tracks which
    creature is being spectated for the display layer.
    """

    def __init__(self, config: ExperimentConfig, evaluator: FitnessEvaluator | None = None) -> None:
        self.config = config
        self.rng = DeterministicRNG(config.seed)
        self.evaluator = evaluator
        self.methods: list[OptimisationMethod] = []

        self.spectate_method: int = 0
        self.spectate_generation: int = 0
        self.spectate_creature: int = 0
        self.simulation_frame: int = 0
        self.current_fitness: float = 0.0

    @property
    def started(self) -> bool:
        return bool(self.methods)

    @property
    def total_generations(self) -> int:
        """Generations completed by every method."""
        if not self.methods:
            return 0
        return min(method.get_data().gen for method in self.methods)

    def start(self) -> None:
        """Build generation 0 and hand every enabled method its own copy.

        Raises:
            InvalidConfiguration: If no method is selected or a name is unknown.
        """
        names = list(self.config.methods)
        if not names:
            raise InvalidConfiguration("Please select at least one optimisation method.")

        self.reset()
        self.rng.reseed()
        evaluator = self.evaluator
        if evaluator is None:
            evaluator = create_evaluator(str(self.config.get("evaluator", "walker")), self.config)

        population = Population.new(self.config.generation_size, self.rng.stream("population"))
        methods: list[OptimisationMethod] = []
        for position, name in enumerate(names):
            # The last method takes the original population.
            owned = population if position == len(names) - 1 else population.clone()
            methods.append(create_method(name, owned, evaluator, self.config))

        self.evaluator = evaluator
        self.methods = methods
        LOGGER.info(
            "Started run with %d creatures per generation using %s",
            self.config.generation_size,
            ", ".join(method.name for method in methods),
        )
        self.set_creature_random()

    def generation_single(self) -> None:
        """Advance every method that has not yet completed the next generation.

        A failing method raises after the methods before it have advanced;
        calling again only advances the methods that are still behind.
        """
        if not self.methods:
            raise InvalidConfiguration("No optimisation run has been started.")

        target = self.total_generations + 1
        for method in self.methods:
            if method.get_data().gen < target:
                method.generation_single(self.rng.stream(method.name))

        self.reset_simulation()
        self.spectate_generation = self.total_generations
        self._refresh_current_fitness()
        LOGGER.debug("Completed generation %d", self.total_generations)

    def run(self, generations: int) -> None:
        """Advance ``generations`` ticks, starting the run first if needed."""
        if generations < 0:
            raise ValueError("generations must be non-negative")
        if not self.started:
            self.start()
        for _ in range(generations):
            self.generation_single()

    def spectated(self) -> Creature:
        data = self.methods[self.spectate_method].get_data()
        return data.creature(self.spectate_generation, self.spectate_creature)

    def set_creature(self, method: int, index: int, generation: int) -> None:
        """Spectate creature ``index`` of ``generation`` in method ``method``."""
        if not 0 <= method < len(self.methods):
            raise IndexError(f"Method index {method} out of range [0, {len(self.methods)}).")
        self.reset_simulation()
        creature = self.methods[method].get_data().creature(generation, index)
        self.spectate_method = method
        self.spectate_generation = generation
        self.spectate_creature = index
        self.current_fitness = creature.fitness_or_zero

    def set_creature_random(self) -> None:
        """Spectate a uniformly drawn creature of the spectated generation."""
        data = self.methods[self.spectate_method].get_data()
        index = data.random_creature_index(self.rng.stream("spectate"))
        self.set_creature(self.spectate_method, index, self.spectate_generation)

    def reset_simulation(self) -> None:
        """Put the spectated creature of every method back at its start pose."""
        for method in self.methods:
            data = method.get_data_mut()
            if self.spectate_generation < len(data.generations):
                data.generations[self.spectate_generation].creatures[self.spectate_creature].reset_position()
        self.simulation_frame = 0

    def advance_replay(self) -> Creature:
        """Advance the spectated creature's replay by one physics frame."""
        if self.evaluator is None or not self.methods:
            raise InvalidConfiguration("No optimisation run has been started.")
        creature = self.spectated()
        self.evaluator.step(creature)
        self.simulation_frame += 1
        return creature

    def reset(self) -> None:
        """Drop every method and return the spectate counters to zero."""
        self.methods = []
        self.spectate_method = 0
        self.spectate_generation = 0
        self.spectate_creature = 0
        self.simulation_frame = 0
        self.current_fitness = 0.0

    def summaries(self, include_diversity: bool = False) -> dict[str, list[dict[str, float]]]:
        """Return per-method analytics for every scored generation."""
        return {
            method.name: [
                summarise_generation(generation, include_diversity=include_diversity)
                for generation in method.get_data().generations
                if generation.is_evaluated
            ]
            for method in self.methods
        }

    def _refresh_current_fitness(self) -> None:
        self.current_fitness = self.spectated().fitness_or_zero
