"""End-to-end check of all three optimisation methods over one starting population."""

from __future__ import annotations

import random

from creatures.population import Population
from optimisation.base import OptimisationMethod
from optimisation.genetic_algorithm import GeneticAlgorithm
from optimisation.hill_climbing import HillClimbing
from optimisation.simulated_annealing import SimulatedAnnealing


def test_three_methods_complete_same_number_of_generations(score_evaluator) -> None:
    generation_count = 200
    population_size = 200

    population = Population.new(population_size, random.Random(2024))

    # Clone for the first two, hand the original to the last one.
    methods: list[OptimisationMethod] = [
        GeneticAlgorithm(population.clone(), evaluator=score_evaluator),
        SimulatedAnnealing(population.clone(), evaluator=score_evaluator),
        HillClimbing(population, evaluator=score_evaluator),
    ]

    rng = random.Random(7)
    for method in methods:
        for _ in range(generation_count):
            method.generation_single(rng)

    for method in methods:
        data = method.get_data()
        assert data.gen == generation_count
        assert len(data.generations) == generation_count + 1
        assert len(data.generations[generation_count - 1].creatures) == population_size
        assert len(data.generations[generation_count].creatures) == population_size

    starting_genomes = [
        [creature.genome for creature in method.get_data().generations[0]] for method in methods
    ]
    assert starting_genomes[0] == starting_genomes[1] == starting_genomes[2]


def test_spectate_index_is_in_range_for_every_generation(score_evaluator) -> None:
    method = HillClimbing(Population.new(9, random.Random(1)), evaluator=score_evaluator)
    rng = random.Random(2)
    for _ in range(10):
        method.generation_single(rng)

    data = method.get_data()
    spectate_rng = random.Random(3)
    for generation_index in range(len(data.generations)):
        for _ in range(50):
            index = data.random_creature_index(spectate_rng)
            assert 0 <= index < data.generation_size
            assert data.creature(generation_index, index) is data.generations[generation_index][index]
