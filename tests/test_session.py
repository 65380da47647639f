"""Tests for the run session controller."""

from __future__ import annotations

import numpy as np
import pytest

from configs.loader import ExperimentConfig
from core.errors import EvaluationFailure, InvalidConfiguration
from engine.session import OptimisationSession


def _config(methods=("genetic_algorithm", "hill_climbing", "simulated_annealing"), size: int = 6, seed: int = 42):
    return ExperimentConfig(
        generation_size=size,
        generations=4,
        seed=seed,
        methods=tuple(methods),
        extras={"trial_steps": 30},
    )


def test_start_requires_a_method() -> None:
    session = OptimisationSession(_config(methods=()))

    with pytest.raises(InvalidConfiguration, match="at least one"):
        session.start()
    assert not session.started


def test_start_rejects_unknown_method_without_partial_state() -> None:
    session = OptimisationSession(_config(methods=("genetic_algorithm", "gradient_descent")))

    with pytest.raises(InvalidConfiguration, match="Unknown optimisation method"):
        session.start()
    assert session.methods == []


def test_generation_single_requires_started_run() -> None:
    with pytest.raises(InvalidConfiguration):
        OptimisationSession(_config()).generation_single()


def test_methods_share_generation_zero_but_not_history() -> None:
    session = OptimisationSession(_config())
    session.start()

    first, second, third = (method.get_data() for method in session.methods)
    assert [c.genome for c in first.current] == [c.genome for c in second.current] == [c.genome for c in third.current]
    assert first is not second and second is not third
    assert first.current[0] is not second.current[0]

    session.generation_single()
    assert session.total_generations == 1
    assert all(method.get_data().gen == 1 for method in session.methods)


def test_run_advances_and_tracks_spectated_generation() -> None:
    session = OptimisationSession(_config(methods=("hill_climbing",)))
    session.run(3)

    assert session.total_generations == 3
    assert session.spectate_generation == 3
    assert 0 <= session.spectate_creature < 6
    assert session.current_fitness == session.spectated().fitness


def test_same_seed_reproduces_run() -> None:
    def fitnesses(seed: int) -> dict[str, list[list[float]]]:
        session = OptimisationSession(_config(seed=seed))
        session.run(3)
        return {
            method.name: [generation.fitnesses() for generation in method.get_data().generations]
            for method in session.methods
        }

    assert fitnesses(5) == fitnesses(5)
    assert fitnesses(5) != fitnesses(6)


def test_method_results_do_not_depend_on_other_methods() -> None:
    alone = OptimisationSession(_config(methods=("simulated_annealing",)))
    alone.run(3)
    together = OptimisationSession(_config())
    together.run(3)

    solo = alone.methods[0].get_data()
    shared = together.methods[2].get_data()
    assert [g.fitnesses() for g in solo.generations] == [g.fitnesses() for g in shared.generations]


def test_restart_reproduces_generation_zero() -> None:
    session = OptimisationSession(_config(methods=("genetic_algorithm",)))
    session.start()
    genomes = [c.genome for c in session.methods[0].get_data().current]
    session.run(2)

    session.start()
    assert session.total_generations == 0
    assert [c.genome for c in session.methods[0].get_data().current] == genomes


def test_set_creature_and_reset_simulation() -> None:
    session = OptimisationSession(_config(methods=("hill_climbing", "simulated_annealing")))
    session.run(1)

    session.set_creature(1, 4, 0)
    creature = session.spectated()
    assert session.current_fitness == creature.fitness
    start = creature.state.positions.copy()

    for _ in range(5):
        session.advance_replay()
    assert session.simulation_frame == 5
    assert creature.state.frame == 5

    session.reset_simulation()
    assert session.simulation_frame == 0
    assert creature.state.frame == 0
    assert np.array_equal(creature.state.positions, start)


def test_set_creature_rejects_out_of_range_indices() -> None:
    session = OptimisationSession(_config(methods=("hill_climbing",)))
    session.start()

    with pytest.raises(IndexError):
        session.set_creature(1, 0, 0)
    with pytest.raises(IndexError):
        session.set_creature(0, 6, 0)
    with pytest.raises(IndexError):
        session.set_creature(0, 0, 1)


def test_spectate_random_stays_in_bounds() -> None:
    session = OptimisationSession(_config(methods=("hill_climbing",), size=5))
    session.run(2)

    for _ in range(100):
        session.set_creature_random()
        assert 0 <= session.spectate_creature < 5


def test_reset_clears_methods_and_counters() -> None:
    session = OptimisationSession(_config(methods=("genetic_algorithm",)))
    session.run(2)

    session.reset()

    assert session.methods == []
    assert session.total_generations == 0
    assert (session.spectate_method, session.spectate_generation, session.spectate_creature) == (0, 0, 0)


def test_failed_tick_only_retries_lagging_methods(flaky_evaluator) -> None:
    evaluator = flaky_evaluator(fail_from=10_000)
    session = OptimisationSession(_config(methods=("hill_climbing", "simulated_annealing"), size=4), evaluator=evaluator)
    session.start()

    # First method: 4 parents + 4 candidates, second fails on its first parent.
    evaluator.fail_from = 9
    with pytest.raises(EvaluationFailure):
        session.generation_single()

    hill, annealing = session.methods
    assert hill.get_data().gen == 1
    assert annealing.get_data().gen == 0
    assert session.total_generations == 0

    evaluator.healed = True
    session.generation_single()
    assert hill.get_data().gen == 1
    assert annealing.get_data().gen == 1
    assert session.total_generations == 1


def test_summaries_cover_scored_generations() -> None:
    session = OptimisationSession(_config(methods=("genetic_algorithm", "hill_climbing")))
    session.run(3)

    summaries = session.summaries(include_diversity=True)

    # The newest GA generation is scored only on the next tick.
    assert len(summaries["genetic_algorithm"]) == 3
    assert len(summaries["hill_climbing"]) == 4
    assert all("diversity" in row for row in summaries["hill_climbing"])
