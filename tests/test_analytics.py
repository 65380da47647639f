"""Tests for generation summaries and run-level aggregates."""

from __future__ import annotations

import random

import pytest

from core.analytics import build_summary, genome_diversity, summarise_generation
from creatures.body_genome import BodyGenome
from creatures.creature import Creature
from creatures.population import Generation


def _generation(fitnesses, index: int = 0) -> Generation:
    rng = random.Random(4)
    return Generation(
        creatures=[Creature(genome=BodyGenome.random(rng), fitness=value) for value in fitnesses],
        index=index,
    )


def test_summarise_generation_counts_unscored_as_zero() -> None:
    summary = summarise_generation(_generation([2.0, None, 4.0], index=3))

    assert summary["generation_index"] == 3.0
    assert summary["max_fitness"] == 4.0
    assert summary["min_fitness"] == 0.0
    assert summary["mean_fitness"] == pytest.approx(2.0)
    assert "diversity" not in summary


def test_diversity_is_zero_for_clones_and_positive_otherwise() -> None:
    genome = BodyGenome.random(random.Random(1))
    clones = Generation(creatures=[Creature(genome=genome, fitness=1.0) for _ in range(4)])

    assert genome_diversity(clones) == 0.0
    assert summarise_generation(_generation([1.0, 2.0, 3.0]), include_diversity=True)["diversity"] > 0.0


def test_build_summary_reports_improvement_and_peak() -> None:
    history = [
        {"generation_index": 0.0, "mean_fitness": 1.0, "max_fitness": 2.0},
        {"generation_index": 1.0, "mean_fitness": 2.0, "max_fitness": 5.0},
        {"generation_index": 2.0, "mean_fitness": 3.0, "max_fitness": 4.0},
    ]

    summary = build_summary(history)

    assert summary["mean_fitness"] == 3.0
    assert summary["max_fitness"] == 5.0
    assert summary["fitness_improvement_rate"] == pytest.approx(1.0)
    assert summary["peak_generation"] == 1.0
    assert summary["generations"] == 3.0


def test_build_summary_of_empty_history() -> None:
    assert build_summary([])["generations"] == 0.0
