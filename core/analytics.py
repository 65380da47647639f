"""Generation analytics shared by the optimisation methods, session and CLI."""

from __future__ import annotations

from statistics import mean
from typing import Sequence

from creatures.population import Generation


def genome_diversity(generation: Generation) -> float:
    """Mean genome distance of every creature to the generation's best one."""
    if len(generation) < 2:
        return 0.0
    best = generation.best().genome
    distances = [float(creature.genome.distance(best)) for creature in generation]
    return float(mean(distances))


def summarise_generation(generation: Generation, include_diversity: bool = False) -> dict[str, float]:
    """Compute fitness metrics for one generation.

    Unscored creatures count as 0.0. Diversity is opt-in because it walks
    every genome.
    """
    fitnesses = generation.fitnesses()
    summary = {
        "generation_index": float(generation.index),
        "mean_fitness": float(mean(fitnesses)) if fitnesses else 0.0,
        "max_fitness": float(max(fitnesses)) if fitnesses else 0.0,
        "min_fitness": float(min(fitnesses)) if fitnesses else 0.0,
    }
    if include_diversity:
        summary["diversity"] = genome_diversity(generation)
    return summary


def build_summary(metrics_history: Sequence[dict[str, float]]) -> dict[str, float]:
    """Build aggregate and derived metrics from generation-level history."""
    if not metrics_history:
        return {
            "mean_fitness": 0.0,
            "max_fitness": 0.0,
            "fitness_improvement_rate": 0.0,
            "peak_generation": 0.0,
            "generations": 0.0,
        }

    means = [float(m.get("mean_fitness", 0.0)) for m in metrics_history]
    maxes = [float(m.get("max_fitness", 0.0)) for m in metrics_history]

    improvement = (means[-1] - means[0]) / max(len(means) - 1, 1)
    peak_index = max(range(len(maxes)), key=lambda i: maxes[i])

    return {
        "mean_fitness": float(means[-1]),
        "max_fitness": float(max(maxes)),
        "fitness_improvement_rate": float(improvement),
        "peak_generation": float(metrics_history[peak_index].get("generation_index", peak_index)),
        "generations": float(len(metrics_history)),
    }
