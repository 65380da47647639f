"""Shared fixtures: cheap deterministic evaluators standing in for the physics trial."""

from __future__ import annotations

import pytest

from core.errors import EvaluationFailure
from creatures.creature import Creature
from physics.base import FitnessEvaluator


class GenomeScoreEvaluator(FitnessEvaluator):
    """Scores a creature directly from its genes without running physics."""

    def __init__(self) -> None:
        self.calls = 0

    def evaluate(self, creature: Creature) -> float:
        self.calls += 1
        genome = creature.genome
        muscle_score = sum(m.strength * m.extended_length * (1.0 - m.contraction) for m in genome.muscles)
        grip = sum(node.friction for node in genome.nodes) / len(genome.nodes)
        return muscle_score + grip - abs(genome.cycle - 50) / 100.0


class FlakyEvaluator(GenomeScoreEvaluator):
    """Fails every call from ``fail_from`` onwards until ``healed`` is set."""

    def __init__(self, fail_from: int, result: float | None = None) -> None:
        super().__init__()
        self.fail_from = fail_from
        self.result = result
        self.healed = False

    def evaluate(self, creature: Creature) -> float:
        score = super().evaluate(creature)
        if not self.healed and self.calls >= self.fail_from:
            if self.result is not None:
                return self.result
            raise EvaluationFailure("simulated trial diverged")
        return score


@pytest.fixture
def score_evaluator() -> GenomeScoreEvaluator:
    return GenomeScoreEvaluator()


@pytest.fixture
def flaky_evaluator():
    def _build(fail_from: int, result: float | None = None) -> FlakyEvaluator:
        return FlakyEvaluator(fail_from=fail_from, result=result)

    return _build
