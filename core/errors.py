"""Typed failures surfaced by optimisation runs."""

from __future__ import annotations


class SimulationError(RuntimeError):
    """Base class for every failure an optimisation run reports to its caller."""


class InvalidConfiguration(SimulationError, ValueError):
    """Raised before any simulation work when run parameters are unusable.

    Examples are a zero population size, an empty set of optimisation methods,
    or a cooling schedule that cannot stay positive.
    """


class EvaluationFailure(SimulationError):
    """Raised when the physics trial cannot produce a score for a creature."""

    def __init__(self, message: str, creature_index: int | None = None) -> None:
        super().__init__(message)
        self.creature_index = creature_index


class InvariantViolation(SimulationError):
    """Raised when a generation transition would break population size conservation."""
