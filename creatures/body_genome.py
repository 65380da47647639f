"""Node-and-muscle body genome used by the walking creatures."""

from __future__ import annotations

import random
from dataclasses import dataclass, replace

from creatures.genome import Genome


MIN_NODES = 3
MAX_NODES = 6
EXTRA_MUSCLE_PROBABILITY = 0.3


@dataclass(frozen=True)
class GeneRange:
    """Inclusive bounds for one numeric gene."""

    low: float
    high: float

    @property
    def span(self) -> float:
        return self.high - self.low

    def sample(self, rng: random.Random) -> float:
        return float(rng.uniform(self.low, self.high))

    def clamp(self, value: float) -> float:
        return float(min(max(value, self.low), self.high))


NODE_GENES: dict[str, GeneRange] = {
    "x": GeneRange(0.0, 2.0),
    "y": GeneRange(0.0, 2.0),
    "friction": GeneRange(0.0, 1.0),
}

MUSCLE_GENES: dict[str, GeneRange] = {
    "extended_length": GeneRange(0.4, 2.0),
    "contraction": GeneRange(0.2, 0.9),
    "strength": GeneRange(0.05, 0.5),
    "phase": GeneRange(0.0, 1.0),
    "duty": GeneRange(0.1, 0.9),
}

CYCLE_RANGE = (20, 80)


@dataclass(frozen=True)
class Node:
    """Point mass with its starting coordinates and ground friction."""

    x: float
    y: float
    friction: float


@dataclass(frozen=True)
class Muscle:
    """Spring between nodes ``a`` and ``b`` that toggles between two rest lengths.

    The muscle is contracted for ``duty`` of each clock cycle, starting at
    ``phase`` of the cycle, and extended for the remainder.
    """

    a: int
    b: int
    extended_length: float
    contraction: float
    strength: float
    phase: float
    duty: float

    @property
    def key(self) -> tuple[int, int]:
        return (self.a, self.b)

    @property
    def contracted_length(self) -> float:
        return self.extended_length * self.contraction

    def is_contracted(self, cycle_position: float) -> bool:
        """Return whether the muscle pulls in at ``cycle_position`` in [0, 1)."""
        offset = (cycle_position - self.phase) % 1.0
        return offset < self.duty

    def target_length(self, cycle_position: float) -> float:
        if self.is_contracted(cycle_position):
            return self.contracted_length
        return self.extended_length


def _mutate_genes(item, genes: dict[str, GeneRange], rng: random.Random, rate: float, sigma: float):
    changes = {}
    for name, bounds in genes.items():
        if rng.random() >= rate:
            continue
        step = rng.gauss(0.0, sigma * bounds.span)
        changes[name] = bounds.clamp(float(getattr(item, name)) + step)
    return replace(item, **changes) if changes else item


@dataclass(frozen=True)
class BodyGenome(Genome):
    """Genome describing a creature as nodes joined by periodic muscles.

    Nodes carry their start position and friction; muscles carry the rest
    lengths, strength and timing that drive the walking motion. ``cycle`` is
    the number of physics frames in one muscle clock period.
    """

    nodes: tuple[Node, ...]
    muscles: tuple[Muscle, ...]
    cycle: int

    def __post_init__(self) -> None:
        if not self.nodes:
            raise ValueError("BodyGenome requires at least one node.")
        for muscle in self.muscles:
            if not (0 <= muscle.a < len(self.nodes) and 0 <= muscle.b < len(self.nodes)):
                raise ValueError(f"Muscle {muscle.key} references a missing node.")
            if muscle.a == muscle.b:
                raise ValueError("Muscle must join two distinct nodes.")

    @classmethod
    def random(cls, rng: random.Random) -> "BodyGenome":
        """Sample a connected body with 3-6 nodes."""
        node_count = rng.randint(MIN_NODES, MAX_NODES)
        nodes = tuple(
            Node(**{name: bounds.sample(rng) for name, bounds in NODE_GENES.items()})
            for _ in range(node_count)
        )

        # Chain every node to the next so the body is one piece, then add extras.
        pairs = [(i, i + 1) for i in range(node_count - 1)]
        for i in range(node_count):
            for j in range(i + 2, node_count):
                if rng.random() < EXTRA_MUSCLE_PROBABILITY:
                    pairs.append((i, j))

        muscles = tuple(
            Muscle(a=a, b=b, **{name: bounds.sample(rng) for name, bounds in MUSCLE_GENES.items()})
            for a, b in pairs
        )
        cycle = rng.randint(*CYCLE_RANGE)
        return cls(nodes=nodes, muscles=muscles, cycle=cycle)

    def crossover(self, other: Genome, rng: random.Random) -> "BodyGenome":
        """Uniform crossover on this genome's topology.

        Node genes are swapped where the index exists in both parents, muscle
        genes where both parents join the same node pair. The child always
        keeps this parent's node count and muscle layout.
        """
        if not isinstance(other, BodyGenome):
            raise TypeError("BodyGenome crossover requires another BodyGenome.")

        nodes = []
        for index, node in enumerate(self.nodes):
            if index < len(other.nodes) and rng.random() < 0.5:
                nodes.append(other.nodes[index])
            else:
                nodes.append(node)

        other_muscles = {muscle.key: muscle for muscle in other.muscles}
        muscles = []
        for muscle in self.muscles:
            partner = other_muscles.get(muscle.key)
            if partner is not None and rng.random() < 0.5:
                muscles.append(partner)
            else:
                muscles.append(muscle)

        cycle = other.cycle if rng.random() < 0.5 else self.cycle
        return BodyGenome(nodes=tuple(nodes), muscles=tuple(muscles), cycle=cycle)

    def mutate(self, rng: random.Random, rate: float, sigma: float = 0.1) -> "BodyGenome":
        """Gaussian mutation within gene bounds; topology is preserved."""
        nodes = tuple(_mutate_genes(node, NODE_GENES, rng, rate, sigma) for node in self.nodes)
        muscles = tuple(_mutate_genes(muscle, MUSCLE_GENES, rng, rate, sigma) for muscle in self.muscles)

        cycle = self.cycle
        if rng.random() < rate:
            low, high = CYCLE_RANGE
            cycle = int(min(max(cycle + rng.choice([-2, -1, 1, 2]), low), high))
        return BodyGenome(nodes=nodes, muscles=muscles, cycle=cycle)

    def distance(self, other: Genome) -> float:
        """Mean normalized gene difference plus a topology mismatch penalty."""
        if not isinstance(other, BodyGenome):
            raise TypeError("BodyGenome distance requires another BodyGenome.")

        diffs: list[float] = []
        for mine, theirs in zip(self.nodes, other.nodes):
            for name, bounds in NODE_GENES.items():
                diffs.append(abs(getattr(mine, name) - getattr(theirs, name)) / bounds.span)

        other_muscles = {muscle.key: muscle for muscle in other.muscles}
        for muscle in self.muscles:
            partner = other_muscles.get(muscle.key)
            if partner is None:
                continue
            for name, bounds in MUSCLE_GENES.items():
                diffs.append(abs(getattr(muscle, name) - getattr(partner, name)) / bounds.span)

        low, high = CYCLE_RANGE
        diffs.append(abs(self.cycle - other.cycle) / float(high - low))

        mismatched_muscles = {m.key for m in self.muscles} ^ set(other_muscles)
        penalty = float(abs(len(self.nodes) - len(other.nodes)) + len(mismatched_muscles))
        return sum(diffs) / len(diffs) + penalty

    def node_positions(self) -> list[tuple[float, float]]:
        return [(node.x, node.y) for node in self.nodes]
