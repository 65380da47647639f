"""Factories/registries for optimisation methods and fitness evaluators."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from configs.loader import ExperimentConfig, normalize_method_name
from core.errors import InvalidConfiguration
from creatures.population import Population
from optimisation.base import OptimisationMethod
from optimisation.genetic_algorithm import GeneticAlgorithm
from optimisation.hill_climbing import HillClimbing
from optimisation.simulated_annealing import SimulatedAnnealing
from physics.base import FitnessEvaluator
from physics.walker import WalkingTrial


MethodFactory = Callable[[Population, FitnessEvaluator, ExperimentConfig], OptimisationMethod]
EvaluatorFactory = Callable[[ExperimentConfig], FitnessEvaluator]


_METHOD_FACTORIES: dict[str, MethodFactory] = {}
_EVALUATOR_FACTORIES: dict[str, EvaluatorFactory] = {}


def register_method_factory(name: str, factory: MethodFactory) -> None:
    _METHOD_FACTORIES[normalize_method_name(name)] = factory


def register_evaluator_factory(name: str, factory: EvaluatorFactory) -> None:
    _EVALUATOR_FACTORIES[str(name)] = factory


def available_method_factories() -> list[str]:
    return sorted(_METHOD_FACTORIES)


def available_evaluator_factories() -> list[str]:
    return sorted(_EVALUATOR_FACTORIES)


def create_method(
    name: str,
    population: Population,
    evaluator: FitnessEvaluator,
    config: ExperimentConfig,
) -> OptimisationMethod:
    factory = _METHOD_FACTORIES.get(normalize_method_name(name))
    if factory is None:
        available = ", ".join(available_method_factories()) or "<none>"
        raise InvalidConfiguration(f"Unknown optimisation method '{name}'. Available: {available}")
    return factory(population, evaluator, config)


def create_evaluator(name: str, config: ExperimentConfig) -> FitnessEvaluator:
    factory = _EVALUATOR_FACTORIES.get(str(name))
    if factory is None:
        available = ", ".join(available_evaluator_factories()) or "<none>"
        raise InvalidConfiguration(f"Unknown fitness evaluator '{name}'. Available: {available}")
    return factory(config)


def method_option(config: ExperimentConfig, method: str, key: str, default: Any) -> Any:
    """Look up ``key`` in the method's own section first, then at top level.

    A config may carry e.g. ``hill_climbing: {mutation_rate: 0.5}`` next to a
    shared top-level ``mutation_rate``.
    """
    section = config.get(method)
    if isinstance(section, Mapping) and key in section:
        return section[key]
    return config.get(key, default)


def _genetic_algorithm_factory(
    population: Population,
    evaluator: FitnessEvaluator,
    config: ExperimentConfig,
) -> OptimisationMethod:
    name = GeneticAlgorithm.name
    return GeneticAlgorithm(
        population,
        evaluator=evaluator,
        mutation_rate=float(method_option(config, name, "mutation_rate", 0.1)),
        mutation_sigma=float(method_option(config, name, "mutation_sigma", 0.1)),
        crossover_rate=float(method_option(config, name, "crossover_rate", 0.7)),
        tournament_size=int(method_option(config, name, "tournament_size", 3)),
        elite_count=int(method_option(config, name, "elite_count", 1)),
        verbose=bool(config.get("print_data", False)),
    )


def _hill_climbing_factory(
    population: Population,
    evaluator: FitnessEvaluator,
    config: ExperimentConfig,
) -> OptimisationMethod:
    name = HillClimbing.name
    return HillClimbing(
        population,
        evaluator=evaluator,
        mutation_rate=float(method_option(config, name, "mutation_rate", 0.3)),
        mutation_sigma=float(method_option(config, name, "mutation_sigma", 0.1)),
        verbose=bool(config.get("print_data", False)),
    )


def _simulated_annealing_factory(
    population: Population,
    evaluator: FitnessEvaluator,
    config: ExperimentConfig,
) -> OptimisationMethod:
    name = SimulatedAnnealing.name
    return SimulatedAnnealing(
        population,
        evaluator=evaluator,
        initial_temperature=float(method_option(config, name, "initial_temperature", 10.0)),
        cooling_rate=float(method_option(config, name, "cooling_rate", 0.95)),
        min_temperature=float(method_option(config, name, "min_temperature", 1e-3)),
        mutation_rate=float(method_option(config, name, "mutation_rate", 0.3)),
        mutation_sigma=float(method_option(config, name, "mutation_sigma", 0.1)),
        verbose=bool(config.get("print_data", False)),
    )


def _walker_evaluator_factory(config: ExperimentConfig) -> FitnessEvaluator:
    return WalkingTrial(
        steps=int(config.get("trial_steps", 300)),
        gravity=float(config.get("gravity", 0.005)),
        damping=float(config.get("damping", 0.98)),
        muscle_stiffness=float(config.get("muscle_stiffness", 0.2)),
    )


def _register_defaults() -> None:
    if _METHOD_FACTORIES:
        return
    register_method_factory(GeneticAlgorithm.name, _genetic_algorithm_factory)
    register_method_factory(HillClimbing.name, _hill_climbing_factory)
    register_method_factory(SimulatedAnnealing.name, _simulated_annealing_factory)

    register_evaluator_factory("walker", _walker_evaluator_factory)


_register_defaults()
