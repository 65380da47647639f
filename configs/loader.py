"""Configuration loading and validation utilities for optimisation runs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from core.errors import InvalidConfiguration


_REQUIRED_KEYS: tuple[str, ...] = (
    "generation_size",
    "generations",
    "seed",
)

METHOD_ALIASES: dict[str, str] = {
    "ga": "genetic_algorithm",
    "genetic": "genetic_algorithm",
    "hc": "hill_climbing",
    "hill": "hill_climbing",
    "sa": "simulated_annealing",
    "annealing": "simulated_annealing",
}

# Checkbox-style switches accepted when ``methods`` is not given.
_METHOD_SWITCHES: dict[str, str] = {
    "use_genetic_algorithm": "genetic_algorithm",
    "use_hill_climbing": "hill_climbing",
    "use_simulated_annealing": "simulated_annealing",
}

# Per-method option sections, e.g. ``hill_climbing: {mutation_rate: 0.5}``.
_METHOD_SECTIONS: tuple[str, ...] = tuple(dict.fromkeys(METHOD_ALIASES.values()))


def normalize_method_name(name: str) -> str:
    key = str(name).strip().lower().replace("-", "_")
    return METHOD_ALIASES.get(key, key)


@dataclass(frozen=True)
class ExperimentConfig:
    """Validated run configuration container.

    Provides typed field access for required parameters and dictionary-style
    access for method and trial knobs kept in ``extras``.
    """

    generation_size: int
    generations: int
    seed: int
    methods: tuple[str, ...] = ("genetic_algorithm",)
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a configuration value by key.

        Args:
            key: Configuration key name.
            default: Value to return if key does not exist.

        Returns:
            Value associated with ``key`` or ``default``.
        """
        if key in {"generation_size", "generations", "seed", "methods"}:
            return getattr(self, key)
        return self.extras.get(key, default)

    def with_overrides(self, **overrides: Any) -> "ExperimentConfig":
        """Return a re-validated copy with ``overrides`` applied."""
        payload = self.to_dict()
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return _validate_and_build(payload)

    def to_dict(self) -> dict[str, Any]:
        """Return a full dictionary view of the configuration."""
        payload: dict[str, Any] = {
            "generation_size": self.generation_size,
            "generations": self.generations,
            "seed": self.seed,
            "methods": list(self.methods),
        }
        payload.update(self.extras)
        return payload


class ConfigLoader:
    """Load and validate run configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> ExperimentConfig:
        """Load a single run config from ``path``.

        Args:
            path: Path to a YAML or JSON config file.

        Returns:
            A validated ``ExperimentConfig`` instance.
        """
        payload = _read_config_payload(path)
        if not isinstance(payload, Mapping):
            raise InvalidConfiguration("Single config file must contain a mapping object.")
        return _validate_and_build(payload)

    @staticmethod
    def load_many(path: str | Path) -> list[ExperimentConfig]:
        """Load one or many run configs from ``path``.

        Supports:
            - top-level mapping for a single run
            - top-level list of mappings
            - top-level mapping with an ``experiments`` list
        """
        payload = _read_config_payload(path)

        if isinstance(payload, list):
            return [_validate_and_build(item) for item in payload]

        if isinstance(payload, Mapping) and "experiments" in payload:
            experiments = payload["experiments"]
            if not isinstance(experiments, list):
                raise InvalidConfiguration("'experiments' must be a list of mappings.")
            return [_validate_and_build(item) for item in experiments]

        if isinstance(payload, Mapping):
            return [_validate_and_build(payload)]

        raise InvalidConfiguration("Unsupported config file structure.")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any]) -> ExperimentConfig:
        return _validate_and_build(payload)


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    if suffix == ".json":
        return json.loads(content)

    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(content)

    raise InvalidConfiguration(f"Unsupported config extension: {suffix}")


def _parse_methods(payload: Mapping[str, Any]) -> tuple[str, ...]:
    if "methods" in payload:
        raw = payload["methods"]
        if isinstance(raw, str):
            raw = [part for part in raw.split(",") if part.strip()]
        if not isinstance(raw, (list, tuple)):
            raise InvalidConfiguration("'methods' must be a list of method names.")
        names = [normalize_method_name(item) for item in raw]
    else:
        names = [method for switch, method in _METHOD_SWITCHES.items() if bool(payload.get(switch, False))]

    unique = tuple(dict.fromkeys(names))
    if not unique:
        raise InvalidConfiguration("Please select at least one optimisation method.")
    return unique


def _check_mutation_rate(value: Any, label: str) -> None:
    if value is None:
        return
    try:
        rate = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"Invalid numeric config value for {label}: {exc}") from exc
    if not 0.0 <= rate <= 1.0:
        raise InvalidConfiguration(f"{label} must be in [0.0, 1.0]")


def _validate_and_build(payload: Mapping[str, Any]) -> ExperimentConfig:
    """Validate raw mapping and build ``ExperimentConfig``."""
    if not isinstance(payload, Mapping):
        raise InvalidConfiguration("Config entry must be a mapping object.")
    missing = [key for key in _REQUIRED_KEYS if key not in payload]
    if missing:
        raise InvalidConfiguration(f"Missing required config keys: {', '.join(missing)}")

    try:
        generation_size = int(payload["generation_size"])
        generations = int(payload["generations"])
        seed = int(payload["seed"])
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"Invalid numeric config value: {exc}") from exc

    if generation_size <= 0:
        raise InvalidConfiguration("generation_size must be > 0")
    if generations < 0:
        raise InvalidConfiguration("generations must be >= 0")

    methods = _parse_methods(payload)

    _check_mutation_rate(payload.get("mutation_rate"), "mutation_rate")
    for section in _METHOD_SECTIONS:
        options = payload.get(section)
        if isinstance(options, Mapping):
            _check_mutation_rate(options.get("mutation_rate"), f"{section}.mutation_rate")

    skipped = set(_REQUIRED_KEYS) | {"methods"} | set(_METHOD_SWITCHES)
    extras = {k: v for k, v in payload.items() if k not in skipped}

    return ExperimentConfig(
        generation_size=generation_size,
        generations=generations,
        seed=seed,
        methods=methods,
        extras=extras,
    )
