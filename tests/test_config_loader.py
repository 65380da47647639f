"""Tests for config loading and validation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from configs.loader import ConfigLoader, ExperimentConfig, normalize_method_name
from core.errors import InvalidConfiguration

CONFIG_DIR = Path(__file__).resolve().parents[1] / "configs"


def test_load_json_config(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    payload = {
        "generation_size": 10,
        "generations": 5,
        "seed": 1,
        "methods": ["ga", "hc"],
        "note": "demo",
    }
    config_path.write_text(json.dumps(payload), encoding="utf-8")

    config = ConfigLoader.load(config_path)

    assert config.generation_size == 10
    assert config.methods == ("genetic_algorithm", "hill_climbing")
    assert config.get("note") == "demo"


def test_load_yaml_config_with_method_sections(tmp_path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
generation_size: 8
generations: 3
seed: 11
methods: annealing
simulated_annealing:
  cooling_rate: 0.9
""",
        encoding="utf-8",
    )

    config = ConfigLoader.load(config_path)

    assert config.methods == ("simulated_annealing",)
    assert config.get("simulated_annealing") == {"cooling_rate": 0.9}


def test_checkbox_switches_select_methods() -> None:
    config = ConfigLoader.from_mapping(
        {
            "generation_size": 4,
            "generations": 1,
            "seed": 3,
            "use_genetic_algorithm": False,
            "use_hill_climbing": True,
            "use_simulated_annealing": True,
        }
    )

    assert config.methods == ("hill_climbing", "simulated_annealing")
    assert "use_hill_climbing" not in config.extras


def test_no_selected_method_is_rejected() -> None:
    with pytest.raises(InvalidConfiguration, match="at least one optimisation method"):
        ConfigLoader.from_mapping({"generation_size": 4, "generations": 1, "seed": 3})


def test_duplicate_methods_are_collapsed() -> None:
    config = ConfigLoader.from_mapping(
        {"generation_size": 4, "generations": 1, "seed": 3, "methods": "ga, genetic_algorithm,sa"}
    )

    assert config.methods == ("genetic_algorithm", "simulated_annealing")


def test_load_many_batch_json(tmp_path) -> None:
    config_path = tmp_path / "batch.json"
    payload = {
        "experiments": [
            {"generation_size": 10, "generations": 5, "seed": 1, "methods": ["ga"]},
            {"generation_size": 10, "generations": 6, "seed": 2, "methods": ["hc"]},
        ]
    }
    config_path.write_text(json.dumps(payload), encoding="utf-8")

    configs = ConfigLoader.load_many(config_path)

    assert len(configs) == 2
    assert configs[1].generations == 6
    assert configs[1].methods == ("hill_climbing",)


def test_invalid_config_missing_required_key(tmp_path) -> None:
    config_path = tmp_path / "invalid.json"
    config_path.write_text(json.dumps({"generation_size": 10, "generations": 5}), encoding="utf-8")

    with pytest.raises(InvalidConfiguration, match="Missing required config keys: seed"):
        ConfigLoader.load(config_path)


@pytest.mark.parametrize(
    "overrides",
    [
        {"generation_size": 0},
        {"generations": -1},
        {"mutation_rate": 1.5},
        {"seed": "abc"},
        {"mutation_rate": "abc"},
        {"genetic_algorithm": {"mutation_rate": 5.0}},
        {"hill_climbing": {"mutation_rate": -0.1}},
        {"simulated_annealing": {"mutation_rate": "hot"}},
    ],
)
def test_invalid_values_are_rejected(overrides) -> None:
    payload = {"generation_size": 4, "generations": 2, "seed": 1, "methods": ["ga"]}
    payload.update(overrides)

    with pytest.raises(InvalidConfiguration):
        ConfigLoader.from_mapping(payload)


def test_invalid_configuration_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        ConfigLoader.from_mapping({"generation_size": -3, "generations": 2, "seed": 1, "methods": ["ga"]})


def test_unsupported_extension(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("generation_size = 4", encoding="utf-8")

    with pytest.raises(InvalidConfiguration, match="Unsupported config extension"):
        ConfigLoader.load(config_path)


def test_with_overrides_revalidates_and_ignores_none() -> None:
    config = ExperimentConfig(generation_size=4, generations=2, seed=1, extras={"trial_steps": 20})

    updated = config.with_overrides(generations=7, seed=None, methods="hc,sa")

    assert updated.generations == 7
    assert updated.seed == 1
    assert updated.methods == ("hill_climbing", "simulated_annealing")
    assert updated.get("trial_steps") == 20
    with pytest.raises(InvalidConfiguration):
        config.with_overrides(generation_size=0)


def test_normalize_method_name() -> None:
    assert normalize_method_name(" GA ") == "genetic_algorithm"
    assert normalize_method_name("hill-climbing") == "hill_climbing"
    assert normalize_method_name("sa") == "simulated_annealing"
    assert normalize_method_name("unknown") == "unknown"


def test_bundled_example_configs_load() -> None:
    config = ConfigLoader.load(CONFIG_DIR / "example_experiment.yaml")
    assert config.methods == ("genetic_algorithm", "hill_climbing", "simulated_annealing")
    assert len(ConfigLoader.load_many(CONFIG_DIR / "example_batch.yaml")) == 2
