"""Simple optimisation runner for local validation."""

from __future__ import annotations

import logging

from configs.loader import ConfigLoader, ExperimentConfig
from engine.component_registry import create_evaluator
from engine.session import OptimisationSession


def build_session(config: ExperimentConfig) -> OptimisationSession:
    """Build and start a session from run configuration."""
    evaluator = create_evaluator(str(config.get("evaluator", "walker")), config)
    session = OptimisationSession(config, evaluator=evaluator)
    session.start()
    return session


def main(config_path: str = "configs/example_experiment.yaml") -> None:
    """Load config, build the session, and run every configured generation."""
    logging.basicConfig(level=logging.INFO)
    config = ConfigLoader.load(config_path)
    session = build_session(config)

    early_stop_threshold = config.get("early_stop_max_fitness", None)
    if early_stop_threshold is None:
        session.run(config.generations)
        return

    threshold = float(early_stop_threshold)
    for _ in range(config.generations):
        session.generation_single()
        best = max(
            (method.last_summary or {}).get("max_fitness", 0.0) for method in session.methods
        )
        if best >= threshold:
            break


if __name__ == "__main__":
    main()
