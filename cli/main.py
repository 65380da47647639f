"""Command-line entry points for running, batching, and plotting optimisation runs."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from configs.loader import ConfigLoader, ExperimentConfig
from core.analytics import build_summary
from core.errors import SimulationError
from engine.component_registry import available_evaluator_factories, available_method_factories
from engine.session import OptimisationSession
from main import build_session
from visualization.plotting import plot_history

LOGGER = logging.getLogger(__name__)


def _run_single(config: ExperimentConfig, plot_path: Path | None = None) -> OptimisationSession:
    session = build_session(config)
    for _ in range(config.generations):
        session.generation_single()
    if plot_path is not None:
        print(plot_history(session.summaries(), plot_path))
    return session


def _print_report(session: OptimisationSession) -> None:
    print(f"{'method':<22}{'gen':>6}{'best':>12}{'mean':>12}{'improve/gen':>14}")
    for name, history in session.summaries().items():
        summary = build_summary(history)
        gen = next(m.get_data().gen for m in session.methods if m.name == name)
        print(
            f"{name:<22}{gen:>6}{summary['max_fitness']:>12.4f}"
            f"{summary['mean_fitness']:>12.4f}{summary['fitness_improvement_rate']:>14.4f}"
        )


def run_cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="creature-opt")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run")
    run_cmd.add_argument("--config", default="configs/example_experiment.yaml")
    run_cmd.add_argument("--generations", type=int)
    run_cmd.add_argument("--generation-size", type=int)
    run_cmd.add_argument("--seed", type=int)
    run_cmd.add_argument("--methods", help="Comma separated method names, e.g. ga,hc,sa")
    run_cmd.add_argument("--plot", help="Write a fitness plot to this path")

    batch_cmd = sub.add_parser("batch")
    batch_cmd.add_argument("--config", default="configs/example_batch.yaml")

    sub.add_parser("methods")

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    if args.command == "methods":
        for name in available_method_factories():
            print(name)
        print("evaluators: " + ", ".join(available_evaluator_factories()))
        return 0

    try:
        if args.command == "run":
            config = ConfigLoader.load(args.config).with_overrides(
                generations=args.generations,
                generation_size=args.generation_size,
                seed=args.seed,
                methods=args.methods,
            )
            session = _run_single(config, Path(args.plot) if args.plot else None)
            _print_report(session)
            return 0

        if args.command == "batch":
            for config in ConfigLoader.load_many(args.config):
                _print_report(_run_single(config))
            return 0
    except SimulationError as exc:
        LOGGER.error("Run failed: %s", exc)
        return 1

    return 1


if __name__ == "__main__":
    raise SystemExit(run_cli())
