"""Plot utilities for per-method fitness histories."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402


def plot_history(
    histories: Mapping[str, Sequence[Mapping[str, float]]],
    output_path: str | Path,
) -> Path:
    """Render mean/max fitness curves for every optimisation method.

    ``histories`` maps a method name to its generation summaries as produced
    by ``OptimisationSession.summaries``.
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
    for name, rows in histories.items():
        generations = [int(row.get("generation_index", idx)) for idx, row in enumerate(rows)]
        ax1.plot(generations, [float(row.get("max_fitness", 0.0)) for row in rows], label=name)
        ax2.plot(generations, [float(row.get("mean_fitness", 0.0)) for row in rows], label=name)

    ax1.set_ylabel("max fitness")
    ax1.legend()
    ax2.set_ylabel("mean fitness")
    ax2.set_xlabel("generation")
    ax2.legend()

    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)
    return output
