"""Plot utilities for the persisted population log."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from ecosim.data.logger import SimulationLogger  # noqa: E402


class EmptyRunError(LookupError):
    """Raised when a run id has no logged ticks."""


def plot_population(db_path: str | Path, run_id: str, output_path: str | Path) -> Path:
    """Render prey/predator counts and mean energies for a logged run."""
    logger = SimulationLogger(db_path)
    try:
        rows = logger.fetch_metrics(run_id)
    finally:
        logger.close()
    if not rows:
        raise EmptyRunError(f"No tick metrics logged for run '{run_id}'.")

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    ticks = [int(row["tick"]) for row in rows]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
    ax1.plot(ticks, [int(row["prey"]) for row in rows], label="prey", color="tab:blue")
    ax1.plot(ticks, [int(row["predators"]) for row in rows], label="predators", color="tab:green")
    ax1.set_ylabel("population")
    ax1.legend()

    ax2.plot(ticks, [float(row["mean_prey_energy"]) for row in rows], label="prey", color="tab:blue")
    ax2.plot(ticks, [float(row["mean_predator_energy"]) for row in rows], label="predators", color="tab:green")
    ax2.set_ylabel("mean energy")
    ax2.set_xlabel("tick")
    ax2.legend()

    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)
    return output
