"""Contract every grid-world plugin under ``ecosim.simulations`` implements."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Any


class Simulation(ABC):
    """A population model driven tick by tick by ``core.simulator.Simulator``.

    Lifecycle: the runtime builds the plugin from validated ``params``, calls
    ``reset`` to seed the initial population, then alternates ``step`` with
    reads of ``get_metrics`` (population log) and the renderer adapter. Reads
    only happen between ticks, so a plugin never exposes a half-updated grid.
    ``close`` ends the run.
    """

    def __init__(self, params: dict[str, Any], rng: random.Random) -> None:
        """Keep the validated params and the run's seeded generator.

        Args:
            params: Schema-validated values from the ``params`` config section.
            rng: Seeded generator; every random draw of the run must use it so
                equal seeds give equal populations.
        """
        self.params = params
        self.rng = rng

    @abstractmethod
    def reset(self) -> None:
        """Empty the world and scatter the starting population."""

    @abstractmethod
    def step(self) -> None:
        """Apply one tick of movement, feeding, starvation and births."""

    @abstractmethod
    def get_metrics(self) -> dict[str, float]:
        """Species counts and mean energies after the last tick."""

    @abstractmethod
    def get_render_state(self) -> dict[str, Any]:
        """Grid size and occupied cells as plain data."""

    def close(self) -> None:
        """Drop the world once the run is over."""
