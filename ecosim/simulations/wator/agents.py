"""Organism model for the wator plugin."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


INITIAL_ENERGY = 5.0


class Kind(str, Enum):
    """Closed set of species living on the grid."""

    PREY = "prey"
    PREDATOR = "predator"


# Canvas colors per species.
KIND_COLORS = {
    Kind.PREY: "blue",
    Kind.PREDATOR: "green",
}


@dataclass(eq=False)
class Agent:
    """Single organism.

    Position is only changed through ``ToroidalGrid.move`` so that it always
    matches the cell holding the agent. Identity comparison (``is``) is how the
    engine tells whether a snapshot entry is still alive, hence ``eq=False``.
    """

    kind: Kind
    x: int
    y: int
    energy: float = INITIAL_ENERGY

    @property
    def is_prey(self) -> bool:
        return self.kind is Kind.PREY

    def to_dict(self) -> dict[str, Any]:
        """Serialize agent state for render/export."""
        return {
            "kind": self.kind.value,
            "x": int(self.x),
            "y": int(self.y),
            "position": [int(self.x), int(self.y)],
            "energy": float(self.energy),
            "color": KIND_COLORS[self.kind],
        }
