"""Deterministic RNG container and the biased coin used by the tick rules."""

from __future__ import annotations

import random
from dataclasses import dataclass


def chance(rng: random.Random, probability: float) -> bool:
    """Biased coin: true with ``probability``.

    Probabilities at or below 0 never draw from ``rng``; at or above 1 they
    always succeed without drawing either, so degenerate rule settings leave
    the random sequence untouched.
    """
    if probability <= 0.0:
        return False
    if probability >= 1.0:
        return True
    return rng.random() < probability


@dataclass
class DeterministicRNG:
    """Owns the seeded generator of one run without touching global random state."""

    seed: int

    def __post_init__(self) -> None:
        self.python_rng = random.Random(self.seed)
