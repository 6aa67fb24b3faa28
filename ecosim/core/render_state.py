"""Immutable render-frame contracts handed to external renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AgentState:
    """One occupied cell as a renderer sees it."""

    id: str
    kind: str
    position: tuple[int, int]
    energy: float
    color: str


@dataclass(frozen=True)
class EnvironmentState:
    """Grid bounds plus plugin-specific extras."""

    bounds: tuple[int, int]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RenderState:
    """Top-level frame emitted once per tick, built between ticks."""

    step_index: int
    agents: list[AgentState]
    environment: EnvironmentState
    metrics: dict[str, float]
    timestamp: float
